"""Pack references and the name/type rules shared by every lookup.

A reference is resolved against the manifest in one of two ways:

* flat keys, ``"calendar.js"``: the name is used verbatim when it carries an
  extension, otherwise the manifest suffix of its type is appended;
* entrypoints, ``entrypoints["calendar"]["assets"]["js"]``: the extension is
  stripped back off to recover the entry name.
"""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Union


class PackType(str, Enum):
    JAVASCRIPT = "javascript"
    STYLESHEET = "stylesheet"


_MANIFEST_SUFFIXES = {
    PackType.JAVASCRIPT: "js",
    PackType.STYLESHEET: "css",
}

PackTypeLike = Union[PackType, str, None]


@dataclass(frozen=True)
class PackReference:
    name: str
    type: PackTypeLike = None

    @property
    def manifest_type(self) -> str:
        return resolve_type(self.name, self.type)

    @property
    def full_name(self) -> str:
        return full_pack_name(self.name, self.type)

    @property
    def entry_name(self) -> str:
        return manifest_name(self.name, self.manifest_type)


def extension(name: str) -> str:
    """Return the extension of ``name`` including its dot, or ``""``."""
    base = posixpath.basename(str(name))
    stem, ext = posixpath.splitext(base)
    if not stem or len(ext) < 2:
        return ""
    return ext


def manifest_type(pack_type: PackTypeLike) -> str:
    if pack_type is None:
        return ""
    try:
        pack_type = PackType(pack_type)
    except ValueError:
        return str(pack_type)
    return _MANIFEST_SUFFIXES[pack_type]


def resolve_type(name: str, pack_type: PackTypeLike) -> str:
    if pack_type is None:
        return extension(name)[1:]
    return manifest_type(pack_type)


def full_pack_name(name: str, pack_type: PackTypeLike) -> str:
    name = str(name)
    if extension(name):
        return name
    return f"{name}.{manifest_type(pack_type)}"


def manifest_name(name: str, suffix: str) -> str:
    # Entrypoints are keyed by pack name without extension
    name = str(name)
    if not extension(name):
        return name
    base = posixpath.basename(name)
    ending = f".{suffix}"
    if suffix and base.endswith(ending) and base != ending:
        return base[: -len(ending)]
    return base

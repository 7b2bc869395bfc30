"""Manifest cache: maps logical pack names to the files a build produced.

``lookup("calendar.js")`` turns into ``"/packs/calendar-1016838bab065ae1e314.js"``
by consulting the manifest the build step writes. When on-demand compilation
is configured, each lookup is preceded by a compile unless a dev server is
already serving the assets.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from .compiler import CommandCompiler, Compiler
from .dev_server import DevServer
from .errors import MissingEntryError
from .loader import load_manifest
from .logging_utils import silenced, tagged
from .metrics import observe_lookup
from .pack_types import PackReference, PackTypeLike
from .settings import PackSettings
from .watcher import ChangeWatcher, ManifestChangeHandler, PollingWatcher, WatcherFactory


logger = logging.getLogger("packmap.manifest")

ManifestData = Mapping[str, Any]
Chunks = Tuple[str, ...]


class CachePolicy(str, Enum):
    RELOAD_EVERY_LOOKUP = "reload_every_lookup"
    LOAD_ONCE_AND_HOLD = "load_once_and_hold"

    @classmethod
    def from_settings(cls, settings: PackSettings) -> "CachePolicy":
        if settings.cache_manifest or settings.watch:
            return cls.LOAD_ONCE_AND_HOLD
        return cls.RELOAD_EVERY_LOOKUP


def _blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def _child(node: Any, key: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(key)
    return None


def _as_chunks(value: Any) -> Optional[Chunks]:
    if isinstance(value, str):
        return None if _blank(value) else (value,)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    return None


class ManifestCache:
    """Shared, explicitly owned view of the build manifest.

    Readers always work on one snapshot: ``refresh`` publishes a freshly
    parsed mapping with a single assignment and never edits the current one.
    Concurrent lookups that both need a compile will both run it.
    """

    def __init__(
        self,
        settings: PackSettings,
        *,
        compiler: Optional[Compiler] = None,
        dev_server: Optional[DevServer] = None,
        watcher_factory: Optional[WatcherFactory] = None,
    ) -> None:
        self.settings = settings
        self.policy = CachePolicy.from_settings(settings)
        self._compiler = compiler
        self.dev_server = dev_server or DevServer.from_settings(settings)
        self._watcher_factory = watcher_factory or partial(
            PollingWatcher, interval=settings.watch_interval
        )
        self._watcher: Optional[ChangeWatcher] = None
        self._data: Optional[ManifestData] = None
        if settings.watch:
            self.listen_to_changes()

    @property
    def manifest_path(self) -> Path:
        return self.settings.manifest_path

    @property
    def data(self) -> Optional[ManifestData]:
        return self._data

    @property
    def compiler(self) -> Compiler:
        if self._compiler is None:
            self._compiler = CommandCompiler.from_settings(self.settings)
        return self._compiler

    def refresh(self) -> ManifestData:
        data = load_manifest(self.manifest_path)
        self._data = data
        return data

    def reset(self) -> None:
        self._data = None

    def lookup(self, name: str, type: PackTypeLike = None) -> Optional[str]:
        """Return the built path for ``name``, or None when the manifest has none.

        Example::

            manifest.lookup("calendar.js")  # => "/packs/calendar-1016838bab065ae1e122.js"
            manifest.lookup("calendar", PackType.JAVASCRIPT)  # same entry
        """
        ref = PackReference(name, type)
        self._compile_if_needed()
        value = self._current().get(ref.full_name)
        path = None if _blank(value) or not isinstance(value, str) else value
        observe_lookup("lookup", path is not None)
        return path

    def lookup_strict(self, name: str, type: PackTypeLike = None) -> str:
        path = self.lookup(name, type)
        if path is None:
            raise self._missing_entry(PackReference(name, type))
        return path

    def lookup_pack_with_chunks(self, name: str, type: PackTypeLike = None) -> Optional[Chunks]:
        """Return every chunk file of entrypoint ``name`` for the resolved type."""
        ref = PackReference(name, type)
        self._compile_if_needed()
        node: Any = self._current()
        for key in ("entrypoints", ref.entry_name, "assets", ref.manifest_type):
            node = _child(node, key)
            if node is None:
                break
        chunks = _as_chunks(node)
        observe_lookup("lookup_pack_with_chunks", chunks is not None)
        return chunks

    def lookup_pack_with_chunks_strict(self, name: str, type: PackTypeLike = None) -> Chunks:
        chunks = self.lookup_pack_with_chunks(name, type)
        if chunks is None:
            raise self._missing_entry(PackReference(name, type))
        return chunks

    def listen_to_changes(self) -> ChangeWatcher:
        if self._watcher is None:
            self._watcher = self._watcher_factory(self.manifest_path, ManifestChangeHandler(self))
            logger.debug("Watching %s for changes", self.manifest_path)
        return self._watcher

    def close(self) -> None:
        watcher, self._watcher = self._watcher, None
        if watcher is not None:
            watcher.stop()

    def compiling(self) -> bool:
        return bool(self.settings.compile) and not self.dev_server.running()

    def _compile_if_needed(self) -> None:
        if not self.compiling():
            return
        with silenced(logging.getLogger("packmap"), logging.INFO), tagged("packs"):
            self.compiler.compile()

    def _current(self) -> ManifestData:
        if self.policy is CachePolicy.RELOAD_EVERY_LOOKUP:
            return self.refresh()
        data = self._data
        if data is None:
            data = self.refresh()
        return data

    def _missing_entry(self, ref: PackReference) -> MissingEntryError:
        key = ref.full_name
        return MissingEntryError(
            missing_file_from_manifest_error(key, self.manifest_path, self._data),
            key=key,
            manifest_path=self.manifest_path,
        )


def missing_file_from_manifest_error(bundle_name: str, manifest_path, data: Optional[ManifestData]) -> str:
    dump = json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True)
    return (
        f"Can't find {bundle_name} in {manifest_path}. Possible causes:\n"
        "1. You want to enable on-demand compilation (PACKS_COMPILE) for your environment\n"
        "   unless you are running the build in watch mode or a dev server.\n"
        "2. The build has not yet re-run to reflect updates.\n"
        "3. Your packs settings are misconfigured (check PACKS_MANIFEST_PATH).\n"
        "4. Your build configuration is not creating a manifest.\n"
        "Your manifest contains:\n"
        f"{dump}\n"
    )

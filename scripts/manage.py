from __future__ import annotations

import argparse
import json
import sys
from typing import Optional

from packmap.errors import MissingEntryError
from packmap.manifest import ManifestCache
from packmap.settings import get_settings


def _manifest() -> ManifestCache:
    settings = get_settings().model_copy(update={"watch": False})
    return ManifestCache(settings)


def cmd_lookup(args: argparse.Namespace) -> int:
    manifest = _manifest()
    if args.strict:
        try:
            print(manifest.lookup_strict(args.name, args.type))
        except MissingEntryError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        return 0
    path = manifest.lookup(args.name, args.type)
    if path is None:
        print(f"{args.name}: not found", file=sys.stderr)
        return 1
    print(path)
    return 0


def cmd_chunks(args: argparse.Namespace) -> int:
    manifest = _manifest()
    if args.strict:
        try:
            chunks = manifest.lookup_pack_with_chunks_strict(args.name, args.type)
        except MissingEntryError as exc:
            print(str(exc), file=sys.stderr)
            return 1
    else:
        chunks = manifest.lookup_pack_with_chunks(args.name, args.type)
        if chunks is None:
            print(f"{args.name}: not found", file=sys.stderr)
            return 1
    for chunk in chunks:
        print(chunk)
    return 0


def cmd_show(_: argparse.Namespace) -> int:
    manifest = _manifest()
    print(json.dumps(manifest.refresh(), indent=2, ensure_ascii=False, sort_keys=True))
    return 0


def cmd_compile(_: argparse.Namespace) -> int:
    _manifest().compiler.compile()
    print("Compiled")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="manage", description="Pack manifest utilities")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lookup", help="Resolve a pack name to its built path")
    p.add_argument("name")
    p.add_argument("--type", default=None, help="javascript, stylesheet or a raw extension")
    p.add_argument("--strict", action="store_true", help="Print the full diagnostic when missing")
    p.set_defaults(func=cmd_lookup)

    p = sub.add_parser("chunks", help="List the chunk files of an entrypoint")
    p.add_argument("name")
    p.add_argument("--type", default=None)
    p.add_argument("--strict", action="store_true")
    p.set_defaults(func=cmd_chunks)

    p = sub.add_parser("show", help="Print the manifest as currently on disk")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("compile", help="Run the configured build command")
    p.set_defaults(func=cmd_compile)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args) or 0)


if __name__ == "__main__":
    raise SystemExit(main())

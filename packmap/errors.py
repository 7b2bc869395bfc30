from __future__ import annotations

from pathlib import Path


class MissingEntryError(LookupError):
    """Raised by strict lookups when the manifest has no usable entry."""

    def __init__(self, message: str, *, key: str, manifest_path: Path | str) -> None:
        super().__init__(message)
        self.key = key
        self.manifest_path = Path(manifest_path)


class ManifestFormatError(ValueError):
    """The manifest parsed, but its top level is not a JSON object."""


class CompilationError(RuntimeError):
    def __init__(self, argv: list[str], returncode: int, output: str = "") -> None:
        cmd = " ".join(argv)
        super().__init__(f"Compilation failed ({returncode}): {cmd}")
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output

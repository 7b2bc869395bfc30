from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import ManifestFormatError
from .logging_utils import tagged
from .metrics import observe_load


logger = logging.getLogger("packmap.loader")


def load_manifest(path: Path | str) -> Mapping[str, Any]:
    """Read and parse the manifest at ``path``.

    A missing file means no build has produced a manifest yet and yields an
    empty mapping. Anything unparsable is a broken build and is raised as-is.
    """
    manifest_path = Path(path)
    if not manifest_path.exists():
        observe_load("missing")
        return {}
    with tagged("packs"):
        logger.debug("reading manifest file", extra={"manifest_path": str(manifest_path)})
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except ValueError:
        observe_load("error")
        raise
    if not isinstance(data, dict):
        observe_load("error")
        raise ManifestFormatError(
            f"Manifest {manifest_path} must contain a JSON object, got {type(data).__name__}"
        )
    observe_load("ok")
    return data

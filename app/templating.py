from __future__ import annotations

from fastapi.templating import Jinja2Templates

from packmap.manifest import ManifestCache
from packmap.pack_types import PackTypeLike


def public_pack_path(manifest: ManifestCache, path: str) -> str:
    if path.startswith(("/", "http://", "https://")):
        return path
    prefix = manifest.settings.public_output_path
    return f"{prefix}/{path}" if prefix else f"/{path}"


def register_pack_helpers(templates: Jinja2Templates, manifest: ManifestCache) -> None:
    """Expose ``asset_pack_path`` to templates rendered through ``templates``."""

    def asset_pack_path(name: str, type: PackTypeLike = None) -> str:
        return public_pack_path(manifest, manifest.lookup_strict(name, type))

    templates.env.globals["asset_pack_path"] = asset_pack_path

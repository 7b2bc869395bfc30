from .errors import CompilationError, ManifestFormatError, MissingEntryError
from .manifest import CachePolicy, ManifestCache
from .pack_types import PackReference, PackType
from .settings import PackSettings, get_settings, reset_settings_cache

__all__ = [
    "CachePolicy",
    "CompilationError",
    "ManifestCache",
    "ManifestFormatError",
    "MissingEntryError",
    "PackReference",
    "PackSettings",
    "PackType",
    "get_settings",
    "reset_settings_cache",
]

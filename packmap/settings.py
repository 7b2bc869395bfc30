from __future__ import annotations

import shlex
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_TRUTHY = {"1", "true", "yes", "on"}


class PackSettings(BaseSettings):
    """Asset manifest configuration pulled from environment/.env."""

    manifest_path: Path = Field(Path("public/packs/manifest.json"), alias="PACKS_MANIFEST_PATH")
    # Prefix applied by template helpers when the manifest stores bare file names
    public_output_path: str = Field("/packs", alias="PACKS_PUBLIC_OUTPUT_PATH")
    cache_manifest: bool = Field(False, alias="PACKS_CACHE_MANIFEST")
    watch: bool = Field(False, alias="PACKS_WATCH")
    compile: bool = Field(False, alias="PACKS_COMPILE")
    compile_command: str = Field("npm run build", alias="PACKS_COMPILE_COMMAND")
    # Empty host disables the dev server probe entirely
    dev_server_host: str = Field("", alias="PACKS_DEV_SERVER_HOST")
    dev_server_port: int = Field(3035, alias="PACKS_DEV_SERVER_PORT")
    dev_server_connect_timeout: float = Field(0.01, alias="PACKS_DEV_SERVER_CONNECT_TIMEOUT")
    watch_interval: float = Field(0.5, alias="PACKS_WATCH_INTERVAL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cache_manifest", "watch", "compile", mode="before")
    @classmethod
    def _parse_bool(cls, value) -> bool:
        if isinstance(value, bool):
            return value
        if value is None or value == "":
            return False
        return str(value).strip().lower() in _TRUTHY

    @field_validator("dev_server_host", mode="before")
    @classmethod
    def _strip_host(cls, value: str | None) -> str:
        return (value or "").strip()

    @field_validator("public_output_path", mode="before")
    @classmethod
    def _normalize_public_path(cls, value: str | None) -> str:
        val = (value or "").strip().rstrip("/")
        if val and not val.startswith("/"):
            val = "/" + val
        return val

    @field_validator("watch_interval", mode="before")
    @classmethod
    def _positive_interval(cls, value) -> float:
        try:
            val = float(value)
        except (TypeError, ValueError):
            return 0.5
        return val if val > 0 else 0.5

    def compile_argv(self) -> list[str]:
        return shlex.split(self.compile_command)


@lru_cache(maxsize=1)
def get_settings() -> PackSettings:
    return PackSettings()


def reset_settings_cache() -> None:
    """Testing helper to clear cached settings."""
    get_settings.cache_clear()

from __future__ import annotations

from pathlib import Path

from packmap.settings import PackSettings, get_settings, reset_settings_cache


def test_env_aliases_and_bool_parsing(monkeypatch, tmp_path):
    monkeypatch.setenv("PACKS_MANIFEST_PATH", str(tmp_path / "m.json"))
    monkeypatch.setenv("PACKS_CACHE_MANIFEST", "yes")
    monkeypatch.setenv("PACKS_WATCH", "0")
    monkeypatch.setenv("PACKS_COMPILE", "ON")
    monkeypatch.setenv("PACKS_DEV_SERVER_HOST", "  localhost ")
    monkeypatch.setenv("PACKS_PUBLIC_OUTPUT_PATH", "assets/")

    settings = PackSettings()
    assert settings.manifest_path == tmp_path / "m.json"
    assert settings.cache_manifest is True
    assert settings.watch is False
    assert settings.compile is True
    assert settings.dev_server_host == "localhost"
    assert settings.public_output_path == "/assets"


def test_defaults(monkeypatch):
    for key in ("PACKS_MANIFEST_PATH", "PACKS_CACHE_MANIFEST", "PACKS_WATCH", "PACKS_COMPILE"):
        monkeypatch.delenv(key, raising=False)
    settings = PackSettings()
    assert settings.manifest_path == Path("public/packs/manifest.json")
    assert settings.cache_manifest is False
    assert settings.watch is False
    assert settings.compile is False
    assert settings.compile_argv() == ["npm", "run", "build"]


def test_invalid_watch_interval_falls_back():
    assert PackSettings(watch_interval="soon").watch_interval == 0.5
    assert PackSettings(watch_interval=-1).watch_interval == 0.5
    assert PackSettings(watch_interval="0.25").watch_interval == 0.25


def test_get_settings_is_cached_until_reset(monkeypatch):
    reset_settings_cache()
    monkeypatch.setenv("PACKS_COMPILE", "1")
    first = get_settings()
    assert get_settings() is first
    assert first.compile is True

    monkeypatch.setenv("PACKS_COMPILE", "0")
    reset_settings_cache()
    assert get_settings().compile is False
    reset_settings_cache()

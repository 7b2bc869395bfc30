from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Ensure project root is importable as a module path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packmap.metrics import reset_metrics
from packmap.settings import PackSettings


class FakeCompiler:
    def __init__(self, on_compile=None) -> None:
        self.calls = 0
        self.on_compile = on_compile

    def compile(self) -> None:
        self.calls += 1
        if self.on_compile is not None:
            self.on_compile()


class FakeDevServer:
    def __init__(self, running: bool = False) -> None:
        self.is_running = running

    def running(self) -> bool:
        return self.is_running


class FakeWatcher:
    """Records the subscription instead of polling; tests fire it by hand."""

    instances: list["FakeWatcher"] = []

    def __init__(self, path, on_change) -> None:
        self.path = Path(path)
        self.on_change = on_change
        self.stopped = False
        FakeWatcher.instances.append(self)

    def fire(self) -> None:
        self.on_change()

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    FakeWatcher.instances.clear()
    yield
    reset_metrics()


@pytest.fixture()
def manifest_path(tmp_path) -> Path:
    return tmp_path / "packs" / "manifest.json"


@pytest.fixture()
def write_manifest(manifest_path):
    def _write(data) -> Path:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        manifest_path.write_text(json.dumps(data), encoding="utf-8")
        return manifest_path

    return _write


@pytest.fixture()
def make_settings(manifest_path):
    def _make(**overrides) -> PackSettings:
        values = {"manifest_path": manifest_path}
        values.update(overrides)
        return PackSettings(**values)

    return _make


@pytest.fixture()
def make_manifest(make_settings):
    from packmap.manifest import ManifestCache

    def _make(compiler=None, dev_server=None, **overrides) -> ManifestCache:
        return ManifestCache(
            make_settings(**overrides),
            compiler=compiler or FakeCompiler(),
            dev_server=dev_server or FakeDevServer(),
            watcher_factory=FakeWatcher,
        )

    return _make

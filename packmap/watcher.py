from __future__ import annotations

import hashlib
import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from .manifest import ManifestCache


logger = logging.getLogger("packmap.watcher")

_Signature = Optional[Tuple[int, int, str]]


class ChangeWatcher(Protocol):
    def stop(self) -> None:
        ...


WatcherFactory = Callable[[Path, Callable[[], None]], ChangeWatcher]


class ManifestChangeHandler:
    """Watcher callback that reloads one manifest cache."""

    def __init__(self, manifest: "ManifestCache") -> None:
        self.manifest = manifest

    def __call__(self) -> None:
        logger.debug("Manifest changed on disk; reloading")
        self.manifest.refresh()


def _signature(path: Path) -> _Signature:
    # Rebuilds often keep the same size and can land in the same mtime tick
    try:
        st = os.stat(path)
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size, digest)


class PollingWatcher:
    """Polls ``path`` from a daemon thread and calls ``on_change`` after it changes.

    Creation, deletion and rewrites all count as changes. Errors raised by
    the callback are logged and polling continues.
    """

    def __init__(self, path: Path, on_change: Callable[[], None], interval: float = 0.5) -> None:
        self.path = Path(path)
        self.on_change = on_change
        self.interval = interval
        self._stop = threading.Event()
        self._last = _signature(self.path)
        self._thread = threading.Thread(
            target=self._run, name=f"packmap-watch:{self.path.name}", daemon=True
        )
        self._thread.start()

    def poll(self) -> bool:
        """Check once; returns True when a change was dispatched."""
        current = _signature(self.path)
        if current == self._last:
            return False
        self._last = current
        try:
            self.on_change()
        except Exception:
            logger.exception("Manifest change callback failed for %s", self.path)
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()

    def stop(self) -> None:
        self._stop.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=max(self.interval * 2, 1.0))

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

from __future__ import annotations

import json
import logging
import os
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional


# Request/operation-scoped context read by JsonFormatter
_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_LOG_TAG: ContextVar[Optional[str]] = ContextVar("log_tag", default=None)

# logger name -> (active silenced blocks, level to restore)
_silence_lock = threading.Lock()
_silence_state: dict[str, tuple[int, int]] = {}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        tag = get_log_tag()
        if tag and not hasattr(record, "tag"):
            data["tag"] = tag
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)  # type: ignore[arg-type]
        rid = get_request_id()
        if rid and not hasattr(record, "request_id"):
            data["request_id"] = rid
        for key in ("request_id", "tag", "manifest_path", "duration_s"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        return json.dumps(data, ensure_ascii=False)


def configure_json_logging(level: int = logging.INFO) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    # Remove other handlers to avoid duplicate logs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)


def maybe_enable_json_logging() -> None:
    if (os.environ.get("JSON_LOGS") or "").strip().lower() in {"1", "true", "yes", "on"}:
        configure_json_logging()


@contextmanager
def tagged(tag: str) -> Iterator[None]:
    """Attach ``tag`` to every record formatted inside the block."""
    token = _LOG_TAG.set(tag)
    try:
        yield
    finally:
        _LOG_TAG.reset(token)


@contextmanager
def silenced(logger: logging.Logger, level: int = logging.INFO) -> Iterator[None]:
    """Temporarily drop records below ``level`` on ``logger``.

    Overlapping blocks share one saved level; only the outermost exit restores it.
    """
    with _silence_lock:
        depth, previous = _silence_state.get(logger.name, (0, logger.level))
        if depth == 0 and logger.getEffectiveLevel() < level:
            logger.setLevel(level)
        _silence_state[logger.name] = (depth + 1, previous)
    try:
        yield
    finally:
        with _silence_lock:
            depth, previous = _silence_state.pop(logger.name)
            if depth > 1:
                _silence_state[logger.name] = (depth - 1, previous)
            else:
                logger.setLevel(previous)


def get_log_tag() -> Optional[str]:
    return _LOG_TAG.get()


def set_request_id(request_id: Optional[str]) -> None:
    _REQUEST_ID.set(request_id)


def get_request_id() -> Optional[str]:
    return _REQUEST_ID.get()

"""JSON-lines logging for board renders, with per-command context and crash hooks.

Every record written to ``tileboard.log`` is one JSON object. Fields passed via
``extra=`` (``event``, ``tile``, ``board``, ``crash_id`` ...) are copied into the
object as-is, and fields bound with :func:`log_context` are added to every
record emitted while the context is active.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import logging.handlers
import os
import platform
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator


_LOGGER_NAME = "tileboard"
_LOG_FILE = "tileboard.log"

# attributes every LogRecord carries; anything else came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("tileboard_log_context", default={})


def config_root() -> Path:
    if platform.system() == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "TileBoard"
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "TileBoard"
    return Path.home() / ".config" / "tileboard"


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


@contextlib.contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Attach ``fields`` (e.g. ``board=``, ``command=``) to records logged inside the block."""
    token = _context.set({**_context.get(), **{k: v for k, v in fields.items() if v is not None}})
    try:
        yield
    finally:
        _context.reset(token)


class ContextFilter(logging.Filter):
    """Copies the active :func:`log_context` fields onto each record without overriding ``extra=``."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        payload.update(record_fields(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(keep_files: int = 7, console: bool = True, directory: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    path = (directory or log_dir()) / _LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter())
    logger.addHandler(handler)

    if console:
        # stderr, so stdout stays reserved for the CLI's JSON result
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(stream_handler)

    logger.info("logging to %s", path, extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def install_crash_hooks() -> None:
    """Log uncaught exceptions (main and worker threads) with a crash id before the process dies."""
    logger = get_logger()

    def _log_crash(event: str, exc_info, thread_name: str | None = None) -> None:
        crash_id = uuid.uuid4().hex
        logger.critical(
            "unhandled %s crash_id=%s",
            exc_info[0].__name__ if exc_info[0] else "exception",
            crash_id,
            exc_info=exc_info,
            extra={"event": event, "crash_id": crash_id, "crash_thread": thread_name},
        )

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        _log_crash("uncaught_exception", (exc_type, exc_value, exc_tb))

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        thread_name = args.thread.name if args.thread is not None else None
        _log_crash("thread_exception", (args.exc_type, args.exc_value, args.exc_traceback), thread_name)

    sys.excepthook = _log_uncaught
    threading.excepthook = _thread_hook

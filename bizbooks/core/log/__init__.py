"""Logging setup for the bookkeeping API.

Records are pushed onto a queue by the thread that emits them and written by a
single ``QueueListener``: a rich console handler always, plus a
midnight-rotating ``bizbooks.log`` when ``LOG_DIR`` is configured.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

__all__ = [
    "LOGGER_NAME",
    "init_logging",
    "shutdown_logging",
    "get_logger",
    "log_context",
    "timeit",
]

LOGGER_NAME = "bizbooks"
LOG_FILE_NAME = f"{LOGGER_NAME}.log"
LOG_FILE_BACKUPS = 14

_CONSOLE_FORMAT = "%(context)s%(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"
_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class _Setup:
    level: int
    log_dir: Path | None


_lock = RLock()
_active: _Setup | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def _console_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format=_TIME_FORMAT,
    )
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    return handler


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        when="midnight",
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_TIME_FORMAT))
    return handler


def init_logging(level: str | int = "INFO", log_dir: str | Path | None = None) -> None:
    """Install the queue handler on the root logger.

    ``level`` and ``log_dir`` normally come from ``ServerSettings``. Calling
    again with the same values is a no-op; different values replace the
    running listener.
    """

    setup = _Setup(level=_parse_level(level), log_dir=Path(log_dir) if log_dir else None)
    global _active, _listener, _queue_handler
    with _lock:
        if _active == setup:
            return
        _stop_locked()

        install_rich_traceback(show_locals=False)
        handlers = [_console_handler()]
        if setup.log_dir is not None:
            handlers.append(_file_handler(setup.log_dir))
        for handler in handlers:
            handler.setLevel(setup.level)

        # The context filter must run on the emitting thread, where the
        # request-scoped context variable is visible.
        queue: SimpleQueue = SimpleQueue()
        queue_handler = QueueHandler(queue)
        queue_handler.setLevel(setup.level)
        queue_handler.addFilter(ContextFilter())

        root = logging.getLogger()
        root.setLevel(setup.level)
        root.addHandler(queue_handler)

        listener = QueueListener(queue, *handlers, respect_handler_level=True)
        listener.start()

        _active = setup
        _listener = listener
        _queue_handler = queue_handler


def _stop_locked() -> None:
    global _active, _listener, _queue_handler
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
    _active = None
    _listener = None
    _queue_handler = None


def shutdown_logging() -> None:
    """Flush queued records and detach the handlers installed by ``init_logging``."""

    with _lock:
        _stop_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    with _lock:
        if _active is None:
            init_logging()
    return logging.getLogger(name or LOGGER_NAME)

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Dict, List
from pathlib import Path

from . import settings


def configure_logging(force: bool = False) -> None:
    """Configure process-wide logging for an action run.

    Console output goes to stderr so the Actions log shows it; a rotating
    file handler is added only when ``LOG_FILE`` is set. Handlers are
    installed exactly once unless ``force`` is True.
    """

    root_logger = logging.getLogger()
    force_env = settings.LOG_FORCE

    if root_logger.handlers and not (force or force_env):
        return

    if root_logger.handlers:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)

    handlers: List[logging.Handler] = []
    if settings.LOG_FILE:
        handlers.append(
            _build_file_handler(
                settings.LOG_FILE,
                max_bytes=settings.LOG_MAX_BYTES,
                backup_count=settings.LOG_BACKUP_COUNT,
            )
        )

    if settings.LOG_CONSOLE or not handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(_formatter())
        handlers.append(console_handler)

    logging.basicConfig(level=settings.LOG_LEVEL, handlers=handlers)
    logging.captureWarnings(True)

    _quiet_loggers()


def _build_file_handler(path_str: str, *, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    path = Path(path_str).expanduser()
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter())
    return handler


def _formatter() -> logging.Formatter:
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s%(meta)s"
    return _ExtraFormatter(fmt)


class _ExtraFormatter(logging.Formatter):
    _reserved = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
        "meta",
    }

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        extras = self._collect_extras(record)
        record.meta = f" | {extras}" if extras else ""
        return super().format(record)

    def _collect_extras(self, record: logging.LogRecord) -> Dict[str, object]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._reserved
        }


def _quiet_loggers() -> None:
    noisy = {
        "httpx": logging.WARNING,
        "httpcore": logging.WARNING,
        "openai": logging.WARNING,
        "urllib3": logging.WARNING,
    }
    for name, level in noisy.items():
        logging.getLogger(name).setLevel(level)

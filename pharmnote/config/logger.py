"""Logging for the SOAP note service.

Service records go to children of the uvicorn error logger so they share the
server's console, plus a rotating debug file under ``LOG_DIR`` when it is
writable.

Pipeline stages log through ``log_stage``: one line per event made of short
``key=value`` fields (uids, counts, model ids, URIs). Clinical text is never a
field value; stages log its length instead.
"""

import logging
from collections.abc import Sequence
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from pharmnote.config.settings import settings

SERVER_LOGGER_NAME = "uvicorn.error"
_FILE_HANDLER_MARK = "_pharmnote_debug_file"
_configured = False


def _parse_level(level_name: str | None, default: int) -> tuple[int, bool]:
    level = getattr(logging, (level_name or "").strip().upper(), None)
    if isinstance(level, int):
        return level, True
    return default, False


def _build_debug_file_handler(server_logger: logging.Logger) -> logging.Handler | None:
    level, valid = _parse_level(settings.LOG_FILE_LEVEL, logging.DEBUG)
    if not valid:
        server_logger.warning("[logger] LOG_FILE_LEVEL=%r unknown, using DEBUG", settings.LOG_FILE_LEVEL)

    backup_count = settings.LOG_FILE_BACKUP_COUNT
    if backup_count < 0:
        server_logger.warning("[logger] LOG_FILE_BACKUP_COUNT=%s is negative, using 7", backup_count)
        backup_count = 7

    path = Path(settings.LOG_DIR) / settings.LOG_FILE_NAME
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            filename=str(path),
            when=settings.LOG_FILE_WHEN,
            interval=settings.LOG_FILE_INTERVAL,
            backupCount=backup_count,
            encoding=settings.LOG_FILE_ENCODING,
        )
    except OSError as exc:
        server_logger.warning("[logger] debug file disabled at %s: %s", path, exc)
        return None

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    setattr(handler, _FILE_HANDLER_MARK, True)
    return handler


def configure_logging() -> None:
    """Attach console and debug-file handlers once per process."""
    global _configured
    if _configured:
        return

    server_logger = logging.getLogger(SERVER_LOGGER_NAME)
    level, valid = _parse_level(settings.LOG_LEVEL, logging.INFO)

    # Under uvicorn the server has already installed its handler.
    if not server_logger.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        server_logger.addHandler(console)
        server_logger.propagate = False
    server_logger.setLevel(level)

    if not valid:
        server_logger.warning("[logger] LOG_LEVEL=%r unknown, using INFO", settings.LOG_LEVEL)

    if not any(getattr(h, _FILE_HANDLER_MARK, False) for h in server_logger.handlers):
        file_handler = _build_debug_file_handler(server_logger)
        if file_handler is not None:
            server_logger.addHandler(file_handler)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    configure_logging()
    server_logger = logging.getLogger(SERVER_LOGGER_NAME)
    if not name:
        return server_logger
    return server_logger.getChild(name)


def _render_field(value: Any) -> str:
    if isinstance(value, Sequence) and not isinstance(value, str):
        text = ",".join(str(item) for item in value) or "-"
    else:
        text = str(value)

    limit = settings.LOG_TRUNCATE
    if len(text) > limit:
        text = f"{text[:limit]}...[truncated {len(text) - limit} chars]"
    return text


def log_stage(
    logger: logging.Logger,
    stage: str,
    event: str,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Log ``[stage] event key=value ...`` for one pipeline event.

    Sequences render comma-joined (``-`` when empty) and every value is cut
    to ``LOG_TRUNCATE`` characters.
    """
    rendered = " ".join(f"{key}={_render_field(value)}" for key, value in fields.items())
    if rendered:
        logger.log(level, "[%s] %s %s", stage, event, rendered)
    else:
        logger.log(level, "[%s] %s", stage, event)

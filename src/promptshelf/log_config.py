"""Logging configuration for the promptshelf CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from promptshelf.config.models import LoggingSettings

LOGGER_NAME = "promptshelf"
_HANDLER_MARKER = "_promptshelf_handler"


def configure_logging(settings: LoggingSettings, log_path: Path | None = None) -> logging.Logger:
    """Attach stderr and rotating-file handlers to the package logger.

    Handlers installed by earlier calls are replaced, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        settings: Level and rotation settings.
        log_path: Log file location; file logging is skipped when ``None``
            or when the file cannot be opened.

    Returns:
        logging.Logger: The configured package logger.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    level = logging.getLevelName(settings.level)
    logger.setLevel(logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_path=False,
        rich_tracebacks=False,
    )
    setattr(console_handler, _HANDLER_MARKER, True)
    logger.addHandler(console_handler)

    if log_path is not None:
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=settings.max_size_mb * 1024 * 1024,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("Unable to open log file %s: %s", log_path, exc)
        else:
            file_handler.setLevel(min(level, logging.INFO))
            file_handler.setFormatter(
                logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
            )
            setattr(file_handler, _HANDLER_MARKER, True)
            logger.addHandler(file_handler)

    return logger


__all__ = ["LOGGER_NAME", "configure_logging"]

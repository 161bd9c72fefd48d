"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "todolist"
_LOG_FILE = "todolist.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None

# Marks handlers added here; foreign ones (e.g. log capture) are ignored.
_HANDLER_MARK = "_todolist_handler"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, initialising it on first call.

    Args:
        name: Optional child logger suffix (e.g. "repository")
    """
    global _logger
    if _logger is None:
        _logger = _configure()
    if name:
        return _logger.getChild(name)
    return _logger


def _configure() -> logging.Logger:
    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    if any(getattr(h, _HANDLER_MARK, False) for h in logger.handlers):
        return logger

    log_dir = Path(user_log_dir(_APP_NAME))
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_dir / _LOG_FILE,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        # Read-only home directories still get a working logger
        handler = logging.NullHandler()

    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    setattr(handler, _HANDLER_MARK, True)
    logger.addHandler(handler)
    return logger

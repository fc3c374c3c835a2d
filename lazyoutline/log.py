"""Package logger setup.

Modules log through ``logging.getLogger(__name__)``. ``configure_logging``
sets the package level from the ``log_level`` option and, unless disabled,
mirrors records to ``lazyoutline.log`` in the per-user log directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "lazyoutline"
LOG_FILENAME = "lazyoutline.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_FILE_HANDLER: logging.Handler | None = None


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(level: str = "WARNING", log_file: bool = True, path: Path | None = None) -> logging.Logger:
    """Apply ``level`` to the package logger and (re)install the file handler.

    The file handler is created once; later calls only adjust levels. When the
    log directory cannot be created, file logging is skipped and a warning is
    emitted through the remaining handlers.
    """
    global _FILE_HANDLER

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(getattr(logging, level, logging.WARNING))

    if not log_file:
        if _FILE_HANDLER is not None:
            logger.removeHandler(_FILE_HANDLER)
            _FILE_HANDLER.close()
            _FILE_HANDLER = None
        return logger

    if _FILE_HANDLER is None:
        target = path or default_log_path()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(target, encoding="utf-8", delay=True)
        except OSError as exc:
            logger.warning("File logging disabled, cannot use %s: %s", target, exc)
            return logger
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        _FILE_HANDLER = handler
    _FILE_HANDLER.setLevel(logger.level)
    return logger


__all__ = ["APP_NAME", "configure_logging", "default_log_path"]

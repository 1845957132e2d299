"""
Logging setup for command line use.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed here, on the package logger, by whoever drives the library.
"""

from __future__ import annotations

import logging
import pathlib

import platformdirs
import rich.console
from rich.logging import RichHandler

__all__ = ["USER_LOG_DIR", "get_user_log_dir", "set_level", "setup_logging"]

USER_LOG_DIR = pathlib.Path(platformdirs.user_log_dir("pipeliner", "pipeliner"))

_CONSOLE_HANDLER = "pipeliner-console"
_FILE_HANDLER = "pipeliner-file"


def get_user_log_dir() -> pathlib.Path:
    """Retrieve log dir, ensuring it exists."""
    if not USER_LOG_DIR.exists():
        USER_LOG_DIR.mkdir(parents=True)
    return USER_LOG_DIR


def setup_logging(
    level: str | int = logging.WARNING,
    log_file: bool = False,
    console: rich.console.Console | None = None,
) -> logging.Logger:
    """
    Send package log records to the terminal, and optionally to a file.

    Safe to call repeatedly; handlers from earlier calls are replaced.
    """
    logger = logging.getLogger("pipeliner")
    for handler in list(logger.handlers):
        if handler.get_name() in (_CONSOLE_HANDLER, _FILE_HANDLER):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=console or rich.console.Console(stderr=True),
        show_path=False,
    )
    console_handler.set_name(_CONSOLE_HANDLER)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(get_user_log_dir() / "pipeliner.log")
        file_handler.set_name(_FILE_HANDLER)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    set_level(level)
    return logger


def set_level(level: str | int) -> None:
    """Change how chatty the package logger is."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger("pipeliner").setLevel(level)

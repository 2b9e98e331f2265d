"""Console and file logging for the lunch-calendar commands.

Log records go to stderr through Rich so that ``analyze`` and ``day-labels``
can keep stdout clean for their JSON and text output. ``--log-file`` adds a
plain-text DEBUG log, which is useful when a saved HAR capture misbehaves.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "lunch_calendar"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

stderr_console = Console(stderr=True)


def resolve_level(level: str | int) -> int:
    """Map a CLI level name ("debug", "INFO", ...) to its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=stderr_console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(level: str | int = "info", log_file: Path | None = None) -> logging.Logger:
    """Attach a Rich console handler, and optionally a file handler, to the package logger.

    Calling it again replaces the earlier handlers. With a log file the
    logger itself passes DEBUG records so the file gets everything while the
    console still filters at ``level``.
    """
    console_level = resolve_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(console_level))
    if log_file is not None:
        logger.addHandler(_file_handler(Path(log_file)))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger

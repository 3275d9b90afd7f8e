#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/logging_utils.py
"""Logging setup for the flare2adoc command line.

Log records go to stderr through a :class:`rich.logging.RichHandler`, so
they never mix with AsciiDoc written to stdout. Conversion diagnostics are
logged by :mod:`flare2adoc.result` as they are recorded; the command line
already prints them as a table once the topic is converted, so the console
handler leaves them out. A log file, when requested, receives every record.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "flare2adoc"
DIAGNOSTICS_LOGGER = "flare2adoc.result"

_FILE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DiagnosticRecordFilter(logging.Filter):
    """Drop records of recorded diagnostics, which are reported separately."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(DIAGNOSTICS_LOGGER)


def resolve_level(log_level: int | str) -> int:
    """Return the numeric level for a level number or name, defaulting to INFO."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``flare2adoc`` logger for a command-line run.

    Handlers installed by an earlier call are replaced, so the command line
    can be invoked repeatedly in one process.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO").
    log_file : str, optional
        Path of a file that receives every record, diagnostics included.
    trace_mode : bool, default False
        Show timestamps and logger names on the console.
    console : rich.console.Console, optional
        Console to log to. Defaults to a console on stderr.

    Returns
    -------
    logging.Logger
        The configured package logger.

    """
    resolved_level = resolve_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolved_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        level=resolved_level,
        show_time=trace_mode,
        show_path=trace_mode,
        markup=False,
    )
    console_handler.setFormatter(logging.Formatter("[%(name)s] %(message)s" if trace_mode else "%(message)s"))
    console_handler.addFilter(DiagnosticRecordFilter())
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FORMAT))
            package_logger.addHandler(file_handler)
            package_logger.info("Logging to file: %s", log_file)

    return package_logger

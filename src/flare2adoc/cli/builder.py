#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/cli/builder.py
"""Argument parser construction and exit codes for the flare2adoc CLI."""

from __future__ import annotations

import argparse

from flare2adoc.exceptions import DependencyError, FatalParseError, ValidationError

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_WARNINGS_ERROR = 10


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``flare2adoc`` command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="flare2adoc",
        description="Convert MadCap Flare HTML topics to AsciiDoc.",
        epilog="Examples:\n"
        "  flare2adoc Content/Topic.htm -o topic.adoc\n"
        "  flare2adoc Topic.htm --variables Project/VariableSets/General.flvar --variable-mode flatten\n"
        "  flare2adoc Topic.htm --exclude-condition 'Default\\.Draft' --strict",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", metavar="INPUT", help="Topic file to convert, or '-' for standard input")
    parser.add_argument("-o", "--out", dest="out", help="Output file (default: standard output)")
    parser.add_argument(
        "--variables",
        metavar="FILE",
        help="Variable values: a .flvar variable set, or a JSON, YAML or TOML mapping",
    )
    parser.add_argument(
        "--variable-mode",
        choices=["reference", "flatten"],
        help="Emit variables as attribute references or inline their values",
    )
    parser.add_argument(
        "--exclude-condition",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Regex for condition tags whose elements are removed (repeatable)",
    )
    parser.add_argument(
        "--include-condition",
        action="append",
        default=[],
        metavar="NAME",
        help="Condition tag that always keeps an element (repeatable)",
    )
    parser.add_argument("--config", metavar="FILE", help="Configuration file (JSON, YAML, TOML or pyproject.toml)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Verbose log format with timestamps and logger names")
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with code {EXIT_WARNINGS_ERROR} when the conversion recorded warnings",
    )
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, (ValidationError, ValueError, argparse.ArgumentTypeError)):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, OSError):
        return EXIT_FILE_ERROR

    if isinstance(exception, FatalParseError):
        return EXIT_PARSING_ERROR

    return EXIT_ERROR

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/cli/__init__.py
"""Command-line interface for flare2adoc.

Converts one MadCap Flare topic to AsciiDoc::

    flare2adoc Content/Topic.htm -o Topic.adoc --variables General.flvar

Warnings recorded during conversion are printed as a table on stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from flare2adoc.cli.builder import (
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    EXIT_WARNINGS_ERROR,
    create_parser,
    get_exit_code_for_exception,
)
from flare2adoc.cli.config import load_config_file, load_variables_file
from flare2adoc.exceptions import Flare2AdocError
from flare2adoc.logging_utils import configure_logging
from flare2adoc.options.asciidoc import AsciiDocEmitterOptions
from flare2adoc.options.lint import LintOptions
from flare2adoc.options.madcap import MadCapParserOptions
from flare2adoc.result import ConversionWarning

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser", "print_warnings_table"]


def _build_options(
    parsed_args: argparse.Namespace, config: Dict[str, Any]
) -> tuple[MadCapParserOptions, AsciiDocEmitterOptions, LintOptions]:
    """Build the stage options from the config file and command-line overrides.

    Raises
    ------
    ValueError
        If an option value is invalid

    """
    parser_options = MadCapParserOptions.from_mapping(config.get("parser", {}))
    if parsed_args.exclude_condition or parsed_args.include_condition:
        parser_options = parser_options.create_updated(
            exclude_conditions=(*parser_options.exclude_conditions, *parsed_args.exclude_condition),
            include_conditions=(*parser_options.include_conditions, *parsed_args.include_condition),
        )

    renderer_options = AsciiDocEmitterOptions.from_mapping(config.get("renderer", {}))
    if parsed_args.variable_mode:
        renderer_options = renderer_options.create_updated(variable_mode=parsed_args.variable_mode)

    lint_options = LintOptions.from_mapping(config.get("lint", {}))
    return parser_options, renderer_options, lint_options


def print_warnings_table(warnings: list[ConversionWarning], source: str) -> None:
    """Print conversion warnings as a rich table on stderr."""
    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"Conversion warnings for {source}")
    table.add_column("Code", style="yellow", no_wrap=True)
    table.add_column("Message")
    table.add_column("Location", style="cyan")
    for warning in warnings:
        table.add_row(warning.code, warning.message, warning.location or "")

    Console(stderr=True).print(table)


def _read_input(input_arg: str) -> tuple[Any, Optional[Path]]:
    if input_arg == "-":
        return sys.stdin.read(), None
    path = Path(input_arg)
    if not path.is_file():
        raise FileNotFoundError(f"Input file does not exist: {path}")
    return path, path


def main(args: list[str] | None = None) -> int:
    """Run the ``flare2adoc`` command.

    Parameters
    ----------
    args : list of str, optional
        Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code

    """
    from flare2adoc.api import to_asciidoc

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        config = load_config_file(parsed_args.config) if parsed_args.config else {}
        variables = load_variables_file(parsed_args.variables) if parsed_args.variables else None
        parser_options, renderer_options, lint_options = _build_options(parsed_args, config)
    except (argparse.ArgumentTypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        source, source_path = _read_input(parsed_args.input)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        result = to_asciidoc(
            source,
            variables=variables,
            parser_options=parser_options,
            renderer_options=renderer_options,
            lint_options=lint_options,
        )
    except (Flare2AdocError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    try:
        if parsed_args.out:
            Path(parsed_args.out).write_text(result.text, encoding="utf-8")
            logger.info(f"Wrote {parsed_args.out}")
        else:
            sys.stdout.write(result.text)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    if result.warnings:
        print_warnings_table(result.warnings, str(source_path) if source_path else "<stdin>")
        if parsed_args.strict:
            return EXIT_WARNINGS_ERROR

    return EXIT_SUCCESS

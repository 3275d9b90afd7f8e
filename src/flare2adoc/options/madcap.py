#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/options/madcap.py
"""Configuration options for parsing and canonicalizing MadCap Flare topics."""

from __future__ import annotations

from dataclasses import dataclass, field

from flare2adoc.constants import (
    DEFAULT_EXCLUDED_CONDITION_PATTERNS,
    DEFAULT_HTML_PARSER,
    DEFAULT_MAX_REPAIR_PASSES,
    DEFAULT_PROMOTE_SCREENSHOT_IMAGES,
    HtmlParser,
)
from flare2adoc.options.base import BaseParserOptions


@dataclass(frozen=True)
class MadCapParserOptions(BaseParserOptions):
    """Configuration options for MadCap Flare HTML to AST conversion.

    Parameters
    ----------
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder. ``lxml`` and ``html5lib`` need the
        matching optional dependency.
    exclude_conditions : tuple of str
        Regular expressions matched case-insensitively against each
        condition tag. Elements carrying a matching tag are removed.
    include_conditions : tuple of str, default ()
        Condition tags that keep an element even when an exclusion pattern
        matches one of its other tags (compared case-insensitively).
    max_repair_passes : int, default 8
        Upper bound on the number of structural repair passes.
    promote_screenshot_images : bool, default False
        Also place images under ``/Screens/`` or ``/Screenshots/`` on their
        own line, even when they share a line with text.

    Examples
    --------
    Keep everything tagged ``Internal``:
        >>> options = MadCapParserOptions(include_conditions=("Internal",))

    """

    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": "BeautifulSoup parser backend",
            "choices": ["html.parser", "html5lib", "lxml"],
            "importance": "advanced",
        },
    )
    exclude_conditions: tuple[str, ...] = field(
        default=DEFAULT_EXCLUDED_CONDITION_PATTERNS,
        metadata={
            "help": "Regex patterns for condition tags whose elements are removed",
            "importance": "core",
        },
    )
    include_conditions: tuple[str, ...] = field(
        default=(),
        metadata={
            "help": "Condition tags that always keep an element",
            "importance": "core",
        },
    )
    max_repair_passes: int = field(
        default=DEFAULT_MAX_REPAIR_PASSES,
        metadata={
            "help": "Maximum number of structural repair passes",
            "type": int,
            "importance": "advanced",
        },
    )
    promote_screenshot_images: bool = field(
        default=DEFAULT_PROMOTE_SCREENSHOT_IMAGES,
        metadata={
            "help": "Place screenshot images on their own line even inside text",
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If the parser backend is unknown or the pass limit is not positive.

        """
        super().__post_init__()
        if self.html_parser not in ("html.parser", "html5lib", "lxml"):
            raise ValueError(f"html_parser must be 'html.parser', 'html5lib' or 'lxml', got {self.html_parser!r}")
        if self.max_repair_passes < 1:
            raise ValueError(f"max_repair_passes must be at least 1, got {self.max_repair_passes}")

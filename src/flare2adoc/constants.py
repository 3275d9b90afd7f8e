#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/constants.py
"""Constants and default values for flare2adoc.

This module centralizes the hardcoded values used across the conversion
pipeline so the options classes and the command line share one source of
defaults.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Source Dialect - MadCap Flare vocabulary and condition defaults
3. Canonicalization - Structural repair limits and heuristics
4. Emission - AsciiDoc rendering defaults
5. Post-linting - Text cleanup defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HtmlParser = Literal["html.parser", "html5lib", "lxml"]
VariableMode = Literal["reference", "flatten"]
AdmonitionStyle = Literal["block", "paragraph"]
ListStyle = Literal["numeric", "loweralpha", "upperalpha", "lowerroman", "upperroman", "bullet"]
AdmonitionKind = Literal["note", "tip", "important", "warning", "caution"]
MediaPlacement = Literal["inline", "block"]

# =============================================================================
# Source Dialect
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParser = "html.parser"

# Snippets nested deeper than this are treated as circular.
MAX_SNIPPET_DEPTH = 10

# Longest text accepted as a callout title taken from the lead node.
LEAD_TITLE_MAX_LENGTH = 40

# Condition tags that are excluded by default. Patterns are matched
# case-insensitively against each tag of a madcap:conditions attribute.
DEFAULT_EXCLUDED_CONDITION_PATTERNS: tuple[str, ...] = (
    r"\b(Black|Red|Gray|Grey)\b",
    r"\b(deprecated?|deprecation|obsolete|legacy|old)\b",
    r"\b(paused?|halted?|stopped?|discontinued?|retired?)\b",
    r"\b(print[\s\-_]?only|printonly)\b",
    r"\b(cancelled?|canceled?|abandoned|shelved)\b",
    r"\b(hidden|internal|private|draft)\b",
)

CONDITION_ATTRIBUTES: tuple[str, ...] = ("madcap:conditions", "data-mc-conditions")

SNIPPETS_SUBDIRECTORY: tuple[str, ...] = ("Content", "Resources", "Snippets")

DEFAULT_COLLAPSIBLE_TITLE = "More Information"

# Callout class fragments mapped to admonition kinds, checked in order.
CALLOUT_KIND_BY_CLASS: tuple[tuple[str, AdmonitionKind], ...] = (
    ("warning", "warning"),
    ("caution", "warning"),
    ("attention", "warning"),
    ("danger", "caution"),
    ("error", "caution"),
    ("important", "important"),
    ("advisory", "important"),
    ("tip", "tip"),
    ("info", "note"),
    ("example", "note"),
    ("note", "note"),
)

CALLOUT_LABEL_PATTERN = r"^\s*(note|tip|warning|caution|attention|important|danger|error|info|example)\s*[:!]?\s*$"

SCREENSHOT_PATH_PATTERN = r"/(Screens|Screenshots)/"

# =============================================================================
# Canonicalization
# =============================================================================

DEFAULT_MAX_REPAIR_PASSES = 8
DEFAULT_PROMOTE_SCREENSHOT_IMAGES = False

# Lists at document level with at least this many items are treated as
# standalone lists rather than sub-lists of a preceding item.
STANDALONE_LIST_MIN_ITEMS = 5

LIST_INTRO_PHRASES: tuple[str, ...] = (
    "follow these steps",
    "following steps",
    "do the following",
    "as follows",
    "the following",
    "such as",
    "includes",
    "include",
    "contains",
    "consists of",
    "comprised of",
    "comprises",
)

# =============================================================================
# Emission
# =============================================================================

DEFAULT_VARIABLE_MODE: VariableMode = "reference"
DEFAULT_USE_COLLAPSIBLE_BLOCKS = True
DEFAULT_ADMONITION_STYLE: AdmonitionStyle = "block"
DEFAULT_INCLUDE_VARIABLE_ATTRIBUTES = False
DEFAULT_LIST_INDENT = 0
DEFAULT_XREF_EXTENSION = ".adoc"

ADMONITION_LABELS: dict[str, str] = {
    "note": "NOTE",
    "tip": "TIP",
    "important": "IMPORTANT",
    "warning": "WARNING",
    "caution": "CAUTION",
}

STYLE_DIRECTIVES: dict[str, str] = {
    "loweralpha": "loweralpha",
    "upperalpha": "upperalpha",
    "lowerroman": "lowerroman",
    "upperroman": "upperroman",
}

BASE_FENCE_LENGTH = 4

# Deepest section a heading maps to; ``=`` is the document title, so this
# level is written ``======``.
MAX_HEADING_LEVEL = 5

# =============================================================================
# Post-linting
# =============================================================================

DEFAULT_MAX_BLANK_LINES = 1
DEFAULT_FIX_EMPHASIS_SPACING = True
DEFAULT_FIX_LIST_PUNCTUATION = True

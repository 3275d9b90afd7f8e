#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/options/lint.py
"""Configuration options for the AsciiDoc post-linter."""

from __future__ import annotations

from dataclasses import dataclass, field

from flare2adoc.constants import (
    DEFAULT_FIX_EMPHASIS_SPACING,
    DEFAULT_FIX_LIST_PUNCTUATION,
    DEFAULT_MAX_BLANK_LINES,
)
from flare2adoc.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class LintOptions(CloneFrozenMixin):
    """Configuration options for text-level AsciiDoc cleanup.

    Parameters
    ----------
    max_blank_lines : int, default 1
        Longest run of consecutive blank lines kept outside literal blocks.
    fix_emphasis_spacing : bool, default True
        Normalize whitespace inside and around ``*``/``_`` emphasis pairs.
    fix_list_punctuation : bool, default True
        Remove space before terminal punctuation in list items and collapse
        doubled periods.

    """

    max_blank_lines: int = field(
        default=DEFAULT_MAX_BLANK_LINES,
        metadata={"help": "Maximum consecutive blank lines", "type": int, "importance": "advanced"},
    )
    fix_emphasis_spacing: bool = field(
        default=DEFAULT_FIX_EMPHASIS_SPACING,
        metadata={"help": "Normalize spacing around emphasis markers", "importance": "core"},
    )
    fix_list_punctuation: bool = field(
        default=DEFAULT_FIX_LIST_PUNCTUATION,
        metadata={"help": "Clean punctuation at the end of list items", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If ``max_blank_lines`` is negative.

        """
        if self.max_blank_lines < 0:
            raise ValueError(f"max_blank_lines must be non-negative, got {self.max_blank_lines}")

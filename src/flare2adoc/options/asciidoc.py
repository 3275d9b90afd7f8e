#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/options/asciidoc.py
"""Configuration options for AsciiDoc emission."""

from __future__ import annotations

from dataclasses import dataclass, field

from flare2adoc.constants import (
    DEFAULT_ADMONITION_STYLE,
    DEFAULT_INCLUDE_VARIABLE_ATTRIBUTES,
    DEFAULT_LIST_INDENT,
    DEFAULT_USE_COLLAPSIBLE_BLOCKS,
    DEFAULT_VARIABLE_MODE,
    AdmonitionStyle,
    VariableMode,
)
from flare2adoc.options.base import BaseRendererOptions


@dataclass(frozen=True)
class AsciiDocEmitterOptions(BaseRendererOptions):
    """Configuration options for AST to AsciiDoc emission.

    Parameters
    ----------
    variable_mode : {"reference", "flatten"}, default "reference"
        ``reference`` writes ``{attribute-name}`` for each variable,
        ``flatten`` writes the resolved value.
    use_collapsible_blocks : bool, default True
        Render collapsible regions as ``[%collapsible]`` example blocks.
        When False a discrete heading followed by the content is written.
    admonition_style : {"block", "paragraph"}, default "block"
        ``paragraph`` writes untitled single-paragraph admonitions as
        ``NOTE: text``. Other admonitions always use the block form.
    include_variable_attributes : bool, default False
        Prepend ``:name: value`` attribute entries for every resolved
        variable referenced in ``reference`` mode.
    list_indent : int, default 0
        Spaces of indentation per nesting level before nested list markers.

    """

    variable_mode: VariableMode = field(
        default=DEFAULT_VARIABLE_MODE,
        metadata={
            "help": "How to write variables: attribute reference or literal value",
            "choices": ["reference", "flatten"],
            "importance": "core",
        },
    )
    use_collapsible_blocks: bool = field(
        default=DEFAULT_USE_COLLAPSIBLE_BLOCKS,
        metadata={
            "help": "Render dropdowns as collapsible blocks",
            "cli_name": "no-collapsible-blocks",
            "importance": "core",
        },
    )
    admonition_style: AdmonitionStyle = field(
        default=DEFAULT_ADMONITION_STYLE,
        metadata={
            "help": "Admonition form for simple untitled callouts",
            "choices": ["block", "paragraph"],
            "importance": "advanced",
        },
    )
    include_variable_attributes: bool = field(
        default=DEFAULT_INCLUDE_VARIABLE_ATTRIBUTES,
        metadata={
            "help": "Write attribute entries for referenced variables at the top of the output",
            "importance": "advanced",
        },
    )
    list_indent: int = field(
        default=DEFAULT_LIST_INDENT,
        metadata={"help": "Indentation per nesting level for nested list markers", "type": int, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()
        if self.variable_mode not in ("reference", "flatten"):
            raise ValueError(f"variable_mode must be 'reference' or 'flatten', got {self.variable_mode!r}")
        if self.admonition_style not in ("block", "paragraph"):
            raise ValueError(f"admonition_style must be 'block' or 'paragraph', got {self.admonition_style!r}")
        if self.list_indent < 0:
            raise ValueError(f"list_indent must be non-negative, got {self.list_indent}")

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/options/__init__.py
"""Option dataclasses for the conversion pipeline."""

from flare2adoc.options.asciidoc import AsciiDocEmitterOptions
from flare2adoc.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from flare2adoc.options.lint import LintOptions
from flare2adoc.options.madcap import MadCapParserOptions

__all__ = [
    "CloneFrozenMixin",
    "BaseParserOptions",
    "BaseRendererOptions",
    "MadCapParserOptions",
    "AsciiDocEmitterOptions",
    "LintOptions",
]

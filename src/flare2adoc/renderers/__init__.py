#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/renderers/__init__.py
"""Renderers turning canonical trees into text."""

from flare2adoc.renderers.asciidoc import AsciiDocEmitter
from flare2adoc.renderers.base import BaseRenderer, InlineContentMixin

__all__ = ["AsciiDocEmitter", "BaseRenderer", "InlineContentMixin"]

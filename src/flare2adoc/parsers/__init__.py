#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/parsers/__init__.py
"""Source parsers producing raw AST documents."""

from flare2adoc.parsers.madcap import MadCapToAstConverter

__all__ = ["MadCapToAstConverter"]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/transforms/__init__.py
"""Structural repair passes applied by the canonicalizer.

Each pass is a :class:`~flare2adoc.ast.transforms.NodeTransformer` and
returns a new tree. The canonicalizer applies them in the order of
:data:`DEFAULT_PASS_ORDER` until the tree stops changing.
"""

from flare2adoc.transforms.lists import ListRepairTransform, NestingDecision, should_nest_sibling_list
from flare2adoc.transforms.media import MediaPlacementTransform
from flare2adoc.transforms.paragraphs import NormalizeParagraphsTransform

DEFAULT_PASS_ORDER = ("normalize-paragraphs", "place-media", "repair-lists")

__all__ = [
    "DEFAULT_PASS_ORDER",
    "ListRepairTransform",
    "MediaPlacementTransform",
    "NestingDecision",
    "NormalizeParagraphsTransform",
    "should_nest_sibling_list",
]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/transforms/lists.py
"""List structure repair.

Authoring tools frequently emit list markup that is not a well-formed tree:
paragraphs and images placed between ``li`` elements, sub-lists written as
siblings of the item they belong to, headings inside a list, and a list
that continues another one after an interruption. This pass turns every
:class:`~flare2adoc.ast.nodes.List` into a list that holds only
:class:`~flare2adoc.ast.nodes.ListItem` nodes.

Stray content is handled in this order, for each child of a raw list:

1. ``ListItem``: kept.
2. ``Heading``: splits the list. Items before the heading stay in the
   first list, the heading becomes a sibling block, and the remaining
   items form a new list whose numbering continues through ``start``.
3. ``List``: a candidate sub-list of the preceding item. The decision is
   made by :func:`should_nest_sibling_list`.
4. Any other block: appended to the preceding item, or hoisted above the
   list when there is no preceding item.

Afterwards, a list that directly follows another list in the same
container is nested under the previous list's last item when the evidence
for it is unambiguous.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Optional

from flare2adoc.ast.nodes import (
    Admonition,
    BlockQuote,
    Collapsible,
    Document,
    Heading,
    List,
    ListItem,
    Node,
    extract_text,
)
from flare2adoc.ast.transforms import NodeTransformer
from flare2adoc.constants import LIST_INTRO_PHRASES, STANDALONE_LIST_MIN_ITEMS
from flare2adoc.exceptions import AmbiguousStructure
from flare2adoc.result import DiagnosticCollector
from flare2adoc.utils.text import ends_with_introduction, ends_with_terminal_punctuation, normalize_whitespace

logger = logging.getLogger(__name__)

_INTRO_PHRASE = re.compile(r"\b(" + "|".join(re.escape(phrase) for phrase in LIST_INTRO_PHRASES) + r")\b")

_ALPHA_STYLES = ("loweralpha", "upperalpha")
_ROMAN_STYLES = ("lowerroman", "upperroman")


@dataclass(frozen=True)
class NestingDecision:
    """Outcome of the sibling-list nesting heuristic.

    Parameters
    ----------
    nest : bool
        True when the candidate list belongs under the preceding item
    ambiguous : bool
        True when the evidence was conflicting or absent and the tie-break
        rule (nest) was applied
    reason : str
        Short description of the deciding evidence

    """

    nest: bool
    ambiguous: bool
    reason: str


def item_text(item: Node) -> str:
    """Return the text of a list item, excluding any lists it already holds."""
    if isinstance(item, ListItem):
        parts = [extract_text(child) for child in item.children if not isinstance(child, List)]
        return normalize_whitespace(" ".join(parts)).strip()
    return normalize_whitespace(extract_text(item)).strip()


def _style_evidence(candidate: List, parent: Optional[List]) -> Optional[str]:
    style = candidate.effective_style
    if candidate.metadata.get("sub_list"):
        return "candidate is marked as a sub-list"
    if parent is None:
        if style in _ALPHA_STYLES or style in _ROMAN_STYLES:
            return f"candidate uses {style} numbering"
        return None
    parent_style = parent.effective_style
    if parent_style == "numeric" and (style in _ALPHA_STYLES or style in _ROMAN_STYLES):
        return f"{style} list under a numeric list"
    if parent_style in _ALPHA_STYLES and style in _ROMAN_STYLES:
        return f"{style} list under an {parent_style} list"
    return None


def should_nest_sibling_list(
    item: Node,
    candidate: List,
    parent: Optional[List] = None,
    *,
    heading_between: bool = False,
    at_document_level: bool = False,
) -> NestingDecision:
    """Decide whether a sibling list is a sub-list of the preceding item.

    Parameters
    ----------
    item : Node
        The list item preceding the candidate
    candidate : List
        The list found directly after ``item``
    parent : List, optional
        The list that holds ``item``
    heading_between : bool, default False
        Whether a heading separates the item from the candidate
    at_document_level : bool, default False
        Whether the parent list is a top-level block of the document

    Returns
    -------
    NestingDecision
        The decision together with whether it was ambiguous

    Examples
    --------
    >>> item = ListItem(children=[Paragraph(content=[Text("Do the following:")])])
    >>> should_nest_sibling_list(item, List(ordered=False)).nest
    True

    """
    if heading_between:
        return NestingDecision(nest=False, ambiguous=False, reason="a heading separates the lists")
    if candidate.metadata.get("continued"):
        return NestingDecision(nest=False, ambiguous=False, reason="candidate continues an earlier list")

    text = item_text(item)
    strong = _style_evidence(candidate, parent)
    weak: Optional[str] = None
    if ends_with_introduction(text):
        weak = "item text ends with an introduction mark"
    elif _INTRO_PHRASE.search(text.lower()):
        weak = "item text contains an introduction phrase"
    positive = strong or weak

    negative: Optional[str] = None
    candidate_items = sum(1 for child in candidate.items if isinstance(child, ListItem))
    if at_document_level and candidate_items >= STANDALONE_LIST_MIN_ITEMS:
        negative = f"candidate is a standalone list of {candidate_items} items"
    elif strong is None and ends_with_terminal_punctuation(text):
        negative = "item text ends a sentence"

    if positive and not negative:
        return NestingDecision(nest=True, ambiguous=False, reason=positive)
    if negative and not positive:
        return NestingDecision(nest=False, ambiguous=False, reason=negative)
    if positive and negative:
        return NestingDecision(nest=True, ambiguous=True, reason=f"{positive}, but {negative}")
    return NestingDecision(nest=True, ambiguous=True, reason="no evidence either way")


class ListRepairTransform(NodeTransformer):
    """Repair list structure so that lists hold only list items.

    Parameters
    ----------
    diagnostics : DiagnosticCollector, optional
        Receives an ``ambiguous-structure`` diagnostic for every nesting
        decision taken by the tie-break rule

    """

    def __init__(self, diagnostics: DiagnosticCollector | None = None) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self._nesting = 0

    # Containers -------------------------------------------------------

    def visit_document(self, node: Document) -> Document:
        """Repair every list in the document."""
        children = self._nest_adjacent_lists(self._transform_children(node.children))
        return Document(children=children, metadata=node.metadata.copy(), source_location=node.source_location)

    def _visit_nested_container(self, node: Node, children: list[Node]) -> list[Node]:
        self._nesting += 1
        try:
            return self._nest_adjacent_lists(self._transform_children(children))
        finally:
            self._nesting -= 1

    def visit_list_item(self, node: ListItem) -> ListItem:  # type: ignore[override]
        """Repair lists held by a list item."""
        return replace(node, children=self._visit_nested_container(node, node.children))

    def visit_admonition(self, node: Admonition) -> Admonition:  # type: ignore[override]
        """Repair lists held by an admonition."""
        return replace(node, children=self._visit_nested_container(node, node.children))

    def visit_collapsible(self, node: Collapsible) -> Collapsible:  # type: ignore[override]
        """Repair lists held by a collapsible block."""
        return replace(node, children=self._visit_nested_container(node, node.children))

    def visit_block_quote(self, node: BlockQuote) -> BlockQuote:  # type: ignore[override]
        """Repair lists held by a block quote."""
        return replace(node, children=self._visit_nested_container(node, node.children))

    # Lists ------------------------------------------------------------

    def visit_list(self, node: List) -> Node | list[Node] | None:  # type: ignore[override]
        """Split, absorb and nest the raw children of a list.

        Returns
        -------
        Node, list of Node, or None
            The repaired list, the blocks it was split into, or None when no
            items remain

        """
        at_document_level = self._nesting == 0
        raw_items = self._transform_children(node.items)

        output: list[Node] = []
        segment: list[Node] = []
        emitted = 0

        def close_segment() -> None:
            nonlocal emitted
            if not segment:
                return
            start = node.start + emitted if node.ordered else node.start
            metadata = dict(node.metadata)
            if emitted:
                # Later segments resume the numbering and own none of the anchors.
                metadata["continued"] = True
                metadata.pop("anchors", None)
            output.append(replace(node, items=list(segment), start=start, metadata=metadata))
            emitted += len(segment)
            segment.clear()

        for child in raw_items:
            if isinstance(child, ListItem):
                segment.append(child)
            elif isinstance(child, Heading):
                logger.debug("Heading inside a list splits the list")
                close_segment()
                output.append(child)
            elif isinstance(child, List):
                if not segment:
                    output.append(child)
                    continue
                decision = should_nest_sibling_list(segment[-1], child, node, at_document_level=at_document_level)
                if decision.ambiguous:
                    self.diagnostics.record(
                        AmbiguousStructure(
                            f"Sibling list {'nested under' if decision.nest else 'kept apart from'} the "
                            f"preceding item ({decision.reason})",
                            child.source_location or node.source_location,
                        )
                    )
                if decision.nest:
                    segment[-1] = _append_child(segment[-1], child)
                else:
                    logger.debug("Sibling list promoted out of its parent: %s", decision.reason)
                    close_segment()
                    output.append(child)
            elif segment:
                segment[-1] = _append_child(segment[-1], child)
            else:
                output.append(child)
        close_segment()

        if not output:
            return None
        if len(output) == 1:
            return output[0]
        return output

    def _nest_adjacent_lists(self, children: list[Node]) -> list[Node]:
        at_document_level = self._nesting == 0
        result: list[Node] = []
        for child in children:
            previous = result[-1] if result else None
            if (
                isinstance(child, List)
                and isinstance(previous, List)
                and previous.items
                and isinstance(previous.items[-1], ListItem)
            ):
                decision = should_nest_sibling_list(
                    previous.items[-1], child, previous, at_document_level=at_document_level
                )
                if decision.nest and not decision.ambiguous:
                    logger.debug("Adjacent list nested under the preceding item: %s", decision.reason)
                    items = list(previous.items)
                    items[-1] = _append_child(items[-1], child)
                    result[-1] = replace(previous, items=items)
                    continue
            result.append(child)
        return result


def _append_child(item: Node, child: Node) -> Node:
    return replace(item, children=[*item.children, child])  # type: ignore[call-arg]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/transforms/paragraphs.py
"""Inline content normalization.

Source markup carries whitespace and line breaks wherever the authoring
tool put them. This pass makes inline runs regular so that later passes and
the emitter can rely on a few simple properties:

- adjacent Text nodes are merged and internal whitespace runs collapsed
- paragraphs, headings and cells have no leading or trailing whitespace
  or line breaks
- formatting spans (strong, emphasis, ...) do not start or end with
  whitespace; that whitespace is moved just outside the span
- paragraphs and formatting spans without any content are removed
"""

from __future__ import annotations

import re
from dataclasses import replace

from flare2adoc.ast.nodes import (
    Code,
    CrossReference,
    Emphasis,
    Heading,
    Image,
    Keyboard,
    LineBreak,
    Link,
    Node,
    Paragraph,
    Strong,
    Subscript,
    Superscript,
    TableCell,
    Text,
    Underline,
    VariablePlaceholder,
    get_node_children,
)
from flare2adoc.ast.transforms import NodeTransformer

_WHITESPACE = re.compile(r"\s+")

_FORMATTING = (Strong, Emphasis, Underline, Superscript, Subscript)


def has_content(nodes: list[Node]) -> bool:
    """Return True when an inline run holds anything worth emitting.

    Text with non-whitespace characters, images, variables, code and
    cross-references count; line breaks and blank text do not.

    """
    for node in nodes:
        if isinstance(node, Text):
            if node.content.strip():
                return True
        elif isinstance(node, (Image, VariablePlaceholder, Code, Keyboard, CrossReference)):
            return True
        elif isinstance(node, LineBreak):
            continue
        elif has_content(get_node_children(node)):
            return True
    return False


def normalize_inline(nodes: list[Node]) -> list[Node]:
    """Merge text runs and move edge whitespace out of formatting spans.

    Parameters
    ----------
    nodes : list of Node
        Inline nodes, already normalized internally

    Returns
    -------
    list of Node
        Normalized inline run

    """
    expanded: list[Node] = []
    for node in nodes:
        if isinstance(node, _FORMATTING) and node.content:
            inner = list(node.content)
            leading = trailing = False
            if isinstance(inner[0], Text) and inner[0].content[:1].isspace():
                leading = True
                inner[0] = Text(content=inner[0].content.lstrip())
            if isinstance(inner[-1], Text) and inner[-1].content[-1:].isspace():
                trailing = True
                inner[-1] = Text(content=inner[-1].content.rstrip())
            inner = [n for n in inner if not (isinstance(n, Text) and not n.content)]
            if leading:
                expanded.append(Text(content=" "))
            if has_content(inner):
                expanded.append(replace(node, content=inner))
            if trailing:
                expanded.append(Text(content=" "))
        elif isinstance(node, _FORMATTING):
            continue
        else:
            expanded.append(node)

    merged: list[Node] = []
    for node in expanded:
        if isinstance(node, Text):
            content = _WHITESPACE.sub(" ", node.content)
            if merged and isinstance(merged[-1], Text):
                content = _WHITESPACE.sub(" ", merged[-1].content + content)
                merged[-1] = Text(content=content)
            elif content:
                merged.append(Text(content=content))
        else:
            merged.append(node)

    # Whitespace around hard line breaks carries no meaning.
    for index, node in enumerate(merged):
        if not isinstance(node, Text):
            continue
        content = node.content
        if index + 1 < len(merged) and isinstance(merged[index + 1], LineBreak):
            content = content.rstrip()
        if index > 0 and isinstance(merged[index - 1], LineBreak):
            content = content.lstrip()
        merged[index] = Text(content=content)
    return [node for node in merged if not (isinstance(node, Text) and not node.content)]


def trim_inline(nodes: list[Node]) -> list[Node]:
    """Strip leading and trailing whitespace and line breaks from an inline run."""
    result = list(nodes)
    while result:
        first = result[0]
        if isinstance(first, LineBreak):
            result.pop(0)
        elif isinstance(first, Text) and not first.content.strip():
            result.pop(0)
        elif isinstance(first, Text) and first.content[:1].isspace():
            result[0] = Text(content=first.content.lstrip())
            break
        else:
            break
    while result:
        last = result[-1]
        if isinstance(last, LineBreak):
            result.pop()
        elif isinstance(last, Text) and not last.content.strip():
            result.pop()
        elif isinstance(last, Text) and last.content[-1:].isspace():
            result[-1] = Text(content=last.content.rstrip())
            break
        else:
            break
    # Consecutive line breaks would emit empty hard-wrapped lines.
    collapsed: list[Node] = []
    for node in result:
        if isinstance(node, LineBreak) and collapsed and isinstance(collapsed[-1], LineBreak):
            continue
        collapsed.append(node)
    return collapsed


class NormalizeParagraphsTransform(NodeTransformer):
    """Normalize inline runs and drop paragraphs left without content.

    Examples
    --------
    >>> doc = Document(children=[Paragraph(content=[Text("  "), LineBreak()])])
    >>> NormalizeParagraphsTransform().transform(doc).children
    []

    """

    def _normalize_container(self, node: Node) -> list[Node]:
        return normalize_inline(self._transform_children(get_node_children(node)))

    def visit_paragraph(self, node: Paragraph) -> Paragraph | None:  # type: ignore[override]
        """Normalize a paragraph, removing it when nothing remains."""
        content = trim_inline(self._normalize_container(node))
        if not has_content(content):
            return None
        return replace(node, content=content)

    def visit_heading(self, node: Heading) -> Heading:  # type: ignore[override]
        """Normalize heading text."""
        return replace(node, content=trim_inline(self._normalize_container(node)))

    def visit_table_cell(self, node: TableCell) -> TableCell:  # type: ignore[override]
        """Normalize cell text."""
        return replace(node, content=trim_inline(self._normalize_container(node)))

    def visit_strong(self, node: Strong) -> Strong:  # type: ignore[override]
        """Normalize the content of a strong span."""
        return replace(node, content=self._normalize_container(node))

    def visit_emphasis(self, node: Emphasis) -> Emphasis:  # type: ignore[override]
        """Normalize the content of an emphasis span."""
        return replace(node, content=self._normalize_container(node))

    def visit_underline(self, node: Underline) -> Underline:  # type: ignore[override]
        """Normalize the content of an underline span."""
        return replace(node, content=self._normalize_container(node))

    def visit_superscript(self, node: Superscript) -> Superscript:  # type: ignore[override]
        """Normalize the content of a superscript span."""
        return replace(node, content=self._normalize_container(node))

    def visit_subscript(self, node: Subscript) -> Subscript:  # type: ignore[override]
        """Normalize the content of a subscript span."""
        return replace(node, content=self._normalize_container(node))

    def visit_link(self, node: Link) -> Link:  # type: ignore[override]
        """Normalize link text."""
        return replace(node, content=trim_inline(self._normalize_container(node)))

    def visit_cross_reference(self, node: CrossReference) -> CrossReference:  # type: ignore[override]
        """Normalize cross-reference text."""
        return replace(node, content=trim_inline(self._normalize_container(node)))

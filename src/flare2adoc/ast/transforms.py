#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/ast/transforms.py
"""Base classes for rewriting and searching the AST.

``NodeTransformer`` rebuilds a tree bottom-up, letting subclasses replace or
drop individual nodes. ``NodeCollector`` walks a tree and gathers nodes that
match a predicate. The structural repair passes in
:mod:`flare2adoc.transforms` are built on these.

"""

from __future__ import annotations

import copy
from typing import Callable

from flare2adoc.ast.nodes import (
    Admonition,
    BlockQuote,
    Code,
    CodeBlock,
    Collapsible,
    CrossReference,
    Document,
    Emphasis,
    Heading,
    Image,
    Keyboard,
    LineBreak,
    Link,
    List,
    ListItem,
    MediaBlock,
    Node,
    Paragraph,
    Strong,
    Subscript,
    Superscript,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Underline,
    VariablePlaceholder,
    get_node_children,
    replace_node_children,
)
from flare2adoc.ast.visitors import NodeVisitor


class NodeTransformer(NodeVisitor):
    """Base class for transforming AST nodes.

    Subclasses override visit_* methods and return a modified node, or None
    to remove the node. The original tree is never mutated; every visited
    container is rebuilt with its transformed children.

    Examples
    --------
    >>> class UppercaseTransformer(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(content=node.content.upper())
    >>>
    >>> new_doc = UppercaseTransformer().transform(doc)

    """

    def transform(self, node: Node) -> Node | list[Node] | None:
        """Transform an AST node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node, list of Node, or None
            Transformed node, replacement siblings, or None to remove

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        """Transform a list of child nodes.

        A visit method may return None to drop the child, or a list of nodes
        to replace it with several siblings.

        """
        result: list[Node] = []
        for child in children:
            transformed = self.transform(child)
            if transformed is None:
                continue
            if isinstance(transformed, list):
                result.extend(transformed)
            else:
                result.append(transformed)
        return result

    def _generic_transform(self, node: Node) -> Node:
        """Transform a node by rebuilding it around its transformed children.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node
            Copy of the node with children replaced

        """
        children = get_node_children(node)
        if not children:
            return copy.copy(node)
        return replace_node_children(node, self._transform_children(children))

    def visit_document(self, node: Document) -> Document:
        """Transform a Document node."""
        return Document(
            children=self._transform_children(node.children),
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_heading(self, node: Heading) -> Node | None:
        """Transform a Heading node."""
        return self._generic_transform(node)

    def visit_paragraph(self, node: Paragraph) -> Node | None:
        """Transform a Paragraph node."""
        return self._generic_transform(node)

    def visit_code_block(self, node: CodeBlock) -> Node | None:
        """Transform a CodeBlock node."""
        return self._generic_transform(node)

    def visit_block_quote(self, node: BlockQuote) -> Node | None:
        """Transform a BlockQuote node."""
        return self._generic_transform(node)

    def visit_list(self, node: List) -> Node | None:
        """Transform a List node."""
        return self._generic_transform(node)

    def visit_list_item(self, node: ListItem) -> Node | None:
        """Transform a ListItem node."""
        return self._generic_transform(node)

    def visit_admonition(self, node: Admonition) -> Node | None:
        """Transform an Admonition node."""
        return self._generic_transform(node)

    def visit_collapsible(self, node: Collapsible) -> Node | None:
        """Transform a Collapsible node."""
        return self._generic_transform(node)

    def visit_media_block(self, node: MediaBlock) -> Node | None:
        """Transform a MediaBlock node.

        A MediaBlock whose image was removed by a subclass is dropped.

        """
        image = self.transform(node.image)
        if image is None:
            return None
        return replace_node_children(node, [image])

    def visit_table(self, node: Table) -> Node | None:
        """Transform a Table node."""
        return self._generic_transform(node)

    def visit_table_row(self, node: TableRow) -> Node | None:
        """Transform a TableRow node."""
        return self._generic_transform(node)

    def visit_table_cell(self, node: TableCell) -> Node | None:
        """Transform a TableCell node."""
        return self._generic_transform(node)

    def visit_thematic_break(self, node: ThematicBreak) -> Node | None:
        """Transform a ThematicBreak node."""
        return self._generic_transform(node)

    def visit_text(self, node: Text) -> Node | None:
        """Transform a Text node."""
        return self._generic_transform(node)

    def visit_emphasis(self, node: Emphasis) -> Node | None:
        """Transform an Emphasis node."""
        return self._generic_transform(node)

    def visit_strong(self, node: Strong) -> Node | None:
        """Transform a Strong node."""
        return self._generic_transform(node)

    def visit_underline(self, node: Underline) -> Node | None:
        """Transform an Underline node."""
        return self._generic_transform(node)

    def visit_superscript(self, node: Superscript) -> Node | None:
        """Transform a Superscript node."""
        return self._generic_transform(node)

    def visit_subscript(self, node: Subscript) -> Node | None:
        """Transform a Subscript node."""
        return self._generic_transform(node)

    def visit_code(self, node: Code) -> Node | None:
        """Transform a Code node."""
        return self._generic_transform(node)

    def visit_keyboard(self, node: Keyboard) -> Node | None:
        """Transform a Keyboard node."""
        return self._generic_transform(node)

    def visit_link(self, node: Link) -> Node | None:
        """Transform a Link node."""
        return self._generic_transform(node)

    def visit_cross_reference(self, node: CrossReference) -> Node | None:
        """Transform a CrossReference node."""
        return self._generic_transform(node)

    def visit_variable_placeholder(self, node: VariablePlaceholder) -> Node | None:
        """Transform a VariablePlaceholder node."""
        return self._generic_transform(node)

    def visit_image(self, node: Image) -> Node | None:
        """Transform an Image node."""
        return self._generic_transform(node)

    def visit_line_break(self, node: LineBreak) -> Node | None:
        """Transform a LineBreak node."""
        return self._generic_transform(node)


class NodeCollector(NodeVisitor):
    """Visitor that collects nodes matching a condition.

    Parameters
    ----------
    predicate : callable or None, default = None
        Function that takes a node and returns True to collect it

    Examples
    --------
    >>> collector = NodeCollector(lambda n: isinstance(n, CrossReference))
    >>> doc.accept(collector)
    >>> anchors = [n.anchor for n in collector.collected]

    """

    def __init__(self, predicate: Callable[[Node], bool] | None = None):
        """Initialize the collector with an optional predicate function."""
        self.predicate = predicate or (lambda n: True)
        self.collected: list[Node] = []

    def _generic_visit(self, node: Node) -> None:
        """Collect the node if it matches, then visit its children."""
        if self.predicate(node):
            self.collected.append(node)
        for child in get_node_children(node):
            child.accept(self)

    def visit_document(self, node: Document) -> None:
        """Visit a Document node."""
        self._generic_visit(node)

    def visit_heading(self, node: Heading) -> None:
        """Visit a Heading node."""
        self._generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Visit a Paragraph node."""
        self._generic_visit(node)

    def visit_code_block(self, node: CodeBlock) -> None:
        """Visit a CodeBlock node."""
        self._generic_visit(node)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Visit a BlockQuote node."""
        self._generic_visit(node)

    def visit_list(self, node: List) -> None:
        """Visit a List node."""
        self._generic_visit(node)

    def visit_list_item(self, node: ListItem) -> None:
        """Visit a ListItem node."""
        self._generic_visit(node)

    def visit_admonition(self, node: Admonition) -> None:
        """Visit an Admonition node."""
        self._generic_visit(node)

    def visit_collapsible(self, node: Collapsible) -> None:
        """Visit a Collapsible node."""
        self._generic_visit(node)

    def visit_media_block(self, node: MediaBlock) -> None:
        """Visit a MediaBlock node."""
        self._generic_visit(node)

    def visit_table(self, node: Table) -> None:
        """Visit a Table node."""
        self._generic_visit(node)

    def visit_table_row(self, node: TableRow) -> None:
        """Visit a TableRow node."""
        self._generic_visit(node)

    def visit_table_cell(self, node: TableCell) -> None:
        """Visit a TableCell node."""
        self._generic_visit(node)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Visit a ThematicBreak node."""
        self._generic_visit(node)

    def visit_text(self, node: Text) -> None:
        """Visit a Text node."""
        self._generic_visit(node)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Visit an Emphasis node."""
        self._generic_visit(node)

    def visit_strong(self, node: Strong) -> None:
        """Visit a Strong node."""
        self._generic_visit(node)

    def visit_underline(self, node: Underline) -> None:
        """Visit an Underline node."""
        self._generic_visit(node)

    def visit_superscript(self, node: Superscript) -> None:
        """Visit a Superscript node."""
        self._generic_visit(node)

    def visit_subscript(self, node: Subscript) -> None:
        """Visit a Subscript node."""
        self._generic_visit(node)

    def visit_code(self, node: Code) -> None:
        """Visit a Code node."""
        self._generic_visit(node)

    def visit_keyboard(self, node: Keyboard) -> None:
        """Visit a Keyboard node."""
        self._generic_visit(node)

    def visit_link(self, node: Link) -> None:
        """Visit a Link node."""
        self._generic_visit(node)

    def visit_cross_reference(self, node: CrossReference) -> None:
        """Visit a CrossReference node."""
        self._generic_visit(node)

    def visit_variable_placeholder(self, node: VariablePlaceholder) -> None:
        """Visit a VariablePlaceholder node."""
        self._generic_visit(node)

    def visit_image(self, node: Image) -> None:
        """Visit an Image node."""
        self._generic_visit(node)

    def visit_line_break(self, node: LineBreak) -> None:
        """Visit a LineBreak node."""
        self._generic_visit(node)


def collect_nodes(root: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    """Return every node under ``root`` (inclusive) for which ``predicate`` is true."""
    collector = NodeCollector(predicate)
    root.accept(collector)
    return collector.collected

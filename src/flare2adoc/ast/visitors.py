#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

This module provides the visitor base class used by the emitter and by the
structural repair passes. Visitors keep the algorithms (rendering, collecting,
rewriting) separate from the node classes, which only know how to call
``visitor.visit_<kind>(self)``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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
)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement a visit_* method for every node kind in the closed
    node set. The abstract methods make a missing handler a construction-time
    error instead of a silent gap in the output.

    Examples
    --------
    Visitor that counts list items:

        >>> class ItemCounter(NodeTransformer):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_list_item(self, node):
        ...         self.count += 1
        ...         return super().visit_list_item(node)

    """

    # Block-level nodes

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node.

        Parameters
        ----------
        node : Document
            The document node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node.

        Parameters
        ----------
        node : Heading
            The heading node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        pass

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""
        pass

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""
        pass

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node.

        Parameters
        ----------
        node : List
            The list node to visit. In a raw tree its items may include
            nodes other than ListItem.

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""
        pass

    @abstractmethod
    def visit_admonition(self, node: Admonition) -> Any:
        """Visit an Admonition node."""
        pass

    @abstractmethod
    def visit_collapsible(self, node: Collapsible) -> Any:
        """Visit a Collapsible node."""
        pass

    @abstractmethod
    def visit_media_block(self, node: MediaBlock) -> Any:
        """Visit a MediaBlock node."""
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""
        pass

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""
        pass

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""
        pass

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""
        pass

    # Inline nodes

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""
        pass

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""
        pass

    @abstractmethod
    def visit_underline(self, node: Underline) -> Any:
        """Visit an Underline node."""
        pass

    @abstractmethod
    def visit_superscript(self, node: Superscript) -> Any:
        """Visit a Superscript node."""
        pass

    @abstractmethod
    def visit_subscript(self, node: Subscript) -> Any:
        """Visit a Subscript node."""
        pass

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""
        pass

    @abstractmethod
    def visit_keyboard(self, node: Keyboard) -> Any:
        """Visit a Keyboard node."""
        pass

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""
        pass

    @abstractmethod
    def visit_cross_reference(self, node: CrossReference) -> Any:
        """Visit a CrossReference node.

        Parameters
        ----------
        node : CrossReference
            The cross-reference to visit. Its target is looked up in the
            cross-reference table by anchor, not stored on the node.

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_variable_placeholder(self, node: VariablePlaceholder) -> Any:
        """Visit a VariablePlaceholder node."""
        pass

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""
        pass

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""
        pass

    def generic_visit(self, node: Node) -> Any:
        """Fallback visitor for node types without a handler.

        The default implementation does nothing but can be overridden.

        Parameters
        ----------
        node : Node
            The node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/ast/nodes.py
"""AST node classes for the canonical document tree.

This module defines the closed node hierarchy that sits between the MadCap
Flare source and the AsciiDoc emitter. The source dialect has an open,
irregular tag vocabulary; the parser resolves it into these node kinds so
the emitter only ever dispatches over a fixed set.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Block-level nodes represent structural document elements:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - Admonition, Collapsible, MediaBlock, ThematicBreak

Inline nodes represent text runs and references:
    - Text, Emphasis, Strong, Underline, Superscript, Subscript, Code
    - Link, CrossReference, VariablePlaceholder, Image, LineBreak, Keyboard

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from flare2adoc.constants import AdmonitionKind, ListStyle


@dataclass
class SourceLocation:
    """Source location information for AST nodes.

    Parameters
    ----------
    format : str
        Source format (e.g., 'madcap', 'snippet')
    line : int or None, default = None
        Line number in the source document
    column : int or None, default = None
        Column number in the source document
    element_id : str or None, default = None
        Source element identifier (tag name or id attribute)
    path : str or None, default = None
        Source file (set for content pulled in from snippets)
    metadata : dict, default = empty dict
        Additional format-specific location information

    """

    format: str
    line: Optional[int] = None
    column: Optional[int] = None
    element_id: Optional[str] = None
    path: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        """Return a short human-readable form such as ``snippet.flsnp:12:4 <p>``."""
        parts = []
        if self.path:
            parts.append(self.path)
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        where = ":".join(parts) if parts else self.format
        if self.element_id:
            return f"{where} <{self.element_id}>"
        return where


class Node(ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and rendering.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node
    source_location : SourceLocation or None, default = None
        Information about where this node came from in the source

    """

    metadata: dict[str, Any]
    source_location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (title, source path)
    source_location : SourceLocation or None, default = None
        Source location information

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    content : list of Node, default = empty list
        Inline nodes representing heading text

    """

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes representing paragraph content

    """

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Preformatted code block with optional language.

    Parameters
    ----------
    content : str
        Code content, emitted verbatim
    language : str or None, default = None
        Language for the ``[source,...]`` attribute

    """

    content: str
    language: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or bulleted).

    In a canonical tree ``items`` holds only :class:`ListItem` nodes. The
    parser may produce lists holding stray blocks or sibling lists, which
    the canonicalizer migrates into items or promotes out of the list.

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for bulleted lists
    items : list of Node, default = empty list
        List items (only ListItem once canonical)
    start : int, default = 1
        Starting number for ordered lists
    style : str or None, default = None
        Numbering scheme: numeric, loweralpha, upperalpha, lowerroman,
        upperroman or bullet. None means numeric for ordered lists and
        bullet otherwise.

    """

    ordered: bool
    items: list[Node] = field(default_factory=list)
    start: int = 1
    style: Optional[ListStyle] = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def effective_style(self) -> ListStyle:
        """Return the numbering scheme with the ordered/bullet default applied."""
        if self.style is not None:
            return self.style
        return "numeric" if self.ordered else "bullet"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item node containing block content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class Admonition(Node):
    """Titled callout block (note, tip, important, warning, caution).

    The title is taken from the lead label of the source callout, which is
    removed from ``children`` so it is emitted exactly once.

    Parameters
    ----------
    kind : str
        Admonition type
    title : str or None, default = None
        Title consumed from the callout's lead node
    children : list of Node, default = empty list
        Body blocks

    """

    kind: AdmonitionKind
    title: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this admonition."""
        return visitor.visit_admonition(self)


@dataclass
class Collapsible(Node):
    """Titled collapsible region built from a dropdown head and body.

    Parameters
    ----------
    title : str
        Text of the dropdown head
    children : list of Node, default = empty list
        Body blocks

    """

    title: str
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this collapsible block."""
        return visitor.visit_collapsible(self)


@dataclass
class MediaBlock(Node):
    """Standalone image placed on its own line.

    Parameters
    ----------
    image : Image
        The image being placed as a block

    """

    image: Image
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this media block."""
        return visitor.visit_media_block(self)


@dataclass
class Table(Node):
    """Table node with optional header row.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Body rows
    header : TableRow or None, default = None
        Header row
    caption : str or None, default = None
        Table caption, emitted as a block title

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    caption: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row containing cells."""

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table row."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell containing inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table cell."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Horizontal rule."""

    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run.

    Parameters
    ----------
    content : str
        Text content (unescaped)

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasized (italic) inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong node."""
        return visitor.visit_strong(self)


@dataclass
class Underline(Node):
    """Underlined inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this underline."""
        return visitor.visit_underline(self)


@dataclass
class Superscript(Node):
    """Superscript inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this superscript."""
        return visitor.visit_superscript(self)


@dataclass
class Subscript(Node):
    """Subscript inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this subscript."""
        return visitor.visit_subscript(self)


@dataclass
class Code(Node):
    """Inline code span, emitted verbatim."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass
class Keyboard(Node):
    """Keyboard shortcut (``kbd``) inline."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this keyboard node."""
        return visitor.visit_keyboard(self)


@dataclass
class Link(Node):
    """External hyperlink.

    Parameters
    ----------
    url : str
        Link target
    content : list of Node, default = empty list
        Inline nodes for the link text

    """

    url: str
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class CrossReference(Node):
    """Reference to another topic or to an anchor in the same topic.

    The anchor is kept as written in the source. Resolution to a target
    path happens during canonicalization through the cross-reference
    collaborator and is recorded in the cross-reference table, which the
    emitter consumes.

    Parameters
    ----------
    anchor : str
        Raw reference as written in the source (``topic.htm#section``)
    content : list of Node, default = empty list
        Display text

    """

    anchor: str
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this cross-reference."""
        return visitor.visit_cross_reference(self)


@dataclass
class VariablePlaceholder(Node):
    """Named variable reference, resolved at emission time.

    Parameters
    ----------
    name : str
        Variable name as written in the source (``General.ProductName``)
    fallback_text : str or None, default = None
        Text the source rendered in place of the variable, if any

    """

    name: str
    fallback_text: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this variable placeholder."""
        return visitor.visit_variable_placeholder(self)


@dataclass
class Image(Node):
    """Image reference.

    Inside a paragraph an Image is inline; an image placed on its own line
    is wrapped in a :class:`MediaBlock` during canonicalization.

    Parameters
    ----------
    url : str
        Image source path
    alt_text : str, default = ''
        Alternative text
    width : int or None, default = None
        Width in pixels
    height : int or None, default = None
        Height in pixels

    """

    url: str
    alt_text: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break within a paragraph."""

    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source_location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


INLINE_CONTAINERS = (Heading, Paragraph, Emphasis, Strong, Underline, Superscript, Subscript, Link, CrossReference, TableCell)
BLOCK_CONTAINERS = (Document, BlockQuote, ListItem, Admonition, Collapsible)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        List of child nodes (empty list if node has no children)

    Examples
    --------
    >>> heading = Heading(level=1, content=[Text("Hello"), Strong(content=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, BLOCK_CONTAINERS):
        return list(node.children)

    if isinstance(node, INLINE_CONTAINERS):
        return list(node.content)

    if isinstance(node, List):
        return list(node.items)

    if isinstance(node, Table):
        children: list[Node] = []
        if node.header:
            children.append(node.header)
        children.extend(node.rows)
        return children

    if isinstance(node, TableRow):
        return list(node.cells)

    if isinstance(node, MediaBlock):
        return [node.image]

    return []


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy and modify
    new_children : list of Node
        New children to use in the copy

    Returns
    -------
    Node
        New node with replaced children

    Raises
    ------
    ValueError
        If a Table or MediaBlock receives children of the wrong type

    """
    if isinstance(node, BLOCK_CONTAINERS):
        return replace(node, children=new_children)

    if isinstance(node, INLINE_CONTAINERS):
        return replace(node, content=new_children)

    if isinstance(node, List):
        return replace(node, items=new_children)

    if isinstance(node, Table):
        header_row: TableRow | None = None
        body_rows: list[TableRow] = []
        for child in new_children:
            if not isinstance(child, TableRow):
                raise ValueError(f"Table children must be TableRow instances, got {type(child).__name__}")
            if child.is_header and header_row is None:
                header_row = child
            else:
                body_rows.append(child)
        return replace(node, header=header_row, rows=body_rows)

    if isinstance(node, TableRow):
        return replace(node, cells=new_children)  # type: ignore[arg-type]

    if isinstance(node, MediaBlock):
        if len(new_children) != 1 or not isinstance(new_children[0], Image):
            raise ValueError("MediaBlock must hold exactly one Image")
        return replace(node, image=new_children[0])

    return node


def extract_text(nodes: Node | list[Node]) -> str:
    """Return the plain text of a node or node list.

    Variable placeholders contribute their fallback text, images their alt
    text. Line breaks become single spaces.

    """
    if isinstance(nodes, Node):
        nodes = [nodes]
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, (Text, Code, Keyboard)):
            parts.append(node.content)
        elif isinstance(node, VariablePlaceholder):
            parts.append(node.fallback_text or "")
        elif isinstance(node, Image):
            parts.append(node.alt_text)
        elif isinstance(node, LineBreak):
            parts.append(" ")
        elif isinstance(node, Collapsible):
            parts.append(node.title)
            parts.append(extract_text(node.children))
        else:
            parts.append(extract_text(get_node_children(node)))
    return "".join(parts)

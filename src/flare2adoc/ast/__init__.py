#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/ast/__init__.py
"""Abstract Syntax Tree (AST) module for canonical document representation.

The MadCap parser produces a tree of these nodes, the canonicalizer repairs
it, and the AsciiDoc emitter renders it. The module consists of:

- nodes: the closed set of node classes
- visitors: visitor base class used for traversal and rendering
- transforms: tree rewriting and collection helpers

Examples
--------
    >>> from flare2adoc.ast import Document, Heading, Paragraph, Text
    >>> from flare2adoc.renderers.asciidoc import AsciiDocEmitter
    >>>
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")]),
    ...     Paragraph(content=[Text(content="Hello world")])
    ... ])
    >>> AsciiDocEmitter().render_to_string(doc)
    '== Title\\n\\nHello world\\n'

"""

from __future__ import annotations

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
    SourceLocation,
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
    extract_text,
    get_node_children,
    replace_node_children,
)
from flare2adoc.ast.transforms import NodeCollector, NodeTransformer, collect_nodes
from flare2adoc.ast.visitors import NodeVisitor

__all__ = [
    # Base
    "Node",
    "SourceLocation",
    # Block nodes
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Admonition",
    "Collapsible",
    "MediaBlock",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    # Inline nodes
    "Text",
    "Emphasis",
    "Strong",
    "Underline",
    "Superscript",
    "Subscript",
    "Code",
    "Keyboard",
    "Link",
    "CrossReference",
    "VariablePlaceholder",
    "Image",
    "LineBreak",
    # Helpers
    "extract_text",
    "get_node_children",
    "replace_node_children",
    # Visitors
    "NodeVisitor",
    "NodeTransformer",
    "NodeCollector",
    "collect_nodes",
]

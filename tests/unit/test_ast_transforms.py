#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_ast_transforms.py
"""Tests for AST transformation utilities.

Tests cover:
- NodeTransformer rebuilding, removal and splicing of nodes
- NodeCollector and collect_nodes
"""

import pytest

from flare2adoc.ast import (
    Admonition,
    Document,
    Heading,
    Image,
    List,
    ListItem,
    MediaBlock,
    NodeCollector,
    NodeTransformer,
    Paragraph,
    Strong,
    Text,
    collect_nodes,
)


class UppercaseTransformer(NodeTransformer):
    def visit_text(self, node):
        return Text(content=node.content.upper())


class DropHeadings(NodeTransformer):
    def visit_heading(self, node):
        return None


class SplitParagraphs(NodeTransformer):
    def visit_paragraph(self, node):
        return [Paragraph(content=[child]) for child in node.content]


class DropImages(NodeTransformer):
    def visit_image(self, node):
        return None


@pytest.mark.unit
class TestNodeTransformer:
    """Test the NodeTransformer base class."""

    def test_identity_transform_is_equal_copy(self) -> None:
        """Test the base transformer returns an equal but distinct tree."""
        doc = Document(
            children=[
                Heading(level=1, content=[Text(content="Title")]),
                List(ordered=True, items=[ListItem(children=[Paragraph(content=[Text(content="x")])])]),
            ]
        )
        result = NodeTransformer().transform(doc)
        assert result == doc
        assert result is not doc
        assert result.children[1] is not doc.children[1]

    def test_transform_rewrites_nested_text(self) -> None:
        """Test text inside formatting inside admonitions is reached."""
        doc = Document(
            children=[Admonition(kind="note", children=[Paragraph(content=[Strong(content=[Text(content="go")])])])]
        )
        result = UppercaseTransformer().transform(doc)
        assert result.children[0].children[0].content[0].content[0].content == "GO"
        assert doc.children[0].children[0].content[0].content[0].content == "go"

    def test_returning_none_removes_node(self) -> None:
        """Test a visit method returning None drops the node."""
        doc = Document(children=[Heading(level=2, content=[Text(content="H")]), Paragraph()])
        assert DropHeadings().transform(doc).children == [Paragraph()]

    def test_returning_list_splices_siblings(self) -> None:
        """Test a visit method returning a list replaces one node with several."""
        doc = Document(children=[Paragraph(content=[Text(content="a"), Text(content="b")])])
        result = SplitParagraphs().transform(doc)
        assert result.children == [Paragraph(content=[Text(content="a")]), Paragraph(content=[Text(content="b")])]

    def test_media_block_without_image_is_dropped(self) -> None:
        """Test a media block whose image was removed disappears."""
        doc = Document(children=[MediaBlock(image=Image(url="a.png"))])
        assert DropImages().transform(doc).children == []


@pytest.mark.unit
class TestNodeCollector:
    """Test node collection."""

    def test_collect_all_nodes(self) -> None:
        """Test a collector without predicate collects every node."""
        doc = Document(children=[Paragraph(content=[Text(content="a")])])
        collector = NodeCollector()
        doc.accept(collector)
        assert len(collector.collected) == 3

    def test_collect_nodes_with_predicate(self) -> None:
        """Test collect_nodes filters with a predicate."""
        doc = Document(
            children=[
                Paragraph(content=[Text(content="a")]),
                List(ordered=False, items=[ListItem(children=[Paragraph(content=[Text(content="b")])])]),
            ]
        )
        texts = collect_nodes(doc, lambda node: isinstance(node, Text))
        assert [node.content for node in texts] == ["a", "b"]

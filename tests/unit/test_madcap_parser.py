#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_madcap_parser.py
"""Unit tests for the MadCap Flare HTML to AST converter.

Tests cover:
- Headings, paragraphs, code blocks and tables
- Conditional filtering and include overrides
- Callouts with lead titles, dropdowns and details regions
- List numbering across madcap:continue and list styles
- Variables, cross-references and links
- Element ids and bookmarks kept as anchors
- Snippet inlining, missing and circular snippets
- Diagnostics for unsupported elements and unparsable input
"""

import pytest

from flare2adoc.ast import (
    Admonition,
    Code,
    CodeBlock,
    Collapsible,
    CrossReference,
    Document,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Paragraph,
    Table,
    Text,
    VariablePlaceholder,
    extract_text,
)
from flare2adoc.exceptions import FatalParseError
from flare2adoc.options import MadCapParserOptions
from flare2adoc.parsers.madcap import MadCapToAstConverter
from flare2adoc.result import DiagnosticCollector


def parse(markup: str, **kwargs) -> Document:
    return MadCapToAstConverter(**kwargs).parse(markup)


@pytest.mark.unit
class TestBasicStructure:
    """Tests for plain HTML structure."""

    def test_heading_and_paragraph(self) -> None:
        """Test headings and paragraphs are converted."""
        doc = parse("<h1>Title</h1><p>Body</p>")
        assert doc.children == [
            Heading(level=1, content=[Text(content="Title")]),
            Paragraph(content=[Text(content="Body")]),
        ]

    def test_full_topic_uses_body_and_title(self) -> None:
        """Test a complete topic keeps body content and records the title."""
        markup = (
            '<?xml version="1.0" encoding="utf-8"?>'
            '<html xmlns:MadCap="http://www.madcapsoftware.com/Schemas/MadCap.xsd">'
            "<head><title>Install</title></head><body><p>Hello</p></body></html>"
        )
        doc = parse(markup)
        assert doc.metadata["title"] == "Install"
        assert doc.children == [Paragraph(content=[Text(content="Hello")])]

    def test_flare_heading_class(self) -> None:
        """Test mc-heading-N paragraphs become headings."""
        doc = parse('<p class="mc-heading-3">Sub</p>')
        assert doc.children == [Heading(level=3, content=[Text(content="Sub")])]

    def test_code_block_language(self) -> None:
        """Test pre elements keep their text and language class."""
        doc = parse('<pre class="language-python">x = 1\n</pre>')
        assert doc.children == [CodeBlock(content="x = 1", language="python")]

    def test_table_header_detection(self) -> None:
        """Test a row of th cells becomes the header."""
        doc = parse("<table><tr><th>Name</th></tr><tr><td>Value</td></tr></table>")
        table = doc.children[0]
        assert isinstance(table, Table)
        assert table.header is not None
        assert extract_text(table.header) == "Name"
        assert [extract_text(row) for row in table.rows] == ["Value"]

    def test_comments_are_dropped(self) -> None:
        """Test HTML comments never reach the tree."""
        doc = parse("<p>a<!-- hidden -->b</p>")
        assert extract_text(doc) == "ab"

    def test_image_size_from_style(self) -> None:
        """Test pixel sizes are read from the inline style."""
        doc = parse('<p><img src="a.png" style="width: 120px;" alt="A" /></p>')
        image = doc.children[0].content[0]
        assert image == Image(url="a.png", alt_text="A", width=120)

    def test_unsupported_element_is_reported(self) -> None:
        """Test unknown elements keep their text and record a diagnostic."""
        diagnostics = DiagnosticCollector()
        doc = parse("<p><blink>Hi</blink></p>", diagnostics=diagnostics)
        assert extract_text(doc) == "Hi"
        assert [d.code for d in diagnostics] == ["unknown-node-kind"]

    def test_non_markup_input_is_fatal(self) -> None:
        """Test input that is not markup raises FatalParseError."""
        with pytest.raises(FatalParseError):
            MadCapToAstConverter().parse(123)

    def test_self_closing_madcap_elements_are_expanded(self) -> None:
        """Test self-closing MadCap elements are opened and closed."""
        markup = MadCapToAstConverter.preprocess_markup('<MadCap:variable name="A.B" />')
        assert markup == '<MadCap:variable name="A.B"></MadCap:variable>'


@pytest.mark.unit
class TestConditions:
    """Tests for conditional filtering."""

    def test_default_patterns_filter_and_count(self) -> None:
        """Test elements tagged with an excluded condition are removed and counted."""
        diagnostics = DiagnosticCollector()
        doc = parse('<p madcap:conditions="Default.Draft">Secret</p><p>Public</p>', diagnostics=diagnostics)
        assert extract_text(doc) == "Public"
        assert diagnostics.metadata.filtered_conditional_count == 1
        assert len(diagnostics) == 0

    def test_data_attribute_conditions(self) -> None:
        """Test the data-mc-conditions attribute is honored."""
        doc = parse('<p data-mc-conditions="Default.PrintOnly">Print</p><p>Web</p>')
        assert extract_text(doc) == "Web"

    def test_include_condition_overrides_exclusion(self) -> None:
        """Test an include condition keeps an element."""
        options = MadCapParserOptions(include_conditions=("Draft",))
        doc = parse('<p madcap:conditions="Default.Draft">Kept</p>', options=options)
        assert extract_text(doc) == "Kept"

    def test_untagged_content_is_kept(self) -> None:
        """Test elements with unrelated conditions are kept."""
        doc = parse('<p madcap:conditions="Default.Online">Online</p>')
        assert extract_text(doc) == "Online"

    def test_filtered_list_items_are_counted(self) -> None:
        """Test list items can be filtered individually."""
        diagnostics = DiagnosticCollector()
        doc = parse('<ul><li>A</li><li madcap:conditions="Internal">B</li></ul>', diagnostics=diagnostics)
        assert len(doc.children[0].items) == 1
        assert diagnostics.metadata.filtered_conditional_count == 1


@pytest.mark.unit
class TestCallouts:
    """Tests for callout detection."""

    def test_styled_lead_span_becomes_title(self) -> None:
        """Test a callout's lead span is consumed as the title."""
        doc = parse('<div class="warning"><p><span class="warningInDiv">Caution!</span> Hot surface.</p></div>')
        admonition = doc.children[0]
        assert isinstance(admonition, Admonition)
        assert admonition.kind == "warning"
        assert admonition.title == "Caution!"
        assert extract_text(admonition.children).strip() == "Hot surface."

    def test_bold_label_becomes_title(self) -> None:
        """Test a bold label such as Note: becomes the title without its colon."""
        doc = parse('<p class="note"><b>Note:</b> Read this.</p>')
        admonition = doc.children[0]
        assert admonition.kind == "note"
        assert admonition.title == "Note"
        assert extract_text(admonition.children).strip() == "Read this."

    def test_text_before_bold_prevents_title(self) -> None:
        """Test a lead element is only taken when nothing precedes it."""
        doc = parse('<p class="tip">Use <b>Ctrl</b> keys.</p>')
        admonition = doc.children[0]
        assert admonition.kind == "tip"
        assert admonition.title is None
        assert "Ctrl" in extract_text(admonition.children)

    @pytest.mark.parametrize(
        "cls,kind",
        [("mc-caution", "warning"), ("danger", "caution"), ("importantInDiv", "important"), ("info", "note")],
    )
    def test_class_kinds(self, cls: str, kind: str) -> None:
        """Test callout classes map to admonition kinds."""
        doc = parse(f'<p class="{cls}">Text</p>')
        assert doc.children[0].kind == kind


@pytest.mark.unit
class TestCollapsibles:
    """Tests for dropdowns and details."""

    def test_dropdown_head_and_body(self) -> None:
        """Test a dropdown becomes a collapsible with the hotspot as title."""
        doc = parse(
            "<MadCap:dropDown><MadCap:dropDownHead><MadCap:dropDownHotspot>Details</MadCap:dropDownHotspot>"
            "</MadCap:dropDownHead><MadCap:dropDownBody><p>Hidden text.</p></MadCap:dropDownBody></MadCap:dropDown>"
        )
        assert doc.children == [Collapsible(title="Details", children=[Paragraph(content=[Text(content="Hidden text.")])])]

    def test_dropdown_without_head_gets_default_title(self) -> None:
        """Test a dropdown without a head uses the default title."""
        doc = parse("<MadCap:dropDown><MadCap:dropDownBody><p>x</p></MadCap:dropDownBody></MadCap:dropDown>")
        assert doc.children[0].title == "More Information"

    def test_details_summary(self) -> None:
        """Test details/summary become a collapsible."""
        doc = parse("<details><summary>Why</summary><p>Because.</p></details>")
        assert doc.children == [Collapsible(title="Why", children=[Paragraph(content=[Text(content="Because.")])])]


@pytest.mark.unit
class TestLists:
    """Tests for raw list conversion."""

    def test_continue_resumes_numbering(self) -> None:
        """Test madcap:continue starts after the previous list at the same depth."""
        doc = parse(
            "<ol><li>One</li><li>Two</li></ol><p>Interlude</p><ol madcap:continue=\"true\"><li>Three</li></ol>"
        )
        lists = [child for child in doc.children if isinstance(child, List)]
        assert [lst.start for lst in lists] == [1, 3]

    def test_start_attribute(self) -> None:
        """Test an explicit start attribute is kept."""
        doc = parse('<ol start="4"><li>Four</li></ol>')
        assert doc.children[0].start == 4

    @pytest.mark.parametrize(
        "markup,style",
        [
            ('<ol style="list-style-type: lower-alpha"><li>x</li></ol>', "loweralpha"),
            ('<ol type="I"><li>x</li></ol>', "upperroman"),
            ('<ol class="upperAlpha"><li>x</li></ol>', "upperalpha"),
            ("<ol><li>x</li></ol>", None),
        ],
    )
    def test_list_styles(self, markup: str, style) -> None:
        """Test list styles are read from style, type and class."""
        assert parse(markup).children[0].style == style

    def test_stray_content_is_kept_in_place(self) -> None:
        """Test stray blocks between items stay in the raw list."""
        doc = parse("<ul><li>A</li><p>Stray</p><li>B</li></ul>")
        items = doc.children[0].items
        assert [type(item) for item in items] == [ListItem, Paragraph, ListItem]

    def test_continue_marks_the_list(self) -> None:
        """Test a continued list is marked so repair keeps it at its own level."""
        doc = parse('<ol><li>One</li></ol><p>Interlude</p><ol madcap:continue="true"><li>Two</li></ol>')
        lists = [child for child in doc.children if isinstance(child, List)]
        assert [bool(lst.metadata.get("continued")) for lst in lists] == [False, True]


@pytest.mark.unit
class TestInlineReferences:
    """Tests for variables, cross-references and links."""

    def test_madcap_variable(self) -> None:
        """Test MadCap:variable becomes a placeholder."""
        doc = parse('<p>Use <MadCap:variable name="General.Product" /></p>')
        assert doc.children[0].content[-1] == VariablePlaceholder(name="General.Product")

    def test_variable_span_keeps_rendered_text(self) -> None:
        """Test a rendered variable span keeps its text as fallback."""
        doc = parse('<p><span data-mc-variable="General.Version">1.0</span></p>')
        assert doc.children[0].content == [VariablePlaceholder(name="General.Version", fallback_text="1.0")]

    def test_xref(self) -> None:
        """Test MadCap:xref becomes a cross-reference."""
        doc = parse('<p><MadCap:xref href="Other.htm#a">Other</MadCap:xref></p>')
        assert doc.children[0].content == [CrossReference(anchor="Other.htm#a", content=[Text(content="Other")])]

    def test_xref_without_href_is_unwrapped(self) -> None:
        """Test an xref without a target keeps only its text."""
        doc = parse("<p><MadCap:xref>Other</MadCap:xref></p>")
        assert doc.children[0].content == [Text(content="Other")]

    def test_anchor_kinds(self) -> None:
        """Test fragments and topics become references and URLs become links."""
        doc = parse('<p><a href="#sec">S</a><a href="Topic.htm">T</a><a href="https://example.com">E</a></p>')
        content = doc.children[0].content
        assert content[0] == CrossReference(anchor="#sec", content=[Text(content="S")])
        assert content[1] == CrossReference(anchor="Topic.htm", content=[Text(content="T")])
        assert content[2] == Link(url="https://example.com", content=[Text(content="E")])


@pytest.mark.unit
class TestAnchors:
    """Tests for element ids and bookmarks carried as block anchors."""

    def test_heading_id(self) -> None:
        """Test a heading keeps its id."""
        doc = parse('<h2 id="setup">Setup</h2>')
        assert doc.children[0].metadata["anchors"] == ["setup"]

    def test_bookmark_inside_paragraph(self) -> None:
        """Test a named bookmark anchors its paragraph."""
        doc = parse('<p><a name="intro"></a>Intro text</p>')
        assert doc.children[0] == Paragraph(content=[Text(content="Intro text")])
        assert doc.children[0].metadata["anchors"] == ["intro"]

    def test_empty_paragraph_hands_anchor_to_next_block(self) -> None:
        """Test a bookmark in an otherwise empty paragraph anchors the following block."""
        doc = parse('<p><a name="next"></a></p><h2>Next</h2>')
        assert len(doc.children) == 1
        assert isinstance(doc.children[0], Heading)
        assert doc.children[0].metadata["anchors"] == ["next"]

    def test_list_item_id(self) -> None:
        """Test a list item keeps its id."""
        doc = parse('<ol><li id="s1">One</li></ol>')
        assert doc.children[0].items[0].metadata["anchors"] == ["s1"]

    def test_trailing_bookmark_stays_with_last_block(self) -> None:
        """Test a bookmark after the last block is not lost."""
        doc = parse('<p>Body</p><a name="end"></a>')
        assert doc.children[0].metadata["anchors"] == ["end"]

    def test_filtered_element_has_no_anchor(self) -> None:
        """Test an excluded element's id is not kept."""
        doc = parse('<h2 id="draft" madcap:conditions="Default.Draft">Draft</h2><p>Kept</p>')
        assert "anchors" not in doc.children[0].metadata


@pytest.mark.unit
class TestSnippets:
    """Tests for snippet inlining."""

    def test_snippet_block_is_inlined(self) -> None:
        """Test a snippet block is replaced by the snippet's blocks."""
        snippets = {"Note.flsnp": "<html><body><p>From snippet</p></body></html>"}
        doc = parse('<MadCap:snippetBlock src="Note.flsnp" />', snippet_resolver=snippets.get)
        assert doc.children == [Paragraph(content=[Text(content="From snippet")])]

    def test_snippet_text_is_inlined(self) -> None:
        """Test a snippet text reference is inlined into the paragraph."""
        snippets = {"Name.flsnp": "<p>Acme</p>"}
        doc = parse('<p>By <MadCap:snippetText src="Name.flsnp" /></p>', snippet_resolver=snippets.get)
        assert extract_text(doc) == "By Acme"

    def test_missing_snippet_placeholder(self) -> None:
        """Test a missing snippet leaves a placeholder and is counted."""
        diagnostics = DiagnosticCollector()
        doc = parse('<MadCap:snippetBlock src="Gone.flsnp" />', diagnostics=diagnostics)
        assert doc.children[0].content[-1] == Code(content="Gone.flsnp")
        assert diagnostics.metadata.unresolved_snippet_count == 1
        assert [d.code for d in diagnostics] == ["resource-unavailable"]

    def test_circular_snippet_is_cut(self) -> None:
        """Test a snippet including itself is inlined once and then reported."""
        diagnostics = DiagnosticCollector()

        def resolver(src: str) -> str:
            return '<p>Loop</p><MadCap:snippetBlock src="Loop.flsnp" />'

        doc = parse('<MadCap:snippetBlock src="Loop.flsnp" />', snippet_resolver=resolver, diagnostics=diagnostics)
        assert extract_text(doc).count("Loop") == 2
        assert diagnostics.metadata.unresolved_snippet_count == 1
        assert "Circular snippet reference" in diagnostics.diagnostics[0].message

    def test_snippet_resolver_returning_document(self) -> None:
        """Test a resolver may return an already parsed document."""
        snippet = Document(children=[Paragraph(content=[Text(content="Parsed")])])
        doc = parse('<MadCap:snippetBlock src="x.flsnp" />', snippet_resolver=lambda src: snippet)
        assert doc.children == snippet.children
        assert doc.children[0] is not snippet.children[0]

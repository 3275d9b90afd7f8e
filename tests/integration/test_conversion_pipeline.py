#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_conversion_pipeline.py
"""Integration tests for the to_asciidoc pipeline.

Tests cover:
- Callouts, dropdowns and condition filtering end to end
- Snippets from a Flare project layout and circular snippets
- List continuation and sibling-list repair
- Variables in both modes
- Cross-references within and across topics, and the anchors they target
- Image placement
- Result shape and idempotence of the final text
"""

from pathlib import Path

import pytest

from flare2adoc import to_asciidoc
from flare2adoc.exceptions import InvalidOptionsError
from flare2adoc.linter import lint
from flare2adoc.options import AsciiDocEmitterOptions, LintOptions


@pytest.mark.integration
class TestFlareConstructs:
    """End-to-end conversion of Flare-specific markup."""

    def test_callout_with_lead_title(self) -> None:
        """Test a callout paragraph becomes a titled admonition."""
        result = to_asciidoc('<p class="note"><span class="noteInDiv">Note:</span> Save first.</p>')
        assert result.text == "[NOTE]\n.Note\n====\nSave first.\n====\n"
        assert result.warnings == []

    def test_callout_div(self) -> None:
        """Test a callout div with a lead span in its first paragraph."""
        result = to_asciidoc(
            '<div class="warning"><p><span class="warningInDiv">Caution!</span> Hot surface.</p></div>'
        )
        assert result.text == "[WARNING]\n.Caution!\n====\nHot surface.\n====\n"

    def test_dropdown(self) -> None:
        """Test a dropdown becomes a collapsible block."""
        result = to_asciidoc(
            "<MadCap:dropDown><MadCap:dropDownHead><MadCap:dropDownHotspot>Details</MadCap:dropDownHotspot>"
            "</MadCap:dropDownHead><MadCap:dropDownBody><p>Hidden text.</p></MadCap:dropDownBody>"
            "</MadCap:dropDown>"
        )
        assert result.text == ".Details\n[%collapsible]\n====\nHidden text.\n====\n"

    def test_conditions_are_filtered_and_counted(self) -> None:
        """Test excluded conditional content is dropped and counted."""
        result = to_asciidoc('<p>Keep</p><p MadCap:conditions="Default.Draft">Drop</p>')
        assert result.text == "Keep\n"
        assert result.metadata.filtered_conditional_count == 1

    def test_circular_snippet(self) -> None:
        """Test a snippet including itself is expanded once and then replaced by a placeholder."""
        result = to_asciidoc(
            '<MadCap:snippetBlock src="a.flsnp" />',
            snippet_resolver=lambda src: '<p>Loop</p><MadCap:snippetBlock src="a.flsnp" />',
        )
        assert result.text == "Loop\n\n*Missing snippet:* +a.flsnp+\n"
        assert result.metadata.unresolved_snippet_count == 1
        assert [w.code for w in result.warnings] == ["resource-unavailable"]


@pytest.mark.integration
class TestProjectTopics:
    """Conversion of topic files inside a Flare project."""

    def test_topic_file(self, flare_project: Path) -> None:
        """Test snippets and cross-references resolve relative to the topic."""
        topic = flare_project / "Topic.htm"
        topic.write_text(
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<html xmlns:MadCap="http://www.madcapsoftware.com/Schemas/MadCap.xsd"><body>'
            "<h1>Open the case</h1>"
            '<MadCap:snippetBlock src="Resources/Snippets/Warning.flsnp" />'
            '<p>See <MadCap:xref href="Install.htm#steps">Installing</MadCap:xref> and '
            '<MadCap:xref href="Missing.htm">Missing</MadCap:xref>.</p>'
            "</body></html>",
            encoding="utf-8",
        )
        result = to_asciidoc(topic)
        assert result.text == (
            "== Open the case\n\n"
            "Unplug the device before opening it.\n\n"
            "See xref:Install.adoc#steps[Installing] and Missing.\n"
        )
        assert result.metadata.unresolved_xref_count == 1
        assert result.metadata.unresolved_snippet_count == 0
        assert [w.code for w in result.warnings] == ["resource-unavailable"]

    def test_same_page_reference(self) -> None:
        """Test a fragment link to an anchored heading becomes a shorthand cross-reference."""
        result = to_asciidoc('<h2 id="setup">Setup</h2><p><a href="#setup">go</a> <a href="#nowhere">x</a></p>')
        assert result.text == "[[setup]]\n=== Setup\n\n<<setup,go>> x\n"
        assert result.metadata.unresolved_xref_count == 1
        assert [w.code for w in result.warnings] == ["resource-unavailable"]

    def test_bookmark_reference(self) -> None:
        """Test a Flare bookmark is written as an inline anchor and can be referenced."""
        result = to_asciidoc('<p><a name="intro"></a>Intro text.</p><p>Back to <a href="#intro">the intro</a>.</p>')
        assert result.text == "[[intro]]Intro text.\n\nBack to <<intro,the intro>>.\n"
        assert result.metadata.unresolved_xref_count == 0

    def test_unresolved_reference_with_base_path(self, tmp_path: Path) -> None:
        """Test a topic missing under the base path is left unresolved."""
        result = to_asciidoc('<p><a href="Other.htm">Other</a></p>', base_path=tmp_path)
        assert result.text == "Other\n"
        assert result.metadata.unresolved_xref_count == 1


@pytest.mark.integration
class TestLists:
    """End-to-end list handling."""

    def test_continued_numbering(self) -> None:
        """Test a continued list starts after the previous list's items."""
        result = to_asciidoc(
            '<ol><li>One</li><li>Two</li></ol><p>Break</p><ol MadCap:continue="true"><li>Three</li></ol>'
        )
        assert result.text == ". One\n. Two\n\nBreak\n\n[start=3]\n. Three\n"

    def test_sibling_list_is_nested(self) -> None:
        """Test a sub-list written as a sibling is nested under its item."""
        result = to_asciidoc("<ol><li>Do the following:</li><ul><li>Alpha</li></ul><li>Finish.</li></ol>")
        assert result.text == ". Do the following:\n+\n** Alpha\n. Finish.\n"
        assert result.warnings == []

    def test_ambiguous_nesting_warns(self) -> None:
        """Test nesting without evidence is reported."""
        result = to_asciidoc("<ul><li>Alpha</li><ul><li>Beta</li></ul></ul>")
        assert result.text == "* Alpha\n+\n** Beta\n"
        assert [w.code for w in result.warnings] == ["ambiguous-structure"]

    def test_sibling_list_after_sentence_stays_separate(self) -> None:
        """Test a list after a finished sentence is kept apart."""
        result = to_asciidoc("<ol><li>Save the file.</li><ul><li>Backup</li></ul></ol>")
        assert result.text == ". Save the file.\n\n//\n\n* Backup\n"

    def test_split_list_remainder_is_not_renested(self) -> None:
        """Test the items after a promoted sibling list keep their own level."""
        result = to_asciidoc("<ol><li>Step one.</li><ul><li>x:</li></ul><li>B</li><li>C</li></ol>")
        assert result.text == ". Step one.\n\n//\n\n* x:\n\n//\n\n[start=2]\n. B\n. C\n"


@pytest.mark.integration
class TestVariables:
    """End-to-end variable handling."""

    markup = '<p>Welcome to <MadCap:variable name="General.Product" />.</p>'

    def test_reference_mode(self) -> None:
        """Test reference mode writes attribute references and returns the values."""
        result = to_asciidoc(self.markup, variables={"General.Product": "Widget"})
        assert result.text == "Welcome to {product}.\n"
        assert result.attributes == {"product": "Widget"}

    def test_attribute_header(self) -> None:
        """Test attribute entries can be written into the document header."""
        result = to_asciidoc(
            self.markup,
            variables={"General.Product": "Widget"},
            renderer_options=AsciiDocEmitterOptions(include_variable_attributes=True),
        )
        assert result.text == ":product: Widget\n\nWelcome to {product}.\n"

    def test_flatten_mode(self) -> None:
        """Test flatten mode inlines the value."""
        result = to_asciidoc(self.markup, variables={"General.Product": "Widget"}, variable_mode="flatten")
        assert result.text == "Welcome to Widget.\n"
        assert result.warnings == []

    def test_flatten_mode_unresolved(self) -> None:
        """Test an unknown variable in flatten mode is reported."""
        result = to_asciidoc(self.markup, variable_mode="flatten")
        assert result.text == "Welcome to {product}.\n"
        assert [w.code for w in result.warnings] == ["resource-unavailable"]


@pytest.mark.integration
class TestImagesAndResult:
    """Image placement, result shape and idempotence."""

    def test_image_placement(self) -> None:
        """Test standalone images become blocks and images in text stay inline."""
        result = to_asciidoc(
            '<p><img src="Images/a.png" alt="Diagram" /></p><p>Click <img src="Images/icon.png" /> to save.</p>'
        )
        assert result.text == "image::Images/a.png[Diagram]\n\nClick image:Images/icon.png[] to save.\n"

    def test_bytes_source(self) -> None:
        """Test UTF-8 bytes are accepted."""
        assert to_asciidoc("<p>Café</p>".encode("utf-8")).text == "Café\n"

    def test_result_dict(self) -> None:
        """Test the JSON-ready result shape."""
        data = to_asciidoc('<p><a href="Gone.htm">Gone</a></p>', base_path=Path("/nonexistent")).to_dict()
        assert set(data) >= {"text", "warnings", "metadata"}
        assert data["metadata"] == {
            "filteredConditionalCount": 0,
            "unresolvedXrefCount": 1,
            "unresolvedSnippetCount": 0,
        }
        assert data["warnings"][0]["code"] == "resource-unavailable"

    def test_output_is_lint_stable(self) -> None:
        """Test linting the final text again changes nothing."""
        result = to_asciidoc(
            "<h1>Setup</h1>"
            '<p class="tip">Press <b>Save </b>now .</p>'
            "<ol><li>Open the menu:</li><ol><li>File</li></ol><li>Save..</li></ol>"
        )
        assert lint(result.text) == result.text

    def test_wrong_options_class(self) -> None:
        """Test options of the wrong class are rejected."""
        with pytest.raises(InvalidOptionsError):
            to_asciidoc("<p>x</p>", lint_options=AsciiDocEmitterOptions())  # type: ignore[arg-type]

    def test_lint_options_are_applied(self) -> None:
        """Test lint options reach the linter."""
        result = to_asciidoc("<ul><li>Save..</li></ul>", lint_options=LintOptions(fix_list_punctuation=False))
        assert result.text == "* Save..\n"

    def test_deepest_heading(self) -> None:
        """Test a level 6 heading is written at the deepest AsciiDoc section level."""
        assert to_asciidoc("<h6>Deep</h6>").text == "====== Deep\n"

    def test_italic_glued_to_word(self) -> None:
        """Test italic text touching a word is separated so it still renders."""
        assert to_asciidoc("<p>word<i>it</i> more</p>").text == "word _it_ more\n"
        assert to_asciidoc("<p>a<b>b</b>c</p>").text == "a *b* c\n"


@pytest.mark.integration
class TestStructureGuarantees:
    """Marker and continuation counts in the emitted text."""

    def test_orphan_paragraph_joins_last_item(self) -> None:
        """Test a stray paragraph after the last item is attached with one continuation."""
        result = to_asciidoc("<ol><li>A</li><li>B</li><p>orphan</p></ol>")
        assert result.text == ". A\n. B\n+\norphan\n"

    @pytest.mark.parametrize("blocks", [2, 3, 5])
    def test_continuation_count(self, blocks: int) -> None:
        """Test an item with N blocks has N - 1 continuation markers."""
        body = "".join(f"<p>Part {n}</p>" for n in range(blocks))
        result = to_asciidoc(f"<ul><li>{body}</li></ul>")
        assert result.text.splitlines().count("+") == blocks - 1

    @pytest.mark.parametrize("count", [1, 4, 12])
    def test_marker_count(self, count: int) -> None:
        """Test an ordered list with K items has K markers whatever the item length."""
        items = "".join(f"<li><p>Step {n}</p><p>{'More text. ' * n}</p></li>" for n in range(count))
        result = to_asciidoc(f"<ol>{items}</ol>")
        assert sum(1 for line in result.text.splitlines() if line.startswith(". ")) == count

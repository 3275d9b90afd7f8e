#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_linter.py
"""Unit tests for the AsciiDoc post-linter.

Tests cover:
- Whitespace cleanup and blank line collapsing
- Emphasis spacing and punctuation rules
- Protected spans, literal blocks and skipped lines
- Idempotence
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from flare2adoc.linter import AsciiDocLinter, lint
from flare2adoc.options import LintOptions

MARKUP_TOKENS = st.sampled_from(
    ["*", "_", "+", "`", "a", "word", " ", ".", ",", "----", "\n", "* ", ". ", "..", "https://x.y/a_b", "{attr}", "\\", "[[id]]"]
)


@pytest.mark.unit
class TestWhitespace:
    """Tests for line and blank-line cleanup."""

    def test_trailing_whitespace(self) -> None:
        """Test trailing spaces and tabs are removed."""
        assert lint("a   \nb\t") == "a\nb\n"

    def test_blank_runs_collapse(self) -> None:
        """Test runs of blank lines are collapsed."""
        assert lint("a\n\n\n\nb") == "a\n\nb\n"

    def test_max_blank_lines_option(self) -> None:
        """Test the blank line limit is configurable."""
        assert lint("a\n\n\n\nb", LintOptions(max_blank_lines=2)) == "a\n\n\nb\n"

    def test_line_endings(self) -> None:
        """Test CRLF and CR line endings are normalized."""
        assert lint("a\r\nb\rc") == "a\nb\nc\n"

    def test_empty_text(self) -> None:
        """Test empty text becomes a single newline."""
        assert lint("") == "\n"


@pytest.mark.unit
class TestRules:
    """Tests for the emphasis and punctuation rules."""

    def test_emphasis_spacing(self) -> None:
        """Test whitespace inside a pair moves outside it."""
        assert lint("Press *Save *now.") == "Press *Save* now.\n"

    def test_underscore_emphasis(self) -> None:
        """Test underscore pairs are tightened too."""
        assert lint("an _ important_ word") == "an _important_ word\n"

    def test_underscore_pair_glued_to_following_word(self) -> None:
        """Test an underscore pair touching the next word is separated from it."""
        assert lint("text _it_x") == "text _it_ x\n"

    def test_underscore_pair_glued_to_preceding_word(self) -> None:
        """Test an underscore pair touching the previous word is separated from it."""
        assert lint("word_it_ more") == "word _it_ more\n"

    @pytest.mark.parametrize("line", ["use snake_case here", "set _snake_case_ now", "a__b"])
    def test_identifiers_keep_their_underscores(self, line: str) -> None:
        """Test intraword underscores that do not form a glued pair are kept."""
        assert lint(line) == line + "\n"

    def test_emphasis_rule_can_be_disabled(self) -> None:
        """Test the emphasis rule is skipped when disabled."""
        assert lint("Press *Save *now.", LintOptions(fix_emphasis_spacing=False)) == "Press *Save *now.\n"

    def test_space_before_punctuation(self) -> None:
        """Test space before punctuation is removed."""
        assert lint("Click Save .") == "Click Save.\n"
        assert lint("Hello , world") == "Hello, world\n"

    def test_doubled_period_in_list_item(self) -> None:
        """Test a doubled period at the end of a list item is collapsed."""
        assert lint("* Save the file..") == "* Save the file.\n"
        assert lint(". Then exit..") == ". Then exit.\n"

    def test_doubled_period_outside_lists_is_kept(self) -> None:
        """Test paragraphs keep their periods."""
        assert lint("Wait..") == "Wait..\n"

    def test_ellipsis_is_kept(self) -> None:
        """Test an ellipsis in a list item is not shortened."""
        assert lint("* Wait...") == "* Wait...\n"

    def test_list_punctuation_rule_can_be_disabled(self) -> None:
        """Test doubled periods survive when the rule is disabled."""
        assert lint("* Save..", LintOptions(fix_list_punctuation=False)) == "* Save..\n"


@pytest.mark.unit
class TestProtection:
    """Tests for content the linter must not touch."""

    def test_listing_block(self) -> None:
        """Test listing block content is copied unchanged."""
        text = "----\nx   .  \n\n\n\n----"
        assert lint(text) == text + "\n"

    def test_backtick_span(self) -> None:
        """Test punctuation spacing inside backticks is kept."""
        assert lint("Use `a , b` here") == "Use `a , b` here\n"

    def test_url(self) -> None:
        """Test underscores inside URLs are not treated as emphasis."""
        assert lint("See https://example.com/a_b_c now") == "See https://example.com/a_b_c now\n"

    def test_macro_target(self) -> None:
        """Test macro targets are kept."""
        assert lint("image:my_icon_x.png[] here") == "image:my_icon_x.png[] here\n"

    @pytest.mark.parametrize("line", [":product: Widget .", "[NOTE]", "// a , b", "|==="])
    def test_skipped_lines(self, line: str) -> None:
        """Test attribute entries, block attributes, comments and delimiters are kept."""
        assert lint(line) == line + "\n"


@pytest.mark.unit
class TestIdempotence:
    """Tests for lint(lint(x)) == lint(x)."""

    @pytest.mark.parametrize(
        "text",
        [
            "Press *Save *now.",
            "* Save the file..\n\n\n* Next , step",
            "an _ important_ word\n----\n a  \n----\n",
            "*bold** .",
            "*__*_",
            "text _it_x and word_it_ more",
        ],
    )
    def test_examples(self, text: str) -> None:
        """Test linting twice equals linting once."""
        once = lint(text)
        assert lint(once) == once

    def test_rules_applied_until_line_settles(self) -> None:
        """Test a fix that exposes another rule's match is followed through."""
        assert lint("*bold** .") == "*bold* *.\n"

    @given(st.text(alphabet="ab \n"))
    def test_whitespace_property(self, text: str) -> None:
        """Test idempotence over arbitrary whitespace layouts."""
        linter = AsciiDocLinter()
        once = linter.lint(text)
        assert linter.lint(once) == once

    @given(st.lists(MARKUP_TOKENS, max_size=30).map("".join))
    def test_markup_property(self, text: str) -> None:
        """Test idempotence over text built from AsciiDoc markup tokens."""
        linter = AsciiDocLinter()
        once = linter.lint(text)
        assert linter.lint(once) == once

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_utils.py
"""Unit tests for the escaping and text helpers.

Tests cover:
- escape_asciidoc for markup characters, macros and underscores
- escape_block_start for paragraph lines that look like blocks
- attribute_name conversion of variable names
- Sentence and introduction punctuation checks
"""

import pytest

from flare2adoc.utils.escape import (
    escape_asciidoc,
    escape_attribute_value,
    escape_block_start,
    escape_macro_text,
)
from flare2adoc.utils.text import (
    attribute_name,
    ends_with_introduction,
    ends_with_terminal_punctuation,
    normalize_whitespace,
)


@pytest.mark.unit
class TestEscapeAsciidoc:
    """Tests for escape_asciidoc."""

    def test_formatting_characters(self) -> None:
        """Test emphasis, monospace and highlight markers are escaped."""
        assert escape_asciidoc("*bold* `code` #mark#") == r"\*bold\* \`code\` \#mark\#"

    def test_attribute_reference(self) -> None:
        """Test an opening brace is escaped."""
        assert escape_asciidoc("use {count}") == r"use \{count}"

    def test_intraword_underscore_is_kept(self) -> None:
        """Test snake_case words are left alone."""
        assert escape_asciidoc("set max_value") == "set max_value"

    def test_boundary_underscores_are_escaped(self) -> None:
        """Test underscores that could open emphasis are escaped."""
        assert escape_asciidoc("_init_") == r"\_init\_"

    def test_macro_prefix(self) -> None:
        """Test a macro name followed by a target is neutralized."""
        assert escape_asciidoc("see link:x[y]") == r"see \link:x[y]"

    def test_cross_reference_shorthand(self) -> None:
        """Test double angle brackets are escaped."""
        assert escape_asciidoc("a <<b>>") == r"a \<<b>>"

    def test_plain_punctuation_is_untouched(self) -> None:
        """Test colons, pipes and plus signs in text stay readable."""
        assert escape_asciidoc("Step 1: a | b + c") == "Step 1: a | b + c"

    def test_empty(self) -> None:
        """Test empty text is returned as is."""
        assert escape_asciidoc("") == ""


@pytest.mark.unit
class TestEscapeBlockStart:
    """Tests for escape_block_start."""

    @pytest.mark.parametrize("line", ["== Title", ". item", "* item", "- item", "// comment", "[NOTE]", "|===", "+"])
    def test_block_prefixes_are_protected(self, line: str) -> None:
        """Test lines that would start a block get an {empty} prefix."""
        assert escape_block_start(line) == "{empty}" + line

    @pytest.mark.parametrize("line", ["Plain text", "3. Third", "1+1 is two"])
    def test_ordinary_lines_are_untouched(self, line: str) -> None:
        """Test ordinary lines are unchanged."""
        assert escape_block_start(line) == line


@pytest.mark.unit
class TestSmallEscapes:
    """Tests for macro text and attribute value escaping."""

    def test_macro_text(self) -> None:
        """Test closing brackets are escaped inside macro text."""
        assert escape_macro_text("Array[0]") == r"Array[0\]"

    def test_attribute_value_is_single_line(self) -> None:
        """Test attribute values are collapsed to one line."""
        assert escape_attribute_value(" Acme\n  Corp ") == "Acme Corp"


@pytest.mark.unit
class TestAttributeName:
    """Tests for attribute_name."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("General.ProductName", "product-name"),
            ("Company_Name", "company-name"),
            ("Product.Version2", "version2"),
            ("General.URL", "u-r-l"),
            ("...", "variable"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        """Test variable names convert to kebab-case attribute names."""
        assert attribute_name(name) == expected


@pytest.mark.unit
class TestTextChecks:
    """Tests for the punctuation checks."""

    def test_terminal_punctuation(self) -> None:
        """Test sentence-ending punctuation is detected."""
        assert ends_with_terminal_punctuation("Done. ")
        assert ends_with_terminal_punctuation("Really?")
        assert not ends_with_terminal_punctuation("Choose one:")
        assert not ends_with_terminal_punctuation("")

    def test_introduction(self) -> None:
        """Test colons and semicolons are introductions."""
        assert ends_with_introduction("Do the following:")
        assert ends_with_introduction("either;")
        assert not ends_with_introduction("Done.")

    def test_normalize_whitespace(self) -> None:
        """Test whitespace runs collapse to one space."""
        assert normalize_whitespace("a \n\t b") == "a b"

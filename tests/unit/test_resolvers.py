#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_resolvers.py
"""Unit tests for the snippet, variable and cross-reference resolvers.

Tests cover:
- FileSystemSnippetResolver lookup order
- MappingVariableResolver full and short names
- DefaultCrossReferenceResolver anchor mapping and existence checks
"""

from pathlib import Path

import pytest

from flare2adoc.resolvers import (
    DefaultCrossReferenceResolver,
    FileSystemSnippetResolver,
    MappingVariableResolver,
    XrefTarget,
    find_project_root,
)


@pytest.mark.unit
class TestFileSystemSnippetResolver:
    """Tests for snippet lookup on disk."""

    def test_relative_to_base_path(self, tmp_path: Path) -> None:
        """Test a snippet next to the topic is found."""
        (tmp_path / "Note.flsnp").write_text("<p>Hi</p>", encoding="utf-8")
        assert FileSystemSnippetResolver(tmp_path)("Note.flsnp") == "<p>Hi</p>"

    def test_project_snippets_folder(self, flare_project: Path) -> None:
        """Test a snippet path relative to another folder falls back to the project snippets."""
        topic_dir = flare_project / "Topics"
        topic_dir.mkdir()
        resolver = FileSystemSnippetResolver(topic_dir)
        markup = resolver("../Resources/Snippets/Warning.flsnp")
        assert markup is not None
        assert "Unplug the device" in markup

    def test_bare_snippet_name(self, flare_project: Path) -> None:
        """Test a bare name is looked up under Content/Resources/Snippets."""
        resolver = FileSystemSnippetResolver(flare_project / "Topics")
        assert resolver("Snippets/Warning.flsnp") is not None

    def test_missing_snippet(self, tmp_path: Path) -> None:
        """Test a missing snippet resolves to None."""
        assert FileSystemSnippetResolver(tmp_path)("Nope.flsnp") is None

    def test_empty_src_has_no_candidates(self, tmp_path: Path) -> None:
        """Test an empty src yields no candidate paths."""
        assert FileSystemSnippetResolver(tmp_path).candidates("  ") == []

    def test_find_project_root(self, flare_project: Path) -> None:
        """Test the project root is the directory holding Content."""
        nested = flare_project / "Topics"
        nested.mkdir()
        assert find_project_root(nested) == flare_project.parent


@pytest.mark.unit
class TestMappingVariableResolver:
    """Tests for variable lookup."""

    def test_full_name(self) -> None:
        """Test the full dotted name is found."""
        assert MappingVariableResolver({"General.Product": "Widget"})("General.Product") == "Widget"

    def test_short_name_fallback(self) -> None:
        """Test the last dotted part is tried second."""
        assert MappingVariableResolver({"Product": "Widget"})("General.Product") == "Widget"

    def test_unknown(self) -> None:
        """Test an unknown variable resolves to None."""
        assert MappingVariableResolver()("General.Product") is None


@pytest.mark.unit
class TestDefaultCrossReferenceResolver:
    """Tests for cross-reference mapping."""

    def test_same_document_fragment(self) -> None:
        """Test a bare fragment targets the current document."""
        assert DefaultCrossReferenceResolver()("#intro") == XrefTarget(path=None, fragment="intro")

    def test_topic_with_fragment(self) -> None:
        """Test the topic extension is replaced."""
        target = DefaultCrossReferenceResolver()("Guide/Install.htm#steps")
        assert target == XrefTarget(path="Guide/Install.adoc", fragment="steps")

    def test_custom_extension(self) -> None:
        """Test the target extension can be changed."""
        target = DefaultCrossReferenceResolver(target_extension=".html")("Install.htm")
        assert target is not None
        assert target.path == "Install.html"

    @pytest.mark.parametrize("anchor", ["", "#", "javascript:void(0)", "https://example.com/a.htm"])
    def test_unresolvable(self, anchor: str) -> None:
        """Test empty, script and external anchors resolve to None."""
        assert DefaultCrossReferenceResolver()(anchor) is None

    def test_existence_check_with_base_path(self, flare_project: Path) -> None:
        """Test topics are checked on disk when a base path is given."""
        resolver = DefaultCrossReferenceResolver(flare_project)
        assert resolver("Install.htm") == XrefTarget(path="Install.adoc", fragment=None)
        assert resolver("Missing.htm") is None

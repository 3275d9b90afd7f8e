#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli_config.py
"""Unit tests for CLI configuration and variable file loading.

Tests cover:
- JSON, TOML, YAML and pyproject.toml configuration files
- Configuration errors
- Variable files, including nested mappings and MadCap .flvar sets
"""

import argparse
import json
import warnings
from pathlib import Path

import pytest
from bs4 import XMLParsedAsHTMLWarning

from flare2adoc.cli.config import load_config_file, load_flvar_file, load_variables_file


@pytest.mark.unit
class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_toml(self, tmp_path: Path) -> None:
        """Test a TOML file with all three sections."""
        path = tmp_path / "flare2adoc.toml"
        path.write_text(
            '[parser]\ninclude_conditions = ["Internal"]\n\n'
            '[renderer]\nvariable_mode = "flatten"\n\n'
            "[lint]\nmax_blank_lines = 2\n",
            encoding="utf-8",
        )
        config = load_config_file(path)
        assert config == {
            "parser": {"include_conditions": ["Internal"]},
            "renderer": {"variable_mode": "flatten"},
            "lint": {"max_blank_lines": 2},
        }

    def test_yaml_missing_sections_are_empty(self, tmp_path: Path) -> None:
        """Test omitted sections default to empty tables."""
        path = tmp_path / "config.yml"
        path.write_text("renderer:\n  admonition_style: paragraph\n", encoding="utf-8")
        config = load_config_file(path)
        assert config["renderer"] == {"admonition_style": "paragraph"}
        assert config["parser"] == {}
        assert config["lint"] == {}

    def test_json(self, tmp_path: Path) -> None:
        """Test a JSON configuration."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"lint": {"fix_list_punctuation": False}}), encoding="utf-8")
        assert load_config_file(path)["lint"] == {"fix_list_punctuation": False}

    def test_pyproject(self, tmp_path: Path) -> None:
        """Test the tool table of a pyproject.toml is used."""
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "docs"\n\n[tool.flare2adoc.renderer]\nuse_collapsible_blocks = false\n',
            encoding="utf-8",
        )
        assert load_config_file(path)["renderer"] == {"use_collapsible_blocks": False}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is rejected."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_directory(self, tmp_path: Path) -> None:
        """Test a directory is rejected."""
        with pytest.raises(argparse.ArgumentTypeError, match="not a file"):
            load_config_file(tmp_path)

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        """Test unknown formats are rejected."""
        path = tmp_path / "config.ini"
        path.write_text("[parser]\n", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="Unsupported file format"):
            load_config_file(path)

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        """Test parse errors are reported as argument errors."""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="Error reading config file"):
            load_config_file(path)

    def test_section_must_be_table(self, tmp_path: Path) -> None:
        """Test a section that is not a mapping is rejected."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"parser": ["a"]}), encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="must be a table"):
            load_config_file(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        """Test a configuration that is not a mapping is rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="must be a mapping"):
            load_config_file(path)


@pytest.mark.unit
class TestLoadVariablesFile:
    """Tests for load_variables_file and load_flvar_file."""

    def test_nested_mapping_is_flattened(self, tmp_path: Path) -> None:
        """Test nested tables become dotted names and values become strings."""
        path = tmp_path / "vars.toml"
        path.write_text('[General]\nProduct = "Widget"\nVersion = 2\n', encoding="utf-8")
        assert load_variables_file(path) == {"General.Product": "Widget", "General.Version": "2"}

    def test_flat_yaml(self, tmp_path: Path) -> None:
        """Test a flat YAML mapping."""
        path = tmp_path / "vars.yaml"
        path.write_text("Product: Widget\n", encoding="utf-8")
        assert load_variables_file(path) == {"Product": "Widget"}

    def test_flvar(self, tmp_path: Path) -> None:
        """Test a MadCap variable set uses the file stem as the set name."""
        path = tmp_path / "General.flvar"
        path.write_text(
            '<?xml version="1.0" encoding="utf-8"?>\n'
            "<CatapultVariableSet>\n"
            '  <Variable Name="Product" EvaluatedDefinition="Widget Pro">Widget Pro</Variable>\n'
            '  <Variable Name="Company">Acme\n    Corp</Variable>\n'
            '  <Variable Name="Empty"></Variable>\n'
            "</CatapultVariableSet>\n",
            encoding="utf-8",
        )
        assert load_flvar_file(path) == {"General.Product": "Widget Pro", "General.Company": "Acme Corp"}
        assert load_variables_file(path) == load_flvar_file(path)

    def test_flvar_parses_without_xml_warning(self, tmp_path: Path) -> None:
        """Test a variable set with an XML declaration loads without an XML-as-HTML warning."""
        path = tmp_path / "General.flvar"
        path.write_text(
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<CatapultVariableSet><Variable Name="Product">Widget</Variable></CatapultVariableSet>\n',
            encoding="utf-8",
        )
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            assert load_flvar_file(path) == {"General.Product": "Widget"}
        assert not [w for w in caught if issubclass(w.category, XMLParsedAsHTMLWarning)]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing variables file is rejected."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_variables_file(tmp_path / "vars.json")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test a variables file must hold a mapping."""
        path = tmp_path / "vars.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="must hold a mapping"):
            load_variables_file(path)

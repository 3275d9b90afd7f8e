#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/cli/config.py
"""Configuration and variable file loading for the flare2adoc CLI.

Configuration files may be JSON, TOML or YAML, or a ``pyproject.toml``
with a ``[tool.flare2adoc]`` table. A configuration holds up to three
sections named after the pipeline stages::

    [parser]
    exclude_conditions = ["\\\\bdraft\\\\b"]

    [renderer]
    variable_mode = "flatten"

    [lint]
    max_blank_lines = 1

Variable files may be JSON, TOML or YAML mappings (nested tables are
flattened to dotted names), or MadCap ``.flvar`` variable sets.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

CONFIG_SECTIONS = ("parser", "renderer", "lint")


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.flare2adoc]`` table from a pyproject.toml file.

    Raises
    ------
    argparse.ArgumentTypeError
        If the table exists but is not a table

    """
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)

    config = data.get("tool", {}).get("flare2adoc", {})
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.flare2adoc] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def _load_structured_file(path: Path) -> Any:
    """Load a JSON, TOML or YAML file according to its extension."""
    ext = path.suffix.lower()
    if path.name.lower() == "pyproject.toml":
        return _load_pyproject_section(path)
    if ext == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    if ext in (".yaml", ".yml"):
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    if ext == ".json":
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    raise argparse.ArgumentTypeError(f"Unsupported file format: {ext}. Use .json, .toml, or .yaml")


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration with ``parser``, ``renderer`` and ``lint`` sections

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has an invalid structure

    Examples
    --------
    >>> config = load_config_file("flare2adoc.toml")
    >>> config["renderer"].get("variable_mode")
    'flatten'

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    try:
        data = _load_structured_file(config_path)
    except argparse.ArgumentTypeError:
        raise
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(f"Configuration in {config_path} must be a mapping")

    config: Dict[str, Any] = {}
    for section in CONFIG_SECTIONS:
        values = data.get(section, {})
        if not isinstance(values, dict):
            raise argparse.ArgumentTypeError(f"Section '{section}' in {config_path} must be a table")
        config[section] = values
    return config


def _flatten(mapping: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for key, value in mapping.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{name}."))
        elif value is not None:
            flat[name] = str(value)
    return flat


def load_flvar_file(path: Path) -> Dict[str, str]:
    """Load a MadCap ``.flvar`` variable set.

    Each ``Variable`` element yields ``<set>.<Name>``, where the set name is
    the file stem. The value is the ``EvaluatedDefinition`` attribute when
    present, otherwise the element text. The XML declaration is removed
    first, as it is for topics.

    """
    from bs4 import BeautifulSoup

    from flare2adoc.parsers.madcap import MadCapToAstConverter

    markup = MadCapToAstConverter.preprocess_markup(path.read_text(encoding="utf-8", errors="replace"))
    soup = BeautifulSoup(markup, "html.parser")
    variables: Dict[str, str] = {}
    for element in soup.find_all("variable"):
        name = element.get("name")
        if not name:
            continue
        value = element.get("evaluateddefinition")
        if value is None:
            value = element.get_text()
        value = " ".join(str(value).split())
        if value:
            variables[f"{path.stem}.{name}"] = value
    return variables


def load_variables_file(path: Path | str) -> Dict[str, str]:
    """Load variable values from a file.

    Parameters
    ----------
    path : Path or str
        A ``.flvar`` variable set, or a JSON, TOML or YAML mapping

    Returns
    -------
    dict
        Variable names (dotted for nested mappings) mapped to values

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read or does not hold a mapping

    """
    path = Path(path)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"Variables file does not exist: {path}")
    try:
        if path.suffix.lower() == ".flvar":
            return load_flvar_file(path)
        data = _load_structured_file(path)
    except argparse.ArgumentTypeError:
        raise
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise argparse.ArgumentTypeError(f"Error reading variables file {path}: {e}") from e

    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(f"Variables file {path} must hold a mapping")
    return _flatten(data)

"""Pytest configuration and shared fixtures for the flare2adoc test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from flare2adoc.result import DiagnosticCollector

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def diagnostics() -> DiagnosticCollector:
    """Provide a fresh diagnostic collector."""
    return DiagnosticCollector()


@pytest.fixture
def flare_project(tmp_path: Path) -> Path:
    """Create a minimal Flare project layout and return its topic directory.

    The project holds ``Content/Resources/Snippets/Warning.flsnp`` and a
    second topic ``Content/Install.htm`` next to the topic directory.
    """
    content = tmp_path / "Content"
    snippets = content / "Resources" / "Snippets"
    snippets.mkdir(parents=True)
    (snippets / "Warning.flsnp").write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<html><body><p>Unplug the device before opening it.</p></body></html>",
        encoding="utf-8",
    )
    (content / "Install.htm").write_text("<html><body><h1>Install</h1></body></html>", encoding="utf-8")
    return content

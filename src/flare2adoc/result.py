#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/result.py
"""Conversion result types and the per-conversion diagnostic collector.

A conversion never fails on recoverable problems. Missing resources,
ambiguous structure and unsupported constructs are recorded in a
:class:`DiagnosticCollector` while the document is processed, and are
returned to the caller as :class:`ConversionWarning` entries on the
:class:`ConversionResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from flare2adoc.exceptions import AmbiguousStructure, ConversionDiagnostic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionWarning:
    """A recoverable problem encountered during conversion.

    Parameters
    ----------
    code : str
        Stable identifier: ``resource-unavailable``, ``ambiguous-structure``
        or ``unknown-node-kind``
    message : str
        Human-readable description
    location : str or None, default None
        Source position, when known

    """

    code: str
    message: str
    location: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of this warning."""
        return {"code": self.code, "message": self.message, "location": self.location}


@dataclass
class ConversionMetadata:
    """Counters describing what the conversion had to drop or leave unresolved."""

    filtered_conditional_count: int = 0
    unresolved_xref_count: int = 0
    unresolved_snippet_count: int = 0

    def to_dict(self) -> dict[str, int]:
        """Return the counters with camelCase keys."""
        return {
            "filteredConditionalCount": self.filtered_conditional_count,
            "unresolvedXrefCount": self.unresolved_xref_count,
            "unresolvedSnippetCount": self.unresolved_snippet_count,
        }


@dataclass
class ConversionResult:
    """Output of a single document conversion.

    Parameters
    ----------
    text : str
        Final AsciiDoc text
    warnings : list of ConversionWarning
        Recoverable problems, in the order they were found
    metadata : ConversionMetadata
        Conversion counters
    attributes : dict of str to str
        Attribute names and resolved values for every variable the
        document references, for writing an attributes include

    Examples
    --------
    >>> result = to_asciidoc("<p>Hello</p>")
    >>> result.to_dict()["metadata"]["unresolvedXrefCount"]
    0

    """

    text: str
    warnings: list[ConversionWarning] = field(default_factory=list)
    metadata: ConversionMetadata = field(default_factory=ConversionMetadata)
    attributes: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of this result."""
        return {
            "text": self.text,
            "warnings": [warning.to_dict() for warning in self.warnings],
            "metadata": self.metadata.to_dict(),
        }


class DiagnosticCollector:
    """Collects recoverable diagnostics and counters for one conversion.

    Each recorded diagnostic is logged as it arrives: ambiguity decisions
    at INFO, everything else at WARNING.

    Parameters
    ----------
    metadata : ConversionMetadata, optional
        Counter object to update. A fresh one is created when omitted.

    """

    def __init__(self, metadata: ConversionMetadata | None = None) -> None:
        self.diagnostics: list[ConversionDiagnostic] = []
        self.metadata = metadata if metadata is not None else ConversionMetadata()

    def record(self, diagnostic: ConversionDiagnostic) -> None:
        """Record a diagnostic and log it."""
        self.diagnostics.append(diagnostic)
        where = diagnostic.location.describe() if diagnostic.location is not None else None
        level = logging.INFO if isinstance(diagnostic, AmbiguousStructure) else logging.WARNING
        if where:
            logger.log(level, "[%s] %s (%s)", diagnostic.code, diagnostic.message, where)
        else:
            logger.log(level, "[%s] %s", diagnostic.code, diagnostic.message)

    def extend(self, other: DiagnosticCollector) -> None:
        """Append diagnostics from another collector without logging them again."""
        self.diagnostics.extend(other.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.diagnostics)

    def warnings(self) -> list[ConversionWarning]:
        """Return the recorded diagnostics as result warnings."""
        return [
            ConversionWarning(
                code=diagnostic.code,
                message=diagnostic.message,
                location=diagnostic.location.describe() if diagnostic.location is not None else None,
            )
            for diagnostic in self.diagnostics
        ]

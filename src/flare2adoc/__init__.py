#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/__init__.py
"""flare2adoc - convert MadCap Flare HTML topics to AsciiDoc.

A topic goes through three stages:

- the **canonicalizer** resolves the Flare dialect (conditions, snippets,
  dropdowns, callouts, variables and cross-references) and repairs the
  structure of the resulting tree,
- the **emitter** writes the canonical tree as AsciiDoc,
- the **post-linter** fixes spacing in the emitted text.

Recoverable problems never raise. They are collected as warnings on the
returned :class:`ConversionResult`, together with counters for dropped
conditional content and unresolved references.

Examples
--------
Convert a topic file, flattening variables into text:

    >>> from pathlib import Path
    >>> from flare2adoc import to_asciidoc
    >>> result = to_asciidoc(Path("Content/Install.htm"),
    ...                      variables={"General.ProductName": "Acme"},
    ...                      variable_mode="flatten")
    >>> print(result.text)
    >>> for warning in result.warnings:
    ...     print(warning.code, warning.message)

Run only the canonicalizer and inspect the tree:

    >>> from flare2adoc import Canonicalizer
    >>> tree = Canonicalizer().canonicalize("<ol><li>One</li></ol>")
    >>> tree.document.children[0].ordered
    True

"""

from flare2adoc.api import to_asciidoc
from flare2adoc.canonicalizer import CanonicalTree, Canonicalizer
from flare2adoc.classifier import BlockClassifier
from flare2adoc.exceptions import (
    AmbiguousStructure,
    ConversionDiagnostic,
    DependencyError,
    FatalParseError,
    Flare2AdocError,
    InvalidOptionsError,
    ResourceUnavailable,
    UnknownNodeKind,
    ValidationError,
)
from flare2adoc.linter import AsciiDocLinter, lint
from flare2adoc.options import AsciiDocEmitterOptions, LintOptions, MadCapParserOptions
from flare2adoc.renderers.asciidoc import AsciiDocEmitter
from flare2adoc.resolvers import (
    DefaultCrossReferenceResolver,
    FileSystemSnippetResolver,
    MappingVariableResolver,
    XrefTarget,
)
from flare2adoc.result import ConversionMetadata, ConversionResult, ConversionWarning, DiagnosticCollector

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Pipeline
    "to_asciidoc",
    "Canonicalizer",
    "CanonicalTree",
    "BlockClassifier",
    "AsciiDocEmitter",
    "AsciiDocLinter",
    "lint",
    # Options
    "MadCapParserOptions",
    "AsciiDocEmitterOptions",
    "LintOptions",
    # Resolvers
    "FileSystemSnippetResolver",
    "DefaultCrossReferenceResolver",
    "MappingVariableResolver",
    "XrefTarget",
    # Results
    "ConversionResult",
    "ConversionWarning",
    "ConversionMetadata",
    "DiagnosticCollector",
    # Exceptions
    "Flare2AdocError",
    "ValidationError",
    "InvalidOptionsError",
    "FatalParseError",
    "DependencyError",
    "ConversionDiagnostic",
    "ResourceUnavailable",
    "AmbiguousStructure",
    "UnknownNodeKind",
]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/api.py
"""Public conversion API.

:func:`to_asciidoc` is the single entry point most callers need. It wires
the three pipeline stages together for one document:

1. :class:`~flare2adoc.canonicalizer.Canonicalizer` builds the canonical
   tree and the cross-reference table,
2. :class:`~flare2adoc.renderers.asciidoc.AsciiDocEmitter` writes AsciiDoc,
3. :func:`~flare2adoc.linter.lint` cleans the text up.

All recoverable problems end up in the returned result's ``warnings``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from flare2adoc.canonicalizer import Canonicalizer
from flare2adoc.constants import VariableMode
from flare2adoc.exceptions import InvalidOptionsError
from flare2adoc.linter import lint
from flare2adoc.options.asciidoc import AsciiDocEmitterOptions
from flare2adoc.options.lint import LintOptions
from flare2adoc.options.madcap import MadCapParserOptions
from flare2adoc.parsers.madcap import SnippetLookup
from flare2adoc.renderers.asciidoc import AsciiDocEmitter
from flare2adoc.resolvers import (
    CrossReferenceResolver,
    DefaultCrossReferenceResolver,
    FileSystemSnippetResolver,
    MappingVariableResolver,
    VariableResolver,
)
from flare2adoc.result import ConversionResult, DiagnosticCollector

logger = logging.getLogger(__name__)

SourceType = Union[str, bytes, Path, Any]


def _read_source(source: SourceType) -> tuple[Any, Optional[Path]]:
    """Return the markup to parse and, for file sources, the file path."""
    if isinstance(source, Path):
        logger.debug(f"Reading topic from {source}")
        return source.read_bytes(), source
    return source, None


def _check_options(options: Any, expected_type: type, component_name: str) -> None:
    if options is not None and not isinstance(options, expected_type):
        raise InvalidOptionsError(component_name, expected_type, type(options))


def to_asciidoc(
    source: SourceType,
    *,
    base_path: Union[str, Path, None] = None,
    variables: Optional[Mapping[str, str]] = None,
    variable_mode: Optional[VariableMode] = None,
    parser_options: Optional[MadCapParserOptions] = None,
    renderer_options: Optional[AsciiDocEmitterOptions] = None,
    lint_options: Optional[LintOptions] = None,
    snippet_resolver: Optional[SnippetLookup] = None,
    variable_resolver: Optional[VariableResolver] = None,
    cross_reference_resolver: Optional[CrossReferenceResolver] = None,
) -> ConversionResult:
    """Convert a MadCap Flare topic to AsciiDoc.

    Parameters
    ----------
    source : str, bytes, Path or bs4.BeautifulSoup
        Topic markup, a path to a topic file, or a tree parsed by the caller
    base_path : str or Path, optional
        Directory used to resolve snippets and check cross-reference
        targets. Defaults to the directory of ``source`` when it is a path.
    variables : Mapping of str to str, optional
        Variable values, used when no ``variable_resolver`` is given
    variable_mode : {"reference", "flatten"}, optional
        Overrides ``renderer_options.variable_mode``
    parser_options : MadCapParserOptions, optional
        Parsing and structural repair options
    renderer_options : AsciiDocEmitterOptions, optional
        Emission options
    lint_options : LintOptions, optional
        Post-lint options
    snippet_resolver : callable, optional
        Maps a snippet ``src`` to markup. Defaults to
        :class:`~flare2adoc.resolvers.FileSystemSnippetResolver`.
    variable_resolver : callable, optional
        Maps a variable name to its value
    cross_reference_resolver : callable, optional
        Maps a reference anchor to a target. Defaults to
        :class:`~flare2adoc.resolvers.DefaultCrossReferenceResolver`.

    Returns
    -------
    ConversionResult
        AsciiDoc text, warnings, counters and variable attributes

    Raises
    ------
    FatalParseError
        If the source cannot be parsed at all
    InvalidOptionsError
        If an options object of the wrong class is passed
    OSError
        If a source path cannot be read

    Examples
    --------
        >>> result = to_asciidoc('<p class="note"><span class="noteInDiv">Note:</span> Save first.</p>')
        >>> print(result.text)
        [NOTE]
        .Note
        ====
        Save first.
        ====
        <BLANKLINE>

    """
    _check_options(parser_options, MadCapParserOptions, "to_asciidoc")
    _check_options(renderer_options, AsciiDocEmitterOptions, "to_asciidoc")
    _check_options(lint_options, LintOptions, "to_asciidoc")

    markup, source_path = _read_source(source)
    if base_path is None and source_path is not None:
        base_path = source_path.parent

    renderer_options = renderer_options or AsciiDocEmitterOptions()
    if variable_mode is not None:
        renderer_options = renderer_options.create_updated(variable_mode=variable_mode)

    if snippet_resolver is None:
        snippet_resolver = FileSystemSnippetResolver(base_path)
    if cross_reference_resolver is None:
        cross_reference_resolver = DefaultCrossReferenceResolver(base_path)
    if variable_resolver is None and variables is not None:
        variable_resolver = MappingVariableResolver(variables)

    diagnostics = DiagnosticCollector()
    canonicalizer = Canonicalizer(
        parser_options,
        snippet_resolver=snippet_resolver,
        cross_reference_resolver=cross_reference_resolver,
    )
    tree = canonicalizer.canonicalize(
        markup,
        source_path=str(source_path) if source_path is not None else None,
        diagnostics=diagnostics,
    )

    emitter = AsciiDocEmitter(
        renderer_options,
        xref_table=tree.xref_table,
        variable_resolver=variable_resolver,
        diagnostics=diagnostics,
    )
    text = lint(emitter.render_to_string(tree.document), lint_options)

    logger.debug(f"Converted topic with {len(diagnostics)} warning(s)")
    return ConversionResult(
        text=text,
        warnings=diagnostics.warnings(),
        metadata=diagnostics.metadata,
        attributes=dict(emitter.attributes),
    )

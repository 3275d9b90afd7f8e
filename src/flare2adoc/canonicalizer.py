#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/canonicalizer.py
"""Canonicalization of MadCap Flare topics.

The canonicalizer turns a topic into the canonical tree the emitter
consumes. It runs in two phases:

1. The :class:`~flare2adoc.parsers.madcap.MadCapToAstConverter` resolves the
   source dialect at the DOM level (conditions, snippets, dropdowns,
   callouts, variables, cross-references) and produces a raw AST.
2. The structural passes of :mod:`flare2adoc.transforms` are applied in a
   fixed order and repeated until the tree no longer changes, bounded by
   ``max_repair_passes``.

Finally every cross-reference anchor in the tree is resolved once, giving
the cross-reference table handed to the emitter.

Examples
--------
    >>> tree = Canonicalizer().canonicalize("<ol><li>One</li></ol>")
    >>> type(tree.document.children[0]).__name__
    'List'

"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from flare2adoc.ast.nodes import CrossReference, Document, Node
from flare2adoc.ast.transforms import NodeTransformer, collect_nodes
from flare2adoc.classifier import BlockClassifier
from flare2adoc.exceptions import AmbiguousStructure, FatalParseError
from flare2adoc.options.madcap import MadCapParserOptions
from flare2adoc.parsers.madcap import MadCapToAstConverter, SnippetLookup
from flare2adoc.resolvers import CrossReferenceResolver, DefaultCrossReferenceResolver, XrefTarget
from flare2adoc.result import ConversionMetadata, DiagnosticCollector
from flare2adoc.transforms import ListRepairTransform, MediaPlacementTransform, NormalizeParagraphsTransform

logger = logging.getLogger(__name__)

XrefTable = dict[str, Optional[XrefTarget]]


@dataclass
class CanonicalTree:
    """Result of canonicalization.

    Parameters
    ----------
    document : Document
        The canonical tree
    xref_table : dict
        Every cross-reference anchor in the document mapped to its target,
        or None when it could not be resolved
    diagnostics : DiagnosticCollector
        Diagnostics recorded while canonicalizing
    counts : ConversionMetadata
        Counters updated while canonicalizing

    """

    document: Document
    xref_table: XrefTable = field(default_factory=dict)
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)
    counts: ConversionMetadata = field(default_factory=ConversionMetadata)


class Canonicalizer:
    """Produce canonical trees from MadCap Flare topics.

    Parameters
    ----------
    options : MadCapParserOptions, optional
        Parsing and repair options
    snippet_resolver : callable, optional
        Maps a snippet ``src`` to markup or a node. Without one, every
        snippet reference is reported as missing.
    cross_reference_resolver : callable, optional
        Maps a reference anchor to an :class:`XrefTarget`. Defaults to
        :class:`DefaultCrossReferenceResolver` without a base path.

    """

    def __init__(
        self,
        options: MadCapParserOptions | None = None,
        snippet_resolver: Optional[SnippetLookup] = None,
        cross_reference_resolver: Optional[CrossReferenceResolver] = None,
    ) -> None:
        self.options = options or MadCapParserOptions()
        self.snippet_resolver = snippet_resolver
        self.cross_reference_resolver = cross_reference_resolver or DefaultCrossReferenceResolver()
        self.classifier = BlockClassifier(promote_screenshot_images=self.options.promote_screenshot_images)

    def canonicalize(
        self,
        tree: Union[str, bytes, Document, Any],
        source_path: str | None = None,
        diagnostics: DiagnosticCollector | None = None,
    ) -> CanonicalTree:
        """Canonicalize markup, a parsed tree, or an existing document.

        Parameters
        ----------
        tree : str, bytes, bs4.BeautifulSoup or Document
            Topic to canonicalize. A Document is copied and only the
            structural passes are applied to it.
        source_path : str, optional
            Path of the topic, used in diagnostic locations
        diagnostics : DiagnosticCollector, optional
            Collector to record into. A fresh one is created when omitted.

        Returns
        -------
        CanonicalTree
            The canonical document with its cross-reference table and
            diagnostics

        Raises
        ------
        FatalParseError
            If the input cannot be parsed into a tree at all

        """
        diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()

        if isinstance(tree, Document):
            document = copy.deepcopy(tree)
        else:
            if isinstance(tree, bytes):
                tree = self._decode(tree)
            converter = MadCapToAstConverter(
                self.options,
                snippet_resolver=self.snippet_resolver,
                diagnostics=diagnostics,
                source_path=source_path,
            )
            document = converter.parse(tree)

        document = self.repair(document, diagnostics)
        xref_table = self.build_xref_table(document)
        return CanonicalTree(
            document=document,
            xref_table=xref_table,
            diagnostics=diagnostics,
            counts=diagnostics.metadata,
        )

    @staticmethod
    def _decode(data: bytes) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FatalParseError(
                f"Input is not valid UTF-8: {e}",
                parsing_stage="decode",
                original_error=e,
            ) from e

    def passes(self, diagnostics: DiagnosticCollector) -> list[NodeTransformer]:
        """Return the structural passes in the order they are applied."""
        return [
            NormalizeParagraphsTransform(),
            MediaPlacementTransform(self.classifier),
            ListRepairTransform(diagnostics),
        ]

    def repair(self, document: Document, diagnostics: DiagnosticCollector) -> Document:
        """Apply the structural passes until the tree is unchanged.

        Each round applies every pass once. Rounds repeat until a round
        leaves the tree unchanged or ``max_repair_passes`` rounds have
        changed it, in which case an ``ambiguous-structure`` diagnostic is
        recorded and the last tree is kept.

        """
        passes = self.passes(diagnostics)
        for round_number in range(1, self.options.max_repair_passes + 1):
            current: Node = document
            for transformer in passes:
                result = transformer.transform(current)
                if not isinstance(result, Document):
                    raise TypeError(f"{transformer.__class__.__name__} did not return a Document")
                current = result
            if current == document:
                logger.debug(f"Structural repair converged after {round_number} round(s)")
                return document
            document = current  # type: ignore[assignment]

        diagnostics.record(
            AmbiguousStructure(
                f"Structural repair did not converge after {self.options.max_repair_passes} passes; "
                "keeping the last result",
                document.source_location,
            )
        )
        return document

    def build_xref_table(self, document: Document) -> XrefTable:
        """Resolve every distinct cross-reference anchor in ``document``.

        A target within the same document resolves only when its fragment
        names an anchor the document writes; otherwise the entry is None.

        """
        anchors = self.classifier.document_anchors(document)
        table: XrefTable = {}
        for node in collect_nodes(document, lambda n: isinstance(n, CrossReference)):
            anchor = node.anchor  # type: ignore[attr-defined]
            if anchor in table:
                continue
            try:
                target = self.cross_reference_resolver(anchor)
            except (OSError, ValueError) as e:
                logger.warning(f"Cross-reference resolver failed for '{anchor}': {e}")
                target = None
            if target is not None and target.path is None and target.fragment not in anchors:
                logger.debug(f"Cross-reference '{anchor}' names no anchor in this document")
                target = None
            table[anchor] = target
        return table

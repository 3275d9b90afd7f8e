#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/classifier.py
"""Block/inline classification over the closed node set.

The classifier answers the structural questions the repair passes and the
emitter need to agree on: whether a node is block-level or inline-level,
whether a block needs a list continuation marker, whether an image is
placed inline or on its own line, and which anchor ids a block writes.
The media decision is made once, during canonicalization; the emitter
only reads the node kind that results from it.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from flare2adoc.ast.nodes import (
    Admonition,
    BlockQuote,
    Code,
    CodeBlock,
    Collapsible,
    CrossReference,
    Document,
    Emphasis,
    Heading,
    Image,
    Keyboard,
    LineBreak,
    Link,
    List,
    ListItem,
    MediaBlock,
    Node,
    Paragraph,
    Strong,
    Subscript,
    Superscript,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Underline,
    VariablePlaceholder,
)
from flare2adoc.ast.transforms import collect_nodes
from flare2adoc.constants import SCREENSHOT_PATH_PATTERN, MediaPlacement

_SCREENSHOT_PATH = re.compile(SCREENSHOT_PATH_PATTERN, re.IGNORECASE)
_ANCHOR_ID = re.compile(r"^[A-Za-z_:][\w:.\-]*$")

BLOCK_KINDS: frozenset[type[Node]] = frozenset(
    {
        Document,
        Heading,
        Paragraph,
        CodeBlock,
        BlockQuote,
        List,
        ListItem,
        Admonition,
        Collapsible,
        MediaBlock,
        Table,
        TableRow,
        TableCell,
        ThematicBreak,
    }
)

INLINE_KINDS: frozenset[type[Node]] = frozenset(
    {
        Text,
        Emphasis,
        Strong,
        Underline,
        Superscript,
        Subscript,
        Code,
        Keyboard,
        Link,
        CrossReference,
        VariablePlaceholder,
        Image,
        LineBreak,
    }
)


class BlockClassifier:
    """Lookup-table classifier keyed on node class.

    Parameters
    ----------
    promote_screenshot_images : bool, default False
        Place screenshot images on their own line even when they share a
        line with text.

    """

    def __init__(self, promote_screenshot_images: bool = False) -> None:
        self.promote_screenshot_images = promote_screenshot_images

    def is_block(self, node: Node) -> bool:
        """Return True for block-level node kinds."""
        return type(node) in BLOCK_KINDS

    def is_inline(self, node: Node) -> bool:
        """Return True for inline-level node kinds."""
        return type(node) in INLINE_KINDS

    def requires_continuation(self, previous: Optional[Node], node: Node, in_list_item: bool) -> bool:
        """Decide whether ``node`` needs a ``+`` line to stay attached to its list item.

        Parameters
        ----------
        previous : Node or None
            The block emitted before ``node`` within the same container
        node : Node
            The block about to be emitted
        in_list_item : bool
            Whether the container is a list item

        Returns
        -------
        bool
            True for every block after the first inside a list item

        """
        return in_list_item and previous is not None and self.is_block(node)

    def is_screenshot(self, image: Image) -> bool:
        """Return True when the image path lies in a screenshots folder."""
        return bool(_SCREENSHOT_PATH.search("/" + image.url.replace("\\", "/")))

    def image_placement(self, image: Image, line_siblings: Sequence[Node]) -> MediaPlacement:
        """Decide whether an image is placed inline or as a block.

        Parameters
        ----------
        image : Image
            The image being placed
        line_siblings : sequence of Node
            The other inline nodes on the same source line

        Returns
        -------
        {"inline", "block"}
            ``inline`` when any sibling on the line carries non-whitespace
            content, ``block`` otherwise

        """
        if self.promote_screenshot_images and self.is_screenshot(image):
            return "block"
        for sibling in line_siblings:
            if not _is_whitespace(sibling):
                return "inline"
        return "block"

    def anchor_ids(self, node: Node) -> list[str]:
        """Return the anchor ids written for ``node``.

        Paragraphs, headings and list items carry any number of anchors;
        every other block carries one block anchor, so only its first id is
        written. Ids AsciiDoc cannot reference are left out, as are anchors
        on an empty heading, which is not written at all.

        """
        metadata = getattr(node, "metadata", None) or {}
        ids = [anchor for anchor in metadata.get("anchors", ()) if _ANCHOR_ID.match(anchor)]
        if not ids or not self.is_block(node) or isinstance(node, (Document, TableRow, TableCell)):
            return []
        if isinstance(node, Heading) and not node.content:
            return []
        if isinstance(node, (Paragraph, Heading, ListItem)):
            return ids
        return ids[:1]

    def document_anchors(self, document: Node) -> set[str]:
        """Return every anchor id written for the blocks of ``document``."""
        anchors: set[str] = set()
        for node in collect_nodes(document, lambda candidate: bool(getattr(candidate, "metadata", None))):
            anchors.update(self.anchor_ids(node))
        return anchors


def _is_whitespace(node: Node) -> bool:
    if isinstance(node, Text):
        return not node.content.strip()
    return False

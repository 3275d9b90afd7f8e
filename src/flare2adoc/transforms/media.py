#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/transforms/media.py
"""Block/inline placement of images.

An image that sits alone on a line of a paragraph is a figure, not part of
the sentence around it. This pass lifts such images out into
:class:`~flare2adoc.ast.nodes.MediaBlock` nodes and splits the paragraph
around them. The decision itself belongs to the
:class:`~flare2adoc.classifier.BlockClassifier`.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from flare2adoc.ast.nodes import Image, LineBreak, MediaBlock, Node, Paragraph
from flare2adoc.ast.transforms import NodeTransformer
from flare2adoc.classifier import BlockClassifier
from flare2adoc.transforms.paragraphs import has_content, trim_inline

logger = logging.getLogger(__name__)


def split_lines(content: list[Node]) -> list[list[Node]]:
    """Split an inline run into lines at top-level hard line breaks."""
    lines: list[list[Node]] = [[]]
    for node in content:
        if isinstance(node, LineBreak):
            lines.append([])
        else:
            lines[-1].append(node)
    return lines


class MediaPlacementTransform(NodeTransformer):
    """Lift images standing alone on a line into media blocks.

    Parameters
    ----------
    classifier : BlockClassifier, optional
        Makes the inline/block decision for each image

    """

    def __init__(self, classifier: BlockClassifier | None = None) -> None:
        self.classifier = classifier or BlockClassifier()

    def visit_paragraph(self, node: Paragraph) -> Node | list[Node] | None:  # type: ignore[override]
        """Split a paragraph around its block-placed images."""
        lines = split_lines(node.content)
        if not any(self._block_images(line) for line in lines):
            return self._generic_transform(node)

        result: list[Node] = []
        pending: list[Node] = []
        metadata = {key: value for key, value in node.metadata.items() if key != "anchors"}

        def flush() -> None:
            content = trim_inline(pending)
            if has_content(content):
                result.append(replace(node, content=content, metadata=dict(metadata)))
            pending.clear()

        for index, line in enumerate(lines):
            if index > 0:
                pending.append(LineBreak())
            blocks = self._block_images(line)
            if not blocks:
                pending.extend(line)
                continue
            for child in line:
                if any(child is image for image in blocks):
                    flush()
                    logger.debug("Placing image %s as a block", child.url)  # type: ignore[attr-defined]
                    result.append(MediaBlock(image=child, source_location=child.source_location))  # type: ignore[arg-type]
                else:
                    pending.append(child)
        flush()
        if result and node.metadata.get("anchors"):
            # Only the first piece keeps the anchors.
            result[0].metadata["anchors"] = list(node.metadata["anchors"])
        return result

    def _block_images(self, line: list[Node]) -> list[Image]:
        found: list[Image] = []
        for child in line:
            if not isinstance(child, Image):
                continue
            siblings = [other for other in line if other is not child]
            if self.classifier.image_placement(child, siblings) == "block":
                found.append(child)
        return found

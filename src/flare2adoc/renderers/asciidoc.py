#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/renderers/asciidoc.py
"""AsciiDoc rendering from the canonical AST.

This module provides the :class:`AsciiDocEmitter`, which writes a canonical
document as AsciiDoc text. The emitter is a plain recursive walk driven by an
explicit dispatch table. Two small stacks carry the context the target
syntax depends on:

- a list stack of :class:`ListFrame` entries decides the marker length of
  each item, and
- a block stack of :class:`BlockFrame` entries decides the fence length of
  delimited blocks and whether headings must be written as discrete.

A delimited block (admonition, collapsible, block quote) sets the list stack
aside while its body is written, so list markers inside it start again at
depth one.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import ClassVar, Optional

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
    extract_text,
)
from flare2adoc.ast.visitors import NodeVisitor
from flare2adoc.classifier import BlockClassifier
from flare2adoc.constants import (
    ADMONITION_LABELS,
    BASE_FENCE_LENGTH,
    MAX_HEADING_LEVEL,
    STYLE_DIRECTIVES,
    ListStyle,
)
from flare2adoc.exceptions import ResourceUnavailable, UnknownNodeKind
from flare2adoc.options.asciidoc import AsciiDocEmitterOptions
from flare2adoc.renderers.base import BaseRenderer, InlineContentMixin
from flare2adoc.resolvers import DefaultCrossReferenceResolver, VariableResolver, XrefTarget
from flare2adoc.result import DiagnosticCollector
from flare2adoc.utils.escape import (
    escape_asciidoc,
    escape_attribute_value,
    escape_block_start,
    escape_macro_text,
    escape_title,
)
from flare2adoc.utils.text import attribute_name

logger = logging.getLogger(__name__)

_FENCE_LINE = re.compile(r"^-{4,}\s*$", re.MULTILINE)


def _inline_anchors(anchors: list[str]) -> str:
    return "".join(f"[[{anchor}]]" for anchor in anchors)


@dataclass
class ListFrame:
    """An open list while its items are written.

    Parameters
    ----------
    style : str
        Numbering scheme, fixed when the list is opened
    depth : int
        Number of open lists including this one
    item_index : int
        Index of the item being written

    """

    style: ListStyle
    depth: int
    item_index: int = 0

    @property
    def marker(self) -> str:
        return ("*" if self.style == "bullet" else ".") * self.depth


@dataclass
class BlockFrame:
    """An open delimited block.

    ``title_consumed`` turns True once the block title has been written, so
    a title is never written twice.

    """

    kind: str
    title: Optional[str] = None
    title_consumed: bool = False


class AsciiDocEmitter(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render canonical AST documents to AsciiDoc text.

    Parameters
    ----------
    options : AsciiDocEmitterOptions or None, default = None
        Emission options
    xref_table : dict, optional
        Cross-reference anchors mapped to their targets (None when
        unresolved). Anchors missing from the table are resolved with
        :class:`~flare2adoc.resolvers.DefaultCrossReferenceResolver`.
    variable_resolver : callable, optional
        Maps a variable name to its value
    diagnostics : DiagnosticCollector, optional
        Receives diagnostics and the unresolved cross-reference count

    Examples
    --------
        >>> from flare2adoc.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
        >>> AsciiDocEmitter().render_to_string(doc)
        '== Title\\n'

    """

    _DISPATCH: ClassVar[dict[type, str]] = {
        Document: "visit_document",
        Heading: "visit_heading",
        Paragraph: "visit_paragraph",
        CodeBlock: "visit_code_block",
        BlockQuote: "visit_block_quote",
        List: "visit_list",
        ListItem: "visit_list_item",
        Admonition: "visit_admonition",
        Collapsible: "visit_collapsible",
        MediaBlock: "visit_media_block",
        Table: "visit_table",
        TableRow: "visit_table_row",
        TableCell: "visit_table_cell",
        ThematicBreak: "visit_thematic_break",
        Text: "visit_text",
        Emphasis: "visit_emphasis",
        Strong: "visit_strong",
        Underline: "visit_underline",
        Superscript: "visit_superscript",
        Subscript: "visit_subscript",
        Code: "visit_code",
        Keyboard: "visit_keyboard",
        Link: "visit_link",
        CrossReference: "visit_cross_reference",
        VariablePlaceholder: "visit_variable_placeholder",
        Image: "visit_image",
        LineBreak: "visit_line_break",
    }

    def __init__(
        self,
        options: AsciiDocEmitterOptions | None = None,
        xref_table: dict[str, Optional[XrefTarget]] | None = None,
        variable_resolver: Optional[VariableResolver] = None,
        diagnostics: DiagnosticCollector | None = None,
    ):
        """Initialize the emitter with options and collaborators."""
        BaseRenderer._validate_options_type(options, AsciiDocEmitterOptions, "asciidoc")
        options = options or AsciiDocEmitterOptions()
        BaseRenderer.__init__(self, options)
        self.options: AsciiDocEmitterOptions = options
        self.xref_table: dict[str, Optional[XrefTarget]] = dict(xref_table or {})
        self.variable_resolver = variable_resolver
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.classifier = BlockClassifier()
        self.attributes: dict[str, str] = {}
        self._fallback_xref_resolver = DefaultCrossReferenceResolver()
        self._output: list[str] = []
        self._list_stack: list[ListFrame] = []
        self._block_stack: list[BlockFrame] = []
        self._section_level = 1
        self._anchors: set[str] = set()
        self._written_anchors: set[str] = set()

    # ------------------------------------------------------------------
    # Entry point and dispatch
    # ------------------------------------------------------------------

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to AsciiDoc text.

        Parameters
        ----------
        document : Document
            The canonical document to render

        Returns
        -------
        str
            AsciiDoc text ending in a single newline

        """
        self._output = []
        self._list_stack = []
        self._block_stack = []
        self._section_level = 1
        self.attributes = {}
        self._anchors = self.classifier.document_anchors(document)
        self._written_anchors = set()

        self._emit(document)
        body = "".join(self._output).strip("\n")

        if self.options.include_variable_attributes and self.options.variable_mode == "reference" and self.attributes:
            header = "\n".join(
                f":{name}: {escape_attribute_value(value)}" for name, value in sorted(self.attributes.items())
            )
            body = f"{header}\n\n{body}" if body else header

        return body.rstrip() + "\n"

    def _emit(self, node: Node) -> None:
        """Dispatch ``node`` and write the block anchor of blocks that carry one."""
        method_name = self._DISPATCH.get(type(node))
        if method_name is None:
            self._emit_unknown(node)
            return
        if isinstance(node, (Paragraph, Heading, ListItem)) or not self.classifier.is_block(node):
            getattr(self, method_name)(node)
            return

        start = len(self._output)
        getattr(self, method_name)(node)
        if "".join(self._output[start:]):
            anchors = self._claim_anchors(node)
            if anchors:
                self._output.insert(start, f"[[{anchors[0]}]]\n")

    def _claim_anchors(self, node: Node) -> list[str]:
        """Return the anchor ids ``node`` writes, leaving out ids already written."""
        anchors = [anchor for anchor in self.classifier.anchor_ids(node) if anchor not in self._written_anchors]
        self._written_anchors.update(anchors)
        return anchors

    def _emit_unknown(self, node: Node) -> None:
        self.diagnostics.record(
            UnknownNodeKind(
                f"No AsciiDoc form for {type(node).__name__}; written as plain text",
                node.source_location,
            )
        )
        self._output.append(escape_asciidoc(extract_text(node)))

    def _capture(self, node: Node) -> str:
        saved_output = self._output
        self._output = []
        self._emit(node)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, children: list[Node]) -> str:
        """Render block children separated by blank lines.

        Inline nodes found among blocks are buffered and written as a
        paragraph when the next block starts.

        """
        rendered: list[tuple[Node, str]] = []
        buffer: list[Node] = []

        def flush() -> None:
            if buffer:
                paragraph = Paragraph(content=list(buffer))
                text = self._capture(paragraph)
                if text:
                    rendered.append((paragraph, text))
                buffer.clear()

        for child in children:
            if self.classifier.is_inline(child):
                buffer.append(child)
                continue
            flush()
            text = self._capture(child)
            if text:
                rendered.append((child, text))
        flush()

        parts: list[str] = []
        previous: Optional[Node] = None
        for node, text in rendered:
            if previous is not None:
                # Adjacent lists would otherwise be read as one list.
                parts.append("\n\n//\n\n" if isinstance(node, List) and isinstance(previous, List) else "\n\n")
            parts.append(text)
            previous = node
        return "".join(parts)

    def _fence(self, char: str) -> str:
        return char * (BASE_FENCE_LENGTH + len(self._block_stack))

    def _render_delimited(self, frame: BlockFrame, children: list[Node]) -> tuple[str, str]:
        """Render the body of a delimited block with a fresh list context.

        Returns
        -------
        tuple of str
            The fence for this block and the rendered body

        """
        fence = self._fence("_" if frame.kind == "quote" else "=")
        saved_lists = self._list_stack
        self._list_stack = []
        self._block_stack.append(frame)
        try:
            body = self._render_blocks(children)
        finally:
            self._block_stack.pop()
            self._list_stack = saved_lists
        return fence, body

    def _title_line(self, frame: BlockFrame) -> str:
        if not frame.title or frame.title_consumed:
            return ""
        frame.title_consumed = True
        return f".{escape_title(frame.title)}\n"

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        self._output.append(self._render_blocks(node.children))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node.

        Level 1 maps to ``==`` since ``=`` is the document title, and
        levels past 5 are written at the deepest section level, ``======``.
        Headings inside delimited blocks or list items are written as
        discrete headings, which AsciiDoc allows where sections are not.

        """
        content = self._render_inline_content(node.content).replace(" +\n", " ")
        if not content:
            return
        anchors = self._claim_anchors(node)
        if anchors:
            self._output.append(f"[[{anchors[0]}]]\n")
        if self._block_stack or self._list_stack:
            self._output.append("[discrete]\n")
        else:
            self._section_level = node.level
        marker = "=" * (min(node.level, MAX_HEADING_LEVEL) + 1)
        self._output.append(f"{marker} {_inline_anchors(anchors[1:])}{content}")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node, protecting lines that would start a block."""
        content = self._render_inline_content(node.content)
        if not content.strip():
            return
        lines = [escape_block_start(line) for line in content.split("\n")]
        lines[0] = _inline_anchors(self._claim_anchors(node)) + lines[0]
        self._output.append("\n".join(lines))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as a listing block."""
        if node.language:
            self._output.append(f"[source,{node.language}]\n")
        fence = "-" * BASE_FENCE_LENGTH
        longest = max((len(m.group(0).strip()) for m in _FENCE_LINE.finditer(node.content)), default=0)
        if longest >= len(fence):
            fence = "-" * (longest + 1)
        self._output.append(f"{fence}\n")
        self._output.append(node.content)
        if node.content and not node.content.endswith("\n"):
            self._output.append("\n")
        self._output.append(fence)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node as a quote block."""
        fence, body = self._render_delimited(BlockFrame(kind="quote"), node.children)
        self._output.append(f"{fence}\n{body}\n{fence}" if body else f"{fence}\n{fence}")

    def visit_list(self, node: List) -> None:
        """Render a List node.

        One marker per item; the marker repeats once per open list. Alpha
        and roman lists get a style directive, and lists that do not start
        at one get a ``start`` attribute.

        """
        frame = ListFrame(style=node.effective_style, depth=len(self._list_stack) + 1)
        attributes: list[str] = []
        if frame.style in STYLE_DIRECTIVES:
            attributes.append(STYLE_DIRECTIVES[frame.style])
        if node.ordered and node.start != 1:
            attributes.append(f"start={node.start}")

        self._list_stack.append(frame)
        try:
            items: list[str] = []
            for index, item in enumerate(node.items):
                frame.item_index = index
                if isinstance(item, ListItem):
                    items.append(self._render_list_item(item, frame))
                else:
                    items.append(self._render_list_item(ListItem(children=[item]), frame))
        finally:
            self._list_stack.pop()

        if not items:
            return
        if attributes:
            self._output.append(f"[{','.join(attributes)}]\n")
        self._output.append("\n".join(items))

    def _render_list_item(self, node: ListItem, frame: ListFrame) -> str:
        """Render one item with its marker and continuation markers.

        The first paragraph shares the marker line. Every later block is
        attached with a ``+`` line. A first child that is a nested list
        follows an ``{empty}`` marker line directly; any other first block
        is attached to an ``{empty}`` marker line with ``+``.

        """
        indent = " " * ((frame.depth - 1) * self.options.list_indent)
        marker = f"{indent}{frame.marker}"
        children = list(node.children)
        item_anchors = _inline_anchors(self._claim_anchors(node))

        if not children:
            return f"{marker} {item_anchors}{{empty}}"

        first = children[0]
        parts: list[str] = []
        previous: Optional[Node] = None
        lead = self._capture(first) if isinstance(first, Paragraph) else ""
        if lead:
            parts.append(f"{marker} {item_anchors}{lead}")
            previous = first
            rest = children[1:]
        elif isinstance(first, List):
            parts.append(f"{marker} {item_anchors}{{empty}}")
            nested = self._capture(first)
            if nested:
                parts.append(f"\n{nested}")
            previous = first
            rest = children[1:]
        else:
            parts.append(f"{marker} {item_anchors}{{empty}}")
            rest = children
            previous = Paragraph()

        for child in rest:
            text = self._capture(child)
            if not text:
                continue
            if self.classifier.requires_continuation(previous, child, in_list_item=True):
                # A blank line before the marker attaches the block to this
                # item rather than the last item of a preceding nested list.
                separator = "\n\n+\n" if isinstance(previous, List) else "\n+\n"
            else:
                separator = "\n"
            parts.append(f"{separator}{text}")
            previous = child
        return "".join(parts)

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem found outside a list as a single-item bullet list."""
        self.visit_list(List(ordered=False, items=[node]))

    def visit_admonition(self, node: Admonition) -> None:
        """Render an Admonition node.

        The block form is ``[LABEL]``, the optional ``.Title`` and a
        ``====`` fence. With ``admonition_style="paragraph"`` an untitled
        admonition holding a single paragraph is written as ``LABEL: text``.

        """
        label = ADMONITION_LABELS.get(node.kind, "NOTE")
        if (
            self.options.admonition_style == "paragraph"
            and not node.title
            and len(node.children) == 1
            and isinstance(node.children[0], Paragraph)
        ):
            text = self._render_inline_content(node.children[0].content)
            if text:
                anchors = _inline_anchors(self._claim_anchors(node.children[0]))
                self._output.append(f"{label}: {anchors}{text}")
                return

        frame = BlockFrame(kind=node.kind, title=node.title)
        title = self._title_line(frame)
        fence, body = self._render_delimited(frame, node.children)
        self._output.append(f"[{label}]\n{title}{fence}\n")
        if body:
            self._output.append(f"{body}\n")
        self._output.append(fence)

    def visit_collapsible(self, node: Collapsible) -> None:
        """Render a Collapsible node as a collapsible example block."""
        if not self.options.use_collapsible_blocks:
            level = min(self._section_level + 1, MAX_HEADING_LEVEL)
            heading = f"[discrete]\n{'=' * (level + 1)} {escape_title(node.title)}"
            body = self._render_blocks(node.children)
            self._output.append(f"{heading}\n\n{body}" if body else heading)
            return

        frame = BlockFrame(kind="collapsible", title=node.title)
        title = self._title_line(frame)
        fence, body = self._render_delimited(frame, node.children)
        self._output.append(f"{title}[%collapsible]\n{fence}\n")
        if body:
            self._output.append(f"{body}\n")
        self._output.append(fence)

    def visit_media_block(self, node: MediaBlock) -> None:
        """Render a MediaBlock node as a block image."""
        self._output.append(f"image::{self._image_target(node.image)}[{self._image_attributes(node.image)}]")

    def visit_table(self, node: Table) -> None:
        """Render a Table node."""
        if node.caption:
            self._output.append(f".{escape_title(node.caption)}\n")
        if node.header:
            self._output.append('[options="header"]\n')
        self._output.append("|===\n")
        rows = ([node.header] if node.header else []) + list(node.rows)
        for index, row in enumerate(rows):
            self._output.append(self._capture(row))
            self._output.append("\n")
            if index == 0 and node.header:
                self._output.append("\n")
        self._output.append("|===")

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node as one line of cells."""
        self._output.append(" ".join(self._capture(cell) for cell in node.cells))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node."""
        content = self._render_inline_content(node.content).replace("|", r"\|")
        self._output.append(f"|{content}")

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append("'''")

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node with markup characters escaped."""
        self._output.append(escape_asciidoc(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        content = self._render_inline_content(node.content)
        if content:
            self._output.append(f"_{content}_")

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        content = self._render_inline_content(node.content)
        if content:
            self._output.append(f"*{content}*")

    def visit_underline(self, node: Underline) -> None:
        """Render an Underline node with the underline role."""
        content = self._render_inline_content(node.content)
        if content:
            self._output.append(f"[.underline]#{content}#")

    def visit_superscript(self, node: Superscript) -> None:
        """Render a Superscript node."""
        content = self._render_inline_content(node.content)
        if content:
            self._output.append(f"^{content}^")

    def visit_subscript(self, node: Subscript) -> None:
        """Render a Subscript node."""
        content = self._render_inline_content(node.content)
        if content:
            self._output.append(f"~{content}~")

    def visit_code(self, node: Code) -> None:
        """Render a Code node.

        AsciiDoc uses ``+text+`` for literal monospace. Content that itself
        holds ``+`` is wrapped in an unconstrained passthrough inside
        backticks.

        """
        content = node.content
        if not content:
            return
        if "+" in content:
            self._output.append(f"`++{content}++`")
        else:
            self._output.append(f"+{content}+")

    def visit_keyboard(self, node: Keyboard) -> None:
        """Render a Keyboard node as a kbd macro."""
        self._output.append(f"kbd:[{escape_macro_text(node.content)}]")

    def visit_link(self, node: Link) -> None:
        """Render a Link node."""
        content = self._render_inline_content(node.content)
        url = node.url.replace(" ", "%20")
        if len(node.content) == 1 and isinstance(node.content[0], Text) and node.content[0].content == node.url:
            if re.match(r"^(https?|ftp|irc)://", url):
                self._output.append(url)
                return
        self._output.append(f"link:{url}[{escape_macro_text(content)}]")

    def visit_cross_reference(self, node: CrossReference) -> None:
        """Render a CrossReference node.

        Resolved references become ``<<fragment,text>>`` within the document
        or ``xref:path#fragment[text]`` across documents. An unresolved
        reference is written as its display text and recorded.

        """
        target = self._lookup_xref(node.anchor)
        content = self._render_inline_content(node.content)

        if target is None:
            self.diagnostics.metadata.unresolved_xref_count += 1
            self.diagnostics.record(
                ResourceUnavailable(f"Unresolved cross-reference '{node.anchor}'", node.source_location)
            )
            self._output.append(content or escape_asciidoc(node.anchor))
            return

        if not content and target.text:
            content = escape_asciidoc(target.text)

        if target.path is None:
            fragment = target.fragment or ""
            self._output.append(f"<<{fragment},{content}>>" if content else f"<<{fragment}>>")
            return

        reference = target.path.replace(" ", "%20")
        if target.fragment:
            reference = f"{reference}#{target.fragment}"
        self._output.append(f"xref:{reference}[{escape_macro_text(content)}]")

    def _lookup_xref(self, anchor: str) -> Optional[XrefTarget]:
        if anchor not in self.xref_table:
            try:
                target = self._fallback_xref_resolver(anchor)
            except (OSError, ValueError) as e:
                logger.warning(f"Cross-reference resolver failed for '{anchor}': {e}")
                target = None
            if target is not None and target.path is None and target.fragment not in self._anchors:
                logger.debug(f"No anchor '{target.fragment}' in this document")
                target = None
            self.xref_table[anchor] = target
        return self.xref_table[anchor]

    def visit_variable_placeholder(self, node: VariablePlaceholder) -> None:
        """Render a VariablePlaceholder according to ``variable_mode``."""
        name = attribute_name(node.name)
        value = self._resolve_variable(node.name)

        if self.options.variable_mode == "reference":
            if value is not None:
                self.attributes[name] = value
            elif self.options.include_variable_attributes:
                self.diagnostics.record(
                    ResourceUnavailable(f"Unresolved variable '{node.name}'", node.source_location)
                )
            self._output.append(f"{{{name}}}")
            return

        if value is not None:
            self._output.append(escape_asciidoc(value))
            return
        self.diagnostics.record(ResourceUnavailable(f"Unresolved variable '{node.name}'", node.source_location))
        if node.fallback_text:
            self._output.append(escape_asciidoc(node.fallback_text))
        else:
            self._output.append(f"{{{name}}}")

    def _resolve_variable(self, name: str) -> Optional[str]:
        if self.variable_resolver is None:
            return None
        try:
            return self.variable_resolver(name)
        except (LookupError, ValueError) as e:
            logger.warning(f"Variable resolver failed for '{name}': {e}")
            return None

    def visit_image(self, node: Image) -> None:
        """Render an inline Image node."""
        self._output.append(f"image:{self._image_target(node)}[{self._image_attributes(node)}]")

    @staticmethod
    def _image_target(node: Image) -> str:
        return node.url.replace("\\", "/").replace(" ", "%20")

    @staticmethod
    def _image_attributes(node: Image) -> str:
        alt = escape_macro_text(node.alt_text.strip())
        if any(char in alt for char in ',="'):
            alt = '"' + alt.replace('"', r"\"") + '"'
        attributes = [alt]
        if node.width is not None:
            attributes.append(f"width={node.width}")
        if node.height is not None:
            attributes.append(f"height={node.height}")
        if len(attributes) == 1:
            return alt
        return ",".join(attributes)

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node as a hard break."""
        self._output.append(" +\n")


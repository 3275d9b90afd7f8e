#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/parsers/madcap.py
"""MadCap Flare HTML to AST converter.

This module resolves the source dialect: the irregular, partly proprietary
tag vocabulary of Flare topics (``MadCap:*`` elements, condition tags,
callout classes, variable spans) is turned into the closed node set of
:mod:`flare2adoc.ast.nodes`.

The tree produced here is *raw*: lists may still hold stray paragraphs or
sibling lists between their items. The structural repair passes run by the
:class:`~flare2adoc.canonicalizer.Canonicalizer` fix those afterwards.

"""

from __future__ import annotations

import copy
import logging
import posixpath
import re
from typing import Any, Callable, Optional, Union

from flare2adoc.ast import (
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
    Node,
    Paragraph,
    SourceLocation,
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
from flare2adoc.constants import (
    CALLOUT_KIND_BY_CLASS,
    CALLOUT_LABEL_PATTERN,
    CONDITION_ATTRIBUTES,
    DEFAULT_COLLAPSIBLE_TITLE,
    LEAD_TITLE_MAX_LENGTH,
    MAX_SNIPPET_DEPTH,
    AdmonitionKind,
    ListStyle,
)
from flare2adoc.exceptions import DependencyError, FatalParseError, ResourceUnavailable, UnknownNodeKind
from flare2adoc.options.madcap import MadCapParserOptions
from flare2adoc.result import DiagnosticCollector

logger = logging.getLogger(__name__)

SnippetLookup = Callable[[str], Union[str, Node, None]]

_SELF_CLOSING_MADCAP = re.compile(r"<((?:MadCap|madcap|MADCAP):[A-Za-z]+)([^<>]*?)\s*/>")
_XML_DECLARATION = re.compile(r"<\?xml[^>]*\?>", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_CONDITION_SEPARATOR = re.compile(r"[,;]")
_CALLOUT_CLASS = re.compile(
    r"^(?:mc-)?(note|tip|warning|caution|attention|important|advisory|danger|error|info|example)(?:indiv|inpaper)?$",
    re.IGNORECASE,
)
_LEAD_CLASS = re.compile(r"(indiv|inpaper)$", re.IGNORECASE)
_CALLOUT_LABEL = re.compile(CALLOUT_LABEL_PATTERN, re.IGNORECASE)
_HEADING_CLASS = re.compile(r"^(?:mc-)?heading-?(\d)$", re.IGNORECASE)
_SIZE_VALUE = re.compile(r"^\s*(\d+)(?:\.\d+)?\s*(?:px)?\s*$", re.IGNORECASE)
_STYLE_SIZE = re.compile(r"(?:^|;)\s*(width|height)\s*:\s*(\d+)(?:\.\d+)?\s*px", re.IGNORECASE)
_LIST_STYLE_TYPE = re.compile(r"list-style-type\s*:\s*([a-z\-]+)", re.IGNORECASE)
_LANGUAGE_CLASS = re.compile(r"^(?:language|lang|brush)[-:](\S+)$", re.IGNORECASE)
_TOPIC_LINK = re.compile(r"^[^:?#]+\.(?:htm|html|xhtml)(?:[?#].*)?$", re.IGNORECASE)
_EXTERNAL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

_LIST_STYLE_BY_CSS: dict[str, ListStyle] = {
    "decimal": "numeric",
    "decimal-leading-zero": "numeric",
    "lower-alpha": "loweralpha",
    "lower-latin": "loweralpha",
    "upper-alpha": "upperalpha",
    "upper-latin": "upperalpha",
    "lower-roman": "lowerroman",
    "upper-roman": "upperroman",
    "disc": "bullet",
    "circle": "bullet",
    "square": "bullet",
}

_LIST_STYLE_BY_TYPE: dict[str, ListStyle] = {
    "1": "numeric",
    "a": "loweralpha",
    "A": "upperalpha",
    "i": "lowerroman",
    "I": "upperroman",
}


class MadCapToAstConverter:
    """Convert MadCap Flare topic markup to a raw AST document.

    The converter handles, in one walk over the DOM:

    - conditional filtering (``madcap:conditions`` / ``data-mc-conditions``)
    - snippet inlining (``MadCap:snippetBlock`` / ``MadCap:snippetText``)
    - dropdowns and ``<details>`` regions, turned into Collapsible nodes
    - callout ``div``/``p`` elements, turned into Admonition nodes
    - variables, turned into VariablePlaceholder nodes
    - cross-references to other topics, turned into CrossReference nodes
    - Flare structure classes (``mc-heading-N``, ``madcap:continue``, list styles)

    Parameters
    ----------
    options : MadCapParserOptions or None, default None
        Parser configuration
    snippet_resolver : callable or None, default None
        Maps a snippet ``src`` to markup or a node. Without one, every
        snippet reference becomes a placeholder.
    diagnostics : DiagnosticCollector or None, default None
        Collector for recoverable problems. A private one is created when
        omitted.
    source_path : str or None, default None
        Name of the source document, used in diagnostic locations

    """

    BLOCK_ELEMENTS = frozenset(
        {
            "address",
            "article",
            "aside",
            "blockquote",
            "body",
            "center",
            "dd",
            "details",
            "div",
            "dl",
            "dt",
            "fieldset",
            "figcaption",
            "figure",
            "footer",
            "form",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "header",
            "hr",
            "html",
            "li",
            "main",
            "nav",
            "ol",
            "p",
            "pre",
            "section",
            "summary",
            "table",
            "ul",
            "madcap:dropdown",
            "madcap:dropdownbody",
            "madcap:dropdownhead",
            "madcap:snippetblock",
            "madcap:codesnippet",
        }
    )

    # Elements whose tag is dropped and whose children are kept.
    TRANSPARENT_ELEMENTS = frozenset(
        {
            "abbr",
            "acronym",
            "address",
            "article",
            "aside",
            "big",
            "body",
            "center",
            "cite",
            "del",
            "dfn",
            "fieldset",
            "font",
            "footer",
            "form",
            "header",
            "html",
            "ins",
            "label",
            "main",
            "mark",
            "nav",
            "nobr",
            "q",
            "s",
            "section",
            "small",
            "span",
            "strike",
            "time",
            "madcap:conditionaltext",
            "madcap:expanding",
            "madcap:expandingbody",
            "madcap:expandinghead",
            "madcap:glossaryterm",
            "madcap:popup",
            "madcap:popuphead",
            "madcap:toggler",
        }
    )

    # Elements removed together with their content, without a diagnostic.
    DROPPED_ELEMENTS = frozenset(
        {
            "head",
            "link",
            "meta",
            "noscript",
            "script",
            "style",
            "title",
            "wbr",
            "madcap:concept",
            "madcap:keyword",
            "madcap:popupbody",
            "madcap:pagebreak",
        }
    )

    # Dispatch table mapping element names to processing methods
    _ELEMENT_HANDLERS = {
        # Block elements
        "p": "_process_block_to_ast",
        "div": "_process_block_to_ast",
        "h1": "_process_heading_to_ast",
        "h2": "_process_heading_to_ast",
        "h3": "_process_heading_to_ast",
        "h4": "_process_heading_to_ast",
        "h5": "_process_heading_to_ast",
        "h6": "_process_heading_to_ast",
        "ul": "_process_list_to_ast",
        "ol": "_process_list_to_ast",
        "li": "_process_list_item_to_ast",
        "pre": "_process_code_block_to_ast",
        "madcap:codesnippet": "_process_code_block_to_ast",
        "blockquote": "_process_blockquote_to_ast",
        "figure": "_process_block_container",
        "figcaption": "_process_block_to_ast",
        "details": "_process_details_to_ast",
        "summary": "_process_block_to_ast",
        "table": "_process_table_to_ast",
        "dl": "_process_definition_list_to_ast",
        "dt": "_process_block_to_ast",
        "dd": "_process_block_container",
        "madcap:dropdown": "_process_dropdown_to_ast",
        "madcap:dropdownhead": "_process_block_to_ast",
        "madcap:dropdownbody": "_process_block_container",
        "madcap:snippetblock": "_process_snippet_block_to_ast",
        # Inline elements
        "strong": "_process_strong_to_ast",
        "b": "_process_strong_to_ast",
        "em": "_process_emphasis_to_ast",
        "i": "_process_emphasis_to_ast",
        "u": "_process_underline_to_ast",
        "sup": "_process_superscript_to_ast",
        "sub": "_process_subscript_to_ast",
        "code": "_process_code_to_ast",
        "tt": "_process_code_to_ast",
        "samp": "_process_code_to_ast",
        "var": "_process_emphasis_to_ast",
        "kbd": "_process_keyboard_to_ast",
        "a": "_process_link_to_ast",
        "madcap:xref": "_process_xref_to_ast",
        "img": "_process_image_to_ast",
        "madcap:variable": "_process_variable_to_ast",
        "madcap:snippettext": "_process_snippet_text_to_ast",
        "madcap:dropdownhotspot": "_process_children_to_inline",
    }

    def __init__(
        self,
        options: MadCapParserOptions | None = None,
        snippet_resolver: Optional[SnippetLookup] = None,
        diagnostics: DiagnosticCollector | None = None,
        source_path: str | None = None,
    ):
        self.options = options or MadCapParserOptions()
        self.snippet_resolver = snippet_resolver
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.source_path = source_path
        self._exclude_patterns = [re.compile(pattern, re.IGNORECASE) for pattern in self.options.exclude_conditions]
        self._include_conditions = {name.strip().lower() for name in self.options.include_conditions if name.strip()}
        self._snippet_stack: list[str] = []
        self._list_counters: dict[int, int] = {}
        self._list_depth = 0
        self._consumed: dict[int, Any] = {}
        self._pending_anchors: list[str] = []
        self._current_path = source_path

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self, source: Any) -> Document:
        """Parse markup or an existing BeautifulSoup tree into a raw AST.

        Parameters
        ----------
        source : str or bs4.BeautifulSoup
            Topic markup, or a tree parsed by the caller

        Returns
        -------
        Document
            Raw AST document

        Raises
        ------
        FatalParseError
            If the input is not markup or the parser backend fails
        DependencyError
            If the configured parser backend is not installed

        """
        from bs4 import BeautifulSoup

        if isinstance(source, BeautifulSoup):
            soup = source
        elif isinstance(source, str):
            soup = self._make_soup(self.preprocess_markup(source))
        else:
            raise FatalParseError(
                f"Cannot parse input of type {type(source).__name__}; expected markup text",
                parsing_stage="input",
            )
        return self.convert_to_ast(soup)

    @staticmethod
    def preprocess_markup(markup: str) -> str:
        """Normalize raw markup before it reaches the HTML parser.

        Removes the XML declaration and expands self-closing ``MadCap:*``
        elements, which HTML tree builders would otherwise leave open.

        """
        markup = _XML_DECLARATION.sub("", markup)
        return _SELF_CLOSING_MADCAP.sub(r"<\1\2></\1>", markup)

    def convert_to_ast(self, soup: Any) -> Document:
        """Convert a parsed tree to an AST document.

        Parameters
        ----------
        soup : bs4.BeautifulSoup
            Parsed topic

        Returns
        -------
        Document
            Raw AST document

        """
        from bs4.element import Tag

        # Reset parser state to prevent leakage across parse calls
        self._snippet_stack = []
        self._list_counters = {}
        self._list_depth = 0
        self._consumed = {}
        self._pending_anchors = []
        self._current_path = self.source_path

        metadata: dict[str, Any] = {}
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag) and title_tag.get_text(strip=True):
            metadata["title"] = title_tag.get_text(strip=True)
        if self.source_path:
            metadata["source"] = self.source_path

        body = soup.find("body")
        root = body if isinstance(body, Tag) else soup
        children = self._process_block_container(root)
        if self._pending_anchors:
            if children:
                # Trailing bookmarks stay with the last block.
                self._attach_anchors(children[-1], self._pending_anchors)
            else:
                logger.debug("Dropped anchors with no block to carry them: %s", self._pending_anchors)
            self._pending_anchors = []
        return Document(children=children, metadata=metadata)

    def _make_soup(self, markup: str) -> Any:
        from bs4 import BeautifulSoup
        from bs4.exceptions import FeatureNotFound

        try:
            return BeautifulSoup(markup, self.options.html_parser)
        except FeatureNotFound as e:
            raise DependencyError(
                f"Selected html_parser '{self.options.html_parser}' is not available: {e}",
                missing_packages=[self.options.html_parser],
                original_error=e,
            ) from e
        except Exception as e:
            raise FatalParseError(
                f"Markup could not be parsed: {e}",
                parsing_stage="parse",
                original_error=e,
            ) from e

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _location(self, node: Any) -> SourceLocation:
        return SourceLocation(
            format="snippet" if self._snippet_stack else "madcap",
            line=getattr(node, "sourceline", None),
            column=getattr(node, "sourcepos", None),
            element_id=getattr(node, "name", None),
            path=self._current_path,
        )

    @staticmethod
    def _classes(node: Any) -> list[str]:
        value = node.get("class") or []
        if isinstance(value, str):
            value = value.split()
        return [str(cls) for cls in value]

    def _is_filtered(self, node: Any) -> bool:
        """Return True when the element's condition tags exclude it."""
        tags: list[str] = []
        for attribute in CONDITION_ATTRIBUTES:
            value = node.get(attribute)
            if value:
                tags.extend(tag.strip() for tag in _CONDITION_SEPARATOR.split(str(value)) if tag.strip())
        if not tags:
            return False

        for tag in tags:
            lowered = tag.lower()
            if lowered in self._include_conditions or lowered.split(".")[-1] in self._include_conditions:
                return False
        return any(pattern.search(tag) for tag in tags for pattern in self._exclude_patterns)

    def _is_block_element(self, node: Any) -> bool:
        """Check if an element is block-level.

        Parameters
        ----------
        node : Any
            Element node

        Returns
        -------
        bool
            True if element is block-level, False otherwise

        """
        from bs4.element import Tag

        if not isinstance(node, Tag):
            return False
        if node.name in self.BLOCK_ELEMENTS:
            return True
        if node.name in self.TRANSPARENT_ELEMENTS or node.name not in self._ELEMENT_HANDLERS:
            return self._has_block_children(node)
        return False

    def _has_block_children(self, node: Any) -> bool:
        """Check if an element has any block-level children."""
        from bs4.element import Tag

        for child in node.children:
            if not isinstance(child, Tag) or id(child) in self._consumed or child.name in self.DROPPED_ELEMENTS:
                continue
            if self._is_filtered(child):
                continue
            if self._is_block_element(child):
                return True
        return False

    # ------------------------------------------------------------------
    # Generic dispatch
    # ------------------------------------------------------------------

    def _process_node_to_ast(self, node: Any) -> Node | list[Node] | None:
        """Process a DOM node to AST nodes.

        Parameters
        ----------
        node : Any
            BeautifulSoup node to process

        Returns
        -------
        Node, list of Node, or None
            Resulting AST node(s)

        """
        from bs4.element import NavigableString, PreformattedString, Tag

        if isinstance(node, PreformattedString):
            # Comments, CDATA, processing instructions and doctypes
            return None

        if isinstance(node, NavigableString):
            text = _WHITESPACE.sub(" ", str(node))
            return Text(content=text) if text else None

        if not isinstance(node, Tag) or id(node) in self._consumed:
            return None

        name = node.name
        if name in self.DROPPED_ELEMENTS:
            return None

        if self._is_filtered(node):
            self.diagnostics.metadata.filtered_conditional_count += 1
            logger.debug("Removed conditional element <%s> (%s)", name, self._location(node).describe())
            return None

        return self._with_anchors(node, lambda: self._process_element_to_ast(node))

    def _process_element_to_ast(self, node: Any) -> Node | list[Node] | None:
        name = node.name
        if name == "br":
            return LineBreak()
        if name == "hr":
            return ThematicBreak()

        if self._is_variable_element(node):
            return self._process_variable_to_ast(node)

        handler_name = self._ELEMENT_HANDLERS.get(name)
        if handler_name:
            handler = getattr(self, handler_name)
            return handler(node)

        if name not in self.TRANSPARENT_ELEMENTS:
            self.diagnostics.record(
                UnknownNodeKind(f"Unsupported element <{name}> emitted as plain content", self._location(node))
            )

        if self._has_block_children(node):
            return self._process_block_container(node)
        return self._process_children_to_inline(node)

    # ------------------------------------------------------------------
    # Anchors
    # ------------------------------------------------------------------

    @staticmethod
    def _element_anchors(node: Any) -> list[str]:
        """Return the ids a reference can target on ``node``.

        That is the element's ``id``, and the ``name`` of a bookmark such as
        ``<a name="setup"></a>``.
        """
        anchors: list[str] = []
        for value in (node.get("id"), node.get("name") if node.name == "a" else None):
            anchor = str(value or "").strip()
            if anchor and anchor not in anchors:
                anchors.append(anchor)
        return anchors

    @staticmethod
    def _attach_anchors(result: Node | list[Node] | None, anchors: list[str]) -> bool:
        """Add ``anchors`` to the first block in ``result``.

        Returns
        -------
        bool
            False when ``result`` holds no block to carry them

        """
        candidates = result if isinstance(result, list) else [result] if result is not None else []
        for candidate in candidates:
            if isinstance(candidate, _INLINE_TYPES):
                continue
            existing = candidate.metadata.setdefault("anchors", [])
            for anchor in anchors:
                if anchor not in existing:
                    existing.append(anchor)
            return True
        return False

    def _with_anchors(
        self, node: Any, produce: Callable[[], Node | list[Node] | None]
    ) -> Node | list[Node] | None:
        """Run ``produce`` and attach the element's anchors to what it returns.

        Anchors found inside the element that no nested block claimed are
        attached along with the element's own. When the element yields no
        block, for example an inline bookmark or an empty paragraph, the
        anchors wait for the next block of the enclosing container.

        """
        outer = self._pending_anchors
        self._pending_anchors = []
        try:
            result = produce()
        finally:
            inner = self._pending_anchors
            self._pending_anchors = outer
        anchors = [*self._element_anchors(node), *inner]
        if anchors and not self._attach_anchors(result, anchors):
            for anchor in anchors:
                if anchor not in outer:
                    outer.append(anchor)
        return result

    def _take_pending_anchors(self, block: Node) -> None:
        if self._pending_anchors:
            self._attach_anchors(block, self._pending_anchors)
            self._pending_anchors.clear()

    @staticmethod
    def _is_variable_element(node: Any) -> bool:
        if node.name == "madcap:variable" or node.get("data-mc-variable"):
            return True
        classes = node.get("class") or []
        return node.name == "span" and "mc-variable" in classes

    def _process_block_container(self, node: Any) -> list[Node]:
        """Process a block container element (body, div, li, etc.).

        Extracts and returns direct block children, properly handling mixed
        inline/block content. Inline content found between blocks is wrapped
        in a Paragraph node.

        Parameters
        ----------
        node : Any
            Block container element

        Returns
        -------
        list of Node
            List of block nodes

        """
        children: list[Node] = []
        inline_buffer: list[Node] = []

        def flush() -> None:
            if any(not (isinstance(n, Text) and not n.content.strip()) for n in inline_buffer):
                paragraph = Paragraph(content=list(inline_buffer))
                self._take_pending_anchors(paragraph)
                children.append(paragraph)
            inline_buffer.clear()

        for child in node.children:
            if self._is_block_element(child):
                flush()
                start = len(children)
                block_node = self._process_node_to_ast(child)
                if isinstance(block_node, list):
                    children.extend(self._ensure_blocks(block_node))
                elif block_node is not None:
                    children.extend(self._ensure_blocks([block_node]))
                if len(children) > start:
                    self._take_pending_anchors(children[start])
            else:
                inline_nodes = self._process_node_to_ast(child)
                if isinstance(inline_nodes, list):
                    inline_buffer.extend(inline_nodes)
                elif inline_nodes is not None:
                    inline_buffer.append(inline_nodes)

        flush()
        return children

    @staticmethod
    def _ensure_blocks(nodes: list[Node]) -> list[Node]:
        """Wrap runs of inline nodes returned from a block handler in paragraphs."""
        blocks: list[Node] = []
        run: list[Node] = []
        for node in nodes:
            if isinstance(node, _INLINE_TYPES):
                run.append(node)
                continue
            if run:
                blocks.append(Paragraph(content=run))
                run = []
            blocks.append(node)
        if run:
            blocks.append(Paragraph(content=run))
        return blocks

    def _process_children_to_inline(self, node: Any) -> list[Node]:
        """Process element children to inline nodes only.

        Block elements found in an inline context are flattened: their
        paragraph content is kept and separated by line breaks.

        Parameters
        ----------
        node : Any
            Parent element

        Returns
        -------
        list of Node
            List of inline nodes

        """
        result: list[Node] = []
        for child in node.children:
            ast_nodes = self._process_node_to_ast(child)
            if ast_nodes is None:
                continue
            if not isinstance(ast_nodes, list):
                ast_nodes = [ast_nodes]
            for ast_node in ast_nodes:
                if isinstance(ast_node, _INLINE_TYPES):
                    result.append(ast_node)
                else:
                    flattened = self._blocks_to_inline([ast_node])
                    if flattened:
                        if result:
                            result.append(LineBreak())
                        result.extend(flattened)
        return result

    def _blocks_to_inline(self, blocks: list[Node]) -> list[Node]:
        inline: list[Node] = []
        for block in blocks:
            if isinstance(block, (Paragraph, Heading)):
                content = block.content
            elif isinstance(block, CodeBlock):
                content = [Code(content=block.content)]
            elif isinstance(block, ThematicBreak):
                continue
            else:
                text = extract_text(block).strip()
                content = [Text(content=text)] if text else []
            if not content:
                continue
            if inline:
                inline.append(LineBreak())
            inline.extend(content)
        return inline

    # ------------------------------------------------------------------
    # Block handlers
    # ------------------------------------------------------------------

    def _process_block_to_ast(self, node: Any) -> Node | list[Node] | None:
        """Process a block element (p, div) to a Paragraph or a list of blocks.

        Callout elements become Admonitions and Flare heading classes become
        Headings.

        Parameters
        ----------
        node : Any
            Block element node

        Returns
        -------
        Node, list of Node, or None
            - Admonition or Heading for recognized Flare classes
            - List of block nodes if the element contains blocks
            - Paragraph node if the element only contains inline content
            - None if the element is empty or holds only whitespace

        """
        kind = self._callout_kind(node)
        if kind is not None:
            return self._process_callout_to_ast(node, kind)

        level = self._heading_level_from_class(node)
        if level is not None and not self._has_block_children(node):
            return Heading(level=level, content=self._process_children_to_inline(node))

        if self._has_block_children(node):
            return self._process_block_container(node)

        content = self._process_children_to_inline(node)
        if any(not (isinstance(n, Text) and not n.content.strip()) for n in content):
            return Paragraph(content=content, source_location=self._location(node))
        return None

    def _heading_level_from_class(self, node: Any) -> int | None:
        if node.name != "p":
            return None
        classes = self._classes(node)
        for cls in classes:
            match = _HEADING_CLASS.match(cls)
            if match and 1 <= int(match.group(1)) <= 6:
                return int(match.group(1))
        if "mc-heading" in classes:
            level = node.get("data-mc-heading-level")
            if level and str(level).isdigit() and 1 <= int(level) <= 6:
                return int(level)
            for cls in classes:
                if re.fullmatch(r"h[1-6]", cls):
                    return int(cls[1])
            return 2
        return None

    def _process_heading_to_ast(self, node: Any) -> Heading:
        """Process heading element to Heading node.

        Parameters
        ----------
        node : Any
            Heading element (h1-h6)

        Returns
        -------
        Heading
            Heading node

        """
        level = int(node.name[1])
        return Heading(level=level, content=self._process_children_to_inline(node), source_location=self._location(node))

    def _list_style(self, node: Any) -> ListStyle | None:
        style_attr = node.get("style") or ""
        match = _LIST_STYLE_TYPE.search(str(style_attr))
        if match and match.group(1).lower() in _LIST_STYLE_BY_CSS:
            return _LIST_STYLE_BY_CSS[match.group(1).lower()]

        type_attr = node.get("type")
        if type_attr in _LIST_STYLE_BY_TYPE:
            return _LIST_STYLE_BY_TYPE[type_attr]

        for cls in self._classes(node):
            lowered = cls.lower()
            if lowered in _LIST_STYLE_BY_CSS:
                return _LIST_STYLE_BY_CSS[lowered]
            if "upper-alpha" in lowered or "upperalpha" in lowered:
                return "upperalpha"
            if "upper-roman" in lowered or "upperroman" in lowered:
                return "upperroman"
            if "alpha" in lowered:
                return "loweralpha"
            if "roman" in lowered:
                return "lowerroman"
        return None

    def _process_list_to_ast(self, node: Any) -> List:
        """Process list element to a raw List node.

        Every child is kept in ``items``: ``li`` elements become ListItems,
        while stray blocks, inline runs and sibling lists are kept in place
        for the repair passes.

        Parameters
        ----------
        node : Any
            List element (ul or ol)

        Returns
        -------
        List
            Raw list node

        """
        from bs4.element import Tag

        style = self._list_style(node)
        ordered = node.name == "ol" or (style is not None and style != "bullet")
        if style == "bullet" and ordered:
            style = None
        depth = self._list_depth

        start = 1
        continued = False
        if ordered:
            if str(node.get("madcap:continue", "")).lower() == "true":
                start = self._list_counters.get(depth, 1)
                continued = True
            else:
                raw_start = str(node.get("start", "1")).strip()
                start = int(raw_start) if raw_start.isdigit() else 1

        metadata: dict[str, Any] = {}
        if continued:
            metadata["continued"] = True
        classes = [cls.lower() for cls in self._classes(node)]
        if "sub-list" in classes or "sublist" in classes or "nested" in classes:
            metadata["sub_list"] = True

        items: list[Node] = []
        inline_run: list[Node] = []
        item_count = 0

        def flush() -> None:
            if any(not (isinstance(n, Text) and not n.content.strip()) for n in inline_run):
                paragraph = Paragraph(content=list(inline_run))
                self._take_pending_anchors(paragraph)
                items.append(paragraph)
            inline_run.clear()

        self._list_depth += 1
        try:
            for child in node.children:
                if isinstance(child, Tag) and child.name == "li" and id(child) not in self._consumed:
                    flush()
                    if self._is_filtered(child):
                        self.diagnostics.metadata.filtered_conditional_count += 1
                        continue
                    list_item = self._with_anchors(child, lambda: self._process_list_item_to_ast(child))
                    self._take_pending_anchors(list_item)  # type: ignore[arg-type]
                    items.append(list_item)  # type: ignore[arg-type]
                    item_count += 1
                elif self._is_block_element(child):
                    flush()
                    first_new = len(items)
                    result = self._process_node_to_ast(child)
                    if isinstance(result, list):
                        items.extend(self._ensure_blocks(result))
                    elif result is not None:
                        items.extend(self._ensure_blocks([result]))
                    if len(items) > first_new:
                        self._take_pending_anchors(items[first_new])
                else:
                    result = self._process_node_to_ast(child)
                    if isinstance(result, list):
                        inline_run.extend(result)
                    elif result is not None:
                        inline_run.append(result)
            flush()
        finally:
            self._list_depth -= 1

        if ordered:
            self._list_counters[depth] = start + item_count

        return List(
            ordered=ordered,
            items=items,
            start=start,
            style=style,
            metadata=metadata,
            source_location=self._location(node),
        )

    def _process_list_item_to_ast(self, node: Any) -> ListItem:
        """Process list item element to ListItem node.

        Parameters
        ----------
        node : Any
            List item element (li)

        Returns
        -------
        ListItem
            List item node

        """
        return ListItem(children=self._process_block_container(node), source_location=self._location(node))

    def _process_code_block_to_ast(self, node: Any) -> CodeBlock:
        """Process pre element to CodeBlock node."""
        content = node.get_text()
        if content.startswith("\n"):
            content = content[1:]
        return CodeBlock(content=content.rstrip("\n"), language=self._extract_language(node))

    def _extract_language(self, node: Any) -> Optional[str]:
        candidates = [node]
        code = node.find("code")
        if code is not None:
            candidates.append(code)
        for candidate in candidates:
            for attribute in ("data-language", "data-lang", "lang"):
                if candidate.get(attribute):
                    return str(candidate.get(attribute)).strip().lower()
            for cls in self._classes(candidate):
                match = _LANGUAGE_CLASS.match(cls)
                if match:
                    return match.group(1).lower()
        return None

    def _process_blockquote_to_ast(self, node: Any) -> BlockQuote:
        """Process blockquote element to BlockQuote node."""
        return BlockQuote(children=self._process_block_container(node))

    def _process_definition_list_to_ast(self, node: Any) -> list[Node]:
        """Process a definition list to bold term paragraphs followed by their descriptions."""
        from bs4.element import Tag

        blocks: list[Node] = []
        for child in node.children:
            if not isinstance(child, Tag):
                continue
            result = self._process_node_to_ast(child)
            if result is None:
                continue
            results = result if isinstance(result, list) else [result]
            if child.name == "dt":
                for block in results:
                    if isinstance(block, Paragraph):
                        blocks.append(Paragraph(content=[Strong(content=block.content)]))
                    else:
                        blocks.append(block)
            else:
                blocks.extend(self._ensure_blocks(results))
        return blocks

    def _process_table_to_ast(self, node: Any) -> Table:
        """Process table element to Table node.

        The first row holding ``th`` cells (or the ``thead`` row) becomes
        the header. Footer rows are appended as body rows.

        Parameters
        ----------
        node : Any
            Table element

        Returns
        -------
        Table
            Table node

        """
        header: TableRow | None = None
        rows: list[TableRow] = []
        caption: str | None = None

        caption_tag = node.find("caption")
        if caption_tag is not None:
            caption = _WHITESPACE.sub(" ", caption_tag.get_text()).strip() or None

        for tr in self._table_rows(node):
            if self._is_filtered(tr):
                self.diagnostics.metadata.filtered_conditional_count += 1
                continue
            cells = [
                TableCell(content=self._process_table_cell_content(cell)) for cell in tr.find_all(["td", "th"], recursive=False)
            ]
            in_head = tr.parent is not None and tr.parent.name == "thead"
            if header is None and not rows and (in_head or tr.find("th", recursive=False) is not None):
                header = TableRow(cells=cells, is_header=True)
            else:
                rows.append(TableRow(cells=cells))

        return Table(header=header, rows=rows, caption=caption, source_location=self._location(node))

    @staticmethod
    def _table_rows(node: Any) -> list[Any]:
        rows: list[Any] = []
        footer: list[Any] = []
        for child in node.children:
            name = getattr(child, "name", None)
            if name == "tr":
                rows.append(child)
            elif name in ("thead", "tbody"):
                rows.extend(child.find_all("tr", recursive=False))
            elif name == "tfoot":
                footer.extend(child.find_all("tr", recursive=False))
        return rows + footer

    def _process_table_cell_content(self, cell_node: Any) -> list[Node]:
        """Process a table cell to inline content, flattening any blocks."""
        if self._has_block_children(cell_node):
            return self._blocks_to_inline(self._process_block_container(cell_node))
        return self._process_children_to_inline(cell_node)

    # ------------------------------------------------------------------
    # Flare-specific block handlers
    # ------------------------------------------------------------------

    def _callout_kind(self, node: Any) -> AdmonitionKind | None:
        """Return the admonition kind for a callout element, or None."""
        if node.name not in ("div", "p"):
            return None
        for cls in self._classes(node):
            match = _CALLOUT_CLASS.match(cls)
            if not match:
                continue
            fragment = match.group(1).lower()
            for key, kind in CALLOUT_KIND_BY_CLASS:
                if fragment == key:
                    return kind
        return None

    def _find_lead_node(self, node: Any) -> Any:
        """Find the title-bearing lead element of a callout, if any.

        The lead is the first element in the callout's first paragraph (or
        in the callout itself) when nothing but whitespace precedes it and
        it is either a styled span or a ``b``/``strong``/``span`` holding a
        bare label such as ``Note:``.

        """
        from bs4.element import NavigableString, PreformattedString, Tag

        container = node
        if node.name != "p":
            for child in node.children:
                if isinstance(child, PreformattedString):
                    continue
                if isinstance(child, NavigableString):
                    if str(child).strip():
                        break
                    continue
                if isinstance(child, Tag) and child.name == "p":
                    container = child
                break

        for child in container.children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, NavigableString):
                if str(child).strip():
                    return None
                continue
            if not isinstance(child, Tag):
                return None
            return child if self._is_lead_node(child) else None
        return None

    def _is_lead_node(self, node: Any) -> bool:
        if node.name not in ("span", "b", "strong") or self._is_variable_element(node):
            return False
        text = _WHITESPACE.sub(" ", node.get_text()).strip()
        if not text or len(text) > LEAD_TITLE_MAX_LENGTH:
            return False
        classes = self._classes(node)
        if any(_LEAD_CLASS.search(cls) for cls in classes):
            return True
        if _CALLOUT_LABEL.match(text) or text.endswith((":", "!")):
            return True
        return node.name == "span" and bool(classes)

    def _process_callout_to_ast(self, node: Any, kind: AdmonitionKind) -> Admonition:
        """Convert a callout element to an Admonition, consuming its lead node as the title."""
        title: str | None = None
        lead = self._find_lead_node(node)
        if lead is not None:
            title = _WHITESPACE.sub(" ", lead.get_text()).strip().rstrip(":").strip() or None
            self._consumed[id(lead)] = lead

        if node.name == "p" or not self._has_block_children(node):
            content = self._process_children_to_inline(node)
            children: list[Node] = [Paragraph(content=content)] if content else []
        else:
            children = self._process_block_container(node)

        return Admonition(kind=kind, title=title, children=children, source_location=self._location(node))

    def _process_dropdown_to_ast(self, node: Any) -> Collapsible:
        """Merge a ``MadCap:dropDown`` head and body into a Collapsible node."""
        from bs4.element import Tag

        head = node.find("madcap:dropdownhead")
        title = ""
        if isinstance(head, Tag):
            hotspot = head.find("madcap:dropdownhotspot")
            title_source = hotspot if isinstance(hotspot, Tag) else head
            title = extract_text(self._process_children_to_inline(title_source))
            self._consumed[id(head)] = head

        body = node.find("madcap:dropdownbody")
        if isinstance(body, Tag):
            children = self._process_block_container(body)
        else:
            children = self._process_block_container(node)

        title = _WHITESPACE.sub(" ", title).strip() or DEFAULT_COLLAPSIBLE_TITLE
        return Collapsible(title=title, children=children, source_location=self._location(node))

    def _process_details_to_ast(self, node: Any) -> Collapsible:
        """Convert ``<details>``/``<summary>`` to a Collapsible node."""
        from bs4.element import Tag

        summary = node.find("summary", recursive=False)
        title = ""
        if isinstance(summary, Tag):
            title = extract_text(self._process_children_to_inline(summary))
            self._consumed[id(summary)] = summary
        title = _WHITESPACE.sub(" ", title).strip() or DEFAULT_COLLAPSIBLE_TITLE
        return Collapsible(title=title, children=self._process_block_container(node), source_location=self._location(node))

    # ------------------------------------------------------------------
    # Snippets
    # ------------------------------------------------------------------

    @staticmethod
    def _snippet_key(src: str) -> str:
        key = posixpath.normpath(src.replace("\\", "/").split("#", 1)[0]).lower()
        key = re.sub(r"^(\.\./)+", "", key)
        return re.sub(r"^(content/)?(resources/)?snippets/", "", key)

    def _load_snippet(self, src: str, node: Any) -> list[Node] | None:
        """Resolve a snippet reference to block nodes, or None when unavailable."""
        location = self._location(node)
        if not src:
            self._record_missing_snippet("Snippet reference without a src attribute", location)
            return None

        key = self._snippet_key(src)
        if key in self._snippet_stack or len(self._snippet_stack) >= MAX_SNIPPET_DEPTH:
            chain = " -> ".join([*self._snippet_stack, key])
            self._record_missing_snippet(f"Circular snippet reference: {chain}", location)
            return None

        if self.snippet_resolver is None:
            self._record_missing_snippet(f"Snippet not available: {src}", location)
            return None

        try:
            resolved = self.snippet_resolver(src)
        except (OSError, ValueError) as e:
            self._record_missing_snippet(f"Snippet could not be loaded: {src} ({e})", location)
            return None

        if resolved is None:
            self._record_missing_snippet(f"Snippet not found: {src}", location)
            return None

        if isinstance(resolved, Document):
            return copy.deepcopy(resolved.children)
        if isinstance(resolved, Node):
            return self._ensure_blocks([copy.deepcopy(resolved)])

        from bs4.element import Tag

        soup = self._make_soup(self.preprocess_markup(str(resolved)))
        body = soup.find("body")
        root = body if isinstance(body, Tag) else soup

        previous_path = self._current_path
        self._snippet_stack.append(key)
        self._current_path = src
        try:
            return self._process_block_container(root)
        finally:
            self._snippet_stack.pop()
            self._current_path = previous_path

    def _record_missing_snippet(self, message: str, location: SourceLocation) -> None:
        self.diagnostics.metadata.unresolved_snippet_count += 1
        self.diagnostics.record(ResourceUnavailable(message, location))

    @staticmethod
    def _snippet_placeholder(src: str) -> Paragraph:
        return Paragraph(
            content=[Strong(content=[Text(content="Missing snippet:")]), Text(content=" "), Code(content=src or "(no src)")]
        )

    def _process_snippet_block_to_ast(self, node: Any) -> list[Node]:
        """Replace a ``MadCap:snippetBlock`` with the snippet's blocks or a placeholder."""
        src = str(node.get("src") or "").strip()
        blocks = self._load_snippet(src, node)
        if blocks is not None:
            return blocks
        return [self._snippet_placeholder(src), *self._process_block_container(node)]

    def _process_snippet_text_to_ast(self, node: Any) -> list[Node]:
        """Replace a ``MadCap:snippetText`` with the snippet's inline content or a placeholder."""
        src = str(node.get("src") or "").strip()
        blocks = self._load_snippet(src, node)
        if blocks is not None:
            return self._blocks_to_inline(blocks)
        return [*self._snippet_placeholder(src).content, *self._process_children_to_inline(node)]

    # ------------------------------------------------------------------
    # Inline handlers
    # ------------------------------------------------------------------

    def _process_strong_to_ast(self, node: Any) -> Strong:
        """Process strong/b element to Strong node."""
        return Strong(content=self._process_children_to_inline(node))

    def _process_emphasis_to_ast(self, node: Any) -> Emphasis:
        """Process em/i element to Emphasis node."""
        return Emphasis(content=self._process_children_to_inline(node))

    def _process_underline_to_ast(self, node: Any) -> Underline:
        """Process u element to Underline node."""
        return Underline(content=self._process_children_to_inline(node))

    def _process_superscript_to_ast(self, node: Any) -> Superscript:
        """Process sup element to Superscript node."""
        return Superscript(content=self._process_children_to_inline(node))

    def _process_subscript_to_ast(self, node: Any) -> Subscript:
        """Process sub element to Subscript node."""
        return Subscript(content=self._process_children_to_inline(node))

    def _process_code_to_ast(self, node: Any) -> Code:
        """Process inline code element to Code node."""
        return Code(content=node.get_text())

    def _process_keyboard_to_ast(self, node: Any) -> Keyboard:
        """Process kbd element to Keyboard node."""
        return Keyboard(content=_WHITESPACE.sub(" ", node.get_text()).strip())

    def _process_link_to_ast(self, node: Any) -> Node | list[Node]:
        """Process an anchor element.

        Local topic links and same-page fragments become CrossReferences,
        external URLs become Links, and anchors without a usable target are
        unwrapped.

        """
        href = str(node.get("href") or "").strip()
        content = self._process_children_to_inline(node)
        if not href or href.lower().startswith("javascript:"):
            return content
        if (href.startswith("#") and len(href) > 1) or _TOPIC_LINK.match(href):
            return CrossReference(anchor=href, content=content, source_location=self._location(node))
        if href.startswith("#"):
            return content
        return Link(url=href, content=content)

    def _process_xref_to_ast(self, node: Any) -> Node | list[Node]:
        """Process ``MadCap:xref`` element to CrossReference node."""
        href = str(node.get("href") or "").strip()
        content = self._process_children_to_inline(node)
        if not href or href.lower().startswith("javascript:"):
            return content
        if _EXTERNAL_SCHEME.match(href):
            return Link(url=href, content=content)
        return CrossReference(anchor=href, content=content, source_location=self._location(node))

    def _process_variable_to_ast(self, node: Any) -> VariablePlaceholder | list[Node]:
        """Process a Flare variable reference to a VariablePlaceholder node.

        The name comes from the ``name`` or ``data-mc-variable`` attribute,
        or from the class following ``mc-variable``. Text already rendered
        into the element is kept as the fallback value.

        """
        name = str(node.get("name") or node.get("data-mc-variable") or "").strip()
        if not name:
            classes = self._classes(node)
            remaining = [cls for cls in classes if cls not in ("mc-variable", "variable")]
            dotted = [cls for cls in remaining if "." in cls]
            name = (dotted or remaining or [""])[0]

        text = _WHITESPACE.sub(" ", node.get_text()).strip()
        if not name:
            return [Text(content=text)] if text else []
        fallback = text if text and text != name else None
        return VariablePlaceholder(name=name, fallback_text=fallback, source_location=self._location(node))

    def _process_image_to_ast(self, node: Any) -> Image | None:
        """Process img element to Image node.

        Width and height are taken from the attributes or from pixel values
        in the inline style.

        """
        src = str(node.get("src") or "").strip()
        if not src:
            return None
        sizes: dict[str, int] = {}
        for dimension in ("width", "height"):
            match = _SIZE_VALUE.match(str(node.get(dimension) or ""))
            if match:
                sizes[dimension] = int(match.group(1))
        for dimension, value in _STYLE_SIZE.findall(str(node.get("style") or "")):
            sizes.setdefault(dimension.lower(), int(value))
        metadata: dict[str, Any] = {}
        classes = self._classes(node)
        if classes:
            metadata["class"] = classes
        return Image(
            url=src,
            alt_text=_WHITESPACE.sub(" ", str(node.get("alt") or node.get("title") or "")).strip(),
            width=sizes.get("width"),
            height=sizes.get("height"),
            metadata=metadata,
            source_location=self._location(node),
        )


_INLINE_TYPES = (
    Text,
    Strong,
    Emphasis,
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
)

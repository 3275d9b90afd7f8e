#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/renderers/base.py
"""Base classes for AST renderers.

This module defines the abstract base class the AsciiDoc emitter inherits
from, together with the inline capture mixin used by text renderers.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import TextIOBase
from pathlib import Path
from typing import IO, Union

from flare2adoc.ast import Document
from flare2adoc.ast.nodes import Node
from flare2adoc.exceptions import InvalidOptionsError
from flare2adoc.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the AST to a string.

        Parameters
        ----------
        doc : Document
            AST Document node to render

        Returns
        -------
        str
            Rendered document

        """

    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the AST and write it to a path or stream.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write text output to a file path or an IO stream.

        Text streams receive the string, binary streams its UTF-8 encoding.

        Raises
        ------
        TypeError
            If output type is not supported

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
        elif isinstance(output, TextIOBase):
            output.write(text)
        elif hasattr(output, "write"):
            output.write(text.encode("utf-8"))  # type: ignore[arg-type]
        else:
            raise TypeError(f"Unsupported output type: {type(output).__name__}")


class InlineContentMixin:
    """Mixin providing the inline capture pattern for text renderers.

    The implementing class must have an ``_output`` list and visitor
    methods that append to it.

    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to text.

        The current output is set aside while the nodes are rendered, so the
        result can be embedded in the markup of an enclosing node.

        Parameters
        ----------
        content : list of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content

        """
        saved_output = self._output
        self._output = []

        for node in content:
            self._emit(node)

        result = "".join(self._output)
        self._output = saved_output
        return result

    def _emit(self, node: Node) -> None:
        node.accept(self)

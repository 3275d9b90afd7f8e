#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/resolvers.py
"""Collaborator interfaces for snippets, variables and cross-references.

The converter core never touches the file system or a variable store
directly. It calls three collaborators, each a plain callable:

- a snippet resolver maps a snippet ``src`` to markup (or an AST node),
- a variable resolver maps a variable name to its value,
- a cross-reference resolver maps a reference anchor to an output target.

Any of them may return None, which the core records as an unavailable
resource and recovers from. Default implementations backed by the file
system and a mapping are provided here.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Union

from flare2adoc.constants import DEFAULT_XREF_EXTENSION, SNIPPETS_SUBDIRECTORY

if TYPE_CHECKING:
    from flare2adoc.ast.nodes import Node

logger = logging.getLogger(__name__)

_TOPIC_EXTENSIONS = re.compile(r"\.(htm|html|xhtml)$", re.IGNORECASE)
_EXTERNAL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")


@dataclass(frozen=True)
class XrefTarget:
    """Resolved cross-reference target.

    Parameters
    ----------
    path : str or None
        Output document path (``topic.adoc``), or None for an anchor in the
        current document
    fragment : str or None
        Anchor within the target document
    text : str or None, default None
        Preferred display text, used when the reference has none

    """

    path: Optional[str]
    fragment: Optional[str]
    text: Optional[str] = None


class SnippetResolver(Protocol):
    """Protocol for snippet lookup callables.

    Parameters
    ----------
    path : str
        The ``src`` attribute of the snippet reference

    Returns
    -------
    str, Node or None
        Snippet markup, an already parsed node, or None when unavailable

    """

    def __call__(self, path: str) -> Union[str, "Node", None]: ...


class VariableResolver(Protocol):
    """Protocol for variable lookup callables returning a value or None."""

    def __call__(self, name: str) -> Optional[str]: ...


class CrossReferenceResolver(Protocol):
    """Protocol for cross-reference lookup callables returning a target or None."""

    def __call__(self, anchor: str) -> Optional[XrefTarget]: ...


def find_project_root(start: Path) -> Optional[Path]:
    """Walk up from ``start`` to the first directory holding a ``Content`` folder.

    Parameters
    ----------
    start : Path
        Directory (or file) to start from

    Returns
    -------
    Path or None
        The Flare project root, or None when no ancestor qualifies

    """
    current = start if start.is_dir() else start.parent
    for candidate in (current, *current.parents):
        if (candidate / SNIPPETS_SUBDIRECTORY[0]).is_dir():
            return candidate
    return None


class FileSystemSnippetResolver:
    """Read snippet files relative to a topic directory or the project snippets folder.

    Lookup order for a ``src`` value:

    1. relative to ``base_path``;
    2. under ``<project>/Content/Resources/Snippets/``, after dropping any
       leading ``../`` segments and a leading ``Snippets/`` or
       ``Resources/Snippets/`` prefix. The project root is the nearest
       ancestor of ``base_path`` holding a ``Content`` directory.

    Parameters
    ----------
    base_path : str or Path or None, default None
        Directory of the topic being converted. Defaults to the working
        directory.
    encoding : str, default "utf-8"
        Encoding used to read snippet files

    """

    def __init__(self, base_path: Union[str, Path, None] = None, encoding: str = "utf-8") -> None:
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()
        self.encoding = encoding

    def candidates(self, path: str) -> list[Path]:
        """Return the file paths tried for a snippet ``src``, in order."""
        clean = path.replace("\\", "/").split("#", 1)[0].strip()
        if not clean:
            return []
        found: list[Path] = []
        direct = Path(clean)
        found.append(direct if direct.is_absolute() else self.base_path / direct)

        root = find_project_root(self.base_path)
        if root is not None:
            relative = re.sub(r"^(\.\./)+", "", clean)
            content_dir = root.joinpath(SNIPPETS_SUBDIRECTORY[0])
            if relative.startswith("Resources/Snippets/"):
                found.append(content_dir / relative)
            else:
                relative = re.sub(r"^Snippets/", "", relative)
                found.append(root.joinpath(*SNIPPETS_SUBDIRECTORY) / relative)
        return found

    def __call__(self, path: str) -> Optional[str]:
        """Return the snippet markup, or None when no candidate file can be read."""
        for candidate in self.candidates(path):
            if not candidate.is_file():
                continue
            try:
                return candidate.read_text(encoding=self.encoding, errors="replace")
            except OSError as exc:
                logger.debug("Could not read snippet %s: %s", candidate, exc)
        return None


class MappingVariableResolver:
    """Resolve variables from a mapping of names to values.

    The full name (``General.ProductName``) is tried first, then its last
    dotted part (``ProductName``).

    Parameters
    ----------
    table : Mapping of str to str
        Variable values

    Examples
    --------
        >>> resolve = MappingVariableResolver({"ProductName": "Widget"})
        >>> resolve("General.ProductName")
        'Widget'

    """

    def __init__(self, table: Optional[Mapping[str, str]] = None) -> None:
        self.table = dict(table or {})

    def __call__(self, name: str) -> Optional[str]:
        """Return the variable value or None."""
        if name in self.table:
            return str(self.table[name])
        short = name.split(".")[-1]
        if short in self.table:
            return str(self.table[short])
        return None


class DefaultCrossReferenceResolver:
    """Map Flare topic references to AsciiDoc document references.

    - ``#section`` resolves to an anchor in the current document;
    - ``topic.htm#section`` resolves to ``topic.adoc#section``;
    - empty anchors, ``javascript:`` and other external schemes resolve to
      None.

    When ``base_path`` is given, a reference whose topic file does not exist
    under it resolves to None.

    A same-document target is only a candidate: the canonicalizer and the
    emitter treat it as unresolved unless the document writes an anchor
    with that id.

    Parameters
    ----------
    base_path : str or Path or None, default None
        Directory used to check that referenced topics exist
    target_extension : str, default ".adoc"
        Extension substituted for the topic's ``.htm``/``.html`` extension

    """

    def __init__(self, base_path: Union[str, Path, None] = None, target_extension: str = DEFAULT_XREF_EXTENSION) -> None:
        self.base_path = Path(base_path) if base_path is not None else None
        self.target_extension = target_extension

    def __call__(self, anchor: str) -> Optional[XrefTarget]:
        """Return the target for ``anchor`` or None when it cannot be resolved."""
        anchor = anchor.strip()
        if not anchor or anchor == "#":
            return None
        if _EXTERNAL_SCHEME.match(anchor):
            return None

        topic, _, fragment = anchor.partition("#")
        if not topic:
            return XrefTarget(path=None, fragment=fragment or None)

        topic = topic.replace("\\", "/")
        if self.base_path is not None and not (self.base_path / topic).is_file():
            return None

        normalized = posixpath.normpath(topic)
        target = _TOPIC_EXTENSIONS.sub(self.target_extension, normalized)
        return XrefTarget(path=target, fragment=fragment or None)

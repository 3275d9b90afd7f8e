#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/utils/escape.py
"""AsciiDoc text escaping utilities.

Only characters that would otherwise open unintended markup are escaped.
Punctuation such as ``:``, ``|`` or ``+`` in running text is left alone so
that the output stays readable.

"""

from __future__ import annotations

import re

# Inline macros that would be recognized when followed by a target and "[".
_MACRO_PATTERN = re.compile(r"(?<![\w\\])(link|xref|image|kbd|btn|menu|footnote|pass|mailto|include|https?|ftp|irc):(?=\S*\[)")

# Underscores that can open or close constrained emphasis. Intra-word
# underscores (snake_case) are inert in AsciiDoc.
_BOUNDARY_UNDERSCORE = re.compile(r"(?<![\w\\])_|_(?!\w)")

# Line prefixes that start a block construct when they open a paragraph.
_BLOCK_START_PATTERN = re.compile(r"^(=+\s|\.{1,5}\s|\.\S|-\s|//|\[|\|===|:\w[\w-]*:|<\d+>|____|====|----|\*{1,5}\s|'''|<<<|\+\s*$)")


def escape_asciidoc(text: str) -> str:
    r"""Escape special AsciiDoc characters in text content.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        Escaped text safe for AsciiDoc

    Examples
    --------
        >>> escape_asciidoc("Press *Save* or use `code`")
        'Press \\*Save\\* or use \\`code\\`'
        >>> escape_asciidoc("set max_value to {count}")
        'set max_value to \\{count}'

    """
    if not text:
        return text

    result = text.replace("*", r"\*")
    result = result.replace("`", r"\`")
    result = result.replace("#", r"\#")
    result = result.replace("{", r"\{")
    result = result.replace("<<", r"\<<")
    result = _BOUNDARY_UNDERSCORE.sub(r"\\_", result)
    result = _MACRO_PATTERN.sub(r"\\\1:", result)
    return result


def escape_block_start(line: str) -> str:
    """Protect a paragraph's first line from being read as a block construct.

    Lines starting with a heading, list, delimiter, attribute or block
    attribute marker are prefixed with ``{empty}``.

    Examples
    --------
        >>> escape_block_start(". not a list")
        '{empty}. not a list'

    """
    if _BLOCK_START_PATTERN.match(line):
        return "{empty}" + line
    return line


def escape_macro_text(text: str) -> str:
    r"""Escape text placed inside a macro's ``[...]`` attribute list.

    Examples
    --------
        >>> escape_macro_text("Array[0]")
        'Array[0\\]'

    """
    return text.replace("]", r"\]")


def escape_attribute_value(text: str) -> str:
    """Collapse text to a single line for use as an attribute entry value."""
    return " ".join(text.split())


def escape_title(text: str) -> str:
    """Collapse text to a single line for use as a ``.Title`` block title."""
    return " ".join(text.split())

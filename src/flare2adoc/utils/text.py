#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/utils/text.py
"""Text processing utilities shared by the parser, repair passes and emitter.

Functions
---------
attribute_name : Convert a Flare variable name to an AsciiDoc attribute name
normalize_whitespace : Collapse runs of whitespace to single spaces
ends_with_terminal_punctuation : Test for a sentence-ending character

Examples
--------
    >>> from flare2adoc.utils.text import attribute_name
    >>> attribute_name("General.ProductName")
    'product-name'

"""

from __future__ import annotations

import re

_CAPITAL = re.compile(r"([A-Z])")
_INVALID = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHEN = re.compile(r"--+")
_WHITESPACE = re.compile(r"\s+")


def attribute_name(variable_name: str) -> str:
    """Convert a variable name to a kebab-case AsciiDoc attribute name.

    Only the last dotted part of the name is used, so variables from
    different sets with the same short name share one attribute.

    Parameters
    ----------
    variable_name : str
        Variable name such as ``General.ProductName``

    Returns
    -------
    str
        Attribute name such as ``product-name``. Falls back to ``variable``
        when nothing usable remains.

    Examples
    --------
        >>> attribute_name("Company_Name")
        'company-name'
        >>> attribute_name("Product.Version2")
        'version2'

    """
    short = variable_name.strip().split(".")[-1]
    name = _CAPITAL.sub(r"-\1", short).lower()
    name = _INVALID.sub("-", name)
    name = _REPEATED_HYPHEN.sub("-", name).strip("-")
    return name or "variable"


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs (including newlines) into single spaces."""
    return _WHITESPACE.sub(" ", text)


def ends_with_terminal_punctuation(text: str) -> bool:
    """Return True when ``text`` ends a sentence with ``.``, ``!`` or ``?``."""
    stripped = text.rstrip()
    return bool(stripped) and stripped[-1] in ".!?"


def ends_with_introduction(text: str) -> bool:
    """Return True when ``text`` ends with ``:`` or ``;``."""
    stripped = text.rstrip()
    return bool(stripped) and stripped[-1] in ":;"

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/linter.py
"""Text-level cleanup of emitted AsciiDoc.

The linter runs after emission and fixes spacing that is easier to repair
on the final text than on the tree: trailing whitespace, runs of blank
lines, whitespace just inside emphasis markers and before punctuation,
emphasis pairs glued to a neighbouring word, and doubled periods at the
end of list items.

It works line by line. Delimited literal blocks (listing, literal,
passthrough and comment blocks) and comment lines are copied unchanged.
Within a line, spans whose content must stay literal (inline code and
passthroughs, backtick spans, macro targets, attribute references, URLs
and backslash escapes) are set aside as placeholders before any rule runs
and put back afterwards.

``lint`` is total and idempotent: ``lint(lint(x)) == lint(x)``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from flare2adoc.options.lint import LintOptions

logger = logging.getLogger(__name__)

_PLACEHOLDER = "\x00"

_LITERAL_FENCE = re.compile(r"^(-{4,}|\.{4,}|\+{4,}|/{4,})$")
_COMMENT_LINE = re.compile(r"^//(?!//)")
_SKIPPED_LINE = re.compile(r"^(\[.*\]|:[\w-]+:.*|'''|={4,}|_{4,}|\*{4,}|\|===|\+)$")
_LIST_MARKER = re.compile(r"^(\s*(?:\*+|\.+|-)\s+)")

_PROTECTED_SPANS = re.compile(
    r"""
    `[^`\n]+`                                   # backtick spans
    | pass:[a-z,]*\[[^\]\n]*\]                  # pass macro
    | (?<![\w+])\+[^+\n]+\+(?![\w+])            # constrained passthrough
    | \b[a-z]+:{1,2}[^\s\[]*\[                  # macro name and target
    | <<[^>\n]*>>                               # cross-reference shorthand
    | \[\[[^\]\n]*\]\]                          # inline anchors
    | \b(?:https?|ftp|irc)://[^\s\[\]]+         # bare URLs
    | \{[\w-]+\}                                # attribute references
    | \\.                                       # backslash escapes
    """,
    re.VERBOSE,
)
_PROTECTED_SPANS_OR_INTRAWORD = re.compile(_PROTECTED_SPANS.pattern + r"| (?<=[^\W_])_(?=[^\W_])", re.VERBOSE)

_STAR_PAIR = re.compile(r"\*([^*\n]+?)\*")
_UNDERSCORE_PAIR = re.compile(r"_([^_\n]+?)_")
_SPACE_BEFORE_PUNCTUATION = re.compile(r"(?<=\S)[ \t]+(?=[,.;:!?](?:\s|$))")
_DOUBLED_PERIOD = re.compile(r"(?<=[^\s./])\.\.(?=\s|$)")
_TOKEN = re.compile(r"\S+")

# A rule can expose a new match for another rule, so a line is rewritten
# until it stops changing.
_MAX_LINE_ROUNDS = 16


def _protect(text: str, pattern: re.Pattern[str]) -> tuple[str, list[str]]:
    """Replace protected spans with numbered placeholders."""
    saved: list[str] = []

    def replace_span(match: re.Match[str]) -> str:
        saved.append(match.group(0))
        return f"{_PLACEHOLDER}{len(saved) - 1}{_PLACEHOLDER}"

    return pattern.sub(replace_span, text), saved


def _restore(text: str, saved: list[str]) -> str:
    for index in range(len(saved) - 1, -1, -1):
        text = text.replace(f"{_PLACEHOLDER}{index}{_PLACEHOLDER}", saved[index])
    return text


def _is_word(char: str) -> bool:
    return bool(char) and (char.isalnum() or char == "_")


def _fix_pairs(text: str, pattern: re.Pattern[str], marker: str) -> str:
    """Tighten emphasis pairs and separate them from adjoining words."""

    def replace_pair(match: re.Match[str]) -> str:
        body = match.group(1).strip()
        if not body:
            return match.group(0)
        source = match.string
        before = source[match.start() - 1] if match.start() > 0 else ""
        after = source[match.end()] if match.end() < len(source) else ""
        after_next = source[match.end() + 1] if match.end() + 1 < len(source) else ""

        prefix = " " if _is_word(before) else ""
        suffix = ""
        if _is_word(after):
            suffix = " "
        elif after and after in "*_" and after_next and not after_next.isspace():
            suffix = " "
        return f"{prefix}{marker}{body}{marker}{suffix}"

    return pattern.sub(replace_pair, text)


def _separate_underscores(token: str) -> str:
    """Split an underscore emphasis pair from a word it is glued to.

    ``word_it_`` and ``_it_word`` hold one underscore between two letters
    and one at a word edge. That shape is an emphasis pair touching a
    word, which AsciiDoc would render literally, so a space is put between
    the pair and the word. Identifiers such as ``snake_case`` have no edge
    underscore and are left alone.
    """
    positions = [index for index, char in enumerate(token) if char == "_"]
    inner = [
        index
        for index in positions
        if 0 < index < len(token) - 1 and token[index - 1].isalnum() and token[index + 1].isalnum()
    ]
    edges = [index for index in positions if index not in inner]
    if len(edges) != 1 or not inner:
        return token

    edge = edges[0]
    before = token[edge - 1] if edge > 0 else ""
    after = token[edge + 1] if edge + 1 < len(token) else ""
    if after.isalnum() and not before.isalnum():
        closing = [index for index in inner if index > edge]
        if closing:
            split = closing[0] + 1
            return f"{token[:split]} {token[split:]}"
    elif before.isalnum() and not after.isalnum():
        opening = [index for index in inner if index < edge]
        if opening:
            split = opening[-1]
            return f"{token[:split]} {token[split:]}"
    return token


class AsciiDocLinter:
    """Apply text-level cleanup rules to AsciiDoc.

    Parameters
    ----------
    options : LintOptions, optional
        Which rules to apply

    """

    def __init__(self, options: LintOptions | None = None) -> None:
        self.options = options or LintOptions()

    def lint(self, text: str) -> str:
        """Return ``text`` with the cleanup rules applied.

        Parameters
        ----------
        text : str
            AsciiDoc text

        Returns
        -------
        str
            Cleaned text ending in a single newline

        """
        lines: list[str] = []
        fence: Optional[str] = None
        blank_run = 0

        for raw_line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
            if fence is not None:
                lines.append(raw_line)
                if raw_line.rstrip() == fence:
                    fence = None
                continue

            line = raw_line.rstrip()
            if _LITERAL_FENCE.match(line):
                fence = line
                blank_run = 0
                lines.append(line)
                continue

            if not line:
                blank_run += 1
                if blank_run <= self.options.max_blank_lines:
                    lines.append("")
                continue
            blank_run = 0

            if _COMMENT_LINE.match(line) or _SKIPPED_LINE.match(line):
                lines.append(line)
                continue
            lines.append(self._lint_line(line))

        if fence is not None:
            logger.debug("Unterminated literal block '%s' left unchanged", fence)
        return "\n".join(lines).strip("\n") + "\n"

    def _lint_line(self, line: str) -> str:
        current = line
        for _ in range(_MAX_LINE_ROUNDS):
            updated = self._apply_line_rules(current)
            if updated == current:
                return current
            current = updated
        logger.debug("Line did not settle after %d rounds, left unchanged: %r", _MAX_LINE_ROUNDS, line)
        return line

    def _apply_line_rules(self, line: str) -> str:
        marker_match = _LIST_MARKER.match(line)
        marker = marker_match.group(1) if marker_match else ""
        rest = line[len(marker) :]

        if self.options.fix_emphasis_spacing:
            protected, saved = _protect(rest, _PROTECTED_SPANS)
            protected = _TOKEN.sub(lambda match: _separate_underscores(match.group(0)), protected)
            rest = _restore(protected, saved)

            protected, saved = _protect(rest, _PROTECTED_SPANS_OR_INTRAWORD)
            protected = _fix_pairs(protected, _STAR_PAIR, "*")
            protected = _fix_pairs(protected, _UNDERSCORE_PAIR, "_")
            rest = _restore(protected, saved)

        protected, saved = _protect(rest, _PROTECTED_SPANS)
        protected = _SPACE_BEFORE_PUNCTUATION.sub("", protected)
        if marker and self.options.fix_list_punctuation:
            protected = _DOUBLED_PERIOD.sub(".", protected)
        rest = _restore(protected, saved)

        return f"{marker}{rest}".rstrip()


def lint(text: str, options: LintOptions | None = None) -> str:
    """Apply the post-lint rules to AsciiDoc text.

    Parameters
    ----------
    text : str
        AsciiDoc text
    options : LintOptions, optional
        Which rules to apply

    Returns
    -------
    str
        Cleaned text

    Examples
    --------
        >>> lint("Press *Save *now.\\n\\n\\n\\nDone")
        'Press *Save* now.\\n\\nDone\\n'

    """
    return AsciiDocLinter(options).lint(text)

"""Pygments-backed syntax highlighting for diff content.

``SyntaxHighlighter.highlight`` never raises and always returns exactly one
output line per input line; anything unexpected degrades to plain text.
"""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from collections.abc import Sequence

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

LOG = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
TAB_REPLACEMENT = "    "
HIGHLIGHT_CACHE_MAX = 256

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def sanitize_terminal_text(text: str) -> str:
    """Escape terminal control bytes so diff content cannot move the cursor."""
    if _CONTROL_RE.search(text) is None:
        return text
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", text)


def prepare_line(text: str) -> str:
    return sanitize_terminal_text(text.replace("\t", TAB_REPLACEMENT))


def _normalize_style(style: str | None) -> str:
    if not style:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        LOG.info("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    return style


class SyntaxHighlighter:
    """Tokenize batches of lines by filename with a small LRU cache."""

    def __init__(self, style: str | None = DEFAULT_STYLE, no_color: bool = False) -> None:
        self.no_color = no_color
        self.style = _normalize_style(style)
        self._formatter = None if no_color else Terminal256Formatter(style=self.style)
        self._cache: OrderedDict[tuple[str, tuple[str, ...]], list[str]] = OrderedDict()

    def _lexer_for(self, filename: str):
        try:
            return get_lexer_for_filename(filename, stripnl=False, ensurenl=False)
        except ClassNotFound:
            return None

    def _tokenize(self, filename: str, lines: list[str]) -> list[str]:
        lexer = self._lexer_for(filename)
        if lexer is None or isinstance(lexer, TextLexer):
            return lines
        source = "\n".join(lines) + "\n"
        rendered = pygments_highlight(source, lexer, self._formatter)
        out = rendered.split("\n")
        if out and out[-1] in {"", "\033[39m", "\033[0m", "\033[39;49;00m"}:
            out.pop()
        if len(out) != len(lines):
            LOG.debug("highlight of %s returned %d lines for %d; using plain text", filename, len(out), len(lines))
            return lines
        return out

    def highlight(self, filename: str, lines: Sequence[str]) -> list[str]:
        """Return styled text for each of ``lines`` in order."""
        plain = [prepare_line(line) for line in lines]
        if self.no_color or not plain:
            return plain

        key = (filename, tuple(plain))
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            return list(cached)

        try:
            styled = self._tokenize(filename, plain)
        except Exception:
            LOG.exception("syntax highlighting failed for %s", filename)
            styled = plain

        self._cache[key] = styled
        while len(self._cache) > HIGHLIGHT_CACHE_MAX:
            self._cache.popitem(last=False)
        return list(styled)


__all__ = [
    "DEFAULT_STYLE",
    "SyntaxHighlighter",
    "prepare_line",
    "sanitize_terminal_text",
]

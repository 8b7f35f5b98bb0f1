"""Width-aware helpers for strings that carry ANSI SGR sequences.

Escape sequences occupy no columns; East Asian wide characters take two and
combining marks none. Tabs are expected to be expanded before these run.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
RESET = "\033[0m"
ELLIPSIS = "..."


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` columns, keeping escapes."""
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        width = char_display_width(text[i])
        if col + width > max_cols:
            break
        out.append(text[i])
        col += width
        i += 1
    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip or right-pad a styled line to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    pad = width - display_width(clipped)
    if "\x1b" in clipped:
        clipped += RESET
    return clipped + " " * max(0, pad)


def truncate(text: str, max_len: int) -> str:
    """Shorten plain ``text`` to ``max_len`` columns with a trailing ellipsis."""
    if max_len <= 0:
        return ""
    if display_width(text) <= max_len:
        return text
    if max_len <= len(ELLIPSIS):
        return clip_ansi_line(text, max_len)
    return clip_ansi_line(text, max_len - len(ELLIPSIS)) + ELLIPSIS


__all__ = [
    "ANSI_ESCAPE_RE",
    "ELLIPSIS",
    "RESET",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "fit_ansi_line",
    "strip_ansi",
    "truncate",
]

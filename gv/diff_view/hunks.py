"""Turn hunks into terminal rows for the unified and side-by-side layouts.

Syntax styling arrives as one pre-tokenized string per diff line; when the
tokenizer output does not line up with the hunk, plain text is used.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..ansi import fit_ansi_line, truncate
from ..git.models import DiffLine, FileDiff, Hunk, LineType
from ..ui_theme import UITheme
from .highlight import SyntaxHighlighter, prepare_line
from .layout import DiffLayout, hunk_row_count, pair_line_indices
from .styling import apply_line_background

NUMBER_WIDTH = 4
UNIFIED_GUTTER_WIDTH = 2 * NUMBER_WIDTH + 2
SPLIT_GUTTER_WIDTH = NUMBER_WIDTH + 1
SPLIT_SEPARATOR = " │ "
COLLAPSED_PLACEHOLDER = "(collapsed)"
BINARY_PLACEHOLDER = "Binary file"


def _number(value: int | None) -> str:
    return f"{value:>{NUMBER_WIDTH}}" if value is not None else " " * NUMBER_WIDTH


def _glyph(line: DiffLine, theme: UITheme) -> str:
    if line.type is LineType.ADDED:
        return f"{theme.glyph_added}{line.type.glyph}{theme.reset}"
    if line.type is LineType.REMOVED:
        return f"{theme.glyph_removed}{line.type.glyph}{theme.reset}"
    return line.type.glyph


def _background(line: DiffLine, theme: UITheme) -> str:
    if line.type is LineType.ADDED:
        return theme.added_bg
    if line.type is LineType.REMOVED:
        return theme.removed_bg
    return ""


def _styled_texts(hunk: Hunk, styled: Sequence[str] | None) -> list[str]:
    if styled is not None and len(styled) == len(hunk.lines):
        return list(styled)
    return [prepare_line(line.content) for line in hunk.lines]


def highlight_hunk(highlighter: SyntaxHighlighter, filename: str, hunk: Hunk) -> list[str]:
    """Tokenize every line of ``hunk`` in one highlighter call."""
    return highlighter.highlight(filename, [line.content for line in hunk.lines])


def _unified_row(line: DiffLine, text: str, width: int, theme: UITheme) -> str:
    gutter = f"{theme.line_number}{_number(line.old_number)} {_number(line.new_number)}{theme.reset} "
    body = fit_ansi_line(f"{_glyph(line, theme)} {text}", max(0, width - UNIFIED_GUTTER_WIDTH))
    return gutter + apply_line_background(body, _background(line, theme))


def _split_cell(line: DiffLine | None, text: str, width: int, theme: UITheme, old_side: bool) -> str:
    if line is None:
        return " " * width
    number = line.old_number if old_side else line.new_number
    gutter = f"{theme.line_number}{_number(number)}{theme.reset} "
    body = fit_ansi_line(f"{_glyph(line, theme)} {text}", max(0, width - SPLIT_GUTTER_WIDTH))
    return gutter + apply_line_background(body, _background(line, theme))


def render_hunk(
    hunk: Hunk,
    layout: DiffLayout,
    styled: Sequence[str] | None,
    width: int,
    theme: UITheme,
) -> list[str]:
    """Render ``hunk`` into display rows of exactly ``width`` columns."""
    texts = _styled_texts(hunk, styled)
    if layout is DiffLayout.UNIFIED:
        return [_unified_row(line, texts[i], width, theme) for i, line in enumerate(hunk.lines)]

    left_width = max(0, (width - len(SPLIT_SEPARATOR)) // 2)
    right_width = max(0, width - len(SPLIT_SEPARATOR) - left_width)
    separator = f"{theme.divider}{SPLIT_SEPARATOR}{theme.reset}"
    rows: list[str] = []
    for left, right in pair_line_indices(hunk.lines):
        left_cell = _split_cell(
            hunk.lines[left] if left is not None else None,
            texts[left] if left is not None else "",
            left_width,
            theme,
            old_side=True,
        )
        right_cell = _split_cell(
            hunk.lines[right] if right is not None else None,
            texts[right] if right is not None else "",
            right_width,
            theme,
            old_side=False,
        )
        rows.append(left_cell + separator + right_cell)
    return rows


def render_file_header(diff: FileDiff, width: int, theme: UITheme, selected: bool = False) -> str:
    """One-row file banner: path (or ``old → new``) with change stats."""
    marker = "▶" if diff.collapsed else "▼"
    name = f"{diff.old_path} → {diff.path}" if diff.is_rename else diff.path
    stats = f"{theme.stat_added}+{diff.added}{theme.reset} {theme.stat_removed}-{diff.removed}{theme.reset}"
    stats_width = len(f"+{diff.added} -{diff.removed}")
    name = truncate(name, max(1, width - stats_width - 4))
    style = theme.reverse if selected else ""
    return fit_ansi_line(f"{style}{theme.file_header}{marker} {name}{theme.reset}  {stats}", width)


def render_placeholder(diff: FileDiff, width: int, theme: UITheme) -> str:
    text = BINARY_PLACEHOLDER if diff.is_binary else COLLAPSED_PLACEHOLDER
    return fit_ansi_line(f"  {theme.placeholder}{text}{theme.reset}", width)


def render_file_body(
    diff: FileDiff,
    layout: DiffLayout,
    highlighter: SyntaxHighlighter,
    width: int,
    theme: UITheme,
    first_row: int = 0,
    row_count: int | None = None,
) -> list[str]:
    """Render body rows ``[first_row, first_row + row_count)`` of ``diff``.

    Hunks entirely outside the window are skipped without tokenizing them.
    """
    if diff.collapsed or diff.is_binary:
        rows = [render_placeholder(diff, width, theme)]
        end = None if row_count is None else first_row + row_count
        return rows[first_row:end]

    out: list[str] = []
    start = 0
    window_end = None if row_count is None else first_row + row_count
    for hunk in diff.hunks:
        count = hunk_row_count(hunk, layout)
        end = start + count
        if end > first_row and (window_end is None or start < window_end):
            rendered = render_hunk(hunk, layout, highlight_hunk(highlighter, diff.path, hunk), width, theme)
            lo = max(0, first_row - start)
            hi = count if window_end is None else min(count, window_end - start)
            out.extend(rendered[lo:hi])
        if window_end is not None and end >= window_end:
            break
        start = end
    return out


__all__ = [
    "BINARY_PLACEHOLDER",
    "COLLAPSED_PLACEHOLDER",
    "highlight_hunk",
    "render_file_body",
    "render_file_header",
    "render_hunk",
    "render_placeholder",
]

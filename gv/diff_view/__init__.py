"""Diff presentation: layouts, syntax highlighting, and row rendering."""

from __future__ import annotations

from .highlight import SyntaxHighlighter
from .hunks import render_file_body, render_file_header, render_hunk
from .layout import DiffLayout, hunk_row_count, pair_hunk_lines, pair_line_indices

__all__ = [
    "DiffLayout",
    "SyntaxHighlighter",
    "hunk_row_count",
    "pair_hunk_lines",
    "pair_line_indices",
    "render_file_body",
    "render_file_header",
    "render_hunk",
]

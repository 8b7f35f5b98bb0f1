"""Non-interactive rendering used when stdout is not a terminal."""

from __future__ import annotations

from collections.abc import Sequence

from ..diff_view.highlight import SyntaxHighlighter
from ..diff_view.hunks import render_file_body, render_file_header
from ..diff_view.layout import DiffLayout
from ..git.models import FileDiff
from ..ui_theme import UITheme


def render_static_diff(
    diffs: Sequence[FileDiff],
    layout: DiffLayout,
    highlighter: SyntaxHighlighter,
    theme: UITheme,
    width: int,
) -> str:
    """Render every file (header plus body) as newline-joined text."""
    out: list[str] = []
    for diff in diffs:
        out.append(render_file_header(diff, width, theme).rstrip())
        out.extend(row.rstrip() for row in render_file_body(diff, layout, highlighter, width, theme))
    return "\n".join(out) + ("\n" if out else "")

"""Sidebar rows: title, separator, and the flattened changed-file tree."""

from __future__ import annotations

from ..ansi import display_width, fit_ansi_line, truncate
from ..runtime.state import SIDEBAR_WIDTH, AppState, FocusArea
from ..tree_model import FolderNode, build_file_tree, flatten_tree, hidden_count
from ..ui_theme import UITheme

INDENT = "  "


def sidebar_title(state: AppState) -> str:
    if state.view.show_hidden:
        return "Files"
    hidden = hidden_count(state.diffs, state.hidden_files)
    return f"Files ({hidden} hidden)" if hidden else "Files"


def _stats(added: int, removed: int, theme: UITheme) -> tuple[str, int]:
    plain = f"+{added} -{removed}"
    styled = f"{theme.stat_added}+{added}{theme.reset} {theme.stat_removed}-{removed}{theme.reset}"
    return styled, len(plain)


def render_sidebar(state: AppState, theme: UITheme, height: int, width: int = SIDEBAR_WIDTH) -> list[str]:
    """Return exactly ``height`` rows of ``width`` columns."""
    view = state.view
    out = [
        fit_ansi_line(f"{theme.sidebar_title}{sidebar_title(state)}{theme.reset}", width),
        f"{theme.divider}{'─' * width}{theme.reset}",
    ]
    rows = flatten_tree(build_file_tree(state.visible_diffs(), view.expanded_folders))
    tree_height = max(0, height - len(out))
    sidebar_focused = view.focus is FocusArea.SIDEBAR

    for row in rows[view.sidebar_start: view.sidebar_start + tree_height]:
        node = row.node
        indent = INDENT * row.depth
        stats, stats_width = _stats(node.added, node.removed, theme)
        name_width = max(1, width - stats_width - 1)
        if isinstance(node, FolderNode):
            indicator = "▼" if node.expanded else "▶"
            label = truncate(f"{indent}{indicator} {node.name}/", name_width)
            label = f"{theme.folder}{label}{theme.reset}"
        else:
            is_cursor = node.file_index == view.file_cursor
            marker = ">" if is_cursor else " "
            label = truncate(f"{indent}{marker} {node.name}", name_width)
            if is_cursor:
                style = theme.cursor + (theme.reverse if sidebar_focused else "")
                label = f"{style}{label}{theme.reset}"
            else:
                label = f"{theme.file}{label}{theme.reset}"
        gap = max(1, width - display_width(label) - stats_width)
        out.append(fit_ansi_line(f"{label}{' ' * gap}{stats}", width))

    while len(out) < height:
        out.append(" " * width)
    return out[:height]

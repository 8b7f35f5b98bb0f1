"""Keybinding help modal."""

from __future__ import annotations

from ..ui_theme import UITheme
from .popups import draw_modal

HELP_ENTRIES: tuple[tuple[str, str], ...] = (
    ("Tab", "Switch focus between sidebar and content"),
    ("j/k", "Move cursor or scroll (accepts count, e.g. 5j)"),
    ("ctrl+d/u", "Scroll half a page down/up"),
    ("g/G", "Go to top/bottom (10G: file or line 10)"),
    ("n/N", "Next/previous file"),
    ("space", "Collapse/expand file under cursor (sidebar)"),
    ("enter", "Jump to file (sidebar) or collapse current file"),
    ("z", "Collapse/expand all files"),
    ("h", "Toggle hidden files (lock files, etc.)"),
    ("x", "Cycle context lines (3, 1, 0)"),
    ("u", "Toggle unified/side-by-side layout"),
    ("c", "Filter commits"),
    ("w", "Switch worktree"),
    ("W", "List worktrees"),
    ("?", "Toggle this help"),
    ("q", "Quit"),
)


def help_lines(theme: UITheme) -> list[str]:
    key_width = max(len(key) for key, _ in HELP_ENTRIES)
    lines = [f"{theme.help_heading}Keys{theme.reset}"]
    for key, description in HELP_ENTRIES:
        lines.append(f"  {theme.help_key}{key:<{key_width}}{theme.reset}  {description}")
    return lines


def render_help_modal(width: int, height: int, theme: UITheme) -> str:
    footer = f"{theme.popup_dim}Press any key to close{theme.reset}"
    return draw_modal("gv help", help_lines(theme), width, height, theme, footer)

"""Modal popups drawn over the diff frame.

Each popup is returned as a string of absolute cursor moves so it can be
appended after the base frame without re-flowing it.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..ansi import clip_ansi_line, display_width, fit_ansi_line, truncate
from ..git.models import RealCommit
from ..runtime.state import AppState
from ..ui_theme import UITheme

MAX_MODAL_WIDTH = 90
MIN_MODAL_WIDTH = 30
SHORT_HASH_WIDTH = 7


def draw_modal(
    title: str,
    lines: Sequence[str],
    width: int,
    height: int,
    theme: UITheme,
    footer: str = "",
) -> str:
    """Draw a rounded frame centered on a ``width`` x ``height`` screen."""
    body = list(lines)
    if footer:
        body += ["", footer]
    content_width = max((display_width(line) for line in body), default=0)
    modal_w = min(MAX_MODAL_WIDTH, max(MIN_MODAL_WIDTH, content_width + 4, len(title) + 6), max(4, width - 2))
    modal_h = min(len(body) + 2, max(3, height - 2))
    inner_w = modal_w - 2
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)

    out: list[str] = []
    border = theme.popup_border
    out.append(f"\033[{y + 1};{x + 1}H{border}╭{'─' * inner_w}╮{theme.reset}")
    for i in range(modal_h - 2):
        text = body[i] if i < len(body) else ""
        cell = fit_ansi_line(" " + clip_ansi_line(text, inner_w - 2), inner_w)
        out.append(f"\033[{y + 2 + i};{x + 1}H{border}│{theme.reset}{cell}{border}│{theme.reset}")
    out.append(f"\033[{y + modal_h};{x + 1}H{border}╰{'─' * inner_w}╯{theme.reset}")

    label = f" {title} "
    title_x = x + max(1, (modal_w - len(label)) // 2)
    out.append(f"\033[{y + 1};{title_x + 1}H{theme.popup_title}{label}{theme.reset}")
    return "".join(out)


def visible_window(count: int, cursor: int, rows: int) -> range:
    """Indices of a ``rows``-tall list window that keeps ``cursor`` visible."""
    rows = max(1, rows)
    start = max(0, min(cursor - rows // 2, count - rows))
    return range(start, min(count, start + rows))


def _list_rows(state: AppState, reserved: int) -> int:
    return max(1, state.view.height - 2 - 2 - reserved)


def commit_filter_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    lines: list[str] = []
    cursor = state.view.popup_cursor
    for index in visible_window(len(state.commits), cursor, rows):
        entry = state.commits[index]
        marker = ">" if index == cursor else " "
        check = "[x]" if entry.selected else "[ ]"
        if isinstance(entry, RealCommit):
            short_hash = entry.short_hash
            author = f" {theme.popup_dim}{entry.author}{theme.reset}" if entry.author else ""
        else:
            short_hash = " " * SHORT_HASH_WIDTH
            author = ""
        text = f"{marker} {check} {short_hash} {truncate(entry.subject, 60)}"
        if index == cursor:
            text = f"{theme.popup_selected}{text}{theme.reset}"
        lines.append(text + author)
    if not lines:
        lines.append(f"{theme.popup_dim}No commits{theme.reset}")
    return lines


def render_commit_filter(state: AppState, theme: UITheme) -> str:
    view = state.view
    selected = sum(1 for entry in state.commits if entry.selected)
    footer = (
        f"{theme.popup_dim}Showing: {selected} of {len(state.commits)}   "
        f"space toggle  a all  n none  enter close{theme.reset}"
    )
    lines = commit_filter_lines(state, theme, _list_rows(state, 2))
    return draw_modal("Filter Commits", lines, view.width, view.height, theme, footer)


def worktree_switcher_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    lines: list[str] = []
    cursor = state.view.popup_cursor
    for index in visible_window(len(state.worktrees), cursor, rows):
        worktree = state.worktrees[index]
        marker = ">" if index == cursor else " "
        current = f" {theme.current_marker}(current){theme.reset}" if index == state.current_worktree else ""
        label = f"{marker} {worktree.branch or '(none)'}"
        if index == cursor:
            label = f"{theme.popup_selected}{label}{theme.reset}"
        lines.append(f"{label}  {theme.popup_dim}{worktree.path}{theme.reset}{current}")
    return lines


def render_worktree_switcher(state: AppState, theme: UITheme) -> str:
    view = state.view
    footer = f"{theme.popup_dim}j/k move  enter switch  esc close{theme.reset}"
    lines = worktree_switcher_lines(state, theme, _list_rows(state, 2))
    return draw_modal("Switch Worktree", lines, view.width, view.height, theme, footer)


def worktree_list_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    branch_width = max((len(worktree.branch) for worktree in state.worktrees), default=0)
    lines: list[str] = []
    cursor = state.view.popup_cursor
    for index in visible_window(len(state.worktrees), cursor, rows):
        worktree = state.worktrees[index]
        marker = ">" if index == cursor else " "
        head = worktree.head[:SHORT_HASH_WIDTH] or " " * SHORT_HASH_WIDTH
        flags = " bare" if worktree.is_bare else ""
        if index == state.current_worktree:
            flags += " (current)"
        text = f"{marker} {worktree.branch:<{branch_width}}  {head}  {worktree.path}{flags}"
        if index == cursor:
            text = f"{theme.popup_selected}{text}{theme.reset}"
        lines.append(text)
    return lines


def render_worktree_list(state: AppState, theme: UITheme) -> str:
    view = state.view
    footer = f"{theme.popup_dim}{len(state.worktrees)} worktree(s)   enter switch  esc close{theme.reset}"
    lines = worktree_list_lines(state, theme, _list_rows(state, 2))
    return draw_modal("Worktrees", lines, view.width, view.height, theme, footer)

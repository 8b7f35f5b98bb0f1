"""Full-screen frame composition: header, sidebar, content pane, footer.

``build_frame`` is side-effect free and returns the escape-sequence string
for one frame; ``render_frame`` writes it to the terminal.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..ansi import fit_ansi_line
from ..diff_view.highlight import SyntaxHighlighter
from ..diff_view.hunks import render_file_body, render_file_header
from ..diff_view.layout import DiffLayout
from ..git.commits import DiffTarget, diff_target_for_selection, selected_count
from ..git.diff_parser import total_stats
from ..runtime.state import SPINNER_FRAMES, AppState, FocusArea, ViewMode
from ..tree_model import get_display_names
from ..ui_theme import UITheme
from ..viewport import file_at_scroll, file_line_cost, file_offsets
from .help import render_help_modal
from .popups import render_commit_filter, render_worktree_list, render_worktree_switcher
from .sidebar import render_sidebar


@dataclass(frozen=True)
class RenderContext:
    """Per-session rendering collaborators."""

    theme: UITheme
    highlighter: SyntaxHighlighter


def commit_summary(state: AppState) -> str:
    chosen, total, uncommitted = selected_count(state.commits)
    if total == 0:
        return "[uncommitted]" if uncommitted else "[no commits]"
    noun = "commit" if total == 1 else "commits"
    count = f"{total} {noun}" if chosen == total else f"{chosen}/{total} {noun}"
    return f"[{count} + uncommitted]" if uncommitted else f"[{count}]"


def render_header(state: AppState, theme: UITheme, width: int) -> str:
    parts = [
        f"{theme.header}gv:{theme.reset} {theme.header_branch}{state.branch or '?'}{theme.reset}"
        f" {theme.dim}→{theme.reset} {theme.header}{state.base_branch}{theme.reset}",
    ]
    if state.loading:
        parts.append(f"{SPINNER_FRAMES[state.spinner_frame % len(SPINNER_FRAMES)]} loading")
    else:
        added, removed = total_stats(state.diffs)
        parts.append(commit_summary(state))
        parts.append(f"{theme.stat_added}+{added}{theme.reset} {theme.stat_removed}-{removed}{theme.reset}")
    visible = state.visible_diffs()
    index = file_at_scroll(visible, state.view.layout, state.view.scroll_offset)
    if index is not None and not state.loading:
        diff = visible[index]
        name = get_display_names(d.path for d in visible).get(diff.path, diff.path)
        parts.append(
            f"{theme.divider}│{theme.reset} {name} "
            f"{theme.stat_added}+{diff.added}{theme.reset} {theme.stat_removed}-{diff.removed}{theme.reset}"
        )
    return fit_ansi_line("  ".join(parts), width)


def render_footer(state: AppState, theme: UITheme, width: int) -> str:
    view = state.view
    focus = "[Sidebar]" if view.focus is FocusArea.SIDEBAR else "[Content]"
    layout = "unified" if view.layout is DiffLayout.SIDE_BY_SIDE else "split"
    hints = [
        ("Tab", "switch pane"),
        ("j/k", "scroll"),
        ("c", "commits"),
        ("w", "worktrees"),
        ("u", layout),
        ("x", f"context ({view.context_lines})"),
        ("?", "help"),
        ("q", "quit"),
    ]
    text = "  ".join(f"{theme.footer_key}{key}{theme.reset}{theme.footer}: {label}{theme.reset}" for key, label in hints)
    prefix = f"{theme.footer}{focus}{theme.reset} "
    if view.count_buffer:
        prefix += f"{theme.footer_key}{view.count_buffer}{theme.reset} "
    return fit_ansi_line(prefix + text, width)


def empty_state_message(state: AppState) -> list[str]:
    """Explanatory text shown when no file is visible."""
    if state.loading:
        return ["Loading..."]
    if state.error:
        return [f"Error: {state.error}"]
    if state.diffs:
        return [f"All {len(state.diffs)} files hidden (press 'h' to show)"]
    if not state.commits:
        return [f"No changes (branch is same as {state.base_branch})"]
    if diff_target_for_selection(state.commits) is DiffTarget.NONE:
        return ["Nothing selected", "(press 'c' to choose commits)"]
    chosen = sum(1 for entry in state.commits if entry.selected)
    return [f"{chosen} commit(s) selected, but no file changes", "(press 'c' to view commits)"]


def render_content(state: AppState, ctx: RenderContext, width: int, height: int) -> list[str]:
    """Return ``height`` content rows starting at the current scroll offset."""
    theme = ctx.theme
    view = state.view
    out: list[str] = []
    if state.shows_error_banner():
        out.append(fit_ansi_line(f"{theme.error}Error: {state.error}{theme.reset}", width))

    visible = state.visible_diffs()
    if not visible:
        for message in empty_state_message(state):
            out.append(fit_ansi_line(f"  {theme.placeholder}{message}{theme.reset}", width))
    else:
        rows_wanted = height - len(out)
        cursor = view.scroll_offset
        window_end = view.scroll_offset + rows_wanted
        offsets = file_offsets(visible, view.layout)
        for index, diff in enumerate(visible):
            start = offsets[index]
            end = start + file_line_cost(diff, view.layout)
            if end <= cursor:
                continue
            if start >= window_end:
                break
            if start >= cursor:
                out.append(render_file_header(diff, width, theme, selected=index == view.file_cursor))
            body_first = max(0, cursor - start - 1)
            body_rows = window_end - max(cursor, start + 1)
            if body_rows > 0:
                out.extend(
                    render_file_body(
                        diff,
                        view.layout,
                        ctx.highlighter,
                        width,
                        theme,
                        first_row=body_first,
                        row_count=body_rows,
                    )
                )
            cursor = end

    out = out[:height]
    while len(out) < height:
        out.append(" " * width)
    return out


def render_overlay(state: AppState, theme: UITheme) -> str:
    view = state.view
    if view.view_mode is ViewMode.COMMIT_FILTER:
        return render_commit_filter(state, theme)
    if view.view_mode is ViewMode.WORKTREE_SWITCHER:
        return render_worktree_switcher(state, theme)
    if view.view_mode is ViewMode.WORKTREE_LIST:
        return render_worktree_list(state, theme)
    if view.view_mode is ViewMode.HELP:
        return render_help_modal(view.width, view.height, theme)
    return ""


def build_frame_rows(state: AppState, ctx: RenderContext) -> list[str]:
    """Compose the base frame (without popups) as ``height`` rows."""
    theme = ctx.theme
    width = state.view.width
    body_height = state.body_height()
    sidebar = render_sidebar(state, theme, body_height)
    content = render_content(state, ctx, state.content_width(), body_height)
    divider = f"{theme.divider}│{theme.reset}"

    rows = [render_header(state, theme, width)]
    for left, right in zip(sidebar, content):
        rows.append(fit_ansi_line(left + divider + right, width))
    rows.append(render_footer(state, theme, width))
    return rows[: state.view.height]


def build_frame(state: AppState, ctx: RenderContext) -> str:
    rows = build_frame_rows(state, ctx)
    return "\033[H\033[J" + "\r\n".join(rows) + "\033[0m" + render_overlay(state, ctx.theme)


def render_frame(state: AppState, ctx: RenderContext) -> None:
    """Write one frame to stdout."""
    os.write(sys.stdout.fileno(), build_frame(state, ctx).encode("utf-8", errors="replace"))


__all__ = [
    "RenderContext",
    "build_frame",
    "build_frame_rows",
    "commit_summary",
    "empty_state_message",
    "render_content",
    "render_frame",
    "render_footer",
    "render_header",
]

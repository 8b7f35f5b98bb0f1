"""Interactive state machine: key and mouse dispatch plus load orchestration.

The machine is the single owner of ``AppState``. Every input event and every
completed fetch passes through it; the renderer only reads the state.
Global keys (quit, help) are handled first, then the active view mode's key
table. While a fetch is in flight everything except global keys, ticks, and
resizes is ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .. import viewport
from ..git.commits import CommitSelection, apply_selection, set_all_selected, snapshot_selection
from ..input import ENTER_KEYS, KeyComboBinding, KeyComboRegistry, MouseAction, MouseEvent, is_mouse_key, parse_mouse_key
from ..tree_model import FileNode, FolderNode, build_file_tree, flatten_tree, row_index_for_file
from .loader import FetchResult
from .state import (
    HEADER_ROWS,
    SIDEBAR_TITLE_ROWS,
    SIDEBAR_WIDTH,
    SPINNER_FRAMES,
    AppState,
    FocusArea,
    ViewMode,
    next_context_lines,
)

LOG = logging.getLogger(__name__)

QUIT_KEYS = ("q", "CTRL_C")
HELP_KEY = "?"
WHEEL_SCROLL_LINES = 3


class FetchSubmitter(Protocol):
    def submit(
        self,
        repo_path: Path,
        base_branch: str,
        context_lines: int,
        selection: CommitSelection | None = None,
    ) -> int: ...


class AppStateMachine:
    """Apply keys, mouse events, ticks, and fetch results to ``AppState``."""

    def __init__(self, state: AppState, loader: FetchSubmitter) -> None:
        self.state = state
        self.loader = loader
        self.should_quit = False
        # Selection shown before the last commit-filter edit; restored if that fetch fails.
        self._selection_before_edit: CommitSelection | None = None
        self._registries: dict[ViewMode, KeyComboRegistry] = {
            ViewMode.DIFF: self._diff_bindings(),
            ViewMode.COMMIT_FILTER: self._commit_filter_bindings(),
            ViewMode.WORKTREE_SWITCHER: self._worktree_bindings(),
            ViewMode.WORKTREE_LIST: self._worktree_bindings(),
        }

    # -- loading -----------------------------------------------------------

    def request_reload(self, selection: CommitSelection | None = None) -> int:
        """Enter the loading state and issue exactly one fetch."""
        state = self.state
        self._selection_before_edit = None
        state.loading = True
        state.latest_request_id = self.loader.submit(
            state.repo_path,
            state.base_branch,
            state.view.context_lines,
            selection,
        )
        state.dirty = True
        return state.latest_request_id

    def _reload_keeping_selection(self) -> None:
        self.request_reload(snapshot_selection(self.state.commits))

    def handle_result(self, result: FetchResult) -> bool:
        """Install a completed fetch; stale request ids are discarded."""
        state = self.state
        if result.request.request_id != state.latest_request_id:
            LOG.info(
                "discarding stale fetch %d (latest is %d)",
                result.request.request_id,
                state.latest_request_id,
            )
            return False
        state.loading = False
        if result.error is not None:
            state.error = result.error
            if self._selection_before_edit is not None:
                apply_selection(state.commits, self._selection_before_edit)
        else:
            state.commits = result.commits
            state.diffs = result.diffs
            state.error = None
        self._selection_before_edit = None
        self.clamp()
        state.dirty = True
        return True

    def tick(self) -> None:
        if self.state.loading:
            self.state.spinner_frame = (self.state.spinner_frame + 1) % len(SPINNER_FRAMES)
            self.state.dirty = True

    def resize(self, width: int, height: int) -> None:
        view = self.state.view
        if (width, height) == (view.width, view.height):
            return
        view.width = max(1, width)
        view.height = max(1, height)
        self.clamp()
        self.state.dirty = True

    # -- invariants ----------------------------------------------------------

    def clamp(self) -> None:
        """Pull cursor, scroll, and popup positions back into range."""
        state = self.state
        view = state.view
        visible = state.visible_diffs()
        view.file_cursor = viewport.clamp_cursor(view.file_cursor, len(visible))
        view.scroll_offset = viewport.clamp_scroll(
            view.scroll_offset, visible, view.layout, state.content_height()
        )
        view.popup_cursor = max(0, min(view.popup_cursor, self._popup_length() - 1))
        self._sync_sidebar_window()

    def _popup_length(self) -> int:
        mode = self.state.view.view_mode
        if mode is ViewMode.COMMIT_FILTER:
            return len(self.state.commits)
        if mode in (ViewMode.WORKTREE_SWITCHER, ViewMode.WORKTREE_LIST):
            return len(self.state.worktrees)
        return 0

    def _sync_sidebar_window(self) -> None:
        view = self.state.view
        rows = flatten_tree(build_file_tree(self.state.visible_diffs(), view.expanded_folders))
        height = self.state.sidebar_rows()
        cursor_row = row_index_for_file(rows, view.file_cursor)
        if cursor_row is not None:
            if cursor_row < view.sidebar_start:
                view.sidebar_start = cursor_row
            elif cursor_row >= view.sidebar_start + height:
                view.sidebar_start = cursor_row - height + 1
        view.sidebar_start = max(0, min(view.sidebar_start, max(0, len(rows) - height)))

    # -- input ---------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Dispatch one key token from ``read_key``."""
        if not key:
            return
        state = self.state
        view = state.view

        if key in QUIT_KEYS:
            self.should_quit = True
            return
        if key == HELP_KEY:
            view.count_buffer = ""
            view.view_mode = ViewMode.DIFF if view.view_mode is ViewMode.HELP else ViewMode.HELP
            state.dirty = True
            return
        if state.loading:
            return

        if is_mouse_key(key):
            event = parse_mouse_key(key)
            if event is not None and view.view_mode is ViewMode.DIFF:
                self.handle_mouse(event)
            return

        if view.view_mode is ViewMode.HELP:
            view.view_mode = ViewMode.DIFF
            state.dirty = True
            return

        if view.view_mode is ViewMode.DIFF and len(key) == 1 and key.isdigit():
            view.count_buffer += key
            return
        count = int(view.count_buffer) if view.count_buffer else None
        view.count_buffer = ""

        if self._registries[view.view_mode].dispatch(key, count):
            self.clamp()
            state.dirty = True

    def handle_mouse(self, event: MouseEvent) -> None:
        state = self.state
        view = state.view
        in_sidebar = event.x < SIDEBAR_WIDTH
        if event.action is MouseAction.WHEEL_UP or event.action is MouseAction.WHEEL_DOWN:
            step = -1 if event.action is MouseAction.WHEEL_UP else 1
            if in_sidebar:
                view.file_cursor += step
            else:
                view.scroll_offset += step * WHEEL_SCROLL_LINES
        elif event.action is MouseAction.LEFT_UP:
            if in_sidebar:
                self._click_sidebar_row(event.y - HEADER_ROWS - SIDEBAR_TITLE_ROWS)
            else:
                view.focus = FocusArea.CONTENT
        else:
            return
        self.clamp()
        state.dirty = True

    def _click_sidebar_row(self, screen_row: int) -> None:
        view = self.state.view
        if screen_row < 0 or screen_row >= self.state.sidebar_rows():
            return
        rows = flatten_tree(build_file_tree(self.state.visible_diffs(), view.expanded_folders))
        index = view.sidebar_start + screen_row
        if index >= len(rows):
            return
        node = rows[index].node
        view.focus = FocusArea.SIDEBAR
        if isinstance(node, FolderNode):
            view.expanded_folders[node.path] = not node.expanded
        elif isinstance(node, FileNode):
            view.file_cursor = node.file_index
            self._scroll_to_file(node.file_index)

    # -- diff mode -----------------------------------------------------------

    def _diff_bindings(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("TAB",), self._toggle_focus),
            KeyComboBinding(("j", "DOWN"), lambda count: self._move(count or 1)),
            KeyComboBinding(("k", "UP"), lambda count: self._move(-(count or 1))),
            KeyComboBinding(("CTRL_D", "PAGE_DOWN"), lambda count: self._half_page(1)),
            KeyComboBinding(("CTRL_U", "PAGE_UP"), lambda count: self._half_page(-1)),
            KeyComboBinding(("g",), self._go_top),
            KeyComboBinding(("G",), self._go_bottom),
            KeyComboBinding(("n",), lambda count: self._jump_file(count or 1)),
            KeyComboBinding(("N",), lambda count: self._jump_file(-(count or 1))),
            KeyComboBinding((" ",), self._toggle_cursor_file),
            KeyComboBinding(ENTER_KEYS, self._activate),
            KeyComboBinding(("z",), self._toggle_all_collapsed),
            KeyComboBinding(("h",), self._toggle_hidden),
            KeyComboBinding(("x",), self._cycle_context),
            KeyComboBinding(("u",), self._toggle_layout),
            KeyComboBinding(("c",), lambda count: self._open_popup(ViewMode.COMMIT_FILTER, 0)),
            KeyComboBinding(
                ("w",),
                lambda count: self._open_popup(ViewMode.WORKTREE_SWITCHER, self.state.current_worktree),
            ),
            KeyComboBinding(
                ("W",),
                lambda count: self._open_popup(ViewMode.WORKTREE_LIST, self.state.current_worktree),
            ),
        )

    def _sidebar_focused(self) -> bool:
        return self.state.view.focus is FocusArea.SIDEBAR

    def _scroll_to_file(self, index: int) -> None:
        state = self.state
        state.view.scroll_offset = viewport.scroll_offset_for_file(
            state.visible_diffs(), state.view.layout, index
        )

    def _toggle_focus(self, count: int | None) -> None:
        view = self.state.view
        view.focus = FocusArea.CONTENT if view.focus is FocusArea.SIDEBAR else FocusArea.SIDEBAR

    def _move(self, delta: int) -> None:
        view = self.state.view
        if self._sidebar_focused():
            view.file_cursor += delta
        else:
            view.scroll_offset += delta

    def _half_page(self, direction: int) -> None:
        self.state.view.scroll_offset += direction * max(1, self.state.content_height() // 2)

    def _go_top(self, count: int | None) -> None:
        if self._sidebar_focused():
            self.state.view.file_cursor = 0
        else:
            self.state.view.scroll_offset = 0

    def _go_bottom(self, count: int | None) -> None:
        state = self.state
        view = state.view
        visible = state.visible_diffs()
        if self._sidebar_focused():
            if count is not None and 0 < count <= len(visible):
                view.file_cursor = count - 1
            else:
                view.file_cursor = len(visible) - 1
        elif count is not None and count > 0:
            view.scroll_offset = count - 1
        else:
            view.scroll_offset = viewport.max_scroll(visible, view.layout, state.content_height())

    def _jump_file(self, delta: int) -> None:
        view = self.state.view
        view.file_cursor = viewport.clamp_cursor(view.file_cursor + delta, len(self.state.visible_diffs()))
        self._scroll_to_file(view.file_cursor)

    def _toggle_cursor_file(self, count: int | None) -> None:
        if not self._sidebar_focused():
            return
        visible = self.state.visible_diffs()
        if 0 <= self.state.view.file_cursor < len(visible):
            diff = visible[self.state.view.file_cursor]
            diff.collapsed = not diff.collapsed

    def _activate(self, count: int | None) -> None:
        state = self.state
        view = state.view
        visible = state.visible_diffs()
        if self._sidebar_focused():
            if view.file_cursor < len(visible):
                self._scroll_to_file(view.file_cursor)
                view.focus = FocusArea.CONTENT
            return
        index = viewport.file_at_scroll(visible, view.layout, view.scroll_offset)
        if index is None:
            return
        visible[index].collapsed = not visible[index].collapsed
        self._scroll_to_file(index)

    def _toggle_all_collapsed(self, count: int | None) -> None:
        diffs = self.state.diffs
        collapse = not all(diff.collapsed for diff in diffs)
        for diff in diffs:
            diff.collapsed = collapse

    def _toggle_hidden(self, count: int | None) -> None:
        self.state.view.show_hidden = not self.state.view.show_hidden

    def _cycle_context(self, count: int | None) -> None:
        view = self.state.view
        view.context_lines = next_context_lines(view.context_lines)
        self._reload_keeping_selection()

    def _toggle_layout(self, count: int | None) -> None:
        view = self.state.view
        view.layout = view.layout.toggled()

    def _open_popup(self, mode: ViewMode, cursor: int) -> None:
        self.state.view.view_mode = mode
        self.state.view.popup_cursor = cursor

    # -- popups --------------------------------------------------------------

    def _move_popup(self, delta: int) -> None:
        self.state.view.popup_cursor += delta

    def _close_popup(self, count: int | None) -> None:
        self.state.view.view_mode = ViewMode.DIFF

    def _commit_filter_bindings(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", "DOWN"), lambda count: self._move_popup(1)),
            KeyComboBinding(("k", "UP"), lambda count: self._move_popup(-1)),
            KeyComboBinding((" ",), self._toggle_commit),
            KeyComboBinding(("a",), lambda count: self._select_all_commits(True)),
            KeyComboBinding(("n",), lambda count: self._select_all_commits(False)),
            KeyComboBinding((*ENTER_KEYS, "ESC"), self._close_popup),
        )

    def _reload_after_selection_edit(self, previous: CommitSelection) -> None:
        self._reload_keeping_selection()
        self._selection_before_edit = previous

    def _toggle_commit(self, count: int | None) -> None:
        commits = self.state.commits
        cursor = self.state.view.popup_cursor
        if 0 <= cursor < len(commits):
            previous = snapshot_selection(commits)
            commits[cursor].selected = not commits[cursor].selected
            self._reload_after_selection_edit(previous)

    def _select_all_commits(self, selected: bool) -> None:
        previous = snapshot_selection(self.state.commits)
        set_all_selected(self.state.commits, selected)
        self._reload_after_selection_edit(previous)

    def _worktree_bindings(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", "DOWN"), lambda count: self._move_popup(1)),
            KeyComboBinding(("k", "UP"), lambda count: self._move_popup(-1)),
            KeyComboBinding(ENTER_KEYS, self._switch_worktree),
            KeyComboBinding(("ESC",), self._close_popup),
        )

    def _switch_worktree(self, count: int | None) -> None:
        state = self.state
        view = state.view
        if not state.worktrees:
            return
        state.current_worktree = max(0, min(view.popup_cursor, len(state.worktrees) - 1))
        view.view_mode = ViewMode.DIFF
        view.scroll_offset = 0
        view.file_cursor = 0
        view.sidebar_start = 0
        LOG.info("switching to worktree %s", state.repo_path)
        self.request_reload()


__all__ = ["AppStateMachine", "FetchSubmitter"]

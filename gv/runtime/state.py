"""Mutable application state owned by the event loop.

``ViewState`` holds navigation and presentation choices; ``AppState`` holds
the loaded repository data plus the view. Only the state machine mutates
either object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..diff_view.layout import DiffLayout
from ..git.commits import CONTEXT_CYCLE, DEFAULT_CONTEXT_LINES
from ..git.models import CommitEntry, FileDiff, Worktree
from ..tree_model import DEFAULT_HIDDEN_FILES, visible_diffs

SIDEBAR_WIDTH = 35
HEADER_ROWS = 1
FOOTER_ROWS = 1
SIDEBAR_TITLE_ROWS = 2
SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


class ViewMode(Enum):
    DIFF = "diff"
    COMMIT_FILTER = "commit-filter"
    WORKTREE_SWITCHER = "worktree-switcher"
    WORKTREE_LIST = "worktree-list"
    HELP = "help"


class FocusArea(Enum):
    SIDEBAR = "sidebar"
    CONTENT = "content"


def next_context_lines(current: int) -> int:
    """Rotate through 3, 1, 0 and back to 3."""
    if current in CONTEXT_CYCLE:
        return CONTEXT_CYCLE[(CONTEXT_CYCLE.index(current) + 1) % len(CONTEXT_CYCLE)]
    return CONTEXT_CYCLE[0]


@dataclass
class ViewState:
    view_mode: ViewMode = ViewMode.DIFF
    layout: DiffLayout = DiffLayout.SIDE_BY_SIDE
    scroll_offset: int = 0
    file_cursor: int = 0
    focus: FocusArea = FocusArea.SIDEBAR
    context_lines: int = DEFAULT_CONTEXT_LINES
    show_hidden: bool = False
    expanded_folders: dict[str, bool] = field(default_factory=dict)
    count_buffer: str = ""
    popup_cursor: int = 0
    sidebar_start: int = 0
    width: int = 80
    height: int = 24


@dataclass
class AppState:
    """Everything the renderer needs for one frame."""

    worktrees: list[Worktree]
    current_worktree: int
    base_branch: str
    hidden_files: frozenset[str] = frozenset(DEFAULT_HIDDEN_FILES)
    commits: list[CommitEntry] = field(default_factory=list)
    diffs: list[FileDiff] = field(default_factory=list)
    error: str | None = None
    loading: bool = True
    spinner_frame: int = 0
    latest_request_id: int = 0
    view: ViewState = field(default_factory=ViewState)
    dirty: bool = True

    @property
    def worktree(self) -> Worktree | None:
        if 0 <= self.current_worktree < len(self.worktrees):
            return self.worktrees[self.current_worktree]
        return None

    @property
    def repo_path(self) -> Path:
        worktree = self.worktree
        return worktree.path if worktree is not None else Path.cwd()

    @property
    def branch(self) -> str:
        worktree = self.worktree
        return worktree.branch if worktree is not None else ""

    def visible_diffs(self) -> list[FileDiff]:
        return visible_diffs(self.diffs, self.view.show_hidden, self.hidden_files)

    def body_height(self) -> int:
        return max(1, self.view.height - HEADER_ROWS - FOOTER_ROWS)

    def shows_error_banner(self) -> bool:
        """Fetch errors sit above existing diffs and take one content row."""
        return bool(self.error) and bool(self.diffs)

    def content_height(self) -> int:
        return max(1, self.body_height() - (1 if self.shows_error_banner() else 0))

    def content_width(self) -> int:
        return max(1, self.view.width - SIDEBAR_WIDTH - 1)

    def sidebar_rows(self) -> int:
        return max(1, self.body_height() - SIDEBAR_TITLE_ROWS)

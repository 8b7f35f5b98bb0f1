"""Session setup and runtime entry points.

Setup failures (no repository, no git, worktree listing failed) raise
``GvError`` before the terminal is touched.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from ..diff_view.highlight import SyntaxHighlighter
from ..diff_view.layout import DiffLayout
from ..errors import GitError, GvError
from ..git.backend import GitBackend, find_current_worktree
from ..git.commits import DEFAULT_CONTEXT_LINES
from ..render import RenderContext, render_frame, render_static_diff
from ..tree_model import DEFAULT_HIDDEN_FILES, visible_diffs
from ..ui_theme import resolve_theme
from .loader import DiffLoader, FetchRequest, run_fetch
from .loop import RuntimeLoopCallbacks, run_main_loop
from .machine import AppStateMachine
from .state import AppState, ViewState
from .terminal import TerminalController

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionOptions:
    """Settings resolved from CLI flags and the config file."""

    base_branch: str | None = None
    hidden_files: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_HIDDEN_FILES))
    theme: str | None = None
    style: str | None = None
    no_color: bool = False
    layout: DiffLayout = DiffLayout.SIDE_BY_SIDE
    context_lines: int = DEFAULT_CONTEXT_LINES


def open_session(path: Path, options: SessionOptions, backend: GitBackend) -> AppState:
    """Resolve worktrees and base branch for ``path`` into a fresh state."""
    repo_root = backend.repo_root(path)
    worktrees = backend.list_worktrees(repo_root)
    if not worktrees:
        raise GitError(f"no worktrees found for {repo_root}")
    current = find_current_worktree(worktrees, path)
    base_branch = options.base_branch or backend.default_branch(worktrees[current].path)
    LOG.info("opened %s (%d worktrees), base %s", repo_root, len(worktrees), base_branch)
    return AppState(
        worktrees=worktrees,
        current_worktree=current,
        base_branch=base_branch,
        hidden_files=options.hidden_files,
        view=ViewState(layout=options.layout, context_lines=options.context_lines),
    )


def render_once(path: Path, options: SessionOptions, width: int, backend: GitBackend | None = None) -> str:
    """Compute the diff synchronously and render it as plain unified text."""
    backend = backend if backend is not None else GitBackend()
    state = open_session(path, options, backend)
    result = run_fetch(
        backend,
        FetchRequest(0, state.repo_path, state.base_branch, state.view.context_lines),
    )
    if result.error is not None:
        raise GvError(result.error)
    diffs = visible_diffs(result.diffs, False, state.hidden_files)
    return render_static_diff(
        diffs,
        DiffLayout.UNIFIED,
        SyntaxHighlighter(options.style, no_color=True),
        resolve_theme(None, no_color=True),
        width,
    )


def run_app(path: Path, options: SessionOptions, backend: GitBackend | None = None) -> None:
    """Open ``path`` and run the interactive viewer until quit."""
    backend = backend if backend is not None else GitBackend()
    state = open_session(path, options, backend)
    loader = DiffLoader(backend)
    machine = AppStateMachine(state, loader)
    machine.request_reload()

    ctx = RenderContext(
        theme=resolve_theme(options.theme, no_color=options.no_color),
        highlighter=SyntaxHighlighter(options.style, no_color=options.no_color),
    )
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    run_main_loop(
        machine,
        terminal,
        stdin_fd,
        RuntimeLoopCallbacks(
            render=lambda current: render_frame(current, ctx),
            drain_results=loader.drain_results,
            terminal_size=terminal.size,
        ),
    )

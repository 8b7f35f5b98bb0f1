"""Git access: CLI backend, diff parsing, and commit selection."""

from .backend import GitBackend, VersionControlBackend, find_current_worktree
from .commits import DiffTarget, compute_diff, diff_target_for_selection, list_commits
from .diff_parser import parse_diff, total_stats
from .models import (
    CommitEntry,
    DiffLine,
    FileDiff,
    Hunk,
    LineType,
    RealCommit,
    UncommittedChanges,
    Worktree,
)

__all__ = [
    "CommitEntry",
    "DiffLine",
    "DiffTarget",
    "FileDiff",
    "GitBackend",
    "Hunk",
    "LineType",
    "RealCommit",
    "UncommittedChanges",
    "VersionControlBackend",
    "Worktree",
    "compute_diff",
    "diff_target_for_selection",
    "find_current_worktree",
    "list_commits",
    "parse_diff",
    "total_stats",
]

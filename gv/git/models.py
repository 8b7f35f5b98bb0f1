"""Structured records produced from git output.

Diffs, hunks, and lines are plain dataclasses; commits are a two-variant
union so consumers never have to guard against a missing hash.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

UNCOMMITTED_SUBJECT = "(uncommitted changes)"


class LineType(Enum):
    """Kind of one diff body line."""

    CONTEXT = " "
    ADDED = "+"
    REMOVED = "-"

    @property
    def glyph(self) -> str:
        return self.value


@dataclass(frozen=True)
class DiffLine:
    """One body line of a hunk with its resolved line numbers."""

    type: LineType
    content: str
    old_number: int | None = None
    new_number: int | None = None


@dataclass
class Hunk:
    """A contiguous change region with its declared header numbers."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[DiffLine] = field(default_factory=list)


@dataclass
class FileDiff:
    """All hunks for one changed path.

    ``added``/``removed`` must match the line types found in ``hunks``;
    construction fails with ``ValueError`` otherwise.
    """

    path: str
    old_path: str | None = None
    added: int = 0
    removed: int = 0
    hunks: list[Hunk] = field(default_factory=list)
    collapsed: bool = False
    is_binary: bool = False

    def __post_init__(self) -> None:
        added, removed = count_changes(self.hunks)
        if (added, removed) != (self.added, self.removed):
            raise ValueError(
                f"{self.path}: stats +{self.added} -{self.removed} "
                f"do not match hunk lines +{added} -{removed}"
            )

    @property
    def basename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def is_rename(self) -> bool:
        return self.old_path is not None and self.old_path != self.path


def count_changes(hunks: list[Hunk]) -> tuple[int, int]:
    """Return ``(added, removed)`` line totals across ``hunks``."""
    added = 0
    removed = 0
    for hunk in hunks:
        for line in hunk.lines:
            if line.type is LineType.ADDED:
                added += 1
            elif line.type is LineType.REMOVED:
                removed += 1
    return added, removed


@dataclass(frozen=True)
class Worktree:
    """One entry from ``git worktree list``."""

    path: Path
    branch: str
    head: str
    is_bare: bool = False


@dataclass
class RealCommit:
    """A commit reachable from HEAD but not from the base branch."""

    hash: str
    subject: str
    author: str
    selected: bool = True

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass
class UncommittedChanges:
    """Virtual entry standing for staged and unstaged working-tree changes."""

    selected: bool = True

    @property
    def subject(self) -> str:
        return UNCOMMITTED_SUBJECT


CommitEntry = RealCommit | UncommittedChanges


__all__ = [
    "UNCOMMITTED_SUBJECT",
    "LineType",
    "DiffLine",
    "Hunk",
    "FileDiff",
    "count_changes",
    "Worktree",
    "RealCommit",
    "UncommittedChanges",
    "CommitEntry",
]

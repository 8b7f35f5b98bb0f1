"""Commit listing and selection-to-diff mapping.

The selection of commit entries decides which two states get compared:

==================  ===================  ======================
uncommitted chosen  any commit chosen    compared states
==================  ===================  ======================
no                  no                   nothing (empty diff)
yes                 no                   HEAD -> working tree
no                  yes                  base -> HEAD
yes                 yes                  base -> working tree
==================  ===================  ======================
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..errors import GitError
from .backend import VersionControlBackend
from .diff_parser import parse_diff
from .models import CommitEntry, FileDiff, RealCommit, UncommittedChanges

LOG = logging.getLogger(__name__)

REMOTE_PREFIX = "origin/"
CONTEXT_CYCLE: tuple[int, ...] = (3, 1, 0)
DEFAULT_CONTEXT_LINES = 3


class DiffTarget(Enum):
    """Which pair of repository states a diff compares."""

    NONE = "none"
    HEAD_TO_WORKTREE = "head-to-worktree"
    BASE_TO_HEAD = "base-to-head"
    BASE_TO_WORKTREE = "base-to-worktree"


@dataclass(frozen=True)
class CommitSelection:
    """Selection flags carried across a commit-list reload."""

    deselected_hashes: frozenset[str] = frozenset()
    uncommitted_selected: bool = True


def diff_target_for_selection(commits: Iterable[CommitEntry]) -> DiffTarget:
    uncommitted = False
    committed = False
    for entry in commits:
        if not entry.selected:
            continue
        if isinstance(entry, UncommittedChanges):
            uncommitted = True
        else:
            committed = True
    if uncommitted and committed:
        return DiffTarget.BASE_TO_WORKTREE
    if uncommitted:
        return DiffTarget.HEAD_TO_WORKTREE
    if committed:
        return DiffTarget.BASE_TO_HEAD
    return DiffTarget.NONE


def rev_spec_for_target(target: DiffTarget, base_ref: str) -> str | None:
    """Return the ``git diff`` revision argument for ``target``."""
    if target is DiffTarget.HEAD_TO_WORKTREE:
        return "HEAD"
    if target is DiffTarget.BASE_TO_HEAD:
        return f"{base_ref}..HEAD"
    if target is DiffTarget.BASE_TO_WORKTREE:
        return base_ref
    return None


def resolve_base_ref(backend: VersionControlBackend, repo_path: Path, base_branch: str) -> str | None:
    """Resolve ``base_branch`` locally first, then as ``origin/<base_branch>``."""
    if not base_branch:
        return None
    if backend.resolve_ref(repo_path, base_branch):
        return base_branch
    remote = REMOTE_PREFIX + base_branch
    if backend.resolve_ref(repo_path, remote):
        return remote
    LOG.info("base branch %r does not resolve locally or on origin", base_branch)
    return None


def list_commits(backend: VersionControlBackend, repo_path: Path, base_branch: str) -> list[CommitEntry]:
    """Build the ordered commit list for the commit filter.

    The uncommitted entry comes first when the working tree is dirty, followed
    by commits on HEAD that the base does not contain. An unresolvable base is
    not an error: only the uncommitted entry is returned.
    """
    entries: list[CommitEntry] = []
    if backend.has_uncommitted_changes(repo_path):
        entries.append(UncommittedChanges())

    base_ref = resolve_base_ref(backend, repo_path, base_branch)
    if base_ref is None:
        return entries

    seen: set[str] = set()
    for commit in backend.list_commits(repo_path, f"{base_ref}..HEAD"):
        if commit.hash in seen:
            continue
        seen.add(commit.hash)
        entries.append(commit)
    return entries


def snapshot_selection(commits: Iterable[CommitEntry]) -> CommitSelection:
    deselected: set[str] = set()
    uncommitted_selected = True
    for entry in commits:
        if isinstance(entry, UncommittedChanges):
            uncommitted_selected = entry.selected
        elif not entry.selected:
            deselected.add(entry.hash)
    return CommitSelection(frozenset(deselected), uncommitted_selected)


def apply_selection(commits: Sequence[CommitEntry], selection: CommitSelection) -> None:
    """Re-apply carried selection flags in place; unknown commits stay selected."""
    for entry in commits:
        if isinstance(entry, UncommittedChanges):
            entry.selected = selection.uncommitted_selected
        else:
            entry.selected = entry.hash not in selection.deselected_hashes


def set_all_selected(commits: Iterable[CommitEntry], selected: bool) -> None:
    for entry in commits:
        entry.selected = selected


def compute_diff(
    backend: VersionControlBackend,
    repo_path: Path,
    base_branch: str,
    commits: Sequence[CommitEntry],
    context_lines: int,
) -> list[FileDiff]:
    """Diff the states chosen by ``commits`` and parse the result.

    Ranges involving the base are retried against ``origin/<base>`` when the
    local name fails; the last ``GitError`` propagates if both attempts fail.
    """
    target = diff_target_for_selection(commits)
    rev_spec = rev_spec_for_target(target, base_branch)
    if rev_spec is None:
        return []

    try:
        text = backend.diff(repo_path, rev_spec, context_lines)
    except GitError:
        fallback = rev_spec_for_target(target, REMOTE_PREFIX + base_branch)
        if target is DiffTarget.HEAD_TO_WORKTREE or base_branch.startswith(REMOTE_PREFIX) or fallback is None:
            raise
        LOG.info("retrying diff against %s", fallback)
        text = backend.diff(repo_path, fallback, context_lines)
    return parse_diff(text)


def selected_count(commits: Iterable[CommitEntry]) -> tuple[int, int, bool]:
    """Return ``(selected real commits, total real commits, uncommitted selected)``."""
    chosen = 0
    total = 0
    uncommitted = False
    for entry in commits:
        if isinstance(entry, RealCommit):
            total += 1
            chosen += int(entry.selected)
        elif entry.selected:
            uncommitted = True
    return chosen, total, uncommitted


__all__ = [
    "CONTEXT_CYCLE",
    "DEFAULT_CONTEXT_LINES",
    "CommitSelection",
    "DiffTarget",
    "apply_selection",
    "compute_diff",
    "diff_target_for_selection",
    "list_commits",
    "resolve_base_ref",
    "rev_spec_for_target",
    "selected_count",
    "set_all_selected",
    "snapshot_selection",
]

"""Thin git CLI wrapper used for every repository query.

All commands run through ``GitBackend._run`` which logs the invocation and
turns non-zero exits, timeouts, and a missing ``git`` binary into
``GitError``.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ..errors import GitError, RepositoryNotFoundError
from .models import RealCommit, Worktree

LOG = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30.0
DETACHED_BRANCH = "(detached)"
_LOG_FORMAT = "--format=%H%x00%s%x00%an"


class VersionControlBackend(Protocol):
    """Queries the commit selector and loader need from version control."""

    def list_worktrees(self, repo_root: Path) -> list[Worktree]: ...

    def resolve_ref(self, repo_path: Path, name: str) -> bool: ...

    def has_uncommitted_changes(self, repo_path: Path) -> bool: ...

    def list_commits(self, repo_path: Path, rev_range: str) -> list[RealCommit]: ...

    def diff(self, repo_path: Path, rev_spec: str, context_lines: int) -> str: ...


def _decode(raw: bytes) -> str:
    # No newline translation: a lone "\r" inside file content stays on its line.
    return raw.decode("utf-8", "replace")


def parse_worktree_porcelain(text: str) -> list[Worktree]:
    """Parse ``git worktree list --porcelain`` output.

    Records are separated by blank lines. ``refs/heads/`` is stripped from
    branch names and detached worktrees get the ``(detached)`` branch label.
    """
    worktrees: list[Worktree] = []
    fields: dict[str, object] | None = None

    def flush() -> None:
        if fields is not None:
            worktrees.append(
                Worktree(
                    path=Path(str(fields["path"])),
                    branch=str(fields.get("branch", "")),
                    head=str(fields.get("head", "")),
                    is_bare=bool(fields.get("bare", False)),
                )
            )

    for line in text.splitlines():
        if not line:
            flush()
            fields = None
            continue
        if line.startswith("worktree "):
            flush()
            fields = {"path": line[len("worktree "):]}
            continue
        if fields is None:
            continue
        if line.startswith("HEAD "):
            fields["head"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            branch = line[len("branch "):]
            fields["branch"] = branch.removeprefix("refs/heads/")
        elif line == "bare":
            fields["bare"] = True
        elif line == "detached":
            fields["branch"] = DETACHED_BRANCH
    flush()
    return worktrees


def parse_commit_log(text: str) -> list[RealCommit]:
    """Parse NUL-separated ``hash, subject, author`` log records."""
    commits: list[RealCommit] = []
    for line in text.split("\n"):
        if not line:
            continue
        parts = line.split("\x00", 2)
        if len(parts) < 2:
            continue
        author = parts[2] if len(parts) > 2 else ""
        commits.append(RealCommit(hash=parts[0], subject=parts[1], author=author))
    return commits


def find_current_worktree(worktrees: Sequence[Worktree], path: Path) -> int:
    """Return the index of the worktree containing ``path``.

    The deepest matching worktree wins so nested linked worktrees resolve to
    themselves instead of the main checkout. Falls back to ``0``.
    """
    target = path.resolve()
    best_index = 0
    best_depth = -1
    for index, worktree in enumerate(worktrees):
        root = worktree.path.resolve()
        if target == root or target.is_relative_to(root):
            depth = len(root.parts)
            if depth > best_depth:
                best_index = index
                best_depth = depth
    return best_index


class GitBackend:
    """Run git subcommands against a repository path."""

    def __init__(self, git_executable: str = "git", timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> None:
        self.git_executable = git_executable
        self.timeout_seconds = timeout_seconds

    def _run(self, repo_path: Path, args: Sequence[str]) -> str:
        command = [self.git_executable, "-C", str(repo_path), "-c", "core.quotePath=false", *args]
        LOG.debug("running %s", " ".join(command))
        try:
            proc = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise GitError(f"git executable not found: {self.git_executable}", command) from exc
        except subprocess.TimeoutExpired as exc:
            raise GitError(f"git {args[0]} timed out after {self.timeout_seconds:g}s", command) from exc
        except OSError as exc:
            raise GitError(f"could not run git: {exc}", command) from exc
        if proc.returncode != 0:
            LOG.info("git %s exited with %d", " ".join(args), proc.returncode)
            raise GitError(f"git {' '.join(args)} failed", command, _decode(proc.stderr))
        return _decode(proc.stdout)

    def _succeeds(self, repo_path: Path, args: Sequence[str]) -> bool:
        try:
            self._run(repo_path, args)
        except GitError:
            return False
        return True

    def repo_root(self, path: Path) -> Path:
        """Return the top-level directory of the repository containing ``path``."""
        try:
            out = self._run(path, ["rev-parse", "--show-toplevel"])
        except GitError as exc:
            if "not a git repository" in exc.stderr.lower():
                raise RepositoryNotFoundError(f"not a git repository: {path}", exc.command, exc.stderr) from exc
            raise
        return Path(out.strip())

    def list_worktrees(self, repo_root: Path) -> list[Worktree]:
        return parse_worktree_porcelain(self._run(repo_root, ["worktree", "list", "--porcelain"]))

    def resolve_ref(self, repo_path: Path, name: str) -> bool:
        if not name:
            return False
        return self._succeeds(repo_path, ["rev-parse", "--verify", "--quiet", f"{name}^{{commit}}"])

    def has_uncommitted_changes(self, repo_path: Path) -> bool:
        try:
            out = self._run(repo_path, ["status", "--porcelain"])
        except GitError:
            return False
        return bool(out.strip())

    def list_commits(self, repo_path: Path, rev_range: str) -> list[RealCommit]:
        return parse_commit_log(self._run(repo_path, ["log", "--topo-order", _LOG_FORMAT, rev_range]))

    def diff(self, repo_path: Path, rev_spec: str, context_lines: int) -> str:
        return self._run(
            repo_path,
            [
                "diff",
                "--no-color",
                "--no-ext-diff",
                "--src-prefix=a/",
                "--dst-prefix=b/",
                f"-U{context_lines}",
                rev_spec,
            ],
        )

    def default_branch(self, repo_path: Path) -> str:
        """Guess the base branch: ``origin/HEAD`` target, then main/master."""
        try:
            ref = self._run(repo_path, ["symbolic-ref", "refs/remotes/origin/HEAD"]).strip()
        except GitError:
            ref = ""
        if ref:
            return ref.removeprefix("refs/remotes/origin/")
        for branch in ("main", "master"):
            if self.resolve_ref(repo_path, branch):
                return branch
        return "main"


__all__ = [
    "DETACHED_BRANCH",
    "GitBackend",
    "VersionControlBackend",
    "find_current_worktree",
    "parse_commit_log",
    "parse_worktree_porcelain",
]

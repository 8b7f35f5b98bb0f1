"""Exception types raised by gv.

Setup failures propagate to the CLI and end the process; fetch failures are
caught by the background loader and shown inline.
"""

from __future__ import annotations

from collections.abc import Sequence


class GvError(Exception):
    """Base class for all gv errors."""


class GitError(GvError):
    """A git invocation failed or could not be executed."""

    def __init__(self, message: str, command: Sequence[str] = (), stderr: str = "") -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        detail = self.stderr.strip()
        if detail:
            return f"{base}: {detail.splitlines()[-1]}"
        return base


class RepositoryNotFoundError(GitError):
    """The requested path is not inside a git repository."""


class DiffParseError(GvError):
    """Unified diff text could not be read."""


__all__ = [
    "GvError",
    "GitError",
    "RepositoryNotFoundError",
    "DiffParseError",
]

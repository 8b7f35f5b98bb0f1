"""Background fetch of commits and diffs.

Each request runs on its own daemon thread and reports through a queue that
the event loop drains between key reads. Requests carry monotonically
increasing ids so the state machine can drop completions that were
superseded while in flight.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..errors import GvError
from ..git.backend import VersionControlBackend
from ..git.commits import CommitSelection, apply_selection, compute_diff, list_commits
from ..git.models import CommitEntry, FileDiff

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchRequest:
    """One commit-list plus diff computation for a worktree."""

    request_id: int
    repo_path: Path
    base_branch: str
    context_lines: int
    selection: CommitSelection | None = None


@dataclass(frozen=True)
class FetchResult:
    """Completion message; ``error`` is set instead of data on failure."""

    request: FetchRequest
    commits: list[CommitEntry]
    diffs: list[FileDiff]
    error: str | None = None


def run_fetch(backend: VersionControlBackend, request: FetchRequest) -> FetchResult:
    """Execute ``request`` synchronously, converting failures to messages."""
    try:
        commits = list_commits(backend, request.repo_path, request.base_branch)
        if request.selection is not None:
            apply_selection(commits, request.selection)
        diffs = compute_diff(
            backend,
            request.repo_path,
            request.base_branch,
            commits,
            request.context_lines,
        )
    except GvError as exc:
        LOG.info("fetch %d failed: %s", request.request_id, exc)
        return FetchResult(request, [], [], error=str(exc))
    except Exception as exc:
        LOG.exception("fetch %d crashed", request.request_id)
        return FetchResult(request, [], [], error=f"unexpected error: {exc}")
    return FetchResult(request, commits, diffs)


class DiffLoader:
    """Dispatch fetches to worker threads and collect their results."""

    def __init__(self, backend: VersionControlBackend) -> None:
        self._backend = backend
        self._lock = threading.Lock()
        self._next_request_id = 1
        self._results: Queue[FetchResult] = Queue()

    def _worker(self, request: FetchRequest) -> None:
        self._results.put(run_fetch(self._backend, request))

    def submit(
        self,
        repo_path: Path,
        base_branch: str,
        context_lines: int,
        selection: CommitSelection | None = None,
    ) -> int:
        """Start a fetch and return its request id."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
        request = FetchRequest(request_id, repo_path, base_branch, context_lines, selection)
        LOG.debug("issuing fetch %d for %s (-U%d)", request_id, repo_path, context_lines)
        worker = threading.Thread(
            target=self._worker,
            args=(request,),
            name=f"gv-fetch-{request_id}",
            daemon=True,
        )
        worker.start()
        return request_id

    def drain_results(self) -> list[FetchResult]:
        """Drain all completed fetch results."""
        out: list[FetchResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = ["DiffLoader", "FetchRequest", "FetchResult", "run_fetch"]

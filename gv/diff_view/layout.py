"""Diff layouts and the side-by-side run-pairing alignment.

Side-by-side rows are not a sequence alignment: removed lines queue on the
left, added lines on the right, and both queues drain pairwise whenever a
context line (or the end of the hunk) is reached. Runs of different length
therefore leave blank cells on the shorter side.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from ..git.models import DiffLine, FileDiff, Hunk, LineType


class DiffLayout(Enum):
    SIDE_BY_SIDE = "side-by-side"
    UNIFIED = "unified"

    def toggled(self) -> DiffLayout:
        if self is DiffLayout.UNIFIED:
            return DiffLayout.SIDE_BY_SIDE
        return DiffLayout.UNIFIED


IndexPair = tuple[int | None, int | None]


def pair_line_indices(lines: Sequence[DiffLine]) -> list[IndexPair]:
    """Return ``(left, right)`` indices into ``lines`` for each output row."""
    rows: list[IndexPair] = []
    left: list[int] = []
    right: list[int] = []

    def flush() -> None:
        for row in range(max(len(left), len(right))):
            rows.append(
                (
                    left[row] if row < len(left) else None,
                    right[row] if row < len(right) else None,
                )
            )
        left.clear()
        right.clear()

    for index, line in enumerate(lines):
        if line.type is LineType.REMOVED:
            left.append(index)
        elif line.type is LineType.ADDED:
            right.append(index)
        else:
            flush()
            rows.append((index, index))
    flush()
    return rows


def pair_hunk_lines(lines: Sequence[DiffLine]) -> list[tuple[DiffLine | None, DiffLine | None]]:
    """Side-by-side rows as line pairs; ``None`` marks a blank cell."""
    return [
        (
            lines[left] if left is not None else None,
            lines[right] if right is not None else None,
        )
        for left, right in pair_line_indices(lines)
    ]


def hunk_row_count(hunk: Hunk, layout: DiffLayout) -> int:
    """Number of display rows ``hunk`` occupies in ``layout``."""
    if layout is DiffLayout.UNIFIED:
        return len(hunk.lines)
    return len(pair_line_indices(hunk.lines))


def file_content_rows(diff: FileDiff, layout: DiffLayout) -> int:
    return sum(hunk_row_count(hunk, layout) for hunk in diff.hunks)

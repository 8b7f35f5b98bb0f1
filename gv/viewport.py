"""Logical-line addressing for the scrolling content pane.

Each visible file occupies one header row plus either its rendered body rows
or a single placeholder row when collapsed or binary. Scroll offsets count
these logical rows; every helper clamps instead of failing.
"""

from __future__ import annotations

from collections.abc import Sequence

from .diff_view.layout import DiffLayout, file_content_rows
from .git.models import FileDiff


def file_body_rows(diff: FileDiff, layout: DiffLayout) -> int:
    if diff.collapsed or diff.is_binary:
        return 1
    return file_content_rows(diff, layout)


def file_line_cost(diff: FileDiff, layout: DiffLayout) -> int:
    """Logical rows taken by ``diff``: header plus body or placeholder."""
    return 1 + file_body_rows(diff, layout)


def total_logical_lines(diffs: Sequence[FileDiff], layout: DiffLayout) -> int:
    return sum(file_line_cost(diff, layout) for diff in diffs)


def max_scroll(diffs: Sequence[FileDiff], layout: DiffLayout, content_height: int) -> int:
    return max(0, total_logical_lines(diffs, layout) - max(0, content_height))


def scroll_offset_for_file(diffs: Sequence[FileDiff], layout: DiffLayout, index: int) -> int:
    """Logical offset of file ``index``'s header row."""
    index = max(0, min(index, len(diffs)))
    return sum(file_line_cost(diff, layout) for diff in diffs[:index])


def file_at_scroll(diffs: Sequence[FileDiff], layout: DiffLayout, offset: int) -> int | None:
    """Index of the file whose rows contain ``offset``.

    Offsets past the end map to the last file; ``None`` when nothing is
    visible.
    """
    if not diffs:
        return None
    start = 0
    for index, diff in enumerate(diffs):
        end = start + file_line_cost(diff, layout)
        if start <= offset < end:
            return index
        start = end
    return len(diffs) - 1 if offset >= start else 0


def clamp_scroll(offset: int, diffs: Sequence[FileDiff], layout: DiffLayout, content_height: int) -> int:
    return max(0, min(offset, max_scroll(diffs, layout, content_height)))


def clamp_cursor(cursor: int, file_count: int) -> int:
    return max(0, min(cursor, file_count - 1)) if file_count > 0 else 0


def file_offsets(diffs: Sequence[FileDiff], layout: DiffLayout) -> list[int]:
    """Header offsets for every file, in one pass."""
    offsets: list[int] = []
    start = 0
    for diff in diffs:
        offsets.append(start)
        start += file_line_cost(diff, layout)
    return offsets


__all__ = [
    "clamp_cursor",
    "clamp_scroll",
    "file_at_scroll",
    "file_body_rows",
    "file_line_cost",
    "file_offsets",
    "max_scroll",
    "scroll_offset_for_file",
    "total_logical_lines",
]

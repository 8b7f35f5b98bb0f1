"""Logical-line addressing tests for the content pane."""

from __future__ import annotations

import unittest

from gv import viewport
from gv.diff_view.layout import DiffLayout
from gv.git.models import DiffLine, FileDiff, Hunk, LineType


def _lines(*kinds: str) -> list[DiffLine]:
    types = {"+": LineType.ADDED, "-": LineType.REMOVED, " ": LineType.CONTEXT}
    return [DiffLine(types[kind], f"line {i}", i + 1, i + 1) for i, kind in enumerate(kinds)]


def _diff(path: str, *kinds: str, collapsed: bool = False, is_binary: bool = False) -> FileDiff:
    lines = _lines(*kinds)
    added = sum(1 for line in lines if line.type is LineType.ADDED)
    removed = sum(1 for line in lines if line.type is LineType.REMOVED)
    hunks = [Hunk(1, len(lines), 1, len(lines), lines)] if lines else []
    return FileDiff(path, None, added, removed, hunks, collapsed=collapsed, is_binary=is_binary)


UNI = DiffLayout.UNIFIED
SBS = DiffLayout.SIDE_BY_SIDE


class LineCostTests(unittest.TestCase):
    def test_expanded_file_costs_header_plus_rows(self) -> None:
        diff = _diff("a.py", "-", "-", "+", " ")
        self.assertEqual(viewport.file_line_cost(diff, UNI), 5)
        self.assertEqual(viewport.file_line_cost(diff, SBS), 4)

    def test_collapsed_and_binary_cost_two(self) -> None:
        self.assertEqual(viewport.file_line_cost(_diff("a.py", "+", "+", collapsed=True), UNI), 2)
        self.assertEqual(viewport.file_line_cost(_diff("logo.png", is_binary=True), UNI), 2)

    def test_total_and_offsets(self) -> None:
        diffs = [_diff("a.py", "+", "+"), _diff("b.py", " "), _diff("c.py", "-", collapsed=True)]
        self.assertEqual(viewport.total_logical_lines(diffs, UNI), 3 + 2 + 2)
        self.assertEqual(viewport.file_offsets(diffs, UNI), [0, 3, 5])
        self.assertEqual(viewport.scroll_offset_for_file(diffs, UNI, 2), 5)
        self.assertEqual(viewport.scroll_offset_for_file(diffs, UNI, 99), 7)


class FileAtScrollTests(unittest.TestCase):
    def setUp(self) -> None:
        self.diffs = [_diff("a.py", "+", "+"), _diff("b.py", " ")]

    def test_maps_offsets_to_owning_file(self) -> None:
        self.assertEqual(viewport.file_at_scroll(self.diffs, UNI, 0), 0)
        self.assertEqual(viewport.file_at_scroll(self.diffs, UNI, 2), 0)
        self.assertEqual(viewport.file_at_scroll(self.diffs, UNI, 3), 1)

    def test_out_of_range_offsets_clamp(self) -> None:
        self.assertEqual(viewport.file_at_scroll(self.diffs, UNI, 50), 1)
        self.assertEqual(viewport.file_at_scroll(self.diffs, UNI, -4), 0)
        self.assertIsNone(viewport.file_at_scroll([], UNI, 0))


class ClampTests(unittest.TestCase):
    def test_scroll_never_exceeds_content_minus_height(self) -> None:
        diffs = [_diff("a.py", *["+"] * 10)]
        self.assertEqual(viewport.max_scroll(diffs, UNI, 4), 7)
        self.assertEqual(viewport.clamp_scroll(100, diffs, UNI, 4), 7)
        self.assertEqual(viewport.clamp_scroll(-3, diffs, UNI, 4), 0)
        self.assertEqual(viewport.max_scroll(diffs, UNI, 40), 0)

    def test_cursor_clamp(self) -> None:
        self.assertEqual(viewport.clamp_cursor(5, 3), 2)
        self.assertEqual(viewport.clamp_cursor(-1, 3), 0)
        self.assertEqual(viewport.clamp_cursor(4, 0), 0)


class ScrollRoundTripTests(unittest.TestCase):
    def test_file_at_scroll_inverts_scroll_offset_for_file(self) -> None:
        diffs = [
            _diff("a.py", "-", "-", "+", " "),
            _diff("b.py", "+", "+", "+", collapsed=True),
            _diff("logo.png", is_binary=True),
            _diff("c.py", "-", "+", "+", " ", "-"),
            _diff("d.py", " "),
        ]
        for layout in (UNI, SBS):
            with self.subTest(layout=layout):
                for index in range(len(diffs)):
                    offset = viewport.scroll_offset_for_file(diffs, layout, index)
                    self.assertEqual(viewport.file_at_scroll(diffs, layout, offset), index)
                    last = offset + viewport.file_line_cost(diffs[index], layout) - 1
                    self.assertEqual(viewport.file_at_scroll(diffs, layout, last), index)


if __name__ == "__main__":
    unittest.main()

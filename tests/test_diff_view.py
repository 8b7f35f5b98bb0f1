"""Diff layout pairing and hunk row rendering tests."""

from __future__ import annotations

import unittest

from gv.ansi import display_width, strip_ansi
from gv.diff_view import DiffLayout, SyntaxHighlighter, pair_hunk_lines, render_file_body, render_hunk
from gv.diff_view.hunks import render_file_header
from gv.diff_view.styling import apply_line_background
from gv.git.diff_parser import parse_diff
from gv.git.models import DiffLine, FileDiff, Hunk, LineType
from gv.ui_theme import DEFAULT_THEME, PLAIN_THEME

R1 = DiffLine(LineType.REMOVED, "r1", 1, None)
R2 = DiffLine(LineType.REMOVED, "r2", 2, None)
A1 = DiffLine(LineType.ADDED, "a1", None, 1)
C1 = DiffLine(LineType.CONTEXT, "c1", 3, 2)


class PairingTests(unittest.TestCase):
    def test_runs_pair_and_shorter_side_gets_blank(self) -> None:
        self.assertEqual(pair_hunk_lines([R1, R2, A1, C1]), [(R1, A1), (R2, None), (C1, C1)])

    def test_trailing_additions_flush_at_end(self) -> None:
        self.assertEqual(pair_hunk_lines([C1, A1]), [(C1, C1), (None, A1)])

    def test_layout_toggles(self) -> None:
        self.assertIs(DiffLayout.UNIFIED.toggled(), DiffLayout.SIDE_BY_SIDE)
        self.assertIs(DiffLayout.SIDE_BY_SIDE.toggled(), DiffLayout.UNIFIED)


class RenderHunkTests(unittest.TestCase):
    def setUp(self) -> None:
        self.hunk = Hunk(1, 3, 1, 2, [R1, R2, A1, C1])

    def test_unified_rows_have_gutter_and_exact_width(self) -> None:
        rows = render_hunk(self.hunk, DiffLayout.UNIFIED, None, 40, PLAIN_THEME)
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[0].rstrip(), "   1      - r1")
        self.assertEqual(rows[2].rstrip(), "        1 + a1")
        self.assertEqual(rows[3].rstrip(), "   3    2   c1")
        self.assertTrue(all(len(row) == 40 for row in rows))

    def test_side_by_side_rows_split_and_blank_cell(self) -> None:
        rows = render_hunk(self.hunk, DiffLayout.SIDE_BY_SIDE, None, 41, DEFAULT_THEME)
        self.assertEqual(len(rows), 3)
        for row in rows:
            self.assertEqual(display_width(row), 41)
        left, right = strip_ansi(rows[1]).split(" │ ")
        self.assertIn("r2", left)
        self.assertEqual(right.strip(), "")
        left, right = strip_ansi(rows[0]).split(" │ ")
        self.assertIn("r1", left)
        self.assertIn("a1", right)

    def test_mismatched_styled_input_uses_plain_text(self) -> None:
        rows = render_hunk(self.hunk, DiffLayout.UNIFIED, ["only one"], 30, PLAIN_THEME)
        self.assertIn("r1", rows[0])
        self.assertNotIn("only one", "".join(rows))

    def test_tabs_expand_and_control_bytes_escape(self) -> None:
        hunk = Hunk(1, 0, 1, 1, [DiffLine(LineType.ADDED, "\tx\x07", None, 1)])
        row = render_hunk(hunk, DiffLayout.UNIFIED, None, 40, PLAIN_THEME)[0]
        self.assertIn("+     x\\x07", row)


class FileRenderingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.highlighter = SyntaxHighlighter(no_color=True)

    def test_header_shows_rename_and_stats(self) -> None:
        diff = FileDiff("new.txt", "old.txt")
        header = render_file_header(diff, 60, PLAIN_THEME)
        self.assertTrue(header.startswith("▼ old.txt → new.txt"))
        self.assertIn("+0 -0", header)
        self.assertEqual(len(header), 60)

    def test_collapsed_body_is_placeholder(self) -> None:
        diff = parse_diff("diff --git a/f b/f\n@@ -1 +1 @@\n-a\n+b\n")[0]
        diff.collapsed = True
        rows = render_file_body(diff, DiffLayout.UNIFIED, self.highlighter, 30, PLAIN_THEME)
        self.assertEqual([row.strip() for row in rows], ["(collapsed)"])
        self.assertTrue(render_file_header(diff, 30, PLAIN_THEME).startswith("▶"))

    def test_binary_body_is_placeholder(self) -> None:
        diff = parse_diff("diff --git a/x.png b/x.png\nBinary files a/x.png and b/x.png differ\n")[0]
        rows = render_file_body(diff, DiffLayout.UNIFIED, self.highlighter, 30, PLAIN_THEME)
        self.assertEqual([row.strip() for row in rows], ["Binary file"])

    def test_body_window_spans_hunks(self) -> None:
        text = (
            "diff --git a/f b/f\n"
            "@@ -1,2 +1,2 @@\n-a\n+b\n"
            "@@ -10,2 +10,2 @@\n-c\n+d\n"
        )
        diff = parse_diff(text)[0]
        rows = render_file_body(diff, DiffLayout.UNIFIED, self.highlighter, 30, PLAIN_THEME, 1, 2)
        self.assertEqual(len(rows), 2)
        self.assertIn("+ b", rows[0])
        self.assertIn("- c", rows[1])


class BackgroundTests(unittest.TestCase):
    def test_background_survives_inner_resets(self) -> None:
        styled = apply_line_background("\033[38;5;81mdef\033[0m x", "48;5;22")
        self.assertTrue(styled.startswith("\033[48;5;22m"))
        self.assertIn("\033[38;5;81;48;5;22m", styled)
        self.assertIn("\033[0;48;5;22m", styled)
        self.assertTrue(styled.endswith("\033[0m"))

    def test_dark_foreground_is_lifted(self) -> None:
        styled = apply_line_background("\033[38;5;236m# note", "48;5;52")
        self.assertIn("\033[38;5;246;48;5;52m", styled)

    def test_empty_background_is_noop(self) -> None:
        self.assertEqual(apply_line_background("abc", ""), "abc")


if __name__ == "__main__":
    unittest.main()

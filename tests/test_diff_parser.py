"""Unified diff parsing tests.

Covers line numbering, hunk header defaults, metadata skipping, renames,
binary markers, and the added/removed stat invariant.
"""

from __future__ import annotations

import io
import unittest

from gv.errors import DiffParseError
from gv.git.diff_parser import parse_diff, total_stats
from gv.git.models import FileDiff, Hunk, LineType, DiffLine

SIMPLE_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -10,3 +10,2 @@ def main():
 keep = 1
-old = 2
+new = 2
-gone = 3
"""

MULTI_FILE_DIFF = """\
diff --git a/a.txt b/a.txt
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/a.txt
@@ -0,0 +1,2 @@
+one
+two
diff --git a/old/name.go b/new/name.go
similarity index 90%
rename from old/name.go
rename to new/name.go
index 3333333..4444444 100644
--- a/old/name.go
+++ b/new/name.go
@@ -1 +1 @@
-package old
+package new
diff --git a/logo.png b/logo.png
index 5555555..6666666 100644
Binary files a/logo.png and b/logo.png differ
"""


class DiffParserTests(unittest.TestCase):
    def test_line_numbers_advance_by_line_type(self) -> None:
        diffs = parse_diff(SIMPLE_DIFF)

        self.assertEqual(len(diffs), 1)
        hunk = diffs[0].hunks[0]
        self.assertEqual((hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count), (10, 3, 10, 2))
        self.assertEqual(
            [(line.type, line.content, line.old_number, line.new_number) for line in hunk.lines],
            [
                (LineType.CONTEXT, "keep = 1", 10, 10),
                (LineType.REMOVED, "old = 2", 11, None),
                (LineType.ADDED, "new = 2", None, 11),
                (LineType.REMOVED, "gone = 3", 12, None),
            ],
        )

    def test_stats_match_line_counts(self) -> None:
        for diff in parse_diff(SIMPLE_DIFF + MULTI_FILE_DIFF):
            added = sum(1 for h in diff.hunks for line in h.lines if line.type is LineType.ADDED)
            removed = sum(1 for h in diff.hunks for line in h.lines if line.type is LineType.REMOVED)
            self.assertEqual((diff.added, diff.removed), (added, removed), diff.path)

    def test_missing_hunk_counts_default_to_one(self) -> None:
        diffs = parse_diff(MULTI_FILE_DIFF)
        rename = diffs[1]
        hunk = rename.hunks[0]
        self.assertEqual((hunk.old_count, hunk.new_count), (1, 1))

    def test_rename_sets_old_path_and_equal_paths_clear_it(self) -> None:
        diffs = parse_diff(MULTI_FILE_DIFF)
        self.assertIsNone(diffs[0].old_path)
        self.assertEqual(diffs[1].old_path, "old/name.go")
        self.assertEqual(diffs[1].path, "new/name.go")
        self.assertTrue(diffs[1].is_rename)

    def test_binary_marker_sets_flag_without_hunks(self) -> None:
        binary = parse_diff(MULTI_FILE_DIFF)[2]
        self.assertTrue(binary.is_binary)
        self.assertEqual(binary.hunks, [])
        self.assertEqual((binary.added, binary.removed), (0, 0))

    def test_new_file_lines_start_at_declared_new_start(self) -> None:
        created = parse_diff(MULTI_FILE_DIFF)[0]
        self.assertEqual([line.new_number for line in created.hunks[0].lines], [1, 2])
        self.assertEqual(created.added, 2)

    def test_no_newline_marker_is_ignored(self) -> None:
        text = (
            "diff --git a/x b/x\n"
            "--- a/x\n"
            "+++ b/x\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "\\ No newline at end of file\n"
            "+b\n"
            "\\ No newline at end of file\n"
        )
        diff = parse_diff(text)[0]
        self.assertEqual([line.type for line in diff.hunks[0].lines], [LineType.REMOVED, LineType.ADDED])

    def test_removed_line_that_looks_like_header_is_content(self) -> None:
        text = (
            "diff --git a/q.sql b/q.sql\n"
            "--- a/q.sql\n"
            "+++ b/q.sql\n"
            "@@ -1,2 +1,1 @@\n"
            "--- comment\n"
            " select 1;\n"
        )
        diff = parse_diff(text)[0]
        self.assertEqual(diff.removed, 1)
        self.assertEqual(diff.hunks[0].lines[0].content, "-- comment")

    def test_unprefixed_line_inside_hunk_becomes_context(self) -> None:
        text = "diff --git a/x b/x\n@@ -5,1 +5,1 @@\n-a\n+b\nstray\n"
        lines = parse_diff(text)[0].hunks[0].lines
        self.assertEqual(lines[-1], DiffLine(LineType.CONTEXT, "stray", 6, 6))

    def test_lines_before_first_file_header_are_skipped(self) -> None:
        self.assertEqual(parse_diff("warning: something\n+not a diff\n"), [])

    def test_multiple_hunks_keep_their_own_counters(self) -> None:
        text = (
            "diff --git a/m b/m\n"
            "@@ -1,1 +1,1 @@\n"
            "-a\n"
            "+b\n"
            "@@ -40,2 +40,3 @@\n"
            " c\n"
            "+d\n"
            " e\n"
        )
        hunks = parse_diff(text)[0].hunks
        self.assertEqual(len(hunks), 2)
        self.assertEqual([line.old_number for line in hunks[1].lines], [40, None, 41])
        self.assertEqual([line.new_number for line in hunks[1].lines], [40, 41, 42])

    def test_quoted_header_paths_are_unquoted(self) -> None:
        text = (
            "diff --git a/a.txt b/a.txt\n"
            "@@ -1 +1 @@\n"
            "-x\n"
            "+y\n"
            'diff --git "a/donn\\303\\251es.txt" "b/donn\\303\\251es.txt"\n'
            "@@ -1 +1 @@\n"
            "-p\n"
            "+q\n"
        )
        diffs = parse_diff(text)
        self.assertEqual([(d.path, d.added, d.removed) for d in diffs], [("a.txt", 1, 1), ("données.txt", 1, 1)])
        self.assertIsNone(diffs[1].old_path)

    def test_quoted_header_escapes_and_mixed_forms(self) -> None:
        text = 'diff --git a/old name.txt "b/tab\\there \\"q\\".txt"\nrename from old name.txt\n'
        diff = parse_diff(text)[0]
        self.assertEqual(diff.old_path, "old name.txt")
        self.assertEqual(diff.path, 'tab\there "q".txt')

    def test_lone_carriage_return_stays_inside_its_line(self) -> None:
        text = "diff --git a/m b/m\n@@ -1,2 +1,2 @@\n-one\rtwo\n--three\n+one\r-x\n+zzz\n"
        diff = parse_diff(text)[0]
        self.assertEqual((diff.added, diff.removed), (2, 2))
        self.assertEqual(diff.hunks[0].lines[0], DiffLine(LineType.REMOVED, "one\rtwo", 1, None))
        self.assertEqual([line.old_number for line in diff.hunks[0].lines], [1, 2, None, None])

    def test_accepts_line_stream(self) -> None:
        diffs = parse_diff(io.StringIO(SIMPLE_DIFF))
        self.assertEqual(diffs[0].path, "src/app.py")
        self.assertEqual(total_stats(diffs), (1, 2))

    def test_stream_read_failure_raises_parse_error(self) -> None:
        def broken():
            yield "diff --git a/x b/x\n"
            raise OSError("pipe closed")

        with self.assertRaises(DiffParseError):
            parse_diff(broken())

    def test_file_diff_rejects_inconsistent_stats(self) -> None:
        hunk = Hunk(1, 1, 1, 1, [DiffLine(LineType.ADDED, "x", None, 1)])
        with self.assertRaises(ValueError):
            FileDiff(path="x", added=0, removed=0, hunks=[hunk])


if __name__ == "__main__":
    unittest.main()

"""Parse unified ``git diff`` output into ``FileDiff`` records.

Unrecognized lines are skipped rather than rejected; only a failure to read
the input stream raises ``DiffParseError``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..errors import DiffParseError
from .models import DiffLine, FileDiff, Hunk, LineType, count_changes

LOG = logging.getLogger(__name__)

_QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
_FILE_HEADER_RE = re.compile(
    r"^diff --git (?P<old>" + _QUOTED_PATH + r"|a/.+) (?P<new>" + _QUOTED_PATH + r"|b/.+)$"
)
_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}
_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_METADATA_PREFIXES = (
    "---",
    "+++",
    "index ",
    "new file",
    "deleted file",
    "old mode",
    "new mode",
    "similarity",
    "dissimilarity",
    "rename from",
    "rename to",
    "copy from",
    "copy to",
)


@dataclass
class _OpenHunk:
    """Hunk under construction with running line counters."""

    hunk: Hunk
    old_line: int
    new_line: int
    old_remaining: int
    new_remaining: int

    @property
    def expects_body(self) -> bool:
        return self.old_remaining > 0 or self.new_remaining > 0

    def append(self, line_type: LineType, content: str) -> None:
        old_number = None
        new_number = None
        if line_type is not LineType.ADDED:
            old_number = self.old_line
            self.old_line += 1
            self.old_remaining -= 1
        if line_type is not LineType.REMOVED:
            new_number = self.new_line
            self.new_line += 1
            self.new_remaining -= 1
        self.hunk.lines.append(DiffLine(line_type, content, old_number, new_number))


@dataclass
class _OpenFile:
    """File section under construction."""

    path: str
    old_path: str | None
    is_binary: bool = False
    hunks: list[Hunk] = field(default_factory=list)
    current: _OpenHunk | None = None

    def open_hunk(self, old_start: int, old_count: int, new_start: int, new_count: int) -> None:
        hunk = Hunk(old_start, old_count, new_start, new_count)
        self.hunks.append(hunk)
        self.current = _OpenHunk(hunk, old_start, new_start, old_count, new_count)

    def finish(self) -> FileDiff:
        added, removed = count_changes(self.hunks)
        return FileDiff(
            path=self.path,
            old_path=self.old_path,
            added=added,
            removed=removed,
            hunks=self.hunks,
            is_binary=self.is_binary,
        )


def _unquote_path(token: str) -> str:
    """Undo git's C-style path quoting (octal byte escapes are UTF-8)."""
    if len(token) < 2 or token[0] != '"' or token[-1] != '"':
        return token
    body = token[1:-1]
    out = bytearray()
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\" or index + 1 >= len(body):
            out += char.encode("utf-8")
            index += 1
            continue
        escape = body[index + 1]
        octal = body[index + 1:index + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            index += 4
        elif escape in _ESCAPES:
            out.append(_ESCAPES[escape])
            index += 2
        else:
            out += escape.encode("utf-8")
            index += 2
    return out.decode("utf-8", "replace")


def _header_paths(match: re.Match[str]) -> tuple[str, str]:
    old_path = _unquote_path(match.group("old")).removeprefix("a/")
    new_path = _unquote_path(match.group("new")).removeprefix("b/")
    return old_path, new_path


def _iter_lines(source: str | Iterable[str]) -> Iterable[str]:
    if isinstance(source, str):
        source = source.split("\n")
        if source and not source[-1]:
            source.pop()
    for raw in source:
        yield raw.rstrip("\r\n")


def _content_line(line: str) -> tuple[LineType, str] | None:
    """Classify a hunk body line; ``None`` means ignore it."""
    head = line[:1]
    if head == "+":
        return LineType.ADDED, line[1:]
    if head == "-":
        return LineType.REMOVED, line[1:]
    if head == " ":
        return LineType.CONTEXT, line[1:]
    if head == "\\":
        return None
    return LineType.CONTEXT, line


def parse_diff(source: str | Iterable[str]) -> list[FileDiff]:
    """Parse unified diff text (or a line stream) into ordered file diffs.

    Line numbers advance from each hunk's declared starts: removed lines bump
    the old counter, added lines the new counter, context lines both. Lines
    inside a hunk body are classified by prefix before metadata matching, so
    removed text such as ``-- comment`` is not mistaken for a ``---`` header.
    """
    diffs: list[FileDiff] = []
    current: _OpenFile | None = None

    try:
        for line in _iter_lines(source):
            header = _FILE_HEADER_RE.match(line)
            if header:
                if current is not None:
                    diffs.append(current.finish())
                old_path, new_path = _header_paths(header)
                current = _OpenFile(path=new_path, old_path=None if old_path == new_path else old_path)
                continue

            if current is None:
                continue

            hunk = current.current
            if hunk is not None and hunk.expects_body:
                if not line:
                    hunk.append(LineType.CONTEXT, "")
                    continue
                if line[0] in "+- \\":
                    classified = _content_line(line)
                    if classified is not None:
                        hunk.append(*classified)
                    continue

            if line.startswith("Binary files"):
                current.is_binary = True
                continue

            match = _HUNK_RE.match(line)
            if match:
                current.open_hunk(
                    int(match.group(1)),
                    int(match.group(2) or "1"),
                    int(match.group(3)),
                    int(match.group(4) or "1"),
                )
                continue

            if line.startswith(_METADATA_PREFIXES):
                continue

            if hunk is None or not line:
                continue
            classified = _content_line(line)
            if classified is not None:
                hunk.append(*classified)
    except (OSError, UnicodeDecodeError) as exc:
        raise DiffParseError(f"failed to read diff: {exc}") from exc

    if current is not None:
        diffs.append(current.finish())
    LOG.debug("parsed %d file diffs", len(diffs))
    return diffs


def total_stats(diffs: Iterable[FileDiff]) -> tuple[int, int]:
    """Return summed ``(added, removed)`` across ``diffs``."""
    added = 0
    removed = 0
    for diff in diffs:
        added += diff.added
        removed += diff.removed
    return added, removed


__all__ = ["parse_diff", "total_stats"]

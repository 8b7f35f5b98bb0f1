"""Build and flatten the changed-file tree shown in the sidebar."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..git.models import FileDiff
from .types import FileNode, FolderNode, TreeRow

PATH_SEPARATOR = "/"


def build_file_tree(diffs: Sequence[FileDiff], expanded_folders: Mapping[str, bool]) -> FolderNode:
    """Group ``diffs`` by directory under an unnamed root folder.

    Siblings keep first-seen order. A folder is expanded unless
    ``expanded_folders`` maps its path to ``False``. Stats are added to every
    ancestor as each file is inserted.
    """
    root = FolderNode(name="", path="")
    for index, diff in enumerate(diffs):
        parts = diff.path.split(PATH_SEPARATOR)
        folder = root
        folder.added += diff.added
        folder.removed += diff.removed
        for depth, part in enumerate(parts[:-1]):
            folder_path = PATH_SEPARATOR.join(parts[: depth + 1])
            child = _find_folder(folder, part)
            if child is None:
                child = FolderNode(
                    name=part,
                    path=folder_path,
                    expanded=expanded_folders.get(folder_path, True),
                )
                folder.children.append(child)
            child.added += diff.added
            child.removed += diff.removed
            folder = child
        folder.children.append(
            FileNode(
                name=parts[-1],
                path=diff.path,
                file_index=index,
                added=diff.added,
                removed=diff.removed,
            )
        )
    return root


def _find_folder(parent: FolderNode, name: str) -> FolderNode | None:
    for child in parent.children:
        if isinstance(child, FolderNode) and child.name == name:
            return child
    return None


def flatten_tree(root: FolderNode) -> list[TreeRow]:
    """Pre-order rows below ``root``, skipping children of collapsed folders."""
    rows: list[TreeRow] = []
    stack: list[tuple[FolderNode | FileNode, int]] = [(child, 0) for child in reversed(root.children)]
    while stack:
        node, depth = stack.pop()
        rows.append(TreeRow(node, depth))
        if isinstance(node, FolderNode) and node.expanded:
            stack.extend((child, depth + 1) for child in reversed(node.children))
    return rows


def row_index_for_file(rows: Sequence[TreeRow], file_index: int) -> int | None:
    """Return the flattened row showing ``file_index``, if it is visible."""
    for row_index, row in enumerate(rows):
        if isinstance(row.node, FileNode) and row.node.file_index == file_index:
            return row_index
    return None

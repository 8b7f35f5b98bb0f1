"""Sidebar tree node types."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FileNode:
    """Leaf pointing at one entry of the visible diff list."""

    name: str
    path: str
    file_index: int
    added: int = 0
    removed: int = 0


@dataclass
class FolderNode:
    """Directory node; stats are the sum over every descendant file."""

    name: str
    path: str
    children: list[FolderNode | FileNode] = field(default_factory=list)
    expanded: bool = True
    added: int = 0
    removed: int = 0


TreeNode = FolderNode | FileNode


@dataclass(frozen=True)
class TreeRow:
    """One flattened sidebar row."""

    node: TreeNode
    depth: int

    @property
    def is_folder(self) -> bool:
        return isinstance(self.node, FolderNode)

"""Sidebar tree model: filtering, construction, flattening, naming.

Everything here is a pure projection of the current diff list and is
rebuilt on every frame.
"""

from __future__ import annotations

from .build import build_file_tree, flatten_tree, row_index_for_file
from .display_names import get_display_names
from .filtering import DEFAULT_HIDDEN_FILES, hidden_count, is_hidden, visible_diffs
from .types import FileNode, FolderNode, TreeNode, TreeRow

__all__ = [
    "DEFAULT_HIDDEN_FILES",
    "FileNode",
    "FolderNode",
    "TreeNode",
    "TreeRow",
    "build_file_tree",
    "flatten_tree",
    "get_display_names",
    "hidden_count",
    "is_hidden",
    "row_index_for_file",
    "visible_diffs",
]

"""Shortest unambiguous display names for changed files."""

from __future__ import annotations

from collections.abc import Iterable

from .build import PATH_SEPARATOR


def get_display_names(paths: Iterable[str]) -> dict[str, str]:
    """Map each path to its basename, or the shortest unique path suffix.

    Suffixes grow one directory at a time from the filename outward and are
    compared only against paths sharing the same basename. When no proper
    suffix is unique the full path is used.
    """
    unique_paths = list(dict.fromkeys(paths))
    groups: dict[str, list[list[str]]] = {}
    for path in unique_paths:
        parts = path.split(PATH_SEPARATOR)
        groups.setdefault(parts[-1], []).append(parts)

    names: dict[str, str] = {}
    for basename, members in groups.items():
        if len(members) == 1:
            names[PATH_SEPARATOR.join(members[0])] = basename
            continue
        for parts in members:
            path = PATH_SEPARATOR.join(parts)
            names[path] = path
            others = [other for other in members if other is not parts]
            for size in range(2, len(parts)):
                suffix = parts[-size:]
                if not any(other[-size:] == suffix for other in others):
                    names[path] = PATH_SEPARATOR.join(suffix)
                    break
    return names

"""Hidden-file filtering by basename."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from ..git.models import FileDiff

DEFAULT_HIDDEN_FILES: tuple[str, ...] = (
    "go.sum",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Cargo.lock",
    "Gemfile.lock",
    "poetry.lock",
    "composer.lock",
    ".pnp.cjs",
    ".pnp.loader.mjs",
)


def is_hidden(diff: FileDiff, hidden_names: Collection[str]) -> bool:
    return diff.basename in hidden_names


def visible_diffs(diffs: Sequence[FileDiff], show_hidden: bool, hidden_names: Collection[str]) -> list[FileDiff]:
    """Return ``diffs`` minus hidden basenames unless ``show_hidden``."""
    if show_hidden or not hidden_names:
        return list(diffs)
    return [diff for diff in diffs if not is_hidden(diff, hidden_names)]


def hidden_count(diffs: Sequence[FileDiff], hidden_names: Collection[str]) -> int:
    return sum(1 for diff in diffs if is_hidden(diff, hidden_names))

"""JSON config file loading.

Reads base branch, hidden-file basenames, theme, syntax style, layout, and
context-line defaults. All access is defensive: malformed or missing config
falls back safely, one key at a time.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .diff_view.layout import DiffLayout
from .git.commits import CONTEXT_CYCLE, DEFAULT_CONTEXT_LINES
from .tree_model import DEFAULT_HIDDEN_FILES

LOG = logging.getLogger(__name__)

APP_NAME = "gv"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class GvConfig:
    """Resolved settings; ``None`` means "not configured"."""

    base_branch: str | None = None
    hidden_files: frozenset[str] = frozenset(DEFAULT_HIDDEN_FILES)
    theme: str | None = None
    style: str | None = None
    layout: DiffLayout = DiffLayout.SIDE_BY_SIDE
    context_lines: int = DEFAULT_CONTEXT_LINES


def load_config_data(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        LOG.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        LOG.warning("ignoring config %s: top level is not an object", config_path)
        return {}
    return data


def _optional_str(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _hidden_files(value: object) -> frozenset[str]:
    if not isinstance(value, list):
        return frozenset(DEFAULT_HIDDEN_FILES)
    return frozenset(item for item in value if isinstance(item, str) and item)


def _layout(value: object) -> DiffLayout:
    try:
        return DiffLayout(value)
    except ValueError:
        return DiffLayout.SIDE_BY_SIDE


def _context_lines(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value not in CONTEXT_CYCLE:
        return DEFAULT_CONTEXT_LINES
    return value


def load_config(path: Path | None = None) -> GvConfig:
    data = load_config_data(path)
    return GvConfig(
        base_branch=_optional_str(data, "base_branch"),
        hidden_files=_hidden_files(data.get("hidden_files")),
        theme=_optional_str(data, "theme"),
        style=_optional_str(data, "style"),
        layout=_layout(data.get("layout")),
        context_lines=_context_lines(data.get("context_lines")),
    )


__all__ = ["APP_NAME", "CONFIG_PATH", "GvConfig", "load_config", "load_config_data"]

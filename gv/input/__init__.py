"""Input decoding and key dispatch primitives."""

from __future__ import annotations

from .key_registry import ENTER_KEYS, KeyComboBinding, KeyComboRegistry
from .mouse import MouseAction, MouseEvent, is_mouse_key, parse_mouse_key
from .reader import read_key

__all__ = [
    "ENTER_KEYS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "MouseAction",
    "MouseEvent",
    "is_mouse_key",
    "parse_mouse_key",
    "read_key",
]

"""Decode ``MOUSE_*`` key tokens into structured events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MouseAction(Enum):
    WHEEL_UP = "MOUSE_WHEEL_UP"
    WHEEL_DOWN = "MOUSE_WHEEL_DOWN"
    LEFT_DOWN = "MOUSE_LEFT_DOWN"
    LEFT_UP = "MOUSE_LEFT_UP"


@dataclass(frozen=True)
class MouseEvent:
    """Mouse event with 0-based screen coordinates."""

    action: MouseAction
    x: int
    y: int


def is_mouse_key(key: str) -> bool:
    return key.startswith("MOUSE")


def parse_mouse_key(key: str) -> MouseEvent | None:
    """Parse ``MOUSE_<ACTION>:col:row`` (1-based) tokens."""
    parts = key.split(":")
    if len(parts) != 3:
        return None
    try:
        action = MouseAction(parts[0])
        col = int(parts[1])
        row = int(parts[2])
    except ValueError:
        return None
    return MouseEvent(action, max(0, col - 1), max(0, row - 1))

"""Key-combo dispatch tables used by each view mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

ENTER_KEYS = ("ENTER_CR", "ENTER_LF")


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback.

    Handlers receive the numeric prefix (``None`` when none was typed).
    """

    combos: tuple[str, ...]
    handler: Callable[[int | None], None]


class KeyComboRegistry:
    """Exact-match key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[int | None], None]] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register bindings, later combos overwriting earlier ones."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def dispatch(self, key: str, count: int | None = None) -> bool:
        """Invoke the handler bound to ``key``; ``False`` when unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler(count)
        return True

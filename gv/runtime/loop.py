"""Main interactive event loop.

Each iteration syncs the terminal size, installs finished fetches, renders
when the state is dirty, then waits briefly for one key. An empty read is an
idle tick that advances the loading spinner.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from .loader import FetchResult
from .machine import AppStateMachine
from .state import AppState
from .terminal import TerminalController

KEY_TIMEOUT_MS = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[AppState], None]
    drain_results: Callable[[], list[FetchResult]]
    terminal_size: Callable[[], tuple[int, int]]


def run_main_loop(
    machine: AppStateMachine,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run until the state machine requests quit."""
    state = machine.state
    with terminal.raw_mode():
        while not machine.should_quit:
            columns, lines = callbacks.terminal_size()
            machine.resize(columns, lines)
            for result in callbacks.drain_results():
                machine.handle_result(result)

            if state.dirty:
                callbacks.render(state)
                state.dirty = False

            key = read_key(stdin_fd, timeout_ms=KEY_TIMEOUT_MS)
            if not key:
                machine.tick()
                continue
            machine.handle_key(key)

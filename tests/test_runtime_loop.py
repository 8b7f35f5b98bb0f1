from __future__ import annotations

import unittest
from contextlib import contextmanager
from pathlib import Path
from unittest import mock

from gv.git.models import DiffLine, FileDiff, Hunk, LineType, Worktree
from gv.runtime.loader import FetchRequest, FetchResult
from gv.runtime.loop import KEY_TIMEOUT_MS, RuntimeLoopCallbacks, run_main_loop
from gv.runtime.machine import AppStateMachine
from gv.runtime.state import AppState


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _FakeLoader:
    def __init__(self) -> None:
        self.next_id = 0

    def submit(self, repo_path, base_branch, context_lines, selection=None) -> int:
        self.next_id += 1
        return self.next_id


def _diff(path: str) -> FileDiff:
    lines = [DiffLine(LineType.ADDED, "x", None, 1)]
    return FileDiff(path, None, 1, 0, [Hunk(0, 0, 1, 1, lines)])


def _make_machine() -> AppStateMachine:
    state = AppState(worktrees=[Worktree(Path("/repo"), "feature", "abc")], current_worktree=0, base_branch="main")
    machine = AppStateMachine(state, _FakeLoader())
    machine.request_reload()
    return machine


class RunMainLoopTests(unittest.TestCase):
    def test_results_install_then_keys_apply_until_quit(self) -> None:
        machine = _make_machine()
        request = FetchRequest(machine.state.latest_request_id, Path("/repo"), "main", 3)
        pending = [[FetchResult(request, [], [_diff("a.py"), _diff("b.py")])]]
        renders: list[tuple[bool, int]] = []
        keys = iter(["", "j", "q"])
        terminal = _FakeTerminal()

        callbacks = RuntimeLoopCallbacks(
            render=lambda state: renders.append((state.loading, state.view.file_cursor)),
            drain_results=lambda: pending.pop() if pending else [],
            terminal_size=lambda: (100, 30),
        )
        with mock.patch("gv.runtime.loop.read_key", side_effect=lambda fd, timeout_ms: next(keys)) as read_key:
            run_main_loop(machine, terminal, 0, callbacks)

        self.assertTrue(machine.should_quit)
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))
        self.assertEqual(renders, [(False, 0), (False, 1)])
        self.assertEqual((machine.state.view.width, machine.state.view.height), (100, 30))
        read_key.assert_called_with(0, timeout_ms=KEY_TIMEOUT_MS)

    def test_idle_reads_tick_spinner_while_loading(self) -> None:
        machine = _make_machine()
        keys = iter(["", "", "q"])
        callbacks = RuntimeLoopCallbacks(
            render=lambda state: None,
            drain_results=lambda: [],
            terminal_size=lambda: (80, 24),
        )
        with mock.patch("gv.runtime.loop.read_key", side_effect=lambda fd, timeout_ms: next(keys)):
            run_main_loop(machine, _FakeTerminal(), 0, callbacks)
        self.assertEqual(machine.state.spinner_frame, 2)
        self.assertTrue(machine.state.loading)

    def test_terminal_is_restored_when_render_fails(self) -> None:
        machine = _make_machine()
        terminal = _FakeTerminal()

        def explode(state) -> None:
            raise RuntimeError("render failed")

        callbacks = RuntimeLoopCallbacks(render=explode, drain_results=lambda: [], terminal_size=lambda: (80, 24))
        with self.assertRaises(RuntimeError):
            run_main_loop(machine, terminal, 0, callbacks)
        self.assertEqual(terminal.exited, 1)


if __name__ == "__main__":
    unittest.main()

"""Regression tests for raw-key decoding.

Covers ESC timing, arrow and paging sequences, control-key tokens, UTF-8
input, and SGR mouse reports.
"""

import os
import time
import unittest

from gv.input import reader as input_mod
from gv.input.key_registry import KeyComboBinding, KeyComboRegistry


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read_all(self, data: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._read_all(b"\x1b", 1)
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_arrow_and_page_sequences(self) -> None:
        keys = self._read_all(b"\x1b[A\x1b[B\x1b[5~\x1b[6~", 4)
        self.assertEqual(keys, ["UP", "DOWN", "PAGE_UP", "PAGE_DOWN"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read_all(b"\x1ba", 2), ["ESC", "a"])

    def test_control_keys(self) -> None:
        keys = self._read_all(b"\x03\x04\x15\t\r\n", 6)
        self.assertEqual(keys, ["CTRL_C", "CTRL_D", "CTRL_U", "TAB", "ENTER_CR", "ENTER_LF"])

    def test_multibyte_utf8_character_is_one_key(self) -> None:
        self.assertEqual(self._read_all("é?".encode(), 2), ["é", "?"])

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(self._read_all(b"", 1), [""])

    def test_sgr_mouse_reports(self) -> None:
        keys = self._read_all(b"\x1b[<64;10;5M\x1b[<65;3;4M\x1b[<0;7;8M\x1b[<0;7;8m", 4)
        self.assertEqual(
            keys,
            [
                "MOUSE_WHEEL_UP:10:5",
                "MOUSE_WHEEL_DOWN:3:4",
                "MOUSE_LEFT_DOWN:7:8",
                "MOUSE_LEFT_UP:7:8",
            ],
        )

    def test_malformed_mouse_report_is_escape(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[<x;1M", 1), ["ESC"])


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_passes_count_and_reports_unbound(self) -> None:
        seen: list[int | None] = []
        registry = KeyComboRegistry().register_bindings(KeyComboBinding(("j", "DOWN"), seen.append))

        self.assertTrue(registry.dispatch("DOWN", 4))
        self.assertTrue(registry.dispatch("j"))
        self.assertFalse(registry.dispatch("x"))
        self.assertEqual(seen, [4, None])

    def test_later_bindings_override(self) -> None:
        seen: list[str] = []
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q",), lambda count: seen.append("first")),
            KeyComboBinding(("q",), lambda count: seen.append("second")),
        )
        registry.dispatch("q")
        self.assertEqual(seen, ["second"])


if __name__ == "__main__":
    unittest.main()

"""CLI argument, path, and config-merge behavior tests.

Verifies how ``gv.cli.main`` chooses the target path, merges flags over the
config file, and reports startup failures.
"""

from __future__ import annotations

import io
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from gv import cli
from gv.diff_view.layout import DiffLayout
from gv.errors import RepositoryNotFoundError


class _Stream(io.StringIO):
    def __init__(self, tty: bool) -> None:
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("gv.cli.configure_logging", return_value=None)
        patcher.start()
        self.addCleanup(patcher.stop)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        self.config_path = self.root / "config.json"
        self.config_path.write_text("{}", encoding="utf-8")

    def run_main(self, argv: list[str], tty: bool):
        stdout = _Stream(tty)
        with (
            mock.patch.object(sys, "stdin", _Stream(tty)),
            mock.patch.object(sys, "stdout", stdout),
            mock.patch("gv.cli.run_app") as run_app,
            mock.patch("gv.cli.render_once", return_value="plain diff\n") as render_once,
        ):
            cli.main(["--config", str(self.config_path), *argv], default_path=self.root)
        return run_app, render_once, stdout.getvalue()


class CliPathTests(CliTestCase):
    def test_defaults_to_given_default_path(self) -> None:
        run_app, _, _ = self.run_main([], tty=True)
        run_app.assert_called_once()
        path, options = run_app.call_args.args
        self.assertEqual(path, self.root)
        self.assertFalse(options.no_color)

    def test_file_argument_resolves_to_parent_directory(self) -> None:
        target = self.root / "pkg" / "mod.py"
        target.parent.mkdir()
        target.write_text("x = 1\n", encoding="utf-8")
        run_app, _, _ = self.run_main([str(target)], tty=True)
        self.assertEqual(run_app.call_args.args[0], target.parent)

    def test_path_option_is_accepted(self) -> None:
        run_app, _, _ = self.run_main(["-p", str(self.root)], tty=True)
        self.assertEqual(run_app.call_args.args[0], self.root)

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self.run_main([str(self.root / "nope")], tty=True)
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_non_tty_writes_plain_render(self) -> None:
        run_app, render_once, output = self.run_main([], tty=False)
        run_app.assert_not_called()
        render_once.assert_called_once()
        self.assertEqual(output, "plain diff\n")

    def test_startup_error_becomes_exit_message(self) -> None:
        with mock.patch("gv.cli.run_app", side_effect=RepositoryNotFoundError("not a git repository: /x")):
            with mock.patch.object(sys, "stdin", _Stream(True)), mock.patch.object(sys, "stdout", _Stream(True)):
                with self.assertRaises(SystemExit) as ctx:
                    cli.main(["--config", str(self.config_path)], default_path=self.root)
        self.assertEqual(ctx.exception.code, "gv: not a git repository: /x")


class CliOptionTests(CliTestCase):
    def test_config_values_are_used_when_flags_absent(self) -> None:
        self.config_path.write_text(
            json.dumps({"base_branch": "develop", "theme": "ocean", "layout": "unified", "context_lines": 1}),
            encoding="utf-8",
        )
        run_app, _, _ = self.run_main([], tty=True)
        options = run_app.call_args.args[1]
        self.assertEqual(options.base_branch, "develop")
        self.assertEqual(options.theme, "ocean")
        self.assertIs(options.layout, DiffLayout.UNIFIED)
        self.assertEqual(options.context_lines, 1)

    def test_flags_override_config(self) -> None:
        self.config_path.write_text(json.dumps({"base_branch": "develop", "style": "friendly"}), encoding="utf-8")
        run_app, _, _ = self.run_main(["-b", "release", "--style", "monokai", "--no-color"], tty=True)
        options = run_app.call_args.args[1]
        self.assertEqual(options.base_branch, "release")
        self.assertEqual(options.style, "monokai")
        self.assertTrue(options.no_color)

    def test_missing_config_file_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--config", str(self.root / "absent.json")], default_path=self.root)
        self.assertIn("Config file not found", str(ctx.exception.code))

    def test_verbose_is_counted(self) -> None:
        args = cli.build_parser().parse_args(["-vv", "--log-file", "/tmp/gv.log"])
        self.assertEqual(args.verbose, 2)
        self.assertEqual(args.log_file, Path("/tmp/gv.log"))


if __name__ == "__main__":
    unittest.main()

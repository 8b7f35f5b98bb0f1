"""Command-line front door for gv.

Parses CLI options, merges them over the config file, and sets up logging.
Then dispatches into the interactive runtime, or prints a plain diff when
not attached to a terminal.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from . import __version__
from .config import load_config
from .errors import GvError
from .log import configure_logging
from .runtime.app import SessionOptions, render_once, run_app
from .ui_theme import available_theme_names

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gv",
        description="Browse the changes of a git worktree against its base branch.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Repository or worktree path. Defaults to current directory.")
    parser.add_argument("-p", "--path", dest="path_option", default=None, help="Same as the positional path.")
    parser.add_argument("-b", "--base", default=None, help="Base branch to compare against (default: auto-detect).")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: platform config dir).")
    parser.add_argument("--style", default=None, help="Pygments style name for syntax highlighting.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more (repeat for debug).")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_path(args: argparse.Namespace, default_path: Path | None) -> Path:
    """Pick the target directory; positional path wins over ``--path``."""
    raw = args.path or args.path_option
    path = Path(raw) if raw else (default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    return path.parent if path.is_file() else path


def session_options(args: argparse.Namespace) -> SessionOptions:
    """Merge CLI flags over config file values."""
    if args.config is not None and not args.config.exists():
        raise SystemExit(f"Config file not found: {args.config}")
    config = load_config(args.config)
    return SessionOptions(
        base_branch=args.base or config.base_branch,
        hidden_files=config.hidden_files,
        theme=args.theme or config.theme,
        style=args.style or config.style,
        no_color=args.no_color,
        layout=config.layout,
        context_lines=config.context_lines,
    )


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch gv.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    log_path = configure_logging(args.verbose, args.log_file)
    if log_path is not None:
        LOG.info("logging to %s", log_path)

    path = resolve_path(args, default_path)
    options = session_options(args)
    try:
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            width = shutil.get_terminal_size((120, 24)).columns
            sys.stdout.write(render_once(path, options, width))
            return
        run_app(path, options)
    except GvError as exc:
        LOG.error("startup failed: %s", exc)
        raise SystemExit(f"gv: {exc}") from exc


if __name__ == "__main__":
    main()

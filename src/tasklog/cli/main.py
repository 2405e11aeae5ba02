# src/tasklog/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the TrackerEngine, runs exactly one command and
maps tracker errors to exit codes:
- 0 success
- 1 recoverable error (unknown task, session already running, ...)
- 2 fatal error (corrupt or unwritable store) or usage error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.bootstrap import create_engine
from ..cli.commands import TaskArg, registry
from ..config import get_settings
from ..logging_setup import setup_logging
from ..tracker.errors import TrackerError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasklog", description="Command line task time tracker")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding tracker data (default: ~/.tasklog).",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    for name, help_text, task_arg in registry.commands():
        cmd = sub.add_parser(name, help=help_text, description=help_text)
        if task_arg is TaskArg.REQUIRED:
            cmd.add_argument("task", metavar="TASK")
        elif task_arg is TaskArg.OPTIONAL:
            cmd.add_argument("task", metavar="TASK", nargs="?", default=None)
    return parser


def main(argv: list[str] | None = None, *, settings=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if settings is None:
        settings = get_settings()
    if args.data_dir is not None:
        settings = settings.with_data_dir(args.data_dir)

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    log_dir = settings.log_dir if getattr(settings, "log_to_file", True) else None
    try:
        setup_logging(log_dir=log_dir, console_level=console_level)
    except OSError as exc:
        print(f"Error: cannot set up logging in {log_dir}: {exc}", file=sys.stderr)
        return EXIT_FATAL

    task = getattr(args, "task", None)
    logger.debug("%s command=%s task=%s", getattr(settings, "app_name", "tasklog"), args.command, task)

    try:
        engine = create_engine(settings=settings)
        out = registry.handle(engine, args.command, task)
    except TrackerError as exc:
        # The error message carries the path and reason; the store only logs it at DEBUG.
        logger.debug("Command %s failed fatal=%s: %s", args.command, exc.fatal, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FATAL if exc.fatal else EXIT_ERROR
    except OSError as exc:
        logger.exception("Filesystem error while running %s", args.command)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    print(out)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

"""Command line interface for the to-do journal."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import TodoConfig, load_config
from .formatting import format_tasks
from .logging_setup import setup_logging
from .store import JournalStore, TodoError, UsageError

logger = logging.getLogger(__name__)

PROG = "todo"


class TodoArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message, usage=self.format_usage())


def build_parser() -> TodoArgumentParser:
    """Build the argument parser with its add/done/list/help subcommands."""
    parser = TodoArgumentParser(
        prog=PROG,
        description="A command line to-do app that keeps its tasks in a JSON journal.",
    )
    parser.add_argument(
        "-j",
        "--journal-file",
        type=Path,
        help="Use a different journal file (default: journal.json)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (default: auto-detect in current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Print diagnostics to stderr (repeat for more detail)",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<subcommand>", required=True)

    add = subparsers.add_parser("add", help="Write a task to the journal file")
    add.add_argument("text", nargs="+", help="The task description text")

    done = subparsers.add_parser("done", help="Remove a task from the journal file by position")
    done.add_argument("position", type=int, help="1-based position shown by 'list'")

    subparsers.add_parser("list", help="List all tasks in the journal file")

    help_parser = subparsers.add_parser("help", help="Show help for the program or a subcommand")
    help_parser.add_argument("subcommand", nargs="?", help="Subcommand to describe")

    parser.set_defaults(subparsers=subparsers)
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Raises:
        UsageError: If arguments are missing or malformed
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    args.parser = parser
    if args.command == "add":
        args.text = " ".join(args.text)
    return args


def print_help(args: argparse.Namespace) -> None:
    """Print top-level help or the help of one subcommand."""
    if args.subcommand is None:
        args.parser.print_help()
        return

    choices = args.subparsers.choices
    if args.subcommand not in choices:
        raise UsageError(
            f"unknown subcommand '{args.subcommand}' (choose from {', '.join(choices)})",
            usage=args.parser.format_usage(),
        )
    choices[args.subcommand].print_help()


def resolve_config(args: argparse.Namespace) -> TodoConfig:
    """Load configuration and apply command line overrides.

    Raises:
        ValueError: If the config is malformed or the journal path names no file
    """
    config = load_config(Path.cwd(), args.config)
    if args.journal_file is not None:
        config.journal_file = str(args.journal_file)
    config.get_journal_path()
    return config


def run_command(args: argparse.Namespace, config: TodoConfig) -> None:
    """Dispatch a parsed command against the configured journal."""
    journal_path = config.get_journal_path()
    store = JournalStore(journal_path, lock_timeout=config.lock_timeout)
    logger.debug("Using journal %s", journal_path)

    if args.command == "add":
        position, task = store.add_task(args.text)
        print(f"Added task {position}: {task.text}")

    elif args.command == "done":
        task = store.complete_task(args.position)
        print(f"Completed task {args.position}: {task.text}")

    elif args.command == "list":
        for line in format_tasks(store.list_tasks(), width=config.column_width):
            print(line)


def report_usage_error(error: UsageError) -> None:
    sys.stderr.write(error.usage)
    print(f"Error: {error}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Returns:
        Process exit status: 0 on success, 1 on any error
    """
    try:
        args = parse_args(argv)
    except UsageError as e:
        report_usage_error(e)
        return 1

    setup_logging(args.verbose)

    if args.command == "help":
        try:
            print_help(args)
        except UsageError as e:
            report_usage_error(e)
            return 1
        return 0

    # Load configuration
    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        run_command(args, config)
    except TodoError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()

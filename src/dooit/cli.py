# src/dooit/cli.py

"""
Command-line interface for dooit.

This module:
- defines argument parsing and subcommands,
- builds Settings once and hands it to each command,
- delegates filesystem and domain logic to engine modules.

Every handled failure is printed as `Error: ...` and exits with status 1.
"""

import argparse
import logging
from datetime import datetime, timezone

from dooit.engine.dates import parse_due
from dooit.engine.filters import filter_tasks
from dooit.engine.model import Task, Urgency
from dooit.engine.ops import ensure_config_file, ensure_dir, launch_editor, write_task
from dooit.engine.parse import ParseError
from dooit.engine.render import render_tasks, supports_color
from dooit.engine.scan import load_tasks
from dooit.engine.sort import SortMode, sort_tasks
from dooit.engine.validate import ValidationError, validate_task_name
from dooit.logging_setup import setup_logging
from dooit.settings import APP_NAME, Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Personal task tracker")
    parser.add_argument(
        "-e",
        "--editor",
        type=str,
        default=None,
        help="Editor to use when modifying files (default: $EDITOR)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # list
    # ------------------------------------------------------------------

    p_list = sub.add_parser(
        "list",
        help="List tasks",
    )
    p_list.add_argument(
        "-s",
        "--sort",
        type=str,
        default=None,
        choices=[m.value for m in SortMode],
        help=f"Sort tasks (default: {SortMode.default().value})",
    )
    p_list.add_argument(
        "-c",
        "--completed",
        action="store_true",
        help="Show completed items",
    )
    p_list.add_argument(
        "-o",
        "--overdue",
        action="store_true",
        help="Show overdue items",
    )
    p_list.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    p_list.set_defaults(func=cmd_list)

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------

    p_add = sub.add_parser(
        "add",
        help="Add a task",
    )
    p_add.add_argument(
        "name",
        help="Name of the task (subtasks can be created by naming them task/subtask)",
    )
    p_add.add_argument(
        "description",
        nargs="?",
        default=None,
        help="Description of the task",
    )
    p_add.add_argument(
        "-d",
        "--due",
        type=str,
        default=None,
        help="Due date of the task (HH:MM, YYYY-MM-DD or YYYY-MM-DDTHH:MM, local time)",
    )
    p_add.add_argument(
        "-u",
        "--urgency",
        type=str,
        default=Urgency.LOW.value,
        choices=[u.value for u in Urgency],
        help="Urgency of the task",
    )
    p_add.add_argument(
        "-c",
        "--completed",
        action="store_true",
        help="Whether the task has been completed or not",
    )
    p_add.set_defaults(func=cmd_add)

    # ------------------------------------------------------------------
    # config
    # ------------------------------------------------------------------

    p_config = sub.add_parser(
        "config",
        help="Edit the configuration",
    )
    p_config.set_defaults(func=cmd_config)

    return parser


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def _now() -> datetime:
    """Return the current instant (isolated for testability)."""
    return datetime.now(timezone.utc)


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    data_dir = settings.data_dir

    if not data_dir.is_dir():
        print("No tasks to do!")
        print(f"The task directory is empty, add some by running:\n\t`{APP_NAME} add`")
        return 0

    tasks = load_tasks(data_dir)
    visible = filter_tasks(
        tasks,
        _now(),
        completed=bool(args.completed),
        overdue=bool(args.overdue),
    )
    logger.debug("%d of %d task(s) visible", len(visible), len(tasks))

    if not visible:
        print("No tasks to do!")
        return 0

    mode = SortMode(args.sort) if args.sort else settings.default_sort
    color = not bool(args.no_color) and supports_color()
    render_tasks(sort_tasks(visible, mode), color=color)

    return 0


def cmd_add(args: argparse.Namespace, settings: Settings) -> int:
    name = validate_task_name(args.name)
    due = parse_due(args.due) if args.due else None

    task = Task(
        name=name,
        description=args.description,
        due=due,
        urgency=Urgency(args.urgency),
        completed=bool(args.completed),
    )

    if ensure_dir(settings.data_dir):
        print("The task directory doesn't exist, creating it...")

    path = write_task(settings.data_dir, task)
    print(path)
    return 0


def cmd_config(args: argparse.Namespace, settings: Settings) -> int:
    path = ensure_config_file(settings.config_dir)
    launch_editor(args.editor or settings.editor, path)
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    config_error = None
    try:
        settings = Settings.from_env()
    except ParseError as e:
        # `config` is how a broken config.yml gets repaired.
        if args.command != "config":
            print(f"Error: {e}")
            return 1
        config_error = e
        settings = Settings.from_env(read_config=False)

    setup_logging(level="DEBUG" if args.verbose else settings.log_level)
    if config_error is not None:
        logger.warning("Ignoring invalid config file: %s", config_error)
    logger.debug("data_dir=%s config_dir=%s", settings.data_dir, settings.config_dir)

    try:
        return func(args, settings)
    except (ParseError, ValidationError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

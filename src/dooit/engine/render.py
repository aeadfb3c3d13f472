# src/dooit/engine/render.py

"""
Rendering helpers for CLI output.

Presentation-only: formats tasks for the `list` command and never
touches the filesystem.
"""

from __future__ import annotations

import os
import sys
from datetime import timezone
from typing import Iterable

from .model import Task, Urgency


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_RESET = "\033[0m"
_DIM = "\033[90m"

_COLOR = {
    Urgency.LOW: "",
    Urgency.MEDIUM: "\033[33m",  # yellow
    Urgency.HIGH: "\033[31m",    # red
}

DUE_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def supports_color() -> bool:
    """Return True if stdout is a TTY and NO_COLOR is not set."""
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


# ---------------------------------------------------------------------
# Task formatting
# ---------------------------------------------------------------------

def format_task(task: Task, *, color: bool = False) -> str:
    """
    Format a single task block.

    Format:
      - [x] <urgency> <due> <name>
          <description>
    """
    mark = "x" if task.completed else " "

    glyph = task.urgency.glyph
    if color and _COLOR[task.urgency]:
        glyph = f"{_COLOR[task.urgency]}{glyph}{_RESET}"

    line = f"- [{mark}] {glyph}"

    if task.due is not None:
        due_s = task.due.astimezone(timezone.utc).strftime(DUE_FORMAT)
        if color:
            due_s = f"{_DIM}{due_s}{_RESET}"
        line += f" {due_s}"

    line += f" {task.name}"

    if task.description is not None:
        line += f"\n    {task.description}"

    return line


def render_tasks(tasks: Iterable[Task], *, color: bool = False) -> None:
    for task in tasks:
        print(format_task(task, color=color))

# src/dooit/engine/filters.py

"""
List filtering.

Runs before sorting; decides which tasks are shown at all.
"""

from datetime import datetime
from typing import Iterable

from .model import Task


def is_visible(task: Task, now: datetime, *, completed: bool = False, overdue: bool = False) -> bool:
    """
    Return True if `task` should be listed.

    - completed tasks are hidden unless `completed` is set;
    - tasks due strictly before `now` are hidden unless `overdue` is set;
    - tasks without a due date are never hidden by the overdue rule.
    """
    if task.completed and not completed:
        return False

    if task.is_past_due(now) and not overdue:
        return False

    return True


def filter_tasks(
    tasks: Iterable[Task],
    now: datetime,
    *,
    completed: bool = False,
    overdue: bool = False,
) -> list[Task]:
    return [t for t in tasks if is_visible(t, now, completed=completed, overdue=overdue)]

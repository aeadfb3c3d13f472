# src/dooit/engine/sort.py

"""
Task ordering.

Every sort mode is a fixed list of (key, reverse) pairs, most significant
key first. The list is applied as stable sort passes from the least
significant key up, so input order remains the final tie-breaker and a
descending key never disturbs the order of the keys below it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Final, Iterable

from .model import Task


# ---------------------------------------------------------------------
# Sort modes
# ---------------------------------------------------------------------

class SortMode(str, Enum):
    """
    User-selectable list orderings.

    Values are the spellings accepted on the command line.
    """

    URGENCY_ASCENDING = "urgency-ascending"
    URGENCY_DESCENDING = "urgency-descending"
    DAYS_LEFT_ASCENDING = "days-left-ascending"
    DAYS_LEFT_DESCENDING = "days-left-descending"
    NAME_ASCENDING = "name-ascending"
    NAME_DESCENDING = "name-descending"

    @classmethod
    def default(cls) -> "SortMode":
        return cls.URGENCY_DESCENDING


# ---------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------

_NO_DUE: Final[datetime] = datetime.min.replace(tzinfo=timezone.utc)

SortKey = Callable[[Task], Any]


def _by_name(task: Task) -> tuple[str, ...]:
    return task.name_parts


def _by_urgency(task: Task) -> int:
    return task.urgency_rank


def _by_due(task: Task) -> tuple[bool, datetime]:
    # Dated tasks first (False < True), then ascending date.
    return (task.due is None, task.due or _NO_DUE)


_ORDERINGS: Final[dict[SortMode, tuple[tuple[SortKey, bool], ...]]] = {
    SortMode.URGENCY_ASCENDING: (
        (_by_urgency, False),
        (_by_due, False),
        (_by_name, False),
    ),
    SortMode.URGENCY_DESCENDING: (
        (_by_urgency, True),
        (_by_due, False),
        (_by_name, False),
    ),
    SortMode.DAYS_LEFT_ASCENDING: (
        (_by_due, False),
        (_by_urgency, True),
        (_by_name, False),
    ),
    # Reversing the whole due key puts undated tasks first.
    SortMode.DAYS_LEFT_DESCENDING: (
        (_by_due, True),
        (_by_urgency, True),
        (_by_name, False),
    ),
    SortMode.NAME_ASCENDING: (
        (_by_name, False),
        (_by_urgency, True),
        (_by_due, False),
    ),
    SortMode.NAME_DESCENDING: (
        (_by_name, True),
        (_by_urgency, True),
        (_by_due, False),
    ),
}


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def sort_tasks(tasks: Iterable[Task], mode: SortMode = SortMode.URGENCY_DESCENDING) -> list[Task]:
    """
    Return a new list with `tasks` ordered according to `mode`.

    Key priorities (most significant first):

    - urgency-descending:   urgency desc, dated first, due asc, name asc
    - urgency-ascending:    urgency asc,  dated first, due asc, name asc
    - days-left-ascending:  dated first, due asc, urgency desc, name asc
    - days-left-descending: undated first, due desc, urgency desc, name asc
    - name-ascending:       name asc,  urgency desc, dated first, due asc
    - name-descending:      name desc, urgency desc, dated first, due asc

    Names compare component-wise (`a/b` sorts before `a-b`). Tasks equal on
    every key keep their input order in every mode, the descending ones
    included.
    """
    out = list(tasks)
    for key, reverse in reversed(_ORDERINGS[SortMode(mode)]):
        out.sort(key=key, reverse=reverse)
    return out

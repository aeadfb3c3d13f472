# src/dooit/engine/model.py

"""
Core domain models.

This module defines the in-memory representation of a task and the
comparison keys the sorting engine works with.

No filesystem access should happen here.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------
# Urgency
# ---------------------------------------------------------------------

class Urgency(str, Enum):
    """
    Task urgency tier.

    Ordering is fixed and closed:

    low < medium < high
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def sort_key(cls, urgency: "Urgency") -> int:
        """
        Return numeric rank for ordering.

        Higher value = more urgent.
        """
        order = {
            cls.LOW: 0,
            cls.MEDIUM: 1,
            cls.HIGH: 2,
        }
        return order[urgency]

    @property
    def rank(self) -> int:
        return Urgency.sort_key(self)

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    Urgency.LOW: " ",
    Urgency.MEDIUM: "!",
    Urgency.HIGH: "!!",
}


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Task:
    """
    In-memory representation of a single task file.

    Notes:
    - name is a '/'-separated path; `a/b` is a subtask of `a` by convention only.
    - due is always timezone-aware and stored in UTC.
    - instances are never mutated; use dataclasses.replace() to derive new ones.
    """

    name: str
    description: Optional[str] = None
    due: Optional[datetime] = None
    urgency: Urgency = Urgency.LOW
    completed: bool = False

    def __post_init__(self) -> None:
        name = (self.name or "").strip().strip("/")
        if not name:
            raise ValueError("name must be a non-empty string")
        object.__setattr__(self, "name", name)

        if not isinstance(self.urgency, Urgency):
            object.__setattr__(self, "urgency", Urgency(self.urgency))

        if self.due is not None:
            if self.due.tzinfo is None or self.due.utcoffset() is None:
                raise ValueError("due must be a timezone-aware datetime")
            object.__setattr__(self, "due", self.due.astimezone(timezone.utc))

    # -----------------------------------------------------------------
    # Convenience properties
    # -----------------------------------------------------------------

    @property
    def name_parts(self) -> tuple[str, ...]:
        """Path components of the name; compares like a filesystem path."""
        return tuple(self.name.split("/"))

    @property
    def urgency_rank(self) -> int:
        return self.urgency.rank

    def is_past_due(self, now: datetime) -> bool:
        """True if the task has a due date strictly before `now`."""
        return self.due is not None and self.due < now

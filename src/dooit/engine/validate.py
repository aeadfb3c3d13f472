# src/dooit/engine/validate.py

"""
Input validation rules.

This module validates user-supplied values before they reach the store:
task names (which become file paths) and similar command inputs.

It does NOT perform parsing of stored files or filesystem access.
"""

from typing import Final


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    Fatal validation error used for command flow control.

    Raised when an operation must immediately abort
    (e.g. invalid user input or missing required configuration).
    """


# ---------------------------------------------------------------------
# Task names
# ---------------------------------------------------------------------

_RESERVED_PARTS: Final[frozenset[str]] = frozenset({".", ".."})


def validate_task_name(name: str) -> str:
    """
    Check that a task name can be mapped onto a path inside the store.

    Returns the normalised name (surrounding whitespace and slashes removed).

    Rules:
    - non-empty;
    - no empty components (`a//b`);
    - no `.` / `..` components;
    - no backslashes (they would be separators on Windows).
    """
    s = (name or "").strip().strip("/")
    if not s:
        raise ValidationError("Task name must be a non-empty string")

    if "\\" in s:
        raise ValidationError(f"Invalid task name '{name}': backslashes are not allowed")

    for part in s.split("/"):
        if not part.strip():
            raise ValidationError(f"Invalid task name '{name}': empty path component")
        if part in _RESERVED_PARTS:
            raise ValidationError(f"Invalid task name '{name}': '{part}' is not allowed")

    return s

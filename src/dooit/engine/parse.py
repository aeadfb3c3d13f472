# src/dooit/engine/parse.py

"""
Task file parser.

Parses a single stored task file (YAML mapping) into an in-memory Task model.

File layout:
    name:        required, non-empty string ('/'-separated)
    description: optional string
    due:         optional ISO-8601 timestamp (stored in UTC)
    urgency:     optional, one of low / medium / high (default: low)
    completed:   optional bool (default: false)

This module performs *structural* parsing only; model invariants are
enforced by the Task constructor.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Final, Optional

import yaml

from .model import Task, Urgency


# ---------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------

TASK_SUFFIX: Final[str] = ".yml"
TASK_SUFFIXES: Final[tuple[str, ...]] = (TASK_SUFFIX, ".yaml")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseError(Exception):
    """
    Raised when a stored file is syntactically or structurally invalid.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_task(path: str | Path) -> Task:
    """
    Parse a task file into a Task model.
    """
    p = Path(path)
    meta = load_yaml_mapping(p)
    where = str(p)

    name = _require_str_field(where, meta, "name")
    description = _optional_str_field(where, meta, "description")
    due = _parse_due(where, meta)
    urgency = _parse_urgency(where, meta)
    completed = _optional_bool_field(where, meta, "completed")

    try:
        return Task(
            name=name,
            description=description,
            due=due,
            urgency=urgency,
            completed=completed,
        )
    except ValueError as e:
        raise ParseError(where, str(e)) from e


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    """
    Read a YAML file whose root must be a mapping.

    An empty file is treated as an empty mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(str(path), f"Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ParseError(str(path), f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(str(path), "YAML root must be a mapping/dictionary")

    return data


# ---------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------

def _require_str_field(path: str, data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ParseError(path, f"Missing required YAML key: {key}")

    value = data[key]
    if not isinstance(value, str):
        raise ParseError(path, f"YAML key '{key}' must be a string")

    if not value.strip():
        raise ParseError(path, f"YAML key '{key}' must be a non-empty string")

    return value


def _optional_str_field(path: str, data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None

    if not isinstance(value, str):
        raise ParseError(path, f"YAML key '{key}' must be a string")

    return value


def _optional_bool_field(path: str, data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False

    if not isinstance(value, bool):
        raise ParseError(path, f"YAML key '{key}' must be a boolean")

    return value


def _parse_urgency(path: str, data: dict[str, Any]) -> Urgency:
    raw = data.get("urgency")
    if raw is None:
        return Urgency.LOW

    if not isinstance(raw, str):
        raise ParseError(path, "YAML key 'urgency' must be a string")

    try:
        return Urgency(raw.strip().lower())
    except ValueError as e:
        allowed = ", ".join([u.value for u in Urgency])
        raise ParseError(path, f"Invalid urgency '{raw}' (allowed: {allowed})") from e


def _parse_due(path: str, data: dict[str, Any]) -> Optional[datetime]:
    value = data.get("due")
    if value is None:
        return None

    # YAML timestamps arrive as datetime objects; quoted ones as strings.
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        raise ParseError(path, "YAML key 'due' must include a time of day")
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ParseError(path, f"Invalid ISO timestamp for 'due': '{value}'") from e
    else:
        raise ParseError(path, "YAML key 'due' must be an ISO timestamp string")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    try:
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise ParseError(path, f"Timestamp for 'due' is out of range: '{value}'") from e

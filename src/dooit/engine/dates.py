# src/dooit/engine/dates.py

"""
Due-date parsing for task creation.

User input is read as local wall-clock time and normalised to UTC.
"""

from datetime import date, datetime, time, timezone
from typing import Optional

from .validate import ValidationError


_TIME_FORMATS = ("%H:%M", "%H:%M:%S")
_DATE_FORMATS = ("%Y-%m-%d",)
_DATETIME_FORMATS = (
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
)


def _local_now() -> datetime:
    """Return the current local time (isolated for testability)."""
    return datetime.now().astimezone()


def _try_formats(value: str, formats: tuple[str, ...]) -> Optional[datetime]:
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _to_utc(value: str, dt: datetime) -> datetime:
    # astimezone() on a naive value assumes local time.
    try:
        if dt.tzinfo is None:
            dt = dt.astimezone()
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid due date '{value}': {e}") from e


def parse_due(value: str, *, now: Optional[datetime] = None) -> datetime:
    """
    Parse a due date given on the command line.

    Accepted forms (local time):
    - `HH:MM` / `HH:MM:SS`        -> today at that time
    - `YYYY-MM-DD`                -> that day at midnight
    - `YYYY-MM-DD[T ]HH:MM[:SS]`  -> that moment
    - ISO-8601 with an explicit offset is taken as-is.

    Returns a timezone-aware datetime in UTC.
    """
    s = (value or "").strip()
    if not s:
        raise ValidationError("Invalid due date: empty value")

    parsed = _try_formats(s, _TIME_FORMATS)
    if parsed is not None:
        today: date = (now or _local_now()).date()
        return _to_utc(value, datetime.combine(today, parsed.time()))

    parsed = _try_formats(s, _DATE_FORMATS)
    if parsed is not None:
        return _to_utc(value, datetime.combine(parsed.date(), time(0, 0)))

    parsed = _try_formats(s, _DATETIME_FORMATS)
    if parsed is not None:
        return _to_utc(value, parsed)

    try:
        parsed = datetime.fromisoformat(s)
    except ValueError as e:
        raise ValidationError(
            f"Invalid due date '{value}' (expected HH:MM, YYYY-MM-DD or YYYY-MM-DDTHH:MM)"
        ) from e

    return _to_utc(value, parsed)

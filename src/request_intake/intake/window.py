"""
Processing window and mailbox search query.

A run covers one local calendar day in the configured zone. The day comes
from an explicit target date, else from the date override setting, else
today. The window is turned into a mailbox search query with epoch
after:/before: bounds; nothing here talks to a mailbox.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from ..config import ConfigValidationError, resolve_zone

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(hours=24)
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TODAY_WORDS = ("today", "current")


class InvalidTargetDateError(ConfigValidationError):
    """Target date is neither a date nor YYYY-MM-DD text."""

    pass


@dataclass(frozen=True)
class CalendarDate:
    """Target date given as a date value."""

    value: date


@dataclass(frozen=True)
class DateText:
    """Target date given as text ("YYYY-MM-DD", "today" or "current")."""

    value: str


TargetDate = Union[CalendarDate, DateText]


@dataclass(frozen=True)
class ProcessingWindow:
    """Half-open [start, end) window in UTC."""

    start: datetime
    end: datetime
    label: str
    override_applied: bool
    source_property: Optional[str] = None

    @property
    def start_epoch(self) -> int:
        return int(self.start.timestamp())

    @property
    def end_epoch(self) -> int:
        return int(self.end.timestamp())


def coerce_target_date(value) -> Optional[TargetDate]:
    """Wrap a caller-supplied target date in its variant; None stays None."""
    if value is None:
        return None
    if isinstance(value, (CalendarDate, DateText)):
        return value
    # datetime is a date subclass; its calendar date is what counts
    if isinstance(value, datetime):
        return CalendarDate(value.date())
    if isinstance(value, date):
        return CalendarDate(value)
    if isinstance(value, str):
        return DateText(value.strip())
    raise InvalidTargetDateError(f"Unsupported target date type: {type(value).__name__}")


def _local_midnight(day: date, zone: ZoneInfo) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=zone).astimezone(timezone.utc)


def _parse_day(text: str, zone: ZoneInfo, now: datetime) -> date:
    normalized = text.strip()
    if normalized.lower() in _TODAY_WORDS:
        return now.astimezone(zone).date()
    if not _ISO_DATE.match(normalized):
        raise InvalidTargetDateError(
            f'Invalid date override "{text}". Expected format YYYY-MM-DD.'
        )
    try:
        return date.fromisoformat(normalized)
    except ValueError as e:
        raise InvalidTargetDateError(f'Invalid date override "{text}": {e}') from e


def resolve_processing_window(
    target=None,
    zone: Union[ZoneInfo, str, None] = None,
    override: str = "",
    now: Optional[datetime] = None,
) -> ProcessingWindow:
    """
    Resolve the day to process into a UTC window.

    Args:
        target: date/datetime/str/CalendarDate/DateText or None
        zone: Time zone (name or ZoneInfo); blank means the default zone
        override: Date override setting; "today"/"current" are ignored
        now: Current instant (aware), for tests

    Returns:
        ProcessingWindow from local midnight to 24 hours later
    """
    tz = zone if isinstance(zone, ZoneInfo) else resolve_zone(zone or "")
    now = now or datetime.now(timezone.utc)
    override = (override or "").strip()

    candidate = coerce_target_date(target)
    if isinstance(candidate, DateText) and not candidate.value:
        candidate = None

    source_property = None
    if candidate is None and override and override.lower() not in _TODAY_WORDS:
        candidate = DateText(override)
        source_property = override

    if candidate is None:
        day = now.astimezone(tz).date()
        override_applied = False
    elif isinstance(candidate, CalendarDate):
        day = candidate.value
        override_applied = True
    else:
        day = _parse_day(candidate.value, tz, now)
        override_applied = True

    start = _local_midnight(day, tz)
    window = ProcessingWindow(
        start=start,
        end=start + ONE_DAY,
        label=day.isoformat(),
        override_applied=override_applied,
        source_property=source_property,
    )
    logger.debug(
        f"Processing window {window.label} ({tz.key}): "
        f"{window.start.isoformat()} .. {window.end.isoformat()}"
    )
    return window


def _escape_label(name: str) -> str:
    return name.replace("\\", "\\\\").replace('"', '\\"')


def _append(query: str, clause: str) -> str:
    return f"{query} {clause}" if query else clause


def build_search_query(
    base_query: str,
    processed_label: str,
    window: ProcessingWindow,
) -> str:
    """
    Build the mailbox search query for one window.

    Appends an exclusion for already processed messages, then epoch
    after:/before: bounds. Clauses the base query already carries are not
    added twice.
    """
    query = (base_query or "").strip()

    if processed_label:
        label_filter = f'-label:"{_escape_label(processed_label)}"'
        if label_filter not in query:
            query = _append(query, label_filter)

    if "after:" not in query.lower():
        query = _append(query, f"after:{window.start_epoch}")
    if "before:" not in query.lower():
        query = _append(query, f"before:{window.end_epoch}")

    return query


def sender_allowed(from_header: str, allowed_sender: str) -> bool:
    """Case-insensitive substring match; an empty allowed sender admits everyone."""
    allowed = (allowed_sender or "").strip().lower()
    if not allowed:
        return True
    return allowed in (from_header or "").lower()

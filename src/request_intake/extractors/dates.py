"""
Request date stamp parsing.

Forms carry the request time as local wall-clock text, e.g.

    [査定依頼日時・査定依頼番号] 2024年5月1日10時30分(123456)

which is normalized to a UTC instant "2024-05-01T01:30:00Z" using the
offset the configured zone observes at that local time.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from ..config import resolve_zone

_JAPANESE_DATETIME = re.compile(
    r"(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日\s*(\d{1,2})時\s*(\d{1,2})分"
)

# Date phrase followed by the assessment number in half- or full-width parentheses
_REQUEST_STAMP = re.compile(
    r"査定依頼日時・査定依頼番号\].*?([0-9]{4}年\d{1,2}月\d{1,2}日[^(\n（]*)[（(]([0-9]+)[)）]",
    re.DOTALL,
)


@dataclass(frozen=True)
class RequestStamp:
    """Raw date phrase and assessment number captured together."""

    request_date: str = ""
    assessment_number: str = ""


def find_request_stamp(text: str) -> RequestStamp:
    match = _REQUEST_STAMP.search(text or "")
    if not match:
        return RequestStamp()
    return RequestStamp(
        request_date=match.group(1).strip(),
        assessment_number=match.group(2).strip(),
    )


def parse_japanese_datetime(raw: str, zone: ZoneInfo | str) -> datetime | None:
    """
    Parse "<y>年<m>月<d>日<h>時<mi>分" as local time in zone.

    Returns an aware datetime, or None if the phrase has the wrong shape
    or names an impossible date.
    """
    match = _JAPANESE_DATETIME.search(raw or "")
    if not match:
        return None
    if not isinstance(zone, ZoneInfo):
        zone = resolve_zone(zone)

    year, month, day, hour, minute = (int(g) for g in match.groups())
    try:
        return datetime(year, month, day, hour, minute, tzinfo=zone)
    except ValueError:
        return None


def japanese_datetime_to_iso_utc(raw: str, zone: ZoneInfo | str) -> str:
    """Normalize a Japanese date phrase to yyyy-MM-ddTHH:mm:ssZ, or ""."""
    local = parse_japanese_datetime(raw, zone)
    if local is None:
        return ""
    utc = local.astimezone(timezone.utc)
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}Z"
    )

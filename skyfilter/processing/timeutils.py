"""Time and duration helpers shared by the filter, sort and report code.

All functions are total: malformed input never raises, it degrades to a safe default
(0 minutes, hour 0, or the original string for display helpers).
"""
import logging
import re
from datetime import datetime, timedelta, timezone

from ..models import TimeOfDay

logger = logging.getLogger(__name__)

_ISO_DURATION = re.compile(r'PT(\d+H)?(\d+M)?')


def parse_iso(value: str) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug('Unparseable timestamp %r', value)
        return None


def _as_instant(moment: datetime) -> datetime:
    # Offset-less timestamps are read as UTC so naive and aware values stay comparable
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def parse_duration_label(duration: str) -> str:
    """Turn an ISO-8601 duration such as "PT2H30M" into "2h 30m".

    Returns the input unchanged when it does not match or carries neither hours nor minutes.
    """
    if not isinstance(duration, str):
        return duration
    match = _ISO_DURATION.search(duration)
    if not match:
        return duration
    hours = int(match.group(1)[:-1]) if match.group(1) else 0
    minutes = int(match.group(2)[:-1]) if match.group(2) else 0
    if hours and minutes:
        return f'{hours}h {minutes}m'
    if hours:
        return f'{hours}h'
    if minutes:
        return f'{minutes}m'
    return duration


def elapsed_minutes(start_iso: str, end_iso: str) -> int:
    """Whole minutes from start to end, truncated toward zero. 0 if either side fails to parse."""
    start = parse_iso(start_iso)
    end = parse_iso(end_iso)
    if start is None or end is None:
        return 0
    return int((_as_instant(end) - _as_instant(start)) / timedelta(minutes=1))


def timestamp_of(iso: str) -> float | None:
    moment = parse_iso(iso)
    if moment is None:
        return None
    return _as_instant(moment).timestamp()


def time_of_day(hour: int) -> TimeOfDay:
    if 5 <= hour < 12:
        return 'morning'
    if 12 <= hour < 17:
        return 'afternoon'
    if 17 <= hour < 21:
        return 'evening'
    return 'night'


def hour_of(iso: str) -> int:
    """Wall-clock hour exactly as encoded in the timestamp (no timezone conversion)."""
    moment = parse_iso(iso)
    return moment.hour if moment is not None else 0


def format_time(iso: str) -> str:
    moment = parse_iso(iso)
    return moment.strftime('%H:%M') if moment is not None else iso


def format_date(iso: str, fmt: str = '%b %d, %Y') -> str:
    moment = parse_iso(iso)
    return moment.strftime(fmt) if moment is not None else iso

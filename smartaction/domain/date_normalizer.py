"""Date/time normalization for model-produced date tokens.

Every pattern is read in one fixed civil timezone so the same text always
maps to the same instant, whatever the host's local zone is.
"""

from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from typing import Optional, Tuple

from zoneinfo import ZoneInfo

from smartaction.config import ACTION_TIMEZONE

FIXED_TIMEZONE = ZoneInfo(ACTION_TIMEZONE)

CANONICAL_FORMAT = "%Y-%m-%dT%H:%M"

# Time assumed when the model only gives a date.
DATE_ONLY_DEFAULT_TIME = time(10, 0)


@dataclass(frozen=True)
class DatePattern:
    """One accepted textual date layout."""

    name: str
    fmt: str
    date_only: bool = False


# Tried in order; the first match wins, so more specific layouts come first.
DATE_PATTERNS: Tuple[DatePattern, ...] = (
    DatePattern("iso_minutes", CANONICAL_FORMAT),
    DatePattern("slashed", "%Y/%m/%d %H:%M"),
    DatePattern("kanji", "%Y年%m月%d日 %H:%M"),
    DatePattern("date_only", "%Y-%m-%d", date_only=True),
)


def match_pattern(text: str) -> Optional[Tuple[DatePattern, datetime]]:
    """Return the first pattern that parses ``text`` with its naive result."""
    value = text.strip()
    if not value:
        return None
    for pattern in DATE_PATTERNS:
        try:
            parsed = datetime.strptime(value, pattern.fmt)
        except ValueError:
            continue
        return pattern, parsed
    return None


def parse_datetime(text: Optional[str], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse a date token into an aware datetime in the fixed zone.

    Returns None when no accepted pattern matches; callers treat that as
    "date unknown".
    """
    if not isinstance(text, str):
        return None
    matched = match_pattern(text)
    if matched is None:
        return None
    pattern, naive = matched
    if pattern.date_only:
        naive = datetime.combine(naive.date(), DATE_ONLY_DEFAULT_TIME)
    return naive.replace(tzinfo=tz or FIXED_TIMEZONE)


def format_datetime(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:mm`` in the fixed zone."""
    zone = tz or FIXED_TIMEZONE
    if value.tzinfo is None:
        value = value.replace(tzinfo=zone)
    return value.astimezone(zone).strftime(CANONICAL_FORMAT)


def format_display(value: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """Human-readable rendering used in chat messages."""
    if value is None:
        return "not set"
    zone = tz or FIXED_TIMEZONE
    if value.tzinfo is None:
        value = value.replace(tzinfo=zone)
    return value.astimezone(zone).strftime("%Y-%m-%d (%a) %H:%M")

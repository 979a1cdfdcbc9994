"""Turn a finalized action into a concrete, integration-neutral request.

Native integrations (calendar, contacts, maps, dialer, share sheet) read
the payload; this module only decides what they receive.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from typing import Dict, Optional
from urllib.parse import quote

from smartaction.domain.date_normalizer import FIXED_TIMEZONE, format_datetime
from smartaction.domain.models import Action, ActionKind

DEFAULT_EVENT_DURATION = timedelta(hours=1)

GOOGLE_MAPS_URL = "comgooglemaps://?q={query}"
APPLE_MAPS_URL = "http://maps.apple.com/?q={query}"


@dataclass
class ExecutionRequest:
    """What a downstream integration needs to perform one action."""

    action_id: str
    kind: ActionKind
    title: str
    payload: Dict[str, str] = field(default_factory=dict)


def resolve_event_window(
    action: Action,
    now: Optional[datetime] = None,
    duration: timedelta = DEFAULT_EVENT_DURATION,
    tz: Optional[tzinfo] = None,
):
    """Start and end for a calendar entry.

    Unknown start falls back to ``now``; unknown end to start + duration.
    """
    zone = tz or FIXED_TIMEZONE
    start = action.start_at or now or datetime.now(zone)
    end = action.end_at or start + duration
    return start, end


def _split_name(name: str):
    parts = name.split()
    given = parts[0] if parts else ""
    family = parts[-1] if len(parts) > 1 else ""
    return given, family


def plan_execution(
    action: Action,
    summary: Optional[str] = None,
    now: Optional[datetime] = None,
    duration: timedelta = DEFAULT_EVENT_DURATION,
    tz: Optional[tzinfo] = None,
) -> ExecutionRequest:
    """Build the request a downstream integration executes."""
    request = ExecutionRequest(action_id=action.id, kind=action.kind, title=action.primary)
    payload = request.payload

    if action.kind is ActionKind.ADD_CALENDAR_EVENT:
        start, end = resolve_event_window(action, now=now, duration=duration, tz=tz)
        payload["start"] = format_datetime(start, tz)
        payload["end"] = format_datetime(end, tz)
        if action.tertiary:
            payload["notes"] = action.tertiary

    elif action.kind is ActionKind.SEARCH_MAP:
        query = quote(action.primary, safe="")
        payload["google_maps_url"] = GOOGLE_MAPS_URL.format(query=query)
        payload["apple_maps_url"] = APPLE_MAPS_URL.format(query=query)

    elif action.kind is ActionKind.ADD_CONTACT:
        given, family = _split_name(action.primary)
        payload["given_name"] = given
        if family:
            payload["family_name"] = family
        if action.secondary:
            payload["phone"] = action.secondary
        if action.tertiary:
            payload["email"] = action.tertiary

    elif action.kind is ActionKind.OPEN_URL:
        payload["url"] = action.primary

    elif action.kind is ActionKind.CALL:
        digits = "".join(ch for ch in action.primary if ch in "0123456789")
        if not digits:
            raise ValueError(f"no digits in phone number: {action.primary!r}")
        payload["url"] = f"tel://{digits}"

    elif action.kind is ActionKind.ADD_NOTE:
        text = summary.strip() if summary and summary.strip() else action.primary
        payload["text"] = text

    else:
        raise ValueError(f"cannot execute {action.kind.value} action")

    return request

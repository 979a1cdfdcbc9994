"""Action line parsing for model output.

Pure Python, no framework dependencies.
"""

from __future__ import annotations

import re
import sys
from typing import Callable, Dict, List, Optional, Tuple

from smartaction.domain.date_normalizer import parse_datetime
from smartaction.domain.models import Action, ActionKind, DateDiagnostic


def _log(msg: str):
    print(msg, file=sys.stderr)


# Leading list marker: "- ", "* ", "• ", "・", "1. ", "2) "
LIST_MARKER_RE = re.compile(r"^(?:[-*•・]|\d+[.)])\s*")

# Map line markers -> action kind. Matched as a case-sensitive prefix.
ACTION_MARKERS: Dict[str, ActionKind] = {
    "カレンダー登録:": ActionKind.ADD_CALENDAR_EVENT,
    "calendar registration:": ActionKind.ADD_CALENDAR_EVENT,
    "calendar-event:": ActionKind.ADD_CALENDAR_EVENT,
    "経路検索:": ActionKind.SEARCH_MAP,
    "route search:": ActionKind.SEARCH_MAP,
    "連絡先登録:": ActionKind.ADD_CONTACT,
    "contact registration:": ActionKind.ADD_CONTACT,
    "contact:": ActionKind.ADD_CONTACT,
    "URLを開く:": ActionKind.OPEN_URL,
    "open URL:": ActionKind.OPEN_URL,
    "電話をかける:": ActionKind.CALL,
    "call:": ActionKind.CALL,
    "メモに追加:": ActionKind.ADD_NOTE,
    "add to note:": ActionKind.ADD_NOTE,
}

CALENDAR_SEPARATOR = ";"
CONTACT_SEPARATOR = ","


def strip_list_marker(line: str) -> str:
    """Trim a line and drop one leading list marker."""
    return LIST_MARKER_RE.sub("", line.strip(), count=1).strip()


def match_marker(line: str) -> Optional[Tuple[ActionKind, str]]:
    """Return (kind, remainder) when the line starts with a known marker."""
    body = strip_list_marker(line)
    for marker, kind in ACTION_MARKERS.items():
        if body.startswith(marker):
            return kind, body[len(marker):].strip()
    return None


def _parse_date_segment(
    segments: List[str],
    index: int,
    field: str,
    line: str,
    diagnostics: Optional[List[DateDiagnostic]],
):
    if len(segments) <= index:
        return None
    text = segments[index].strip()
    if not text:
        return None
    parsed = parse_datetime(text)
    if parsed is None:
        _log(f"[ActionParser] unparsable {field}: {text!r}")
        if diagnostics is not None:
            diagnostics.append(DateDiagnostic(field=field, text=text, line=line))
    return parsed


def parse_calendar_body(
    body: str,
    line: str = "",
    diagnostics: Optional[List[DateDiagnostic]] = None,
) -> Optional[Action]:
    """Parse ``title; start; end`` into a calendar action.

    An unparsable date leaves that field unknown instead of dropping the
    event. The one-hour default end is applied at execution time.
    """
    segments = body.split(CALENDAR_SEPARATOR)
    title = segments[0].strip()
    if not title:
        return None
    return Action(
        kind=ActionKind.ADD_CALENDAR_EVENT,
        primary=title,
        start_at=_parse_date_segment(segments, 1, "start_at", line, diagnostics),
        end_at=_parse_date_segment(segments, 2, "end_at", line, diagnostics),
    )


def parse_contact_body(body: str) -> Optional[Action]:
    """Parse ``name, phone, email`` into a contact action."""
    parts = [p.strip() for p in body.split(CONTACT_SEPARATOR)]
    name = parts[0]
    if not name:
        return None
    return Action(
        kind=ActionKind.ADD_CONTACT,
        primary=name,
        secondary=parts[1] if len(parts) > 1 else None,
        tertiary=parts[2] if len(parts) > 2 else None,
    )


def _single_value(kind: ActionKind) -> Callable[[str], Optional[Action]]:
    def build(body: str) -> Optional[Action]:
        value = body.strip()
        return Action(kind=kind, primary=value) if value else None
    return build


_SINGLE_VALUE_BUILDERS: Dict[ActionKind, Callable[[str], Optional[Action]]] = {
    kind: _single_value(kind)
    for kind in (ActionKind.SEARCH_MAP, ActionKind.OPEN_URL, ActionKind.CALL, ActionKind.ADD_NOTE)
}


def parse_line(
    line: str,
    diagnostics: Optional[List[DateDiagnostic]] = None,
) -> Optional[Action]:
    """Parse one line; None when it is not a well-formed action line."""
    matched = match_marker(line)
    if matched is None:
        return None
    kind, body = matched
    if kind is ActionKind.ADD_CALENDAR_EVENT:
        return parse_calendar_body(body, line=line.strip(), diagnostics=diagnostics)
    if kind is ActionKind.ADD_CONTACT:
        return parse_contact_body(body)
    return _SINGLE_VALUE_BUILDERS[kind](body)


def parse_actions(
    text: str,
    diagnostics: Optional[List[DateDiagnostic]] = None,
) -> List[Action]:
    """Extract actions from model output, in source order.

    Unrecognized lines are skipped. Pass a list as ``diagnostics`` to
    collect date segments that failed to parse.
    """
    actions: List[Action] = []
    for line in text.splitlines():
        action = parse_line(line, diagnostics)
        if action is not None:
            actions.append(action)
    return actions

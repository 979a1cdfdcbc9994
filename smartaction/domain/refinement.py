"""Apply a model's refinement reply onto the action being discussed.

The reply is free text; only the lines after a change-block marker are
read, and only a few field prefixes are recognized there.
"""

import sys
from typing import List, Optional

from smartaction.domain.action_parser import strip_list_marker
from smartaction.domain.date_normalizer import parse_datetime
from smartaction.domain.models import Action, DateDiagnostic


def _log(msg: str):
    print(msg, file=sys.stderr)


CHANGE_MARKERS = ("[変更内容]", "[changes]")

TITLE_PREFIXES = ("イベント名:", "event name:")
START_PREFIXES = ("日時:", "date/time:")
END_PREFIXES = ("終了日時:", "end date/time:")


def find_change_block(reply: str) -> Optional[str]:
    """Return the text after the earliest change marker, or None."""
    best = None
    for marker in CHANGE_MARKERS:
        idx = reply.find(marker)
        if idx != -1 and (best is None or idx < best[0]):
            best = (idx, marker)
    if best is None:
        return None
    idx, marker = best
    return reply[idx + len(marker):]


def _value_after(line: str, prefixes) -> Optional[str]:
    for prefix in prefixes:
        if line.startswith(prefix):
            return line[len(prefix):].strip()
    return None


def merge_refinement(
    reply: str,
    original: Action,
    diagnostics: Optional[List[DateDiagnostic]] = None,
) -> Action:
    """Return ``original`` updated with the reply's change block.

    A reply without a change block (e.g. a clarifying question) returns
    ``original`` itself. A date line that does not parse keeps the existing
    value.
    """
    block = find_change_block(reply)
    if block is None:
        return original

    changes = {}
    for raw in block.splitlines():
        line = strip_list_marker(raw)
        if not line:
            continue

        title = _value_after(line, TITLE_PREFIXES)
        if title is not None:
            if title:
                changes["primary"] = title
            continue

        for field, prefixes in (("end_at", END_PREFIXES), ("start_at", START_PREFIXES)):
            text = _value_after(line, prefixes)
            if text is None:
                continue
            parsed = parse_datetime(text)
            if parsed is not None:
                changes[field] = parsed
            elif text:
                _log(f"[Refinement] unparsable {field}: {text!r}")
                if diagnostics is not None:
                    diagnostics.append(DateDiagnostic(field=field, text=text, line=line))
            break

    if not changes:
        return original
    return original.evolve(**changes)

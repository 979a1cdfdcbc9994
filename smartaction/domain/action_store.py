"""Ordered, identity-addressed collection of extracted actions."""

import sys
import threading
from typing import Iterable, Iterator, Optional, Tuple

from smartaction.domain.models import Action, ActionKind


def _log(msg: str):
    print(msg, file=sys.stderr)


def first_summary_line(summary: Optional[str]) -> str:
    """First non-empty line of a summary, trimmed."""
    if not summary:
        return ""
    for line in summary.splitlines():
        if line.strip():
            return line.strip()
    return ""


class ActionStore:
    """Holds the actions of one extraction session.

    Readers get an immutable snapshot; writers swap the whole tuple, so a
    reader never sees a half-updated record.
    """

    def __init__(self, actions: Iterable[Action] = ()):
        self._lock = threading.Lock()
        self._actions: Tuple[Action, ...] = tuple(actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    def get(self, action_id: str) -> Optional[Action]:
        for action in self._actions:
            if action.id == action_id:
                return action
        return None

    def replace_all(self, actions: Iterable[Action]):
        """Replace the contents with a fresh parse result."""
        with self._lock:
            self._actions = tuple(actions)

    def clear(self):
        with self._lock:
            self._actions = ()

    def update(self, action_id: str, new_action: Action) -> Action:
        """Replace the action with ``action_id``; its id is kept."""
        if new_action.id != action_id:
            raise ValueError(f"action id mismatch: {new_action.id!r} != {action_id!r}")
        with self._lock:
            current = list(self._actions)
            for index, action in enumerate(current):
                if action.id == action_id:
                    current[index] = new_action
                    self._actions = tuple(current)
                    return new_action
        raise KeyError(action_id)

    def ensure_note_fallback(self, summary: Optional[str]) -> Optional[Action]:
        """Append an ADD_NOTE from the summary when the model proposed none.

        Returns the synthesized action, or None when nothing was added.
        """
        title = first_summary_line(summary)
        if not title:
            return None
        with self._lock:
            if any(a.kind is ActionKind.ADD_NOTE for a in self._actions):
                return None
            note = Action(kind=ActionKind.ADD_NOTE, primary=title)
            self._actions = self._actions + (note,)
        _log(f"[ActionStore] added note fallback: {title[:60]!r}")
        return note

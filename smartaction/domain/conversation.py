"""Refinement session state: history plus the one action being refined.

Pure domain logic, no framework dependencies. Transitions:

    IDLE -> open() -> MERGED* -> begin_turn() -> AWAITING_REPLY
    AWAITING_REPLY -> complete_turn(turn) -> MERGED
    AWAITING_REPLY -> abort_turn(turn) -> previous phase, state restored
    any open phase -> finalize() / close() -> CLOSED (history discarded)

*open() starts in MERGED: the opening message is the model's turn.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from smartaction.domain.models import Action, ActionKind, ChatMessage, ChatRole
from smartaction.domain.refinement import merge_refinement
from smartaction.errors import RefinementSessionError


class SessionPhase(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"
    MERGED = "merged"
    CLOSED = "closed"


REFINABLE_KINDS = (ActionKind.ADD_CALENDAR_EVENT,)


@dataclass(frozen=True)
class PendingTurn:
    """Snapshot taken when a user turn starts, used to roll it back."""

    user_message: ChatMessage
    history_length: int
    action: Action


class ConversationState:
    """History and active action of a single refinement session."""

    def __init__(self):
        self._history: List[ChatMessage] = []
        self._active: Optional[Action] = None
        self._pending: Optional[PendingTurn] = None
        self._phase = SessionPhase.IDLE

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def active_action(self) -> Optional[Action]:
        return self._active

    @property
    def history(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._history)

    @property
    def is_open(self) -> bool:
        return self._active is not None

    @property
    def awaiting_reply(self) -> bool:
        return self._pending is not None

    def open(self, action: Action, opening_message: str = ""):
        if self.is_open:
            raise RefinementSessionError("a refinement session is already open")
        if action.kind not in REFINABLE_KINDS:
            raise RefinementSessionError(f"{action.kind.value} actions cannot be refined")
        self._history = []
        if opening_message:
            self._history.append(ChatMessage(role=ChatRole.MODEL, content=opening_message))
        self._active = action
        self._pending = None
        self._phase = SessionPhase.MERGED

    def begin_turn(self, user_text: str) -> PendingTurn:
        """Record the user's message and mark a model request in flight."""
        if not self.is_open:
            raise RefinementSessionError("no refinement session is open")
        if self._pending is not None:
            raise RefinementSessionError("a model reply is already pending")
        text = (user_text or "").strip()
        if not text:
            raise RefinementSessionError("empty message")
        message = ChatMessage(role=ChatRole.USER, content=text)
        pending = PendingTurn(user_message=message, history_length=len(self._history), action=self._active)
        self._history.append(message)
        self._pending = pending
        self._phase = SessionPhase.AWAITING_REPLY
        return pending

    def complete_turn(self, turn: PendingTurn, reply: str) -> Action:
        """Merge the model's reply into the active action.

        ``turn`` must be the turn still in flight; a reply to a turn whose
        session was closed or replaced is rejected.
        """
        if self._pending is None or turn is not self._pending:
            raise RefinementSessionError("reply does not belong to the pending turn")
        updated = merge_refinement(reply, self._pending.action)
        self._history.append(ChatMessage(role=ChatRole.MODEL, content=reply))
        self._active = updated
        self._pending = None
        self._phase = SessionPhase.MERGED
        return updated

    def abort_turn(self, turn: PendingTurn):
        """Drop an in-flight turn; history and action return to the snapshot.

        A stale turn (session closed or replaced since) is ignored.
        """
        if self._pending is None or turn is not self._pending:
            return
        del self._history[self._pending.history_length:]
        self._active = self._pending.action
        self._pending = None
        self._phase = SessionPhase.MERGED

    def finalize(self) -> Action:
        """Close the session and hand back the last merged action."""
        if not self.is_open:
            raise RefinementSessionError("no refinement session is open")
        if self._pending is not None:
            raise RefinementSessionError("cannot finalize while a model reply is pending")
        action = self._active
        self._discard()
        return action

    def close(self):
        """Cancel the session, discarding pending edits."""
        self._discard()

    def _discard(self):
        self._history = []
        self._active = None
        self._pending = None
        self._phase = SessionPhase.CLOSED

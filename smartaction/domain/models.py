"""Domain data models — pure Python dataclasses."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class ActionKind(str, Enum):
    """Closed set of action variants the parser can emit."""

    ADD_CALENDAR_EVENT = "add_calendar_event"
    SEARCH_MAP = "search_map"
    ADD_CONTACT = "add_contact"
    OPEN_URL = "open_url"
    CALL = "call"
    ADD_NOTE = "add_note"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Action:
    """One user-actionable intent extracted from model output.

    ``None`` in an optional field means "unknown"; an empty string means the
    model explicitly left it blank.
    """

    kind: ActionKind
    primary: str
    secondary: Optional[str] = None
    tertiary: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        if not self.primary or not self.primary.strip():
            raise ValueError(f"{self.kind.value} action requires a non-empty primary value")

    def evolve(self, **changes) -> "Action":
        """Return a copy with mutable fields changed; id is preserved."""
        allowed = {"primary", "start_at", "end_at"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"immutable action fields: {sorted(unknown)}")
        return replace(self, **changes)


@dataclass(frozen=True)
class DateDiagnostic:
    """A date segment that could not be normalized."""

    field: str  # "start_at" | "end_at"
    text: str
    line: str


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ChatMessage:
    """One turn of a refinement dialogue."""

    role: ChatRole
    content: str

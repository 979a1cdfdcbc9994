"""Domain layer — pure Python, no framework dependencies."""

from smartaction.domain.models import Action, ActionKind, ChatMessage, ChatRole, DateDiagnostic
from smartaction.domain.date_normalizer import parse_datetime, format_datetime
from smartaction.domain.action_parser import parse_actions
from smartaction.domain.refinement import merge_refinement
from smartaction.domain.action_store import ActionStore
from smartaction.domain.conversation import ConversationState, SessionPhase
from smartaction.domain.execution import ExecutionRequest, plan_execution
from smartaction.domain.brain import ExtractionResult, SmartActionBrain

__all__ = [
    "Action",
    "ActionKind",
    "ChatMessage",
    "ChatRole",
    "DateDiagnostic",
    "parse_datetime",
    "format_datetime",
    "parse_actions",
    "merge_refinement",
    "ActionStore",
    "ConversationState",
    "SessionPhase",
    "ExecutionRequest",
    "plan_execution",
    "ExtractionResult",
    "SmartActionBrain",
]

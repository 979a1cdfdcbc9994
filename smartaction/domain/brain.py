"""SmartActionBrain — extraction and refinement orchestration.

Owns the action store and the refinement session, and calls the model
through LLMPort. No framework dependencies; tests drive it with mock ports.
"""

import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from smartaction.domain.action_parser import parse_actions
from smartaction.domain.action_store import ActionStore
from smartaction.domain.conversation import ConversationState
from smartaction.domain.execution import DEFAULT_EVENT_DURATION, ExecutionRequest, plan_execution
from smartaction.domain.models import Action, DateDiagnostic
from smartaction.domain.prompts import (
    build_action_prompt,
    build_opening_message,
    build_refinement_prompt,
    build_summarize_prompt,
)
from smartaction.errors import (
    LLMRequestError,
    LLMUnavailableError,
    RefinementSessionError,
    SmartActionError,
    UpstreamError,
)
from smartaction.ports.outbound import ActionExecutorPort, ExecutionResult, LLMPort, TextRecognitionPort


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class ExtractionResult:
    """Raw model output and the actions parsed from it."""

    raw_output: str
    actions: List[Action] = field(default_factory=list)
    diagnostics: List[DateDiagnostic] = field(default_factory=list)
    note_fallback: Optional[Action] = None


class SmartActionBrain:
    """Extraction session plus at most one open refinement session.

    Only the model calls suspend. Every state change happens after the
    awaited reply arrives, so a failed or cancelled call leaves the store
    and the conversation exactly as they were.
    """

    def __init__(
        self,
        llm: Optional[LLMPort] = None,
        store: Optional[ActionStore] = None,
        model: Optional[str] = None,
        recognizer: Optional[TextRecognitionPort] = None,
        performer: Optional[ActionExecutorPort] = None,
        event_duration: timedelta = DEFAULT_EVENT_DURATION,
        max_history: int = 20,
    ):
        self.llm = llm
        self.store = store or ActionStore()
        self.model = model
        self.recognizer = recognizer
        self.performer = performer
        self.event_duration = event_duration
        self.max_history = max_history
        self.conversation = ConversationState()
        self.summary: str = ""
        self.raw_output: str = ""

    # -- Model calls --

    async def _ask(self, prompt: str) -> str:
        if self.llm is None:
            raise LLMUnavailableError("no language model configured")
        try:
            return await self.llm.execute(prompt, model=self.model)
        except UpstreamError:
            raise
        except Exception as e:
            raise LLMRequestError(str(e)) from e

    async def recognize(self, image: bytes) -> str:
        """Run text recognition on an image and summarize the result."""
        if self.recognizer is None:
            raise SmartActionError("no text recognizer configured")
        text = await self.recognizer.recognize(image)
        if not text.strip():
            raise SmartActionError("no text found in image")
        return await self.summarize(text)

    async def summarize(self, text: str) -> str:
        """Ask the model to clean up and condense recognized text."""
        summary = (await self._ask(build_summarize_prompt(text))).strip()
        self.summary = summary
        _log(f"[Brain] summary ready ({len(summary)} chars)")
        return summary

    async def propose_actions(self, summary: Optional[str] = None, now: Optional[datetime] = None) -> ExtractionResult:
        """Ask the model for action lines and load them into the store.

        An empty action list is a valid result; only upstream failures raise.
        """
        source = self.summary if summary is None else summary
        raw = await self._ask(build_action_prompt(source, now=now))

        diagnostics: List[DateDiagnostic] = []
        actions = parse_actions(raw, diagnostics)
        self.conversation.close()
        self.summary = source
        self.raw_output = raw
        self.store.replace_all(actions)
        note = self.store.ensure_note_fallback(source)
        _log(f"[Brain] parsed {len(actions)} action(s), {len(diagnostics)} date diagnostic(s)")
        return ExtractionResult(
            raw_output=raw,
            actions=list(self.store.actions()),
            diagnostics=diagnostics,
            note_fallback=note,
        )

    # -- Refinement session --

    def start_refinement(self, action_id: str) -> str:
        """Open a refinement session on a stored action; returns the opening message."""
        action = self._require_action(action_id)
        opening = build_opening_message(action)
        self.conversation.open(action, opening)
        return opening

    async def send_message(self, text: str) -> Tuple[str, Action]:
        """Send one user turn and merge the model's reply.

        The updated action is written back to the store by identity. A reply
        that arrives after its session was closed raises
        RefinementSessionError and changes nothing.
        """
        if self.llm is None:
            raise LLMUnavailableError("no language model configured")
        pending = self.conversation.begin_turn(text)
        earlier = self.conversation.history[:pending.history_length][-self.max_history:]
        prompt = build_refinement_prompt(pending.action, earlier, pending.user_message.content)
        try:
            reply = await self._ask(prompt)
        except BaseException:
            self.conversation.abort_turn(pending)
            raise

        try:
            updated = self.conversation.complete_turn(pending, reply)
        except RefinementSessionError:
            _log(f"[Brain] dropping late reply for closed session on {pending.action.id}")
            raise
        if updated is not pending.action:
            try:
                self.store.update(updated.id, updated)
            except KeyError:
                _log(f"[Brain] refined action {updated.id} no longer in store")
        return reply, updated

    def finalize_refinement(self) -> Action:
        """Close the session and return the last merged action."""
        action = self.conversation.finalize()
        _log(f"[Brain] refinement finalized: {action.primary[:60]!r}")
        return action

    def cancel_refinement(self):
        self.conversation.close()

    # -- Execution boundary --

    def execution_request(self, action_id: str, now: Optional[datetime] = None) -> ExecutionRequest:
        action = self._require_action(action_id)
        return plan_execution(action, summary=self.summary, now=now, duration=self.event_duration)

    async def perform(self, action_id: str, now: Optional[datetime] = None) -> ExecutionResult:
        """Hand one stored action to the configured integration."""
        if self.performer is None:
            raise SmartActionError("no action executor configured")
        request = self.execution_request(action_id, now=now)
        result = await self.performer.perform(request)
        if not result.success:
            _log(f"[Brain] execution failed for {action_id}: {result.error}")
        return result

    def reset(self):
        """Drop everything from the current extraction session."""
        self.conversation.close()
        self.store.clear()
        self.summary = ""
        self.raw_output = ""

    def _require_action(self, action_id: str) -> Action:
        action = self.store.get(action_id)
        if action is None:
            raise KeyError(action_id)
        return action

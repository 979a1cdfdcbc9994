"""Extraction and refinement API routes."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from smartaction.adapters.llm.executor import create_executor
from smartaction.config import AppConfig
from smartaction.domain.brain import SmartActionBrain
from smartaction.domain.date_normalizer import format_datetime
from smartaction.domain.models import Action, ChatMessage
from smartaction.errors import RefinementSessionError, UpstreamError

actions_router = APIRouter(prefix="/actions", tags=["Actions"])
refine_router = APIRouter(prefix="/refine", tags=["Refinement"])

_config = AppConfig.from_env()
brain = SmartActionBrain(
    llm=create_executor(_config.ai_provider),
    model=_config.model_name,
    max_history=_config.refinement.max_history,
    event_duration=timedelta(minutes=_config.refinement.default_event_minutes),
)


# Request/Response models
class SummarizeRequest(BaseModel):
    text: str


class SummarizeResponse(BaseModel):
    summary: str


class ExtractRequest(BaseModel):
    summary: Optional[str] = None


class ActionModel(BaseModel):
    id: str
    kind: str
    primary: str
    secondary: Optional[str] = None
    tertiary: Optional[str] = None
    start_at: Optional[str] = None
    end_at: Optional[str] = None


class DiagnosticModel(BaseModel):
    field: str
    text: str
    line: str


class ExtractResponse(BaseModel):
    raw_output: str
    actions: List[ActionModel]
    diagnostics: List[DiagnosticModel] = []


class ExecutionResponse(BaseModel):
    action_id: str
    kind: str
    title: str
    payload: Dict[str, str]


class StartRefinementRequest(BaseModel):
    action_id: str


class ChatMessageModel(BaseModel):
    role: str
    content: str


class RefinementResponse(BaseModel):
    phase: str
    action: Optional[ActionModel] = None
    history: List[ChatMessageModel] = []
    reply: Optional[str] = None


class MessageRequest(BaseModel):
    text: str


def _action_model(action: Action) -> ActionModel:
    return ActionModel(
        id=action.id,
        kind=action.kind.value,
        primary=action.primary,
        secondary=action.secondary,
        tertiary=action.tertiary,
        start_at=format_datetime(action.start_at) if action.start_at else None,
        end_at=format_datetime(action.end_at) if action.end_at else None,
    )


def _message_model(message: ChatMessage) -> ChatMessageModel:
    return ChatMessageModel(role=message.role.value, content=message.content)


def _session_response(reply: Optional[str] = None, action: Optional[Action] = None) -> RefinementResponse:
    conversation = brain.conversation
    current = action or conversation.active_action
    return RefinementResponse(
        phase=conversation.phase.value,
        action=_action_model(current) if current else None,
        history=[_message_model(m) for m in conversation.history],
        reply=reply,
    )


# --- Extraction endpoints ---

@actions_router.post("/summarize", response_model=SummarizeResponse)
async def summarize(req: SummarizeRequest):
    try:
        summary = await brain.summarize(req.text)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return SummarizeResponse(summary=summary)


@actions_router.post("/extract", response_model=ExtractResponse)
async def extract(req: ExtractRequest):
    try:
        result = await brain.propose_actions(req.summary)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ExtractResponse(
        raw_output=result.raw_output,
        actions=[_action_model(a) for a in result.actions],
        diagnostics=[DiagnosticModel(field=d.field, text=d.text, line=d.line) for d in result.diagnostics],
    )


@actions_router.get("", response_model=List[ActionModel])
async def list_actions():
    return [_action_model(a) for a in brain.store.actions()]


@actions_router.get("/{action_id}/execution", response_model=ExecutionResponse)
async def execution_request(action_id: str):
    try:
        request = brain.execution_request(action_id, now=datetime.now().astimezone())
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown action: {action_id}")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ExecutionResponse(
        action_id=request.action_id,
        kind=request.kind.value,
        title=request.title,
        payload=request.payload,
    )


@actions_router.delete("")
async def reset():
    brain.reset()
    return {"status": "reset"}


# --- Refinement endpoints ---

@refine_router.post("/start", response_model=RefinementResponse)
async def start_refinement(req: StartRefinementRequest):
    try:
        brain.start_refinement(req.action_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown action: {req.action_id}")
    except RefinementSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_response()


@refine_router.post("/message", response_model=RefinementResponse)
async def send_message(req: MessageRequest):
    try:
        reply, _ = await brain.send_message(req.text)
    except RefinementSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _session_response(reply=reply)


@refine_router.get("", response_model=RefinementResponse)
async def session_state():
    return _session_response()


@refine_router.post("/finalize", response_model=RefinementResponse)
async def finalize():
    try:
        action = brain.finalize_refinement()
    except RefinementSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_response(action=action)


@refine_router.post("/cancel", response_model=RefinementResponse)
async def cancel():
    brain.cancel_refinement()
    return _session_response()

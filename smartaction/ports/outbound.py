"""Outbound ports — interfaces for external system adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from smartaction.domain.execution import ExecutionRequest


@dataclass
class ExecutionResult:
    """Outcome reported by a native integration."""

    success: bool
    detail: Optional[str] = None
    error: Optional[str] = None


@runtime_checkable
class LLMPort(Protocol):
    """Interface for LLM execution backends."""

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str: ...


@runtime_checkable
class TextRecognitionPort(Protocol):
    """Interface for optical text recognition of an image."""

    async def recognize(self, image: bytes) -> str: ...


@runtime_checkable
class ActionExecutorPort(Protocol):
    """Interface for the integration that performs an action."""

    async def perform(self, request: ExecutionRequest) -> ExecutionResult: ...

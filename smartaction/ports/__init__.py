"""Ports — protocols the domain talks to."""

from smartaction.ports.outbound import (
    ActionExecutorPort,
    ExecutionResult,
    LLMPort,
    TextRecognitionPort,
)

__all__ = [
    "ActionExecutorPort",
    "ExecutionResult",
    "LLMPort",
    "TextRecognitionPort",
]

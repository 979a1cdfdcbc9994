"""LLM adapters — Claude and Codex CLI executors."""

from smartaction.adapters.llm.executor import (
    ClaudeExecutor,
    CodexExecutor,
    create_executor,
)

__all__ = [
    "ClaudeExecutor",
    "CodexExecutor",
    "create_executor",
]

"""Configuration and shared settings."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field
from typing import Dict

from dotenv import load_dotenv
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_AI_PROVIDERS = ("claude", "codex")
AI_PROVIDER = os.getenv("AI_PROVIDER", "claude").strip().lower()
if AI_PROVIDER not in SUPPORTED_AI_PROVIDERS:
    _stderr_print(f"Unsupported AI_PROVIDER={AI_PROVIDER!r}, falling back to 'claude'")
    AI_PROVIDER = "claude"

MODEL_ALIASES_BY_PROVIDER = {
    "claude": {
        "opus": os.getenv("CLAUDE_MODEL_OPUS", "claude-opus-4-1"),
        "sonnet": os.getenv("CLAUDE_MODEL_SONNET", "claude-sonnet-4-5-20250929"),
        "haiku": os.getenv("CLAUDE_MODEL_HAIKU", "claude-haiku-4-5-20251001"),
    },
    "codex": {
        "opus": os.getenv("CODEX_MODEL_OPUS", "gpt-5-codex"),
        "sonnet": os.getenv("CODEX_MODEL_SONNET", "gpt-5-codex"),
        "haiku": os.getenv("CODEX_MODEL_HAIKU", "gpt-5-codex-mini"),
    },
}

MODEL_ALIASES = MODEL_ALIASES_BY_PROVIDER[AI_PROVIDER]

DEFAULT_MODEL = os.getenv("AI_DEFAULT_MODEL", "sonnet").strip().lower()
if DEFAULT_MODEL not in MODEL_ALIASES:
    fallback = "sonnet" if "sonnet" in MODEL_ALIASES else next(iter(MODEL_ALIASES))
    _stderr_print(
        f"Unsupported AI_DEFAULT_MODEL={DEFAULT_MODEL!r} for provider={AI_PROVIDER!r}, "
        f"falling back to {fallback!r}"
    )
    DEFAULT_MODEL = fallback

# Every date the model emits is read in this zone, never the host's.
DEFAULT_TIMEZONE = "Asia/Tokyo"
ACTION_TIMEZONE = os.getenv("ACTION_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
try:
    ZoneInfo(ACTION_TIMEZONE)
except (ZoneInfoNotFoundError, ValueError):
    _stderr_print(f"Unknown ACTION_TIMEZONE={ACTION_TIMEZONE!r}, falling back to {DEFAULT_TIMEZONE!r}")
    ACTION_TIMEZONE = DEFAULT_TIMEZONE

# LLM subprocess timeouts (seconds)
LLM_TIMEOUTS = {
    "claude": float(os.getenv("CLAUDE_TIMEOUT_SECONDS", "120")),
    "codex": float(os.getenv("CODEX_TIMEOUT_SECONDS", "180")),
}


# ── Typed config ────────────────────────────────────────────


@dataclass
class RefinementConfig:
    max_history: int = 20
    default_event_minutes: int = 60


@dataclass
class AppConfig:
    """Typed configuration for the server and the brain."""

    host: str = "127.0.0.1"
    port: int = 3000
    ai_provider: str = "claude"
    default_model: str = "sonnet"
    llm_timeouts: Dict[str, float] = field(default_factory=dict)
    refinement: RefinementConfig = field(default_factory=RefinementConfig)

    @property
    def model_name(self) -> str:
        """Resolve the configured alias to a concrete model name."""
        aliases = MODEL_ALIASES_BY_PROVIDER.get(self.ai_provider, MODEL_ALIASES)
        return aliases.get(self.default_model, self.default_model)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "3000")),
            ai_provider=AI_PROVIDER,
            default_model=DEFAULT_MODEL,
            llm_timeouts=dict(LLM_TIMEOUTS),
            refinement=RefinementConfig(
                max_history=int(os.getenv("REFINEMENT_MAX_HISTORY", "20")),
                default_event_minutes=int(os.getenv("DEFAULT_EVENT_MINUTES", "60")),
            ),
        )

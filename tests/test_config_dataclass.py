"""Tests for the typed AppConfig dataclass."""

import dataclasses

from smartaction.config import (
    ACTION_TIMEZONE,
    MODEL_ALIASES_BY_PROVIDER,
    AppConfig,
    RefinementConfig,
)


class TestRefinementConfig:
    def test_defaults(self):
        c = RefinementConfig()
        assert c.max_history == 20
        assert c.default_event_minutes == 60

    def test_custom(self):
        c = RefinementConfig(max_history=4)
        assert c.max_history == 4


class TestAppConfig:
    def test_defaults(self):
        c = AppConfig()
        assert c.port == 3000
        assert c.ai_provider == "claude"
        assert isinstance(c.refinement, RefinementConfig)

    def test_model_name_resolves_alias(self):
        c = AppConfig(ai_provider="codex", default_model="haiku")
        assert c.model_name == MODEL_ALIASES_BY_PROVIDER["codex"]["haiku"]

    def test_model_name_passthrough(self):
        c = AppConfig(default_model="my-custom-model")
        assert c.model_name == "my-custom-model"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("REFINEMENT_MAX_HISTORY", "6")
        monkeypatch.setenv("DEFAULT_EVENT_MINUTES", "30")
        c = AppConfig.from_env()
        assert c.port == 8123
        assert c.refinement.max_history == 6
        assert c.refinement.default_event_minutes == 30
        assert set(c.llm_timeouts) == {"claude", "codex"}


class TestActionTimezone:
    def test_normalizer_reads_module_zone(self):
        from smartaction.domain.date_normalizer import FIXED_TIMEZONE

        assert FIXED_TIMEZONE.key == ACTION_TIMEZONE

    def test_zone_is_not_an_app_config_field(self):
        assert "timezone" not in {f.name for f in dataclasses.fields(AppConfig)}

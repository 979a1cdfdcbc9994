"""Tests for domain/execution.py — execution request planning."""

from datetime import datetime, timedelta

import pytest

from smartaction.domain.date_normalizer import FIXED_TIMEZONE
from smartaction.domain.execution import plan_execution, resolve_event_window
from smartaction.domain.models import Action, ActionKind


def _local(*args):
    return datetime(*args, tzinfo=FIXED_TIMEZONE)


class TestCalendar:
    def test_end_defaults_to_one_hour(self):
        action = Action(kind=ActionKind.ADD_CALENDAR_EVENT, primary="Kickoff", start_at=_local(2025, 11, 1, 9, 0))
        request = plan_execution(action)
        assert request.payload["start"] == "2025-11-01T09:00"
        assert request.payload["end"] == "2025-11-01T10:00"
        assert action.end_at is None

    def test_explicit_end_kept(self):
        action = Action(
            kind=ActionKind.ADD_CALENDAR_EVENT,
            primary="Workshop",
            start_at=_local(2025, 11, 1, 9, 0),
            end_at=_local(2025, 11, 1, 17, 0),
        )
        assert plan_execution(action).payload["end"] == "2025-11-01T17:00"

    def test_unknown_start_uses_now(self):
        action = Action(kind=ActionKind.ADD_CALENDAR_EVENT, primary="Someday")
        now = _local(2025, 1, 1, 8, 30)
        start, end = resolve_event_window(action, now=now)
        assert start == now
        assert end == now + timedelta(hours=1)

    def test_custom_duration(self):
        action = Action(kind=ActionKind.ADD_CALENDAR_EVENT, primary="Call", start_at=_local(2025, 11, 1, 9, 0))
        request = plan_execution(action, duration=timedelta(minutes=30))
        assert request.payload["end"] == "2025-11-01T09:30"

    def test_notes(self):
        action = Action(kind=ActionKind.ADD_CALENDAR_EVENT, primary="X", tertiary="bring ID")
        assert plan_execution(action, now=_local(2025, 1, 1, 0, 0)).payload["notes"] == "bring ID"


class TestOtherKinds:
    def test_map_urls_are_encoded(self):
        request = plan_execution(Action(kind=ActionKind.SEARCH_MAP, primary="東京駅 丸の内"))
        assert request.payload["google_maps_url"].startswith("comgooglemaps://?q=%E6%9D%B1")
        assert "%20" in request.payload["apple_maps_url"]

    def test_contact_name_split(self):
        action = Action(kind=ActionKind.ADD_CONTACT, primary="Taro Yamada", secondary="080-1111-2222", tertiary="")
        payload = plan_execution(action).payload
        assert payload["given_name"] == "Taro"
        assert payload["family_name"] == "Yamada"
        assert payload["phone"] == "080-1111-2222"
        assert "email" not in payload

    def test_contact_single_name(self):
        payload = plan_execution(Action(kind=ActionKind.ADD_CONTACT, primary="Yoshida")).payload
        assert payload == {"given_name": "Yoshida"}

    def test_call_digits_only(self):
        request = plan_execution(Action(kind=ActionKind.CALL, primary="03-1234-5678"))
        assert request.payload["url"] == "tel://0312345678"

    def test_call_without_digits(self):
        with pytest.raises(ValueError):
            plan_execution(Action(kind=ActionKind.CALL, primary="reception"))

    def test_url(self):
        request = plan_execution(Action(kind=ActionKind.OPEN_URL, primary="https://example.com"))
        assert request.payload == {"url": "https://example.com"}

    def test_note_shares_summary(self):
        action = Action(kind=ActionKind.ADD_NOTE, primary="Wedding")
        assert plan_execution(action, summary="Wedding\nDetails").payload["text"] == "Wedding\nDetails"
        assert plan_execution(action).payload["text"] == "Wedding"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            plan_execution(Action(kind=ActionKind.UNKNOWN, primary="?"))

    def test_request_carries_identity(self):
        action = Action(kind=ActionKind.OPEN_URL, primary="https://example.com")
        request = plan_execution(action)
        assert request.action_id == action.id
        assert request.kind is ActionKind.OPEN_URL
        assert request.title == "https://example.com"

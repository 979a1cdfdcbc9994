"""Tests for multi-provider executor behavior."""

import asyncio
from pathlib import Path

import pytest

from smartaction.adapters.llm.executor import ClaudeExecutor, CodexExecutor, create_executor
from smartaction.errors import LLMRequestError, LLMUnavailableError
from smartaction.ports.outbound import LLMPort


def run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


class _FakeProc:
    def __init__(self, returncode=0, stdout=b"", stderr=b""):
        self.returncode = returncode
        self._stdout = stdout
        self._stderr = stderr

    async def communicate(self):
        return self._stdout, self._stderr


def test_create_executor_rejects_unknown_provider():
    with pytest.raises(ValueError):
        create_executor("unknown-provider")


def test_create_executor_returns_llm_ports():
    assert isinstance(create_executor("claude"), LLMPort)
    assert isinstance(create_executor("codex"), CodexExecutor)


def test_codex_executor_uses_codex_exec_and_reads_output(monkeypatch):
    captured = {}

    async def fake_create_subprocess_exec(*args, **kwargs):
        captured["args"] = args
        output_path = args[args.index("--output-last-message") + 1]
        Path(output_path).write_text("codex-result", encoding="utf-8")
        return _FakeProc(returncode=0, stdout=b"", stderr=b"")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)

    executor = CodexExecutor()
    response = run(
        executor.execute(
            "hello",
            system_prompt="system-guidance",
            session_id="session-ignored",
            model="gpt-5",
        )
    )

    args = captured["args"]
    assert args[0:2] == ("codex", "exec")
    assert "--model" in args
    assert "gpt-5" in args
    assert "System instructions:" in args[-1]
    assert "User message:" in args[-1]
    assert response == "codex-result"


def test_codex_executor_failure_raises_request_error(monkeypatch):
    async def fake_create_subprocess_exec(*args, **kwargs):
        return _FakeProc(returncode=2, stderr=b"bad flag")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)

    with pytest.raises(LLMRequestError, match="bad flag"):
        run(CodexExecutor().execute("hello"))


def test_claude_executor_returns_stdout(monkeypatch):
    captured = {}

    async def fake_create_subprocess_exec(*args, **kwargs):
        captured["args"] = args
        return _FakeProc(returncode=0, stdout=b"  - call: 1\n")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)

    response = run(ClaudeExecutor().execute("prompt", system_prompt="sys", model="sonnet"))

    args = captured["args"]
    assert args[0:2] == ("claude", "--print")
    assert "--system-prompt" in args
    assert args[-1] == "prompt"
    assert response == "- call: 1"


def test_claude_executor_missing_cli(monkeypatch):
    async def fake_create_subprocess_exec(*args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)

    with pytest.raises(LLMUnavailableError):
        run(ClaudeExecutor().execute("prompt"))


def test_claude_executor_timeout(monkeypatch):
    class _SlowProc(_FakeProc):
        async def communicate(self):
            await asyncio.sleep(10)
            return b"", b""

        def kill(self):
            pass

    async def fake_create_subprocess_exec(*args, **kwargs):
        proc = _SlowProc()
        proc.returncode = None
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)

    with pytest.raises(LLMRequestError, match="Timeout"):
        run(ClaudeExecutor(timeout=0.05).execute("prompt"))


def test_claude_executor_is_one_shot(monkeypatch):
    calls = []

    async def fake_create_subprocess_exec(*args, **kwargs):
        calls.append(args)
        return _FakeProc(returncode=1, stderr=b"Session ID already in use")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)

    with pytest.raises(LLMRequestError, match="already in use"):
        run(ClaudeExecutor().execute("prompt", session_id="abc"))
    assert len(calls) == 1
    assert "--session-id" not in calls[0]

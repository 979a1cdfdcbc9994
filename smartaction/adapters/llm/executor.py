"""LLM CLI executors — implement LLMPort."""

import asyncio
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from smartaction.config import AI_PROVIDER, LLM_TIMEOUTS
from smartaction.errors import LLMRequestError, LLMUnavailableError
from smartaction.ports.outbound import LLMPort


def _log(msg: str):
    print(msg, file=sys.stderr)


async def _run_subprocess(cmd_args):
    """Run a subprocess command and return process/stdout/stderr."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd_args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise LLMUnavailableError(f"{cmd_args[0]} CLI not found") from e
    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
        raise
    return proc, stdout, stderr


class ClaudeExecutor:
    """Executes Claude CLI commands."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout or LLM_TIMEOUTS["claude"]

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Execute Claude CLI command."""
        # Every call is a one-shot --print run; session_id is accepted for LLMPort.
        _ = session_id
        _log(f"[{datetime.now().isoformat()}] Executing with Claude CLI")

        args = [
            "claude",
            "--print",
            "--output-format",
            "text",
        ]

        if model:
            args.extend(["--model", model])

        if system_prompt:
            args.extend(["--system-prompt", system_prompt])

        args.append(message)

        try:
            proc, stdout, stderr = await asyncio.wait_for(
                _run_subprocess(args),
                timeout=self.timeout,
            )

            if proc.returncode == 0:
                _log(f"[{datetime.now().isoformat()}] Completed")
                return stdout.decode("utf-8").strip()

            raise LLMRequestError(f"Exit code {proc.returncode}: {stderr.decode()}")

        except asyncio.TimeoutError:
            raise LLMRequestError(f"Timeout ({self.timeout:.0f}s)")


class CodexExecutor:
    """Executes Codex CLI commands."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout or LLM_TIMEOUTS["codex"]

    @staticmethod
    def _compose_prompt(message: str, system_prompt: Optional[str]) -> str:
        if not system_prompt:
            return message
        # `codex exec` has no --system-prompt flag.
        return (
            "System instructions:\n"
            f"{system_prompt}\n\n"
            "User message:\n"
            f"{message}"
        )

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Execute Codex CLI command via `codex exec`."""
        # codex exec is stateless; session_id is accepted for LLMPort.
        _ = session_id

        fd, output_path = tempfile.mkstemp(prefix="codex-last-", suffix=".txt")
        os.close(fd)
        out_file = Path(output_path)

        args = [
            "codex",
            "exec",
            "--color",
            "never",
            "--output-last-message",
            output_path,
        ]

        if model:
            args.extend(["--model", model])

        args.append(self._compose_prompt(message, system_prompt))
        _log(f"[{datetime.now().isoformat()}] Executing with Codex CLI")

        try:
            proc, stdout, stderr = await asyncio.wait_for(
                _run_subprocess(args),
                timeout=self.timeout,
            )
            if proc.returncode != 0:
                err_text = stderr.decode("utf-8").strip() or stdout.decode("utf-8").strip()
                raise LLMRequestError(f"Exit code {proc.returncode}: {err_text}")

            response = ""
            if out_file.exists():
                response = out_file.read_text(encoding="utf-8").strip()
            if not response:
                response = stdout.decode("utf-8").strip()
            if not response:
                raise LLMRequestError("Codex returned empty response")

            _log(f"[{datetime.now().isoformat()}] Completed")
            return response
        except asyncio.TimeoutError:
            raise LLMRequestError(f"Timeout ({self.timeout:.0f}s)")
        finally:
            try:
                out_file.unlink(missing_ok=True)
            except OSError:
                pass


def create_executor(provider: Optional[str] = None, timeout: Optional[float] = None) -> LLMPort:
    """Create an executor for the selected provider."""
    selected = (provider or AI_PROVIDER).strip().lower()
    if selected == "claude":
        return ClaudeExecutor(timeout=timeout)
    if selected == "codex":
        return CodexExecutor(timeout=timeout)
    raise ValueError(f"Unsupported provider: {selected}")

import asyncio
import sys
import time

import pytest

from app.agent.errors import AgentAbortedError, AgentExitError, AgentTimeoutError
from app.agent.events import ProgressEvent
from app.agent.invoker import AgentHandle, AgentInvoker

ECHO = "import sys; data = sys.stdin.read(); sys.stdout.write('  echo: ' + data + '\\n')"
FAIL = "import sys; sys.stdin.read(); sys.stderr.write('boom'); sys.exit(3)"
SLEEP = "import time; time.sleep(30)"


def _invoker(script: str) -> AgentInvoker:
	return AgentInvoker(command=[sys.executable, "-c", script], print_args=(), version_args=())


def test_invoke_sends_prompt_on_stdin_and_trims_output():
	events: list[ProgressEvent] = []
	result = asyncio.run(_invoker(ECHO).invoke("hello", on_progress=events.append))
	assert result == "echo: hello"
	kinds = [e.kind for e in events]
	assert kinds[0] == "started"
	assert kinds[-1] == "complete"
	assert "stdout" in kinds
	assert events[-1].bytes_received > 0
	assert all(e.elapsed_ms >= 0 for e in events)


def test_nonzero_exit_raises_with_code_and_stderr():
	events: list[ProgressEvent] = []
	stderr_chunks: list[str] = []
	with pytest.raises(AgentExitError) as exc_info:
		asyncio.run(_invoker(FAIL).invoke("x", on_progress=events.append, on_stderr=stderr_chunks.append))
	assert exc_info.value.exit_code == 3
	assert "boom" in exc_info.value.stderr
	assert "boom" in "".join(stderr_chunks)
	assert events[-1].kind == "error"


def test_timeout_terminates_exactly_once():
	events: list[ProgressEvent] = []
	signals: list[int] = []

	async def main():
		handle = await _invoker(SLEEP).start("x", timeout_ms=200, on_progress=events.append)
		original = handle.process.terminate

		def counting_terminate():
			signals.append(1)
			original()

		handle.process.terminate = counting_terminate
		try:
			await handle
		finally:
			handle.abort()

	started = time.monotonic()
	with pytest.raises(AgentTimeoutError) as exc_info:
		asyncio.run(main())
	assert time.monotonic() - started < 5
	assert exc_info.value.timeout_ms == 200
	assert len(signals) == 1
	assert events[-1].kind == "error"
	assert events[-1].message == "Timeout exceeded"


def test_abort_is_idempotent():
	signals: list[int] = []

	async def main():
		handle = await _invoker(SLEEP).start("x", timeout_ms=10_000)
		original = handle.process.terminate

		def counting_terminate():
			signals.append(1)
			original()

		handle.process.terminate = counting_terminate
		handle.abort()
		handle.abort()
		await handle

	with pytest.raises(AgentAbortedError):
		asyncio.run(main())
	assert len(signals) == 1


def test_missing_binary_is_unavailable():
	invoker = AgentInvoker(command="definitely-not-an-agent-binary-xyz")
	assert asyncio.run(invoker.is_available()) is False
	with pytest.raises(OSError):
		asyncio.run(invoker.invoke("x"))


def test_available_when_version_succeeds():
	invoker = AgentInvoker(command=[sys.executable], version_args=("--version",))
	assert asyncio.run(invoker.is_available()) is True


def test_abort_after_completion_is_harmless():
	async def main():
		handle = await _invoker(ECHO).start("done")
		result = await handle
		handle.abort()
		return result, await handle

	first, again = asyncio.run(main())
	assert first == again == "echo: done"


IGNORE_TERM = "import signal, sys, time; signal.signal(signal.SIGTERM, signal.SIG_IGN); sys.stdout.write('ready\\n'); sys.stdout.flush(); time.sleep(30)"


def test_timeout_does_not_wait_long_for_agent_ignoring_sigterm():
	alive_after: list[bool] = []

	async def main():
		handle = await _invoker(IGNORE_TERM).start("x", timeout_ms=500)
		try:
			await handle
		finally:
			alive_after.append(handle.process.returncode is None)
			if handle.process.returncode is None:
				handle.process.kill()
				await handle.process.wait()

	started = time.monotonic()
	with pytest.raises(AgentTimeoutError):
		asyncio.run(main())
	elapsed = time.monotonic() - started
	assert elapsed < 500 / 1000 + AgentHandle.reap_grace_seconds + 1.5
	assert alive_after == [True]

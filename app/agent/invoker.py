import asyncio
import logging
import time
from typing import Sequence

from .errors import AgentAbortedError, AgentExitError, AgentTimeoutError
from .events import ProgressCallback, ProgressEvent, ProgressKind, StderrCallback

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 300_000
CHUNK_SIZE = 4096


def _now_ms() -> int:
	return int(time.time() * 1000)


class AgentHandle:
	"""
	A running agent subprocess. Await the handle (or ``handle.result``) for the
	trimmed stdout; ``abort()`` sends SIGTERM and is safe to call at any time.

	SIGTERM is the only signal ever sent. An agent that ignores it is left
	running after a timeout; the handle stops waiting for it after
	``reap_grace_seconds`` and logs its pid.
	"""

	reap_grace_seconds = 1.0

	def __init__(
		self,
		process: asyncio.subprocess.Process,
		prompt: str,
		timeout_ms: int,
		on_progress: ProgressCallback | None = None,
		on_stderr: StderrCallback | None = None,
	) -> None:
		self.process = process
		self.timeout_ms = timeout_ms
		self.on_progress = on_progress
		self.on_stderr = on_stderr
		self.bytes_received = 0
		self._started = time.monotonic()
		self._signalled = False
		self._aborted = False
		self._emit("started", f"PID: {process.pid}")
		self.result: asyncio.Task[str] = asyncio.ensure_future(self._run(prompt))

	def __await__(self):
		return self.result.__await__()

	@property
	def pid(self) -> int | None:
		return self.process.pid

	def abort(self) -> None:
		if self._terminate():
			self._aborted = True

	def _terminate(self) -> bool:
		if self._signalled or self.process.returncode is not None:
			return False
		self._signalled = True
		try:
			self.process.terminate()
		except ProcessLookupError:
			return False
		return True

	def _emit(self, kind: ProgressKind, message: str | None = None) -> None:
		if self.on_progress is None:
			return
		event = ProgressEvent(
			kind=kind,
			timestamp_ms=_now_ms(),
			elapsed_ms=int((time.monotonic() - self._started) * 1000),
			bytes_received=self.bytes_received,
			message=message,
		)
		try:
			self.on_progress(event)
		except Exception:
			_LOGGER.exception("Progress observer failed", extra={"kind": kind})

	async def _feed(self, prompt: str) -> None:
		stdin = self.process.stdin
		if stdin is None:
			return
		try:
			stdin.write(prompt.encode("utf-8"))
			await stdin.drain()
		except (BrokenPipeError, ConnectionResetError):
			_LOGGER.debug("Agent closed stdin before the prompt was fully written")
		finally:
			stdin.close()

	async def _pump_stdout(self, sink: list[bytes]) -> None:
		assert self.process.stdout is not None
		while True:
			chunk = await self.process.stdout.read(CHUNK_SIZE)
			if not chunk:
				break
			sink.append(chunk)
			self.bytes_received += len(chunk)
			self._emit("stdout")

	async def _pump_stderr(self, sink: list[bytes]) -> None:
		assert self.process.stderr is not None
		while True:
			chunk = await self.process.stderr.read(CHUNK_SIZE)
			if not chunk:
				break
			sink.append(chunk)
			text = chunk.decode("utf-8", errors="replace")
			if self.on_stderr is not None:
				self.on_stderr(text)
			self._emit("stderr", text[:200])

	async def _collect(self, prompt: str) -> tuple[int, str, str]:
		out: list[bytes] = []
		err: list[bytes] = []
		await asyncio.gather(self._feed(prompt), self._pump_stdout(out), self._pump_stderr(err))
		code = await self.process.wait()
		return code, b"".join(out).decode("utf-8", errors="replace"), b"".join(err).decode("utf-8", errors="replace")

	async def _run(self, prompt: str) -> str:
		try:
			code, stdout, stderr = await asyncio.wait_for(self._collect(prompt), timeout=self.timeout_ms / 1000)
		except asyncio.TimeoutError:
			self._terminate()
			self._emit("error", "Timeout exceeded")
			try:
				await asyncio.wait_for(self.process.wait(), timeout=self.reap_grace_seconds)
			except asyncio.TimeoutError:
				_LOGGER.warning(
					"Agent still running after SIGTERM, leaving it behind",
					extra={"pid": self.process.pid, "timeout_ms": self.timeout_ms},
				)
			raise AgentTimeoutError(self.timeout_ms) from None
		if self._aborted:
			self._emit("error", "Aborted")
			raise AgentAbortedError()
		if code == 0:
			self._emit("complete", f"{self.bytes_received} bytes")
			return stdout.strip()
		self._emit("error", f"Exit {code}: {stderr}")
		raise AgentExitError(code, stderr)


class AgentInvoker:
	"""
	Runs the external text-generation agent. The prompt always travels through
	stdin so its size and content never touch the argument vector.
	"""

	def __init__(
		self,
		command: str | Sequence[str] = "claude",
		print_args: Sequence[str] = ("--print",),
		version_args: Sequence[str] = ("--version",),
		default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
		availability_timeout_ms: int = 15_000,
	) -> None:
		self.command = [command] if isinstance(command, str) else list(command)
		self.print_args = list(print_args)
		self.version_args = list(version_args)
		self.default_timeout_ms = default_timeout_ms
		self.availability_timeout_ms = availability_timeout_ms

	async def is_available(self) -> bool:
		argv = [*self.command, *self.version_args]
		try:
			proc = await asyncio.create_subprocess_exec(
				*argv,
				stdin=asyncio.subprocess.DEVNULL,
				stdout=asyncio.subprocess.DEVNULL,
				stderr=asyncio.subprocess.DEVNULL,
			)
		except OSError as e:
			_LOGGER.info("Agent not available: %s", e, extra={"command": self.command[0]})
			return False
		try:
			code = await asyncio.wait_for(proc.wait(), timeout=self.availability_timeout_ms / 1000)
		except asyncio.TimeoutError:
			_LOGGER.warning("Agent version check timed out", extra={"command": self.command[0]})
			proc.kill()
			await proc.wait()
			return False
		return code == 0

	async def start(
		self,
		prompt: str,
		timeout_ms: int | None = None,
		on_progress: ProgressCallback | None = None,
		on_stderr: StderrCallback | None = None,
	) -> AgentHandle:
		argv = [*self.command, *self.print_args]
		try:
			process = await asyncio.create_subprocess_exec(
				*argv,
				stdin=asyncio.subprocess.PIPE,
				stdout=asyncio.subprocess.PIPE,
				stderr=asyncio.subprocess.PIPE,
			)
		except OSError as e:
			if on_progress is not None:
				on_progress(ProgressEvent(kind="error", timestamp_ms=_now_ms(), elapsed_ms=0, bytes_received=0, message=str(e)))
			raise
		return AgentHandle(
			process,
			prompt,
			timeout_ms=timeout_ms or self.default_timeout_ms,
			on_progress=on_progress,
			on_stderr=on_stderr,
		)

	async def invoke(
		self,
		prompt: str,
		timeout_ms: int | None = None,
		on_progress: ProgressCallback | None = None,
		on_stderr: StderrCallback | None = None,
	) -> str:
		handle = await self.start(prompt, timeout_ms=timeout_ms, on_progress=on_progress, on_stderr=on_stderr)
		return await handle

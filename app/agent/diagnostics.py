import asyncio
import datetime
import os
import shutil
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

from .invoker import AgentInvoker

TEST_PROMPT = "Reply with just the word 'OK'"
REAP_GRACE_SECONDS = 1.0


@dataclass
class CommandResult:
	success: bool = False
	exit_code: int | None = None
	stdout: str | None = None
	stderr: str | None = None
	error: str | None = None
	duration_ms: int | None = None


async def run_command(argv: Sequence[str], input_text: str | None = None, timeout_ms: int = 30_000) -> CommandResult:
	"""Run one command to completion; every failure is reported in the result, never raised."""
	started = time.monotonic()

	def elapsed() -> int:
		return int((time.monotonic() - started) * 1000)

	try:
		proc = await asyncio.create_subprocess_exec(
			*argv,
			stdin=asyncio.subprocess.PIPE if input_text is not None else asyncio.subprocess.DEVNULL,
			stdout=asyncio.subprocess.PIPE,
			stderr=asyncio.subprocess.PIPE,
		)
	except OSError as e:
		return CommandResult(error=str(e), duration_ms=elapsed())
	payload = input_text.encode("utf-8") if input_text is not None else None
	try:
		out, err = await asyncio.wait_for(proc.communicate(payload), timeout=timeout_ms / 1000)
	except asyncio.TimeoutError:
		proc.terminate()
		try:
			await asyncio.wait_for(proc.wait(), timeout=REAP_GRACE_SECONDS)
		except asyncio.TimeoutError:
			proc.kill()
			await proc.wait()
		return CommandResult(error=f"Timeout after {timeout_ms}ms", duration_ms=elapsed())
	return CommandResult(
		success=proc.returncode == 0,
		exit_code=proc.returncode,
		stdout=out.decode("utf-8", errors="replace").strip() or None,
		stderr=err.decode("utf-8", errors="replace").strip() or None,
		duration_ms=elapsed(),
	)


def _mask(value: str | None) -> str | None:
	if not value:
		return None
	return f"{value[:10]}..."


@dataclass
class AgentDiagnostics:
	timestamp: str
	environment: dict[str, str | None]
	checks: dict[str, Any] = field(default_factory=dict)
	recommendations: list[str] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		return asdict(self)


async def diagnose_agent(invoker: AgentInvoker) -> AgentDiagnostics:
	binary = invoker.command[0]
	report = AgentDiagnostics(
		timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
		environment={
			"PATH": os.environ.get("PATH"),
			"HOME": os.environ.get("HOME"),
			"USER": os.environ.get("USER"),
			"ANTHROPIC_API_KEY": _mask(os.environ.get("ANTHROPIC_API_KEY")),
		},
	)

	located = shutil.which(binary)
	report.checks["which"] = {"success": located is not None, "result": located}
	version = await run_command([*invoker.command, *invoker.version_args])
	report.checks["version"] = asdict(version)
	help_result = await run_command([*invoker.command, "--help"])
	if help_result.stdout and len(help_result.stdout) > 500:
		help_result.stdout = help_result.stdout[:500] + "..."
	report.checks["help"] = asdict(help_result)

	if version.success or help_result.success:
		prompt = await run_command([*invoker.command, *invoker.print_args], input_text=TEST_PROMPT, timeout_ms=60_000)
	else:
		prompt = CommandResult(error=f"Skipped - {binary} not found")
	report.checks["prompt"] = asdict(prompt)

	if located is None:
		report.recommendations.append(
			f"{binary} was not found in PATH. Make sure it is installed and that PATH includes its installation directory."
		)
		report.recommendations.append(f"Current PATH: {report.environment['PATH']}")
	if version.error and "No such file" in version.error:
		report.recommendations.append(f"The '{binary}' command could not be started. Install it or fix PATH.")
	if version.stderr and "not authenticated" in version.stderr:
		report.recommendations.append(f"{binary} is not authenticated. Log in before generating reports.")
	if prompt.error and "Timeout" in prompt.error:
		report.recommendations.append(f"{binary} timed out. This could be a network issue or the CLI is hanging.")
	output = prompt.stdout or ""
	if any(marker in output for marker in ("Invalid API key", "/login", "not authenticated")):
		report.recommendations.append(f"{binary} is not authenticated. Set the ANTHROPIC_API_KEY environment variable.")
		if not os.environ.get("ANTHROPIC_API_KEY"):
			report.recommendations.append("ANTHROPIC_API_KEY is not set.")
	return report

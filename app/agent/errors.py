class AgentError(RuntimeError):
	"""Base error for generation-agent invocations."""


class AgentTimeoutError(AgentError):
	def __init__(self, timeout_ms: int) -> None:
		super().__init__(f"Timeout after {timeout_ms}ms")
		self.timeout_ms = timeout_ms


class AgentExitError(AgentError):
	def __init__(self, exit_code: int | None, stderr: str) -> None:
		super().__init__(f"Exit {exit_code}: {stderr}")
		self.exit_code = exit_code
		self.stderr = stderr


class AgentAbortedError(AgentError):
	def __init__(self) -> None:
		super().__init__("Agent invocation aborted")

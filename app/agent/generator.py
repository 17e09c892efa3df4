import logging
from dataclasses import dataclass
from typing import Callable

from .errors import AgentError
from .events import ProgressCallback
from .invoker import AgentInvoker

_LOGGER = logging.getLogger(__name__)


@dataclass
class Summary:
	content: str
	source: str


class SummaryGenerator:
	"""
	Produces report text with the agent when it is installed and healthy,
	otherwise with the deterministic fallback. Agent failures never escape.
	"""

	def __init__(self, invoker: AgentInvoker | None) -> None:
		self.invoker = invoker

	async def available(self) -> bool:
		if self.invoker is None:
			return False
		return await self.invoker.is_available()

	async def generate(
		self,
		prompt: str,
		fallback: Callable[[], str],
		timeout_ms: int,
		stage: str = "report",
		on_progress: ProgressCallback | None = None,
	) -> Summary:
		if not await self.available():
			_LOGGER.info("Agent not available, using fallback", extra={"stage": stage})
			return Summary(content=fallback(), source="fallback")
		assert self.invoker is not None
		try:
			_LOGGER.info("Calling agent", extra={"stage": stage, "timeout_ms": timeout_ms})
			content = await self.invoker.invoke(prompt, timeout_ms=timeout_ms, on_progress=on_progress)
		except (AgentError, OSError) as exc:
			_LOGGER.warning("Agent invocation failed, using fallback", extra={"stage": stage, "error": str(exc)})
			return Summary(content=fallback(), source="fallback")
		if not content:
			_LOGGER.warning("Agent returned empty output, using fallback", extra={"stage": stage})
			return Summary(content=fallback(), source="fallback")
		return Summary(content=content, source="agent")

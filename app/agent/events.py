from dataclasses import dataclass
from typing import Callable, Literal

ProgressKind = Literal["started", "stdout", "stderr", "complete", "error"]


@dataclass(frozen=True)
class ProgressEvent:
	kind: ProgressKind
	timestamp_ms: int
	elapsed_ms: int
	bytes_received: int
	message: str | None = None


ProgressCallback = Callable[[ProgressEvent], None]
StderrCallback = Callable[[str], None]

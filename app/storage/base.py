from typing import Any, Callable, Protocol


class KeyValueStore(Protocol):
	def get_json(self, name: str, default: Any) -> Any: ...
	def set_json(self, name: str, data: Any) -> None: ...
	def update_json(self, name: str, default: Any, mutate: Callable[[Any], Any]) -> Any: ...

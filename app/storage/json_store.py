from typing import Any, Callable

from .provider import get_kv_store


def load_json(name: str, default: Any) -> Any:
	store = get_kv_store()
	return store.get_json(name, default)


def update_json(name: str, default: Any, mutate: Callable[[Any], Any]) -> Any:
	store = get_kv_store()
	return store.update_json(name, default, mutate)

import logging
import os
from typing import Optional

from .base import KeyValueStore
from .kv_store import FileKeyValueStore, MongoKeyValueStore

_LOGGER = logging.getLogger(__name__)
_store: Optional[KeyValueStore] = None


def _mongo_url_from_env() -> str | None:
	mongo_url = os.environ.get("MONGO_URL")
	if mongo_url:
		return mongo_url
	host = os.environ.get("MONGO_HOST")
	port = os.environ.get("MONGO_PORT", "27017")
	user = os.environ.get("MONGO_USERNAME") or os.environ.get("MONGO_INITDB_ROOT_USERNAME")
	pw = os.environ.get("MONGO_PASSWORD") or os.environ.get("MONGO_INITDB_ROOT_PASSWORD")
	auth_db = os.environ.get("MONGO_AUTH_SOURCE", "admin")
	if host and user and pw:
		return f"mongodb://{user}:{pw}@{host}:{port}/?authSource={auth_db}"
	return None


def get_kv_store() -> KeyValueStore:
	global _store
	if _store is not None:
		return _store
	mongo_url = _mongo_url_from_env()
	if mongo_url:
		db_name = os.environ.get("MONGO_DB", "standup_digest")
		try:
			_store = MongoKeyValueStore(mongo_url, database=db_name)
			_LOGGER.info("Using MongoKeyValueStore", extra={"db": db_name})
			return _store
		except Exception as e:
			_LOGGER.warning("Failed to initialize MongoKeyValueStore, falling back", extra={"error": str(e)})
	_store = FileKeyValueStore()
	_LOGGER.info("Using FileKeyValueStore", extra={"data_dir": _store.data_dir})
	return _store


def reset_kv_store() -> None:
	"""Drop the process-wide store handle so the next call rebuilds it from the environment."""
	global _store
	store = _store
	_store = None
	client = getattr(store, "client", None)
	if client is not None:
		client.close()

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable

from .base import KeyValueStore
from .file_lock import FileLock

_LOGGER = logging.getLogger(__name__)


class FileKeyValueStore(KeyValueStore):
    def __init__(self, data_dir: str | None = None) -> None:
        self.data_dir = data_dir or os.environ.get("DATA_DIR") or str(Path.cwd() / "data")
        Path(self.data_dir).mkdir(parents=True, exist_ok=True)

    def _file_path(self, name: str) -> str:
        return str(Path(self.data_dir) / name)

    def get_json(self, name: str, default: Any) -> Any:
        path = self._file_path(name)
        if not os.path.exists(path):
            return default
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError:
            _LOGGER.warning("Corrupt JSON document, using default", extra={"document": name})
            return default

    def set_json(self, name: str, data: Any) -> None:
        path = self._file_path(name)
        tmp = f"{path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)

    def update_json(self, name: str, default: Any, mutate: Callable[[Any], Any]) -> Any:
        with FileLock(f"{self._file_path(name)}.lock"):
            current = self.get_json(name, copy.deepcopy(default))
            updated = mutate(current)
            self.set_json(name, updated)
            return updated


class MongoKeyValueStore(KeyValueStore):
    max_update_attempts = 5

    def __init__(self, mongo_url: str, database: str = "app") -> None:
        try:
            from pymongo import MongoClient  # type: ignore
            from pymongo.errors import DuplicateKeyError  # type: ignore
        except Exception as e:
            raise RuntimeError("pymongo is required for MongoKeyValueStore") from e
        self._duplicate_key_error = DuplicateKeyError
        self.client = MongoClient(mongo_url, connect=True)
        self.db = self.client[database]
        self.col = self.db.get_collection("kv_store")

    def get_json(self, name: str, default: Any) -> Any:
        doc = self.col.find_one({"_id": name})
        if not doc:
            return default
        return doc.get("data", default)

    def set_json(self, name: str, data: Any) -> None:
        try:
            self.col.update_one(
                {"_id": name},
                {"$set": {"data": json.loads(json.dumps(data))}, "$inc": {"rev": 1}},
                upsert=True,
            )
        except Exception:
            _LOGGER.exception("kv_store set_json (mongo) failed")
            raise

    def update_json(self, name: str, default: Any, mutate: Callable[[Any], Any]) -> Any:
        # Optimistic concurrency on the document revision counter
        for _ in range(self.max_update_attempts):
            doc = self.col.find_one({"_id": name})
            if doc:
                rev = int(doc.get("rev", 0))
                updated = mutate(doc.get("data", copy.deepcopy(default)))
                result = self.col.update_one(
                    {"_id": name, "rev": doc.get("rev")},
                    {"$set": {"data": json.loads(json.dumps(updated)), "rev": rev + 1}},
                )
                if result.matched_count:
                    return updated
                continue
            updated = mutate(copy.deepcopy(default))
            try:
                self.col.insert_one({"_id": name, "data": json.loads(json.dumps(updated)), "rev": 1})
                return updated
            except self._duplicate_key_error:
                continue
        raise RuntimeError(f"Concurrent updates to {name} did not settle after {self.max_update_attempts} attempts")

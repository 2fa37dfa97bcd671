import json
import logging
import os
import tempfile
from typing import Any, Optional

import redis
from pydantic import BaseModel

import config

logger = logging.getLogger(__name__)

"""
Persistent Store
----------------
Durable key-value storage for planner state (profile, filters, plan,
grocery list, plan summary, auth token). Values are JSON-encoded strings.
Failures are logged and never propagated: a read that fails returns None.
"""


class StorageKey:
    API_KEY = "aiFitnessApp_apiKey"
    COMBINED_PLAN = "aiFitnessApp_combinedPlan"
    GROCERY_LIST = "aiFitnessApp_groceryList"
    PREVIOUS_PLAN_SUMMARY = "aiFitnessApp_previousPlanSummary"
    USER_PROFILE = API_KEY + "_userProfile"
    WORKOUT_FILTERS = API_KEY + "_workoutFilters"
    DIET_FILTERS = API_KEY + "_dietFilters"
    AUTH_TOKEN = "authToken"


class JsonFileBackend:
    """All keys live in one JSON object on disk; every write rewrites the file."""

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not contain a JSON object")
        return data

    def _write_all(self, data: dict):
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        # Write to a temp file first so a crash never leaves a half-written store
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str):
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str):
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class RedisBackend:
    def __init__(self, url: str = None, prefix: str = "fitplan:", client=None):
        self.prefix = prefix
        self.client = client if client is not None else redis.from_url(url or config.REDIS_URL, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(self.prefix + key)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str):
        self.client.set(self.prefix + key, value)

    def delete(self, key: str):
        self.client.delete(self.prefix + key)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


class PersistentStore:

    def __init__(self, backend):
        self.backend = backend

    def store_item(self, key: str, value: Any) -> None:
        try:
            self.backend.set(key, json.dumps(_to_jsonable(value)))
        except Exception as e:
            logger.error(f"Error storing item {key}: {e}")

    def get_item(self, key: str) -> Optional[Any]:
        try:
            item = self.backend.get(key)
            return json.loads(item) if item else None
        except Exception as e:
            logger.error(f"Error getting item {key}: {e}")
            return None

    def remove_item(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except Exception as e:
            logger.error(f"Error removing item {key}: {e}")


def build_store(backend_name: str = None) -> PersistentStore:
    backend_name = (backend_name or config.STORAGE_BACKEND).lower()
    if backend_name == "redis":
        return PersistentStore(RedisBackend(config.REDIS_URL))
    return PersistentStore(JsonFileBackend(config.STORAGE_PATH))

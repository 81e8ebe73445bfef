"""JSON file cache that survives process restarts.

The whole cache is one JSON object on disk. Every write replaces the file
atomically (write to a temp file, then rename), so a pair of keys written
with ``set_many`` is either fully on disk or not at all. An unreadable or
malformed file reads as an empty cache.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path

from .base import CacheError, LocalCache

logger = logging.getLogger(__name__)


class JsonFileCache(LocalCache):
    """LocalCache persisted to a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Cannot read cache file {self.path}: {e}")
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Cache file {self.path} is not valid JSON, ignoring it")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Cache file {self.path} does not hold an object, ignoring it")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cache-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CacheError(f"Cannot write cache file {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def remove(self, key: str) -> None:
        self.remove_many([key])

    def set_many(self, items: Mapping[str, str]) -> None:
        data = self._load()
        data.update(items)
        self._save(data)

    def remove_many(self, keys: Iterable[str]) -> None:
        data = self._load()
        removed = [key for key in keys if data.pop(key, None) is not None]
        if removed:
            self._save(data)

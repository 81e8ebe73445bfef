"""Local key-value cache interface.

The daily hadith engine keeps two keys in the cache, the serialized hadith
and its day stamp, and always writes or removes them together through
``set_many`` / ``remove_many``.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping


class CacheError(Exception):
    """Raised when the cache medium cannot be written."""

    pass


class LocalCache(ABC):
    """Abstract persisted string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a value, None if absent or unreadable."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            CacheError: If the value cannot be persisted
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        pass

    def set_many(self, items: Mapping[str, str]) -> None:
        """Store several values. Backends override this to write them atomically."""
        for key, value in items.items():
            self.set(key, value)

    def remove_many(self, keys: Iterable[str]) -> None:
        """Delete several keys. Backends override this to remove them atomically."""
        for key in keys:
            self.remove(key)


class MemoryCache(LocalCache):
    """Process-local cache. Lives as long as the object does."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def set_many(self, items: Mapping[str, str]) -> None:
        self._data.update(items)

    def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

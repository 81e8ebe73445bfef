"""Local cache backends for the resolved daily hadith."""

from .base import CacheError, LocalCache, MemoryCache
from .factory import make_cache
from .file_cache import JsonFileCache

__all__ = [
    "CacheError",
    "JsonFileCache",
    "LocalCache",
    "MemoryCache",
    "make_cache",
]

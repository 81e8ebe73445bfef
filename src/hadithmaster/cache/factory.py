"""Local cache factory."""

from ..config import Settings, settings
from .base import LocalCache, MemoryCache
from .file_cache import JsonFileCache


def make_cache(cfg: Settings | None = None) -> LocalCache:
    """Create the configured local cache."""
    cfg = cfg or settings
    if cfg.cache_backend == "memory":
        return MemoryCache()
    return JsonFileCache(cfg.cache_path)

"""Result cache with pluggable storage."""

from .base import CacheStore
from .memory import MemoryCacheStore
from .redis import RedisCacheStore
from .result_cache import CACHE_PREFIX, ResultCache, cache_key

__all__ = [
    "CACHE_PREFIX",
    "CacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "ResultCache",
    "cache_key",
]

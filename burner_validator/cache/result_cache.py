"""Status-aware cache of deep validation results."""

from burner_validator.config import CacheTtlConfig
from burner_validator.core.logging import get_logger
from burner_validator.models import Reachability

from .base import CacheStore
from .memory import MemoryCacheStore

logger = get_logger(__name__)

CACHE_PREFIX = "burner-validator:"


def cache_key(email: str) -> str:
    return f"{CACHE_PREFIX}{email.strip().lower()}"


class ResultCache:
    """
    Serialized validation results keyed by normalized email.

    How long a result lives depends on the mailbox reachability reported by
    the deep check: confirmed mailboxes and hard failures are kept for days,
    risky ones for a day and unknown ones not at all.
    """

    def __init__(
        self,
        store: CacheStore | None = None,
        ttl: CacheTtlConfig | None = None,
    ) -> None:
        """
        Initialize result cache.

        Args:
            store: Backing store, in-process memory if omitted
            ttl: Per-reachability lifetimes in seconds
        """
        self.store = store if store is not None else MemoryCacheStore()
        self.ttl = ttl or CacheTtlConfig()

    def ttl_for(self, reachability: Reachability) -> int:
        return getattr(self.ttl, reachability.value)

    async def get(self, email: str) -> str | None:
        return await self.store.get(cache_key(email))

    async def set(self, email: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        await self.store.set(cache_key(email), value, ttl_seconds)
        logger.bind(ttl=ttl_seconds).debug("result_cached")

    async def delete(self, email: str) -> None:
        delete = getattr(self.store, "delete", None)
        if delete is not None:
            await delete(cache_key(email))

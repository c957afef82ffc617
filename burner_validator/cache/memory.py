"""In-process cache store."""

from burner_validator.core.datetime_utils import epoch_seconds


class MemoryCacheStore:
    """Dict-backed store. Expired entries are dropped when read."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if epoch_seconds() > expires_at:
            del self._store[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        self._store[key] = (value, epoch_seconds() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        """Clear all cached entries."""
        self._store.clear()

    def size(self) -> int:
        """Return current cache size, expired entries included."""
        return len(self._store)

"""Storage contract for cached validation results."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """
    Key/value store with per-entry expiry.

    ``set`` with ``ttl_seconds <= 0`` must be a no-op. ``delete`` is
    optional; ``ResultCache`` checks for it before calling.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...


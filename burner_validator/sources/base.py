import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from pydantic import BaseModel

from burner_validator.core.datetime_utils import epoch_seconds, is_stale
from burner_validator.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RETRY_INTERVAL_SECONDS = 300


@dataclass(frozen=True)
class BlocklistSnapshot:
    """Immutable view of one source's domains at a point in time."""

    name: str
    domains: frozenset[str] = frozenset()
    loaded: bool = False
    fetched_at: float = 0.0  # Epoch seconds, 0 when never fetched
    version: int = 0


class SourceStats(BaseModel):
    """Health summary of a blocklist source."""

    name: str
    count: int
    loaded: bool
    last_fetch: float
    healthy: bool = True
    health_warnings: list[str] = []


class BlocklistSource(ABC):
    """
    A named set of disposable domains refreshed by wholesale snapshot swaps.

    Readers only ever see a complete snapshot: ``refresh`` builds the new
    frozenset first and then rebinds ``_snapshot`` in a single assignment.
    A failed fetch leaves the previous snapshot in place.
    """

    name: str = "unknown"

    # Sources that are fetched at startup wait for that first attempt before
    # refreshing in the background.
    refresh_requires_loaded: bool = True

    def __init__(
        self,
        refresh_interval_seconds: float,
        retry_interval_seconds: float = DEFAULT_RETRY_INTERVAL_SECONDS,
    ) -> None:
        self.refresh_interval = refresh_interval_seconds
        self.retry_interval = retry_interval_seconds
        self._last_attempt = 0.0  # Epoch seconds of the last fetch, successful or not
        self._snapshot = BlocklistSnapshot(name=self.name)
        self._refresh_task: asyncio.Task | None = None
        self._background_tasks: set[asyncio.Task] = set()

    @property
    def snapshot(self) -> BlocklistSnapshot:
        return self._snapshot

    @abstractmethod
    async def fetch(self) -> frozenset[str]:
        """
        Download the full domain set for this source.

        Returns:
            Lowercased domains

        Raises:
            Exception: Any failure; ``refresh`` logs it and keeps the old snapshot
        """

    @abstractmethod
    def contains(self, domain: str) -> bool:
        """Membership test against the current snapshot. Never touches the network."""

    def swap(self, domains: frozenset[str]) -> BlocklistSnapshot:
        """Install a new snapshot built from ``domains``."""
        self._snapshot = replace(
            self._snapshot,
            domains=domains,
            loaded=True,
            fetched_at=epoch_seconds(),
            version=self._snapshot.version + 1,
        )
        return self._snapshot

    async def refresh(self) -> BlocklistSnapshot:
        """Fetch now and swap the snapshot. Errors are logged, never raised."""
        self._last_attempt = epoch_seconds()
        try:
            domains = await self.fetch()
        except Exception as e:
            logger.bind(source=self.name, error=str(e)).error("blocklist_refresh_failed")
            return self._snapshot

        snapshot = self.swap(domains)
        logger.bind(source=self.name, count=len(domains), version=snapshot.version).info(
            "blocklist_refreshed"
        )
        return snapshot

    def is_stale(self) -> bool:
        """
        True when a background refresh is due.

        Data older than the refresh interval is due, and so is a source that
        never loaded. Failed fetches are retried at most once per retry interval.
        """
        if self.refresh_requires_loaded and not self._snapshot.loaded and self._last_attempt == 0:
            return False
        if not is_stale(self._snapshot.fetched_at, self.refresh_interval):
            return False
        return is_stale(self._last_attempt, self.retry_interval)

    def maybe_schedule_refresh(self) -> asyncio.Task | None:
        """
        Start a background refresh if the snapshot is stale.

        The caller is never blocked. Without a running event loop there is
        nothing to schedule on and the stale snapshot keeps being served.
        """
        if not self.is_stale():
            return None
        if self._refresh_task is not None and not self._refresh_task.done():
            return self._refresh_task

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None

        task = loop.create_task(self.refresh(), name=f"refresh:{self.name}")
        self._refresh_task = task
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        logger.bind(source=self.name).debug("blocklist_refresh_scheduled")
        return task

    def stats(self) -> SourceStats:
        snapshot = self._snapshot
        return SourceStats(
            name=self.name,
            count=len(snapshot.domains),
            loaded=snapshot.loaded,
            last_fetch=snapshot.fetched_at,
        )

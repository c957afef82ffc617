"""Domain reputation across all local blocklists.

``DomainReputation`` owns one ``BlocklistSource`` per feed and answers
membership questions from their current snapshots without ever waiting on
the network. Stale sources are refreshed by background tasks.
"""

import asyncio

from burner_validator.config import Settings, get_settings
from burner_validator.core.logging import get_logger
from burner_validator.sources import (
    BlocklistSource,
    DiscoveredDomains,
    GitHubBlocklist,
    ScrapedDomains,
    SourceStats,
)

logger = get_logger(__name__)


class DomainReputation:
    """
    Synchronous disposable-domain lookup over several blocklist sources.

    Sources are evaluated in a fixed order: discovered domains, scraped
    provider domains, then the remote blocklist (which also matches parent
    domains). The first hit wins.
    """

    def __init__(
        self,
        discovered: DiscoveredDomains,
        scraped: ScrapedDomains,
        blocklist: GitHubBlocklist,
    ) -> None:
        self.discovered = discovered
        self.scraped = scraped
        self.blocklist = blocklist
        self._start_task: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DomainReputation":
        return cls(
            discovered=DiscoveredDomains(
                settings.discovered_domains_file,
                refresh_interval_seconds=settings.discovered_reload_minutes * 60,
            ),
            scraped=ScrapedDomains(
                settings.scraped_base_url,
                refresh_interval_seconds=settings.scraped_refresh_hours * 3600,
                timeout_seconds=settings.scraped_timeout,
            ),
            blocklist=GitHubBlocklist(
                settings.blocklist_url,
                refresh_interval_seconds=settings.blocklist_refresh_hours * 3600,
                timeout_seconds=settings.blocklist_timeout,
            ),
        )

    @property
    def sources(self) -> list[BlocklistSource]:
        return [self.discovered, self.scraped, self.blocklist]

    def is_disposable(self, domain: str) -> bool:
        """Check a domain against every local blocklist."""
        domain = domain.strip().lower()

        self._schedule_start()
        for source in self.sources:
            source.maybe_schedule_refresh()

        for source in self.sources:
            if source.contains(domain):
                logger.bind(domain=domain, source=source.name).debug("domain_blocklisted")
                return True
        return False

    async def start(self) -> None:
        """Best-effort initial load of every source."""
        await self.refresh_all()

    def _schedule_start(self) -> None:
        """Kick off the initial load in the background on first use."""
        if self._start_task is not None:
            return
        if any(source.snapshot.loaded for source in self.sources):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._start_task = loop.create_task(self.start(), name="reputation:start")

    async def refresh_all(self) -> None:
        """Refresh every source now and wait for completion. Never raises."""
        await asyncio.gather(*(source.refresh() for source in self.sources))

    async def add_discovered_domain(self, domain: str) -> bool:
        return await self.discovered.add(domain)

    async def reload_discovered_domains(self) -> list[str]:
        return await self.discovered.reload()

    def stats(self) -> dict[str, SourceStats]:
        return {source.name: source.stats() for source in self.sources}


_reputation_instance: DomainReputation | None = None


def get_reputation() -> DomainReputation:
    """Get the shared reputation store built from settings."""
    global _reputation_instance
    if _reputation_instance is None:
        _reputation_instance = DomainReputation.from_settings(get_settings())
    return _reputation_instance


def reset_reputation() -> None:
    """Drop the shared reputation store. Useful for testing."""
    global _reputation_instance
    _reputation_instance = None

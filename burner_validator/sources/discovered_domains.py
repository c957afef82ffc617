"""Domains discovered by the scraper bot.

The bot writes ``{"domains": [...], "lastScrape": <epoch ms>, "count": n}``
to a JSON file; this source reloads it wholesale and lets operators add
domains by hand.
"""

import asyncio
import json
from pathlib import Path

from burner_validator.core.datetime_utils import age_hours, epoch_millis
from burner_validator.core.logging import get_logger
from burner_validator.errors import SourceFetchError

from .base import BlocklistSnapshot, BlocklistSource, SourceStats

logger = get_logger(__name__)

MIN_HEALTHY_DOMAINS = 10
STALE_AFTER_HOURS = 48


class DiscoveredDomains(BlocklistSource):
    """Domains from the discovered-domains JSON document."""

    name = "discovered_domains"
    # Re-read the file on staleness even if it was missing at startup
    refresh_requires_loaded = False

    def __init__(self, path: Path, refresh_interval_seconds: float = 3600) -> None:
        super().__init__(refresh_interval_seconds)
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def fetch(self) -> frozenset[str]:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            logger.bind(path=str(self.path)).info("discovered_domains_file_missing")
            return frozenset()

        data = json.loads(raw)
        domains = data.get("domains") if isinstance(data, dict) else None
        if not isinstance(domains, list):
            raise SourceFetchError(f"{self.path} has no 'domains' list")

        return frozenset(str(d).strip().lower() for d in domains if str(d).strip())

    def contains(self, domain: str) -> bool:
        return domain in self._snapshot.domains

    async def refresh(self) -> BlocklistSnapshot:
        async with self._lock:
            return await super().refresh()

    async def add(self, domain: str) -> bool:
        """
        Add a domain and persist the file immediately.

        Adding a known domain is a no-op. A failed write is logged and the
        domain stays in memory.

        Returns:
            True if the domain was new
        """
        domain = domain.strip().lower()

        # Merge, swap and write under one lock; file writes land in call order
        async with self._lock:
            if not self._snapshot.loaded:
                # Never overwrite the bot's file with a partial set
                await super().refresh()

            current = self._snapshot.domains
            if domain in current:
                return False

            merged = current | {domain}
            self.swap(merged)

            payload = {
                "domains": sorted(merged),
                "lastScrape": epoch_millis(),
                "count": len(merged),
            }
            try:
                await asyncio.to_thread(self._write, json.dumps(payload, indent=2))
            except OSError as e:
                logger.bind(domain=domain, error=str(e)).error(
                    "discovered_domains_save_failed"
                )
            else:
                logger.bind(domain=domain).info("discovered_domain_added")

        return True

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    async def reload(self) -> list[str]:
        """Reload from disk now and return the domains that were not known before."""
        previous = self._snapshot.domains
        snapshot = await self.refresh()
        added = sorted(snapshot.domains - previous)
        if added:
            logger.bind(added=len(added)).info("discovered_domains_new")
        return added

    def stats(self) -> SourceStats:
        stats = super().stats()
        warnings = []

        if stats.count < MIN_HEALTHY_DOMAINS:
            warnings.append(
                f"Suspiciously low domain count ({stats.count}). File may be corrupted."
            )

        if stats.last_fetch > 0 and age_hours(stats.last_fetch) > STALE_AFTER_HOURS:
            warnings.append(f"Domain data is stale ({round(age_hours(stats.last_fetch))} hours old).")

        if not stats.loaded and stats.count == 0:
            warnings.append("Domain file was never loaded.")

        stats.healthy = not warnings
        stats.health_warnings = warnings
        return stats

"""Tests for the combined domain reputation store."""

import asyncio
import time
from dataclasses import replace
from unittest.mock import AsyncMock, patch

import pytest

from burner_validator.reputation import DomainReputation
from burner_validator.sources import DiscoveredDomains, GitHubBlocklist, ScrapedDomains


def _stale(source):
    """Mark a loaded source as fetched long ago."""
    source._snapshot = replace(source.snapshot, loaded=True, fetched_at=1.0)


class TestIsDisposable:
    def test_lowercases_and_strips(self, reputation):
        assert reputation.is_disposable("  Discovered-Burner.COM ")

    def test_each_source_is_consulted(self, reputation):
        assert reputation.is_disposable("discovered-burner.com")
        assert reputation.is_disposable("scraped-burner.com")
        assert reputation.is_disposable("burnerbox.io")
        assert not reputation.is_disposable("company.com")

    def test_sources_in_order(self, reputation):
        assert [s.name for s in reputation.sources] == [
            "discovered_domains",
            "scraped_domains",
            "github_blocklist",
        ]

    def test_without_event_loop_serves_stale_snapshot(self, reputation):
        _stale(reputation.blocklist)

        assert reputation.is_disposable("burnerbox.io")
        assert reputation.blocklist.snapshot.version == 1


@pytest.mark.asyncio
class TestBackgroundRefresh:
    async def test_stale_source_refreshes_without_blocking(self, reputation):
        _stale(reputation.blocklist)
        gate = asyncio.Event()

        async def slow_fetch():
            await gate.wait()
            return frozenset({"new-burner.io"})

        reputation.blocklist.fetch = slow_fetch

        # The lookup answers from the old snapshot while the fetch is pending
        assert reputation.is_disposable("burnerbox.io")
        assert not reputation.is_disposable("new-burner.io")
        task = reputation.blocklist._refresh_task
        assert task is not None and not task.done()

        gate.set()
        await task

        assert reputation.is_disposable("new-burner.io")
        assert not reputation.is_disposable("burnerbox.io")

    async def test_one_refresh_in_flight_per_source(self, reputation):
        _stale(reputation.scraped)
        reputation.scraped.fetch = AsyncMock(return_value=frozenset({"x.com"}))

        reputation.is_disposable("a.com")
        first = reputation.scraped._refresh_task
        reputation.is_disposable("b.com")

        assert reputation.scraped._refresh_task is first
        await first
        assert reputation.scraped.fetch.await_count == 1

    async def test_fresh_sources_are_not_refreshed(self, reputation):
        with patch.object(reputation.blocklist, "refresh") as refresh:
            reputation.is_disposable("company.com")

        refresh.assert_not_called()

    async def test_first_lookup_starts_initial_load(self, discovered_file):
        reputation = DomainReputation(
            discovered=DiscoveredDomains(discovered_file),
            scraped=ScrapedDomains("https://scraper.invalid/providers"),
            blocklist=GitHubBlocklist("https://feed.invalid/domains.txt"),
        )
        for source in reputation.sources:
            source.fetch = AsyncMock(return_value=frozenset({f"{source.name}.test"}))

        # Nothing loaded yet, so only the built-in lists answer
        assert reputation.is_disposable("mailinator.com")
        assert not reputation.is_disposable("github_blocklist.test")

        await reputation._start_task

        assert reputation.is_disposable("github_blocklist.test")
        assert all(source.snapshot.loaded for source in reputation.sources)

    async def test_feed_failing_at_boot_is_retried(self, discovered_file):
        reputation = DomainReputation(
            discovered=DiscoveredDomains(discovered_file),
            scraped=ScrapedDomains("https://scraper.invalid/providers"),
            blocklist=GitHubBlocklist("https://feed.invalid/domains.txt"),
        )
        reputation.discovered.fetch = AsyncMock(return_value=frozenset())
        reputation.scraped.fetch = AsyncMock(return_value=frozenset({"scraped.test"}))
        reputation.blocklist.fetch = AsyncMock(side_effect=RuntimeError("feed down"))

        await reputation.start()
        assert reputation.blocklist.snapshot.loaded is False

        # Within the retry interval the failed feed is left alone
        reputation.is_disposable("company.com")
        assert reputation.blocklist._refresh_task is None

        reputation.blocklist.fetch = AsyncMock(return_value=frozenset({"burner.test"}))
        later = time.time() + reputation.blocklist.retry_interval + 1
        with patch("burner_validator.core.datetime_utils.epoch_seconds", return_value=later):
            reputation.is_disposable("company.com")

        task = reputation.blocklist._refresh_task
        assert task is not None
        await task

        assert reputation.blocklist.snapshot.loaded is True
        assert reputation.is_disposable("burner.test")


@pytest.mark.asyncio
class TestRefreshAll:
    async def test_never_raises(self, reputation):
        for source in reputation.sources:
            source.fetch = AsyncMock(side_effect=RuntimeError("down"))

        await reputation.refresh_all()

        assert reputation.is_disposable("burnerbox.io")

    async def test_add_and_reload_discovered(self, reputation, discovered_file):
        assert await reputation.add_discovered_domain("manual-burner.com") is True
        assert reputation.is_disposable("manual-burner.com")
        assert await reputation.reload_discovered_domains() == []

    async def test_stats(self, reputation):
        stats = reputation.stats()

        assert set(stats) == {"discovered_domains", "scraped_domains", "github_blocklist"}
        assert stats["github_blocklist"].count == 2
        assert stats["github_blocklist"].loaded is True

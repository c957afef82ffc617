"""Tests for the remote disposable-domain blocklist."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from burner_validator.core.retry import RetryConfig
from burner_validator.sources.github_blocklist import (
    IMMEDIATE_DOMAINS,
    GitHubBlocklist,
    ancestor_domains,
    parse_blocklist,
)

FEED = """# disposable domains
Burnerbox.io

tempinbox.xyz
  # indented comment
spam.example.net
"""


def _mock_session(mock_session_class, status=200, text=""):
    mock_session = MagicMock()
    mock_session_class.return_value.__aenter__.return_value = mock_session

    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.text = AsyncMock(return_value=text)
    mock_session.get.return_value.__aenter__.return_value = mock_response
    return mock_session


@pytest.fixture
def blocklist():
    return GitHubBlocklist(
        "https://feed.invalid/domains.txt",
        retry=RetryConfig(max_attempts=1),
    )


class TestParseBlocklist:
    def test_skips_blanks_and_comments(self):
        assert parse_blocklist(FEED) == frozenset(
            {"burnerbox.io", "tempinbox.xyz", "spam.example.net"}
        )

    def test_empty(self):
        assert parse_blocklist("") == frozenset()


class TestAncestorDomains:
    def test_drops_leading_labels(self):
        assert ancestor_domains("evil.mail.tempmail.com") == ["mail.tempmail.com", "tempmail.com"]

    def test_never_produces_tld(self):
        assert ancestor_domains("tempmail.com") == []
        assert "com" not in ancestor_domains("a.b.com")


class TestContains:
    def test_immediate_list_without_any_fetch(self, blocklist):
        assert blocklist.snapshot.loaded is False
        assert blocklist.contains("mailinator.com")
        assert blocklist.contains("inbox.yopmail.com")

    def test_exact_and_subdomain(self, blocklist):
        blocklist.swap(frozenset({"burnerbox.io"}))

        assert blocklist.contains("burnerbox.io")
        assert blocklist.contains("x.y.burnerbox.io")
        assert not blocklist.contains("burnerbox.io.example.org")
        assert not blocklist.contains("notburnerbox.io")

    def test_immediate_list_is_not_empty(self):
        assert "tempmail.com" in IMMEDIATE_DOMAINS


@pytest.mark.asyncio
class TestRefresh:
    async def test_refresh_swaps_snapshot(self, blocklist):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class, text=FEED)

            snapshot = await blocklist.refresh()

        mock_session.get.assert_called_once_with("https://feed.invalid/domains.txt")
        assert snapshot.loaded is True
        assert snapshot.version == 1
        assert "tempinbox.xyz" in snapshot.domains
        assert blocklist.contains("tempinbox.xyz")

    async def test_http_error_keeps_previous_snapshot(self, blocklist):
        blocklist.swap(frozenset({"burnerbox.io"}))
        before = blocklist.snapshot

        with patch("aiohttp.ClientSession") as mock_session_class:
            _mock_session(mock_session_class, status=503)

            snapshot = await blocklist.refresh()

        assert snapshot is before
        assert blocklist.contains("burnerbox.io")

    async def test_connection_error_keeps_previous_snapshot(self, blocklist):
        blocklist.swap(frozenset({"burnerbox.io"}))

        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class)
            mock_session.get.side_effect = aiohttp.ClientError("Connection failed")

            snapshot = await blocklist.refresh()

        assert snapshot.version == 1
        assert snapshot.domains == frozenset({"burnerbox.io"})

    async def test_retries_transient_failures(self):
        blocklist = GitHubBlocklist(
            "https://feed.invalid/domains.txt",
            retry=RetryConfig(
                max_attempts=2,
                backoff_base=0.0,
                jitter=False,
                retryable_exceptions=(aiohttp.ClientError,),
            ),
        )
        blocklist._download = AsyncMock(side_effect=[aiohttp.ClientError("reset"), FEED])

        snapshot = await blocklist.refresh()

        assert blocklist._download.await_count == 2
        assert "burnerbox.io" in snapshot.domains

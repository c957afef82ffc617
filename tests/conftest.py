"""
Pytest configuration and fixtures for burner validator tests.

Provides:
- A reputation store with preloaded, fresh blocklist snapshots
- Deterministic oracle mocks (format/MX, DeBounce, Reacher)
- An EmailValidator wired to those mocks and an in-memory result cache
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from burner_validator.cache import MemoryCacheStore, ResultCache
from burner_validator.oracles import FormatMxResult, ReacherResponse
from burner_validator.reputation import DomainReputation, reset_reputation
from burner_validator.sources import DiscoveredDomains, GitHubBlocklist, ScrapedDomains
from burner_validator.validator import EmailValidator, reset_validator


@pytest.fixture(autouse=True)
def reset_shared_instances():
    """Drop the module-level default validator and reputation store."""
    reset_validator()
    reset_reputation()
    yield
    reset_validator()
    reset_reputation()


@pytest.fixture
def discovered_file(tmp_path: Path) -> Path:
    return tmp_path / "discovered_domains.json"


@pytest.fixture
def reputation(discovered_file: Path) -> DomainReputation:
    """Reputation store whose sources are loaded and fresh, so nothing is fetched."""
    discovered = DiscoveredDomains(discovered_file)
    scraped = ScrapedDomains("https://scraper.invalid/providers")
    blocklist = GitHubBlocklist("https://feed.invalid/domains.txt")

    discovered.swap(frozenset({"discovered-burner.com"}))
    scraped.swap(frozenset({"scraped-burner.com"}))
    blocklist.swap(frozenset({"burnerbox.io", "tempmail.com"}))

    return DomainReputation(discovered=discovered, scraped=scraped, blocklist=blocklist)


@pytest.fixture
def format_mx():
    """Format/MX oracle mock that accepts everything."""
    mock = MagicMock()
    mock.check = AsyncMock(
        return_value=FormatMxResult(format_valid=True, mx_valid=True, disposable_valid=True)
    )
    return mock


@pytest.fixture
def debounce():
    """DeBounce oracle mock that flags nothing."""
    mock = MagicMock()
    mock.is_disposable = AsyncMock(return_value=False)
    mock.cache_stats.return_value = {"size": 0}
    return mock


@pytest.fixture
def reacher_response():
    """Factory for Reacher responses; defaults describe a healthy, safe mailbox."""

    def make(
        email: str = "person@company.com",
        is_reachable: str = "safe",
        **smtp_overrides,
    ) -> ReacherResponse:
        misc = {"is_disposable": smtp_overrides.pop("is_disposable", False)}
        mx = {"accepts_mail": smtp_overrides.pop("accepts_mail", True), "records": []}
        smtp = {
            "can_connect_smtp": True,
            "has_full_inbox": False,
            "is_catch_all": False,
            "is_deliverable": True,
            "is_disabled": False,
            **smtp_overrides,
        }
        return ReacherResponse.model_validate(
            {
                "input": email,
                "is_reachable": is_reachable,
                "syntax": {
                    "address": email,
                    "domain": email.split("@")[1],
                    "is_valid_syntax": True,
                    "username": email.split("@")[0],
                },
                "mx": mx,
                "smtp": smtp,
                "misc": misc,
            }
        )

    return make


@pytest.fixture
def reacher(reacher_response):
    """Reacher client mock returning a safe mailbox."""
    mock = MagicMock()
    mock.check_mailbox = AsyncMock(return_value=reacher_response())
    return mock


@pytest.fixture
def cache_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def validator(reputation, format_mx, debounce, reacher, cache_store) -> EmailValidator:
    """Validator wired to deterministic mocks."""
    return EmailValidator(
        reputation=reputation,
        format_mx=format_mx,
        debounce=debounce,
        reacher=reacher,
        cache=ResultCache(store=cache_store),
    )

"""Community-maintained disposable domain blocklist.

Fetches the strict list from https://github.com/disposable/disposable-email-domains
and checks candidate domains against it, including parent domains.
"""

import aiohttp

from burner_validator.core.logging import get_logger
from burner_validator.core.retry import RetryConfig, retry_with_backoff
from burner_validator.errors import SourceFetchError

from .base import BlocklistSource

logger = get_logger(__name__)

# Always consulted alongside the remote list so an unreachable feed never
# leaves the validator blind to the most common providers.
IMMEDIATE_DOMAINS = frozenset(
    {
        "10minutemail.com",
        "10minutemail.net",
        "20minutemail.com",
        "33mail.com",
        "dispostable.com",
        "dropmail.me",
        "emailondeck.com",
        "fakeinbox.com",
        "getairmail.com",
        "getnada.com",
        "guerrillamail.biz",
        "guerrillamail.com",
        "guerrillamail.de",
        "guerrillamail.net",
        "guerrillamail.org",
        "guerrillamailblock.com",
        "maildrop.cc",
        "mailinator.com",
        "mailinator.net",
        "mailnesia.com",
        "mintemail.com",
        "mohmal.com",
        "mytemp.email",
        "sharklasers.com",
        "spamgourmet.com",
        "temp-mail.io",
        "temp-mail.org",
        "tempail.com",
        "tempmail.com",
        "tempmail.net",
        "tempmailo.com",
        "tempr.email",
        "throwawaymail.com",
        "trashmail.com",
        "trashmail.de",
        "trashmail.net",
        "yopmail.com",
        "yopmail.fr",
        "yopmail.net",
    }
)


def parse_blocklist(text: str) -> frozenset[str]:
    """Parse a newline-delimited domain list, skipping blanks and # comments."""
    domains = set()
    for line in text.splitlines():
        line = line.strip().lower()
        if line and not line.startswith("#"):
            domains.add(line)
    return frozenset(domains)


def ancestor_domains(domain: str) -> list[str]:
    """
    Parent domains tested for a subdomain match.

    Drops 1..n-2 leading labels so the bare TLD is never produced:
    ``evil.mail.tempmail.com`` gives ``mail.tempmail.com`` and ``tempmail.com``.
    """
    labels = domain.split(".")
    return [".".join(labels[i:]) for i in range(1, len(labels) - 1)]


class GitHubBlocklist(BlocklistSource):
    """Remote plaintext blocklist plus the built-in immediate set."""

    name = "github_blocklist"

    def __init__(
        self,
        url: str,
        refresh_interval_seconds: float = 24 * 3600,
        timeout_seconds: float = 30,
        retry: RetryConfig | None = None,
    ) -> None:
        super().__init__(refresh_interval_seconds)
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.retry = retry or RetryConfig(
            max_attempts=3,
            retryable_exceptions=(aiohttp.ClientError, TimeoutError, SourceFetchError),
        )

    async def fetch(self) -> frozenset[str]:
        logger.bind(url=self.url).info("github_blocklist_fetching")
        text = await retry_with_backoff(
            self._download,
            config=self.retry,
            operation_name=f"fetch:{self.name}",
        )
        return parse_blocklist(text)

    async def _download(self) -> str:
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(self.url) as response:
                if response.status != 200:
                    raise SourceFetchError(f"HTTP {response.status} from {self.url}")
                return await response.text()

    def contains(self, domain: str) -> bool:
        domains = self._snapshot.domains

        if domain in domains or domain in IMMEDIATE_DOMAINS:
            return True

        # Subdomains: mail.tempmail.com -> tempmail.com
        return any(
            parent in domains or parent in IMMEDIATE_DOMAINS for parent in ancestor_domains(domain)
        )

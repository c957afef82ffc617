"""Format, MX and bundled-list checks for a single address.

Formatting rules come from ``email-validator`` (no network), MX lookups go
through dnspython's async resolver, and the disposable check uses the
bundled ``disposable_domains.txt``. The whole call is bounded by the
caller's timeout.
"""

import asyncio
from pathlib import Path

import dns.asyncresolver
import dns.exception
import dns.resolver
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from burner_validator.core.datetime_utils import epoch_seconds
from burner_validator.core.logging import get_logger
from burner_validator.errors import OracleTimeoutError
from burner_validator.sources.github_blocklist import parse_blocklist

logger = get_logger(__name__)

MX_CACHE_TTL_SECONDS = 3600
MX_CACHE_MAX_SIZE = 1000


def _load_disposable_domains() -> frozenset[str]:
    """Load disposable domains from file into a frozenset for O(1) lookup."""
    domains_file = Path(__file__).parent.parent / "data" / "disposable_domains.txt"
    if not domains_file.exists():
        return frozenset()
    return parse_blocklist(domains_file.read_text(encoding="utf-8"))


# Load disposable domains once at module import
DISPOSABLE_DOMAINS = _load_disposable_domains()


class FormatMxResult(BaseModel):
    """Per-check verdicts. ``None`` means the check was not requested."""

    format_valid: bool
    mx_valid: bool | None = None
    disposable_valid: bool | None = None
    provider: str | None = None  # Matched disposable provider, if any


class FormatMxOracle:
    """Local format check plus DNS MX lookup."""

    def __init__(
        self,
        disposable_domains: frozenset[str] | None = None,
        resolver: dns.asyncresolver.Resolver | None = None,
        mx_cache_ttl_seconds: float = MX_CACHE_TTL_SECONDS,
        mx_cache_max_size: int = MX_CACHE_MAX_SIZE,
    ) -> None:
        self.disposable_domains = (
            disposable_domains if disposable_domains is not None else DISPOSABLE_DOMAINS
        )
        self._resolver = resolver
        self._mx_cache: dict[str, tuple[bool, float]] = {}
        self._mx_cache_ttl = mx_cache_ttl_seconds
        self._mx_cache_max_size = mx_cache_max_size

    @property
    def resolver(self) -> dns.asyncresolver.Resolver:
        if self._resolver is None:
            self._resolver = dns.asyncresolver.Resolver()
        return self._resolver

    async def check(
        self,
        email: str,
        check_mx: bool = True,
        check_disposable: bool = True,
        timeout: float = 5,
    ) -> FormatMxResult:
        """
        Run the requested checks.

        Raises:
            OracleTimeoutError: The checks did not finish within ``timeout`` seconds
        """
        try:
            async with asyncio.timeout(timeout):
                return await self._check(email, check_mx, check_disposable)
        except TimeoutError as e:
            raise OracleTimeoutError(f"format/MX check timed out after {timeout}s") from e

    async def _check(self, email: str, check_mx: bool, check_disposable: bool) -> FormatMxResult:
        try:
            validated = validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            logger.bind(error=str(e)).debug("format_check_rejected")
            return FormatMxResult(format_valid=False)

        domain = validated.ascii_domain.lower()
        result = FormatMxResult(format_valid=True)

        if check_disposable:
            flagged = domain in self.disposable_domains
            result.disposable_valid = not flagged
            result.provider = domain if flagged else None

        if check_mx:
            result.mx_valid = await self._has_mx(domain)

        return result

    async def _has_mx(self, domain: str) -> bool:
        cached = self._mx_cache.get(domain)
        if cached is not None:
            has_mx, expires_at = cached
            if epoch_seconds() < expires_at:
                return has_mx
            del self._mx_cache[domain]

        try:
            answers = await self.resolver.resolve(domain, "MX")
            has_mx = len(answers) > 0
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer, dns.resolver.NoNameservers):
            has_mx = False
        except dns.exception.Timeout as e:
            raise OracleTimeoutError(f"MX lookup for {domain} timed out") from e

        if len(self._mx_cache) >= self._mx_cache_max_size:
            # Drop the oldest insertion
            self._mx_cache.pop(next(iter(self._mx_cache)))
        self._mx_cache[domain] = (has_mx, epoch_seconds() + self._mx_cache_ttl)

        return has_mx

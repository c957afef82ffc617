"""DeBounce realtime disposable check.

Free unlimited API for per-address disposable detection.
@see https://debounce.com/free-disposable-check-api/
"""

import aiohttp

from burner_validator.core.datetime_utils import epoch_seconds
from burner_validator.core.logging import get_logger
from burner_validator.errors import TransientOracleError

logger = get_logger(__name__)


class DebounceOracle:
    """Realtime disposable lookup with a per-domain result cache. Fails open."""

    def __init__(
        self,
        api_url: str = "https://disposable.debounce.io/",
        timeout_seconds: float = 3,
        cache_ttl_hours: int = 24,
    ) -> None:
        """
        Initialize DeBounce oracle.

        Args:
            api_url: Endpoint taking the address as the ``email`` query parameter
            timeout_seconds: HTTP request timeout
            cache_ttl_hours: How long a domain verdict is reused
        """
        self.api_url = api_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._cache: dict[str, tuple[bool, float]] = {}
        self._ttl_seconds = cache_ttl_hours * 3600

    async def is_disposable(self, email: str) -> bool:
        """Check the address's domain. Any failure answers ``False``."""
        domain = email.rpartition("@")[2].lower()
        if not domain:
            return False

        cached = self._get_cached(domain)
        if cached is not None:
            return cached

        try:
            disposable = await self._request(email)
        except (aiohttp.ClientError, TimeoutError, TransientOracleError, ValueError) as e:
            # Fail open
            logger.bind(domain=domain, error=str(e) or type(e).__name__).warning(
                "debounce_check_failed"
            )
            return False

        self._cache[domain] = (disposable, epoch_seconds() + self._ttl_seconds)
        return disposable

    async def _request(self, email: str) -> bool:
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(self.api_url, params={"email": email}) as response:
                if response.status != 200:
                    raise TransientOracleError(f"HTTP {response.status}")
                data = await response.json(content_type=None)

        if not isinstance(data, dict):
            raise ValueError("unexpected DeBounce response")
        return data.get("disposable") == "true"

    def _get_cached(self, domain: str) -> bool | None:
        """Get cached verdict if not expired."""
        cached = self._cache.get(domain)
        if cached:
            disposable, expires_at = cached
            if epoch_seconds() < expires_at:
                return disposable
            # Expired - remove from cache
            del self._cache[domain]
        return None

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict[str, int]:
        return {"size": len(self._cache)}

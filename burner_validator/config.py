from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DISCOVERED_DOMAINS_FILE = Path(__file__).parent / "data" / "discovered_domains.json"


class CacheTtlConfig(BaseModel):
    """Cache lifetime in seconds per reachability class. Zero disables caching."""

    safe: int = 7 * 24 * 3600
    invalid: int = 30 * 24 * 3600
    risky: int = 24 * 3600
    unknown: int = 0


class Settings(BaseSettings):
    """Validator settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Deep verification (Reacher backend)
    reacher_backend_url: str = Field(default="")
    reacher_api_key: str = Field(default="")
    reacher_timeout: float = Field(default=30)

    # Realtime disposable check (DeBounce)
    debounce_api_url: str = Field(default="https://disposable.debounce.io/")
    debounce_timeout: float = Field(default=3)
    debounce_cache_ttl_hours: int = Field(default=24)

    # Remote blocklist feed
    blocklist_url: str = Field(
        default=(
            "https://raw.githubusercontent.com/disposable/disposable-email-domains"
            "/master/domains_strict.txt"
        )
    )
    blocklist_refresh_hours: int = Field(default=24)
    blocklist_timeout: float = Field(default=30)

    # Scraped provider pages
    scraped_base_url: str = Field(
        default="https://deviceandbrowserinfo.com/data/emails/providers/details"
    )
    scraped_refresh_hours: int = Field(default=24)
    scraped_timeout: float = Field(default=15)

    # Discovered domains file (written by the scraper bot)
    discovered_domains_file: Path = Field(default=DEFAULT_DISCOVERED_DOMAINS_FILE)
    discovered_reload_minutes: int = Field(default=60)

    # Result cache
    cache_enabled: bool = Field(default=True)
    cache_ttl_safe: int = Field(default=CacheTtlConfig().safe)
    cache_ttl_invalid: int = Field(default=CacheTtlConfig().invalid)
    cache_ttl_risky: int = Field(default=CacheTtlConfig().risky)
    cache_ttl_unknown: int = Field(default=CacheTtlConfig().unknown)
    redis_url: str = Field(default="")  # Empty means in-process memory store

    # Batch execution
    batch_concurrency: int = Field(default=5)
    batch_isolate_fatal: bool = Field(default=False)

    # Application
    debug: bool = Field(default=False)

    @property
    def cache_ttl(self) -> CacheTtlConfig:
        return CacheTtlConfig(
            safe=self.cache_ttl_safe,
            invalid=self.cache_ttl_invalid,
            risky=self.cache_ttl_risky,
            unknown=self.cache_ttl_unknown,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Email validation pipeline.

Validates emails to detect disposable/burner addresses and, optionally,
verify mailbox existence. Sources are consulted in order, cheapest first:

1. Syntax check
2. Local blocklists (remote feed, scraped providers, discovered domains)
3. Format/MX lookup
4. DeBounce realtime disposable check
5. Cached deep result, or SMTP verification via the Reacher backend

Transient backend trouble never reaches the caller: the pipeline answers
optimistically instead. The only error callers see is a configuration error,
raised when deep mode is requested without a Reacher backend.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ValidationError

from burner_validator.cache import MemoryCacheStore, RedisCacheStore, ResultCache
from burner_validator.cache.base import CacheStore
from burner_validator.config import Settings, get_settings
from burner_validator.core.logging import get_logger
from burner_validator.errors import ConfigurationError
from burner_validator.models import (
    Reachability,
    SmtpResult,
    ValidationOptions,
    ValidationResult,
    ValidationState,
)
from burner_validator.oracles import DebounceOracle, FormatMxOracle, ReacherClient, ReacherResponse
from burner_validator.reputation import DomainReputation, get_reputation

logger = get_logger(__name__)

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# Deep-check classification, evaluated top to bottom; the first rule that
# matches decides the state.
DEEP_RULES: list[tuple[ValidationState, Callable[[ReacherResponse], bool]]] = [
    (ValidationState.DISPOSABLE, lambda r: r.misc.is_disposable),
    (ValidationState.NO_MX, lambda r: not r.mx.accepts_mail),
    (ValidationState.SMTP_ERROR, lambda r: not r.smtp.can_connect_smtp),
    (ValidationState.MAILBOX_FULL, lambda r: r.smtp.has_full_inbox),
    (ValidationState.MAILBOX_DISABLED, lambda r: r.smtp.is_disabled),
    (ValidationState.CATCH_ALL, lambda r: r.smtp.is_catch_all),
    (ValidationState.MAILBOX_NOT_FOUND, lambda r: not r.smtp.is_deliverable),
]


def classify_deep(response: ReacherResponse) -> ValidationState:
    """Map a Reacher response to a terminal state."""
    if response.is_reachable == Reachability.SAFE:
        return ValidationState.VALID_DEEP

    for state, matches in DEEP_RULES:
        if matches(response):
            return state
    return ValidationState.VALID_DEEP


@dataclass(frozen=True)
class Fatal:
    """Failure that must reach the caller."""

    error: Exception


@dataclass(frozen=True)
class Recoverable:
    """Failure answered with an optimistic verdict."""

    error: Exception


def classify_failure(error: Exception) -> Fatal | Recoverable:
    if isinstance(error, ConfigurationError):
        return Fatal(error)
    return Recoverable(error)


def build_result(
    email: str,
    state: ValidationState,
    disposable: bool = False,
    mx: bool = False,
    smtp: SmtpResult | None = None,
) -> ValidationResult:
    reason = state.reason
    return ValidationResult(
        email=email,
        valid=reason is None,
        reason=reason,
        disposable=disposable,
        mx=mx,
        smtp=smtp,
    )


def fail_open_result(email: str) -> ValidationResult:
    """Optimistic verdict used when a collaborator could not answer."""
    return ValidationResult(email=email, valid=True, reason=None, disposable=False, mx=True)


def transform_reacher_response(email: str, response: ReacherResponse) -> ValidationResult:
    state = classify_deep(response)
    return build_result(
        email,
        state,
        disposable=response.misc.is_disposable,
        mx=response.mx.accepts_mail,
        smtp=SmtpResult(
            is_reachable=response.is_reachable,
            can_connect=response.smtp.can_connect_smtp,
            is_deliverable=response.smtp.is_deliverable,
            is_catch_all=response.smtp.is_catch_all,
        ),
    )


class EmailValidator:
    """Runs the validation pipeline for one address at a time."""

    def __init__(
        self,
        reputation: DomainReputation,
        format_mx: FormatMxOracle,
        debounce: DebounceOracle,
        reacher: ReacherClient,
        cache: ResultCache | None = None,
        cache_enabled: bool = True,
    ) -> None:
        self.reputation = reputation
        self.format_mx = format_mx
        self.debounce = debounce
        self.reacher = reacher
        self.cache = cache or ResultCache()
        self.cache_enabled = cache_enabled

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        reputation: DomainReputation | None = None,
        store: CacheStore | None = None,
    ) -> "EmailValidator":
        if store is None:
            store = (
                RedisCacheStore.from_url(settings.redis_url)
                if settings.redis_url
                else MemoryCacheStore()
            )

        return cls(
            reputation=reputation or get_reputation(),
            format_mx=FormatMxOracle(),
            debounce=DebounceOracle(
                api_url=settings.debounce_api_url,
                timeout_seconds=settings.debounce_timeout,
                cache_ttl_hours=settings.debounce_cache_ttl_hours,
            ),
            reacher=ReacherClient(
                base_url=settings.reacher_backend_url,
                api_key=settings.reacher_api_key,
                timeout_seconds=settings.reacher_timeout,
            ),
            cache=ResultCache(store=store, ttl=settings.cache_ttl),
            cache_enabled=settings.cache_enabled,
        )

    async def validate(
        self, email: str, options: ValidationOptions | None = None
    ) -> ValidationResult:
        """
        Validate an email address.

        Args:
            email: Address to validate, any case, surrounding whitespace allowed
            options: Pipeline switches, defaults to a quick (non-deep) check

        Returns:
            ValidationResult for the normalized address

        Raises:
            ConfigurationError: Deep mode requested without a Reacher backend
        """
        options = options or ValidationOptions()
        normalized = email.strip().lower()

        if not EMAIL_REGEX.match(normalized):
            return build_result(normalized, ValidationState.SYNTAX_FAIL)

        try:
            return await self._run(normalized, options)
        except Exception as e:
            outcome = classify_failure(e)
            if isinstance(outcome, Fatal):
                raise

            logger.bind(email=normalized, error=str(outcome.error) or type(e).__name__).error(
                "validation_failed_open"
            )
            return fail_open_result(normalized)

    async def _run(self, email: str, options: ValidationOptions) -> ValidationResult:
        domain = email.rpartition("@")[2]

        if self.reputation.is_disposable(domain):
            return build_result(email, ValidationState.DISPOSABLE, disposable=True)

        checks = await self.format_mx.check(
            email,
            check_mx=options.check_mx,
            check_disposable=True,
            timeout=options.timeout,
        )
        if not checks.format_valid:
            return build_result(email, ValidationState.SYNTAX_FAIL)
        if checks.disposable_valid is False:
            return build_result(
                email, ValidationState.DISPOSABLE, disposable=True, mx=bool(checks.mx_valid)
            )
        if options.check_mx and checks.mx_valid is False:
            return build_result(email, ValidationState.NO_MX)

        if options.use_debounce and await self.debounce.is_disposable(email):
            return build_result(email, ValidationState.DISPOSABLE, disposable=True, mx=True)

        if not options.deep:
            return build_result(email, ValidationState.VALID_SHALLOW, mx=True)

        if self.cache_enabled:
            cached = await self._get_cached(email)
            if cached is not None:
                return cached

        response = await self.reacher.check_mailbox(email)
        result = transform_reacher_response(email, response)

        if self.cache_enabled:
            await self._store(email, result, response.is_reachable)

        return result

    async def _get_cached(self, email: str) -> ValidationResult | None:
        raw = await self.cache.get(email)
        if raw is None:
            return None
        try:
            result = ValidationResult.model_validate_json(raw)
        except ValidationError:
            logger.bind(email=email).warning("cached_result_unreadable")
            return None
        return result.model_copy(update={"cached": True})

    async def _store(self, email: str, result: ValidationResult, reachability: Reachability) -> None:
        ttl = self.cache.ttl_for(reachability)
        if ttl <= 0:
            return
        try:
            await self.cache.set(email, result.model_dump_json(), ttl)
        except Exception as e:
            # The verdict is still good; only the cache entry is lost
            logger.bind(email=email, error=str(e)).warning("result_cache_write_failed")


_validator_instance: EmailValidator | None = None


def get_validator() -> EmailValidator:
    """Get the shared validator built from settings."""
    global _validator_instance
    if _validator_instance is None:
        _validator_instance = EmailValidator.from_settings(get_settings())
    return _validator_instance


def reset_validator() -> None:
    """Reset the shared validator. Useful for testing."""
    global _validator_instance
    _validator_instance = None


def configure(store: CacheStore | None = None, **overrides) -> EmailValidator:
    """
    Rebuild the shared validator with overridden settings.

    Example:
        ```python
        configure(reacher_backend_url="http://localhost:8080", cache_ttl_risky=0)
        ```
    """
    global _validator_instance
    settings = get_settings().model_copy(update=overrides)
    _validator_instance = EmailValidator.from_settings(settings, store=store)
    return _validator_instance


async def validate_email(
    email: str, options: ValidationOptions | None = None, **option_overrides
) -> ValidationResult:
    """
    Validate an email with the shared validator.

    Example:
        ```python
        result = await validate_email("someone@temp-mail.org")
        result = await validate_email("fakeperson@gmail.com", deep=True)
        ```
    """
    if option_overrides:
        options = (options or ValidationOptions()).model_copy(update=option_overrides)
    return await get_validator().validate(email, options)


def is_disposable_domain(domain: str) -> bool:
    """Quick local blocklist check, no MX or DeBounce lookup."""
    return get_validator().reputation.is_disposable(domain)


def get_validator_stats() -> dict:
    validator = get_validator()
    stats: dict = {
        name: source.model_dump() for name, source in validator.reputation.stats().items()
    }
    stats["debounce_cache"] = validator.debounce.cache_stats()
    return stats

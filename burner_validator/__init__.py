"""Burner email validator.

Detects disposable/burner email addresses and optionally verifies mailbox
existence over SMTP.
"""

from burner_validator.batch import summarize, validate_emails
from burner_validator.cache import CacheStore, MemoryCacheStore, RedisCacheStore, ResultCache
from burner_validator.config import CacheTtlConfig, Settings, get_settings
from burner_validator.errors import (
    BurnerValidatorError,
    ConfigurationError,
    DeepVerificationError,
    DeepVerificationNotConfiguredError,
    TransientOracleError,
)
from burner_validator.models import (
    BatchSummary,
    BatchValidationResult,
    Reachability,
    SmtpResult,
    ValidationOptions,
    ValidationReason,
    ValidationResult,
    ValidationState,
)
from burner_validator.reputation import DomainReputation, get_reputation
from burner_validator.validator import (
    EmailValidator,
    configure,
    get_validator,
    get_validator_stats,
    is_disposable_domain,
    reset_validator,
    validate_email,
)

__all__ = [
    "BatchSummary",
    "BatchValidationResult",
    "BurnerValidatorError",
    "CacheStore",
    "CacheTtlConfig",
    "ConfigurationError",
    "DeepVerificationError",
    "DeepVerificationNotConfiguredError",
    "DomainReputation",
    "EmailValidator",
    "MemoryCacheStore",
    "Reachability",
    "RedisCacheStore",
    "ResultCache",
    "Settings",
    "SmtpResult",
    "TransientOracleError",
    "ValidationOptions",
    "ValidationReason",
    "ValidationResult",
    "ValidationState",
    "configure",
    "get_reputation",
    "get_settings",
    "get_validator",
    "get_validator_stats",
    "is_disposable_domain",
    "reset_validator",
    "summarize",
    "validate_email",
    "validate_emails",
]

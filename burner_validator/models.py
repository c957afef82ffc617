"""Email validation models."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Reachability(str, Enum):
    """Deep-verification backend's confidence that the mailbox exists."""

    SAFE = "safe"
    RISKY = "risky"
    INVALID = "invalid"
    UNKNOWN = "unknown"


class ValidationReason(str, Enum):
    """Why an address was rejected."""

    INVALID_SYNTAX = "invalid_syntax"
    DISPOSABLE = "disposable"
    NO_MX_RECORDS = "no_mx_records"
    MAILBOX_NOT_FOUND = "mailbox_not_found"
    MAILBOX_FULL = "mailbox_full"
    MAILBOX_DISABLED = "mailbox_disabled"
    CATCH_ALL = "catch_all"
    SMTP_ERROR = "smtp_error"


class ValidationState(str, Enum):
    """Terminal state of one validation run."""

    SYNTAX_FAIL = "SYNTAX_FAIL"
    DISPOSABLE = "DISPOSABLE"
    NO_MX = "NO_MX"
    VALID_SHALLOW = "VALID_SHALLOW"
    MAILBOX_NOT_FOUND = "MAILBOX_NOT_FOUND"
    MAILBOX_FULL = "MAILBOX_FULL"
    MAILBOX_DISABLED = "MAILBOX_DISABLED"
    CATCH_ALL = "CATCH_ALL"
    SMTP_ERROR = "SMTP_ERROR"
    VALID_DEEP = "VALID_DEEP"

    @property
    def reason(self) -> ValidationReason | None:
        return _STATE_REASONS[self]


_STATE_REASONS: dict[ValidationState, ValidationReason | None] = {
    ValidationState.SYNTAX_FAIL: ValidationReason.INVALID_SYNTAX,
    ValidationState.DISPOSABLE: ValidationReason.DISPOSABLE,
    ValidationState.NO_MX: ValidationReason.NO_MX_RECORDS,
    ValidationState.VALID_SHALLOW: None,
    ValidationState.MAILBOX_NOT_FOUND: ValidationReason.MAILBOX_NOT_FOUND,
    ValidationState.MAILBOX_FULL: ValidationReason.MAILBOX_FULL,
    ValidationState.MAILBOX_DISABLED: ValidationReason.MAILBOX_DISABLED,
    ValidationState.CATCH_ALL: ValidationReason.CATCH_ALL,
    ValidationState.SMTP_ERROR: ValidationReason.SMTP_ERROR,
    ValidationState.VALID_DEEP: None,
}


class SmtpResult(BaseModel):
    """Condensed SMTP verdict from the deep verification backend."""

    is_reachable: Reachability
    can_connect: bool
    is_deliverable: bool
    is_catch_all: bool


class ValidationResult(BaseModel):
    """Result of email validation."""

    email: str
    valid: bool
    reason: ValidationReason | None = None
    disposable: bool = False
    mx: bool = False
    smtp: SmtpResult | None = None
    cached: bool = False

    @model_validator(mode="after")
    def _reason_matches_validity(self) -> "ValidationResult":
        if self.valid and self.reason is not None:
            raise ValueError("a valid result cannot carry a rejection reason")
        if not self.valid and self.reason is None:
            raise ValueError("an invalid result needs a rejection reason")
        return self


class ValidationOptions(BaseModel):
    """Per-call switches for the validation pipeline."""

    deep: bool = False  # SMTP mailbox verification via Reacher
    check_mx: bool = True
    use_debounce: bool = True  # Realtime disposable API
    timeout: float = Field(default=5, gt=0)  # Seconds, format/MX lookup


class BatchSummary(BaseModel):
    """Tallies over a batch of results."""

    total: int = 0
    valid: int = 0
    invalid: int = 0  # Rejected for any reason other than disposable
    disposable: int = 0
    unknown: int = 0  # Deep results with unknown reachability


class BatchValidationResult(BaseModel):
    """Ordered batch results plus their summary."""

    results: list[ValidationResult]
    summary: BatchSummary

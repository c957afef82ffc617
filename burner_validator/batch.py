"""Batch email validation."""

import asyncio

from burner_validator.config import get_settings
from burner_validator.core.logging import get_logger
from burner_validator.errors import ConfigurationError
from burner_validator.models import (
    BatchSummary,
    BatchValidationResult,
    Reachability,
    ValidationOptions,
    ValidationReason,
    ValidationResult,
)
from burner_validator.validator import EmailValidator, fail_open_result, get_validator

logger = get_logger(__name__)


def summarize(results: list[ValidationResult]) -> BatchSummary:
    """Tally valid, invalid, disposable and unknown-reachability results."""
    return BatchSummary(
        total=len(results),
        valid=sum(1 for r in results if r.valid),
        invalid=sum(1 for r in results if not r.valid and r.reason != ValidationReason.DISPOSABLE),
        disposable=sum(1 for r in results if r.disposable),
        unknown=sum(
            1 for r in results if r.smtp is not None and r.smtp.is_reachable == Reachability.UNKNOWN
        ),
    )


async def validate_emails(
    emails: list[str],
    options: ValidationOptions | None = None,
    concurrency: int | None = None,
    isolate_fatal: bool | None = None,
    validator: EmailValidator | None = None,
) -> BatchValidationResult:
    """
    Validate multiple email addresses.

    At most ``concurrency`` addresses are in the pipeline at once. Results
    come back in input order whatever order they finish in.

    Args:
        emails: Addresses to validate
        options: Pipeline switches applied to every address
        concurrency: Maximum simultaneous validations (default from settings, 5)
        isolate_fatal: Replace items that hit a configuration error with the
            optimistic verdict instead of aborting the batch
        validator: Validator to use, the shared one if omitted

    Returns:
        BatchValidationResult with ordered results and a summary

    Raises:
        ConfigurationError: A validation hit a configuration error and
            ``isolate_fatal`` is off

    Example:
        ```python
        batch = await validate_emails(
            ["a@gmail.com", "b@temp-mail.org", "c@company.com"],
            ValidationOptions(deep=True),
            concurrency=5,
        )
        ```
    """
    settings = get_settings()
    if concurrency is None:
        concurrency = settings.batch_concurrency
    if isolate_fatal is None:
        isolate_fatal = settings.batch_isolate_fatal
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    validator = validator or get_validator()
    semaphore = asyncio.Semaphore(concurrency)

    async def run_one(email: str) -> ValidationResult:
        async with semaphore:
            try:
                return await validator.validate(email, options)
            except ConfigurationError as e:
                if not isolate_fatal:
                    raise
                logger.bind(email=email, error=str(e)).error("batch_item_configuration_error")
                return fail_open_result(email.strip().lower())

    logger.bind(total=len(emails), concurrency=concurrency).debug("batch_started")
    tasks = [asyncio.ensure_future(run_one(email)) for email in emails]
    try:
        results = await asyncio.gather(*tasks)
    except ConfigurationError:
        # Abort: nothing still queued behind the semaphore gets to run
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    summary = summarize(results)
    logger.bind(**summary.model_dump()).info("batch_completed")
    return BatchValidationResult(results=results, summary=summary)

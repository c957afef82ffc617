"""Exception hierarchy.

Only ``ConfigurationError`` and its subclasses ever reach callers of the
validator. Everything under ``TransientOracleError`` is absorbed and turned
into an optimistic verdict.
"""


class BurnerValidatorError(Exception):
    """Base class for all validator errors."""


class ConfigurationError(BurnerValidatorError):
    """The validator was asked to do something it is not configured for."""


class DeepVerificationNotConfiguredError(ConfigurationError):
    """Deep mode was requested but no Reacher backend URL is set."""

    def __init__(self) -> None:
        super().__init__(
            "Reacher backend URL not configured. Pass reacher_backend_url to configure() "
            "or set REACHER_BACKEND_URL."
        )


class SourceFetchError(BurnerValidatorError):
    """A blocklist feed could not be downloaded or parsed."""


class TransientOracleError(BurnerValidatorError):
    """An external oracle could not answer (timeout, bad status, network)."""


class OracleTimeoutError(TransientOracleError):
    """An oracle call exceeded its own timeout."""


class DeepVerificationError(TransientOracleError):
    """The Reacher backend returned an error or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data

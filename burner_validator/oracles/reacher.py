"""Reacher SMTP verification backend.

@see https://github.com/reacherhq/check-if-email-exists
"""

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from burner_validator.core.logging import get_logger
from burner_validator.errors import DeepVerificationError, DeepVerificationNotConfiguredError
from burner_validator.models import Reachability

logger = get_logger(__name__)


class ReacherSyntax(BaseModel):
    address: str | None = None
    domain: str = ""
    is_valid_syntax: bool = False
    username: str = ""


class ReacherMxRecord(BaseModel):
    exchange: str
    priority: int


class ReacherMx(BaseModel):
    accepts_mail: bool = False
    records: list[str | ReacherMxRecord] = []


class ReacherSmtp(BaseModel):
    can_connect_smtp: bool = False
    has_full_inbox: bool = False
    is_catch_all: bool = False
    is_deliverable: bool = False
    is_disabled: bool = False


class ReacherMisc(BaseModel):
    is_disposable: bool = False
    is_role_account: bool = False
    gravatar_url: str | None = None


class ReacherResponse(BaseModel):
    """Subset of the /v0/check_email response used for classification."""

    input: str
    is_reachable: Reachability
    syntax: ReacherSyntax = Field(default_factory=ReacherSyntax)
    mx: ReacherMx = Field(default_factory=ReacherMx)
    smtp: ReacherSmtp = Field(default_factory=ReacherSmtp)
    misc: ReacherMisc = Field(default_factory=ReacherMisc)


class ReacherClient:
    """HTTP client for a self-hosted or managed Reacher backend."""

    def __init__(self, base_url: str = "", api_key: str = "", timeout_seconds: float = 30) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def is_configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def check_mailbox(self, email: str) -> ReacherResponse:
        """
        Verify one mailbox over SMTP.

        Raises:
            DeepVerificationNotConfiguredError: No backend URL configured
            DeepVerificationError: Timeout, transport failure or non-2xx response
        """
        if not self.is_configured():
            raise DeepVerificationNotConfiguredError()

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    f"{self.base_url}/v0/check_email",
                    json={"to_email": email},
                    headers=self._headers(),
                ) as response:
                    if response.status < 200 or response.status >= 300:
                        try:
                            data = await response.json(content_type=None)
                        except (aiohttp.ContentTypeError, ValueError):
                            data = None
                        logger.bind(status=response.status).error("reacher_error_status")
                        raise DeepVerificationError(
                            f"Reacher backend returned {response.status}",
                            status_code=response.status,
                            response_data=data,
                        )
                    payload = await response.json(content_type=None)
        except TimeoutError as e:
            raise DeepVerificationError("Reacher backend request timed out") from e
        except aiohttp.ClientError as e:
            raise DeepVerificationError(f"Reacher backend error: {e}") from e

        try:
            return ReacherResponse.model_validate(payload)
        except ValidationError as e:
            raise DeepVerificationError(
                "Reacher backend returned an unexpected payload", response_data=payload
            ) from e

    async def check_health(self) -> bool:
        """True when the backend answers at all (any status below 500)."""
        if not self.is_configured():
            return False

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=5)) as session:
                async with session.get(self.base_url) as response:
                    return response.status < 500
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.bind(error=str(e)).warning("reacher_health_check_failed")
            return False

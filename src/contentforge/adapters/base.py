"""Shared base for provider adapters.

Every adapter receives its credential and an ``httpx.AsyncClient`` at
construction time. Credential and input checks run before any network call so
that configuration and validation failures never reach the provider.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx

from contentforge.domain.enums import JobStatus
from contentforge.domain.errors import (
    ProviderConfigError,
    ProviderHTTPError,
    RateLimitError,
    ValidationError,
)
from contentforge.logging import get_logger

logger = get_logger(__name__)


def is_usable_key(api_key: str | None) -> bool:
    """Return False for missing, blank or obviously placeholder credentials."""
    if not api_key or not api_key.strip():
        return False
    return "placeholder" not in api_key.lower()


class FieldErrors:
    """Collects per-field validation messages, shaped like a flattened form error."""

    def __init__(self) -> None:
        self.errors: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def check_length(self, field: str, value: str, min_length: int, max_length: int) -> None:
        if len(value) < min_length:
            self.add(field, f"Must be at least {min_length} characters")
        elif len(value) > max_length:
            self.add(field, f"Must be at most {max_length} characters")

    def check_choice(self, field: str, value: Any, choices: Collection[Any]) -> None:
        if value not in choices:
            allowed = ", ".join(str(c) for c in choices)
            self.add(field, f"Invalid value {value!r}; expected one of: {allowed}")

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError("Invalid request", details={"fieldErrors": self.errors})


@dataclass
class JobSubmission:
    """Result of submitting an asynchronous job."""

    job_id: str
    status: JobStatus
    cost: float


@dataclass
class JobPollResult:
    """Normalized status of an asynchronous job."""

    status: JobStatus
    artifact_url: str | None = None
    progress: float | None = None


class ProviderAdapter(ABC):
    """Abstract base class for all provider adapters."""

    # Environment variable named in configuration error messages
    key_setting: ClassVar[str] = ""

    def __init__(self, api_key: str | None, http_client: httpx.AsyncClient) -> None:
        self.api_key = api_key
        self.http_client = http_client

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        ...

    @abstractmethod
    def validate(self, request: Any) -> None:
        """Reject out-of-range input.

        Raises:
            ValidationError: If any field is outside the provider's value set.
        """
        ...

    def require_api_key(self) -> str:
        """Return the credential or fail with a configuration error."""
        if not is_usable_key(self.api_key):
            raise ProviderConfigError(
                f"{self.key_setting} is not configured. Add a valid key to the environment."
            )
        assert self.api_key is not None
        return self.api_key

    def preflight(self, request: Any) -> None:
        """Run every check that must pass before anything is persisted or sent."""
        self.validate(request)
        self.require_api_key()

    def check_response(self, response: httpx.Response) -> None:
        """Raise a classified error for a non-2xx provider response."""
        if response.is_success:
            return

        body = response.text
        logger.error(
            "provider_api_error",
            provider=self.name,
            status_code=response.status_code,
            body=body[:500],
        )
        if response.status_code == 429:
            raise RateLimitError(self.name, response.status_code, body)
        raise ProviderHTTPError(self.name, response.status_code, body)

    async def health_check(self) -> bool:
        """Check if the provider is configured.

        Returns:
            True if a usable credential is present
        """
        return is_usable_key(self.api_key)


class AsyncJobProvider(ProviderAdapter):
    """Adapter for queue-based providers that need a separate poll step."""

    @abstractmethod
    async def poll(self, job_id: str) -> JobPollResult:
        """Fetch the current normalized status of a job.

        Raises:
            JobNotFoundError: If the provider does not know the job id.
        """
        ...

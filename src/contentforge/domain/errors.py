"""Error taxonomy shared by adapters, services and the HTTP layer.

Every error carries a coarse classification (``ErrorCode``) that clients use to
pick a user-facing message, plus the HTTP status the API responds with.
"""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Classification tag returned in every error response."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    CONTENT_POLICY = "CONTENT_POLICY"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ContentForgeError(Exception):
    """Base class for classified errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    http_status: int = 500

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ContentForgeError):
    """Caller-fixable input error, raised before any network call."""

    code = ErrorCode.VALIDATION_ERROR
    http_status = 400


class ProviderConfigError(ContentForgeError):
    """Missing or placeholder provider credential."""

    code = ErrorCode.CONFIG_ERROR
    http_status = 500


class UnauthorizedError(ContentForgeError):
    """No valid session for the caller."""

    code = ErrorCode.UNAUTHORIZED
    http_status = 401

    def __init__(self, message: str = "Unauthorized", details: Any | None = None) -> None:
        super().__init__(message, details)


class NotFoundError(ContentForgeError):
    """A referenced record does not exist or is not owned by the caller."""

    code = ErrorCode.NOT_FOUND
    http_status = 404


class JobNotFoundError(NotFoundError):
    """The provider does not know the polled job id."""


class ProviderHTTPError(ContentForgeError):
    """Provider responded with a non-2xx status.

    The raw body is kept for server-side logging only.
    """

    code = ErrorCode.INTERNAL_ERROR
    http_status = 500

    def __init__(self, provider: str, status_code: int, body: str) -> None:
        super().__init__(f"{provider} API error: {status_code}")
        self.provider = provider
        self.status_code = status_code
        self.body = body


class RateLimitError(ProviderHTTPError):
    """Provider throttled the request (HTTP 429)."""

    code = ErrorCode.RATE_LIMIT
    http_status = 429


class ContentPolicyError(ProviderHTTPError):
    """Provider rejected the content itself."""

    code = ErrorCode.CONTENT_POLICY
    http_status = 400

"""Exception handlers mapping classified errors to ``{error, code, details?}``."""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contentforge.domain.errors import (
    ContentForgeError,
    ContentPolicyError,
    ErrorCode,
    ProviderHTTPError,
    RateLimitError,
)
from contentforge.logging import get_logger

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Generation failed. Please try again."

# Client-facing messages for provider failures; raw bodies stay in the logs
PROVIDER_MESSAGES: dict[type[ProviderHTTPError], str] = {
    RateLimitError: "Rate limit exceeded. Please wait a moment and try again.",
    ContentPolicyError: "The provider rejected this content. Please revise your prompt.",
}

# Leading location parts that are not field names
_LOCATION_SCOPES = {"body", "query", "path", "header"}


def error_body(message: str, code: ErrorCode, details: Any | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message, "code": code.value}
    if details is not None:
        body["details"] = details
    return body


def field_errors_from(exc: RequestValidationError) -> dict[str, list[str]]:
    """Flatten pydantic error locations into ``{field: [messages]}``."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_SCOPES:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


async def handle_contentforge_error(request: Request, exc: ContentForgeError) -> JSONResponse:
    message = exc.message
    if isinstance(exc, ProviderHTTPError):
        logger.error(
            "provider_request_failed",
            path=request.url.path,
            provider=exc.provider,
            status_code=exc.status_code,
            code=exc.code.value,
        )
        message = PROVIDER_MESSAGES.get(type(exc), GENERIC_FAILURE_MESSAGE)
    elif exc.http_status >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code.value, error=exc.message)

    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(message, exc.code, exc.details),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "Invalid request",
            ErrorCode.VALIDATION_ERROR,
            {"fieldErrors": field_errors_from(exc)},
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(GENERIC_FAILURE_MESSAGE, ErrorCode.INTERNAL_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContentForgeError, handle_contentforge_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

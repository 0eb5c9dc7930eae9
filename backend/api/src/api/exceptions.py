"""FastAPI exception handlers for converting WebhookError to HTTP responses.

Stripe only needs to know whether to retry, so every response body is one of
two fixed shapes:
- 400 Bad Request: missing or invalid signature (AuthenticationError)
- 500 Internal Server Error: anything else, logged with its traceback

Usage:
    from api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from api.models.webhooks import WebhookErrorResponse
from storefront.models import AuthenticationError, WebhookError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_SIGNATURE_MESSAGE = "Invalid signature"
GENERIC_ERROR_MESSAGE = "Something went wrong"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=WebhookErrorResponse(message=message).model_dump(mode="json"),
    )


async def webhook_error_handler(request: Request, exc: WebhookError) -> JSONResponse:
    """Handle WebhookError exceptions.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The WebhookError exception

    Returns:
        JSONResponse with 400 for authentication failures, 500 otherwise.
    """
    if isinstance(exc, AuthenticationError):
        return _error_response(HTTP_400_BAD_REQUEST, INVALID_SIGNATURE_MESSAGE)

    # Event context was logged by WebhookHandler
    logger.info("Responding 500 for %s", exc.code.value)
    return _error_response(HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with the generic error response.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The uncaught exception

    Returns:
        JSONResponse with 500 status and generic error message.
    """
    logger.exception("Unhandled exception: %s", exc)
    return _error_response(HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(WebhookError, webhook_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

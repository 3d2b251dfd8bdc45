"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import (
    ImageServiceError,
    NotFoundError,
    ObjectStoreError,
    RepositoryError,
    UnauthorizedError,
    ValidationError,
)
from core.utils.constants import ERROR_CODE_INTERNAL_ERROR, SERVICE_NAME
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors

logger = Logger(service=SERVICE_NAME, UTC=True)

JsonDict = dict[str, Any]


def _get_user_friendly_message(exc: Exception) -> str:
    """
    Convert technical exception messages into user-friendly ones.

    Preserves specific validation messages while making generic errors friendly.
    """
    exc_str = str(exc)

    friendly_prefixes = (
        "Invalid",
        "Missing",
        "Required",
        "Must",
        "Cannot",
        "Unable to",
        "Failed to",
        "Image",
        "File",
        "Album",
    )

    if exc_str and any(exc_str.startswith(prefix) for prefix in friendly_prefixes):
        return exc_str

    if isinstance(exc, ValueError):
        return "The provided data is invalid. Please check your input and try again."

    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."

    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."

    return "We encountered an issue processing your request. Please try again."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('info', 'warning' or 'exception')
    """
    log_extra: JsonDict = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if level == "exception":
        logger.exception(message, extra=log_extra)
    elif level == "info":
        # Client errors are expected; no traceback needed
        logger.info(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


# status, log message and log level per domain error, resolved through the MRO
_DOMAIN_ERRORS: dict[type[ImageServiceError], tuple[HTTPStatus, str, str]] = {
    ValidationError: (HTTPStatus.BAD_REQUEST, "Validation error in handler", "info"),
    UnauthorizedError: (HTTPStatus.UNAUTHORIZED, "Unauthenticated request", "info"),
    NotFoundError: (HTTPStatus.NOT_FOUND, "Resource not found", "info"),
    ObjectStoreError: (HTTPStatus.BAD_GATEWAY, "Object store operation failed", "exception"),
    RepositoryError: (
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "Repository operation failed",
        "exception",
    ),
}

_UNMAPPED_DOMAIN_ERROR = (
    HTTPStatus.INTERNAL_SERVER_ERROR,
    "Unmapped service error",
    "exception",
)


def _classify(exc: ImageServiceError) -> tuple[HTTPStatus, str, str]:
    for cls in type(exc).__mro__:
        if cls in _DOMAIN_ERRORS:
            return _DOMAIN_ERRORS[cls]
    return _UNMAPPED_DOMAIN_ERROR


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight requests, maps domain errors to HTTP statuses
    and turns anything unexpected into a generic 500 while logging the full
    error with the request id.

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"images": []})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if isinstance(event, dict) and event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)
        handler_name = func.__name__

        try:
            return func(event, context)

        except ImageServiceError as exc:
            status, log_message, level = _classify(exc)
            _log_error(
                log_message,
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
                level=level,
            )
            return ResponseBuilder.domain_error(
                exc,
                status=status,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except PydanticValidationError as exc:
            _log_error(
                "Request validation failed",
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
                level="info",
            )
            return ResponseBuilder.validation_error(
                message="Invalid request payload",
                details={"errors": sanitize_validation_errors(list(exc.errors()))},
                request_id=request_id,
                cors_origin=cors_origin,
            )

        # ValueError must come after PydanticValidationError, its base class
        except (ValueError, KeyError, TypeError, UnicodeDecodeError) as exc:
            _log_error(
                "Bad request in handler",
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.bad_request(
                _get_user_friendly_message(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except TimeoutError as exc:
            _log_error(
                "Request timeout",
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                "The request took too long to process. Please try again.",
                status=HTTPStatus.GATEWAY_TIMEOUT,
                details={"error": str(exc)},
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except Exception as exc:
            _log_error(
                "Unexpected error in handler",
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                "We're experiencing technical difficulties. Please try again in a few moments.",
                error=ERROR_CODE_INTERNAL_ERROR,
                details={"error": str(exc)},
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper

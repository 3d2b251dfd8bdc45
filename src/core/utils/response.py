"""
Centralized API response builder for AWS Lambda / API Gateway.

Every JSON body carries ``success`` and ``message``; error bodies add the
``error`` code, optional ``details`` and a ``timestamp``.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.models.errors import ImageServiceError
from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from core.utils.environment import is_production
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": DEFAULT_CONTENT_TYPE,
    }

    DEFAULT_CORS_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @staticmethod
    def _build_headers(cors_origin: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = dict(ResponseBuilder.DEFAULT_HEADERS)

        # Always include CORS headers
        headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)

        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin

        return headers

    @staticmethod
    def _response(
        *,
        status: HTTPStatus,
        body: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {}

        if body:
            payload.update(body)

        if request_id:
            payload["request_id"] = request_id

        response: JsonDict = {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": json.dumps(payload, default=str),
        }

        return response

    @staticmethod
    def _success_body(message: str, body: JsonDict | None) -> JsonDict:
        payload: JsonDict = {"success": True, "message": message}
        if body:
            payload.update(body)
        return payload

    @staticmethod
    def ok(
        body: JsonDict | None = None,
        *,
        message: str = "OK",
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=HTTPStatus.OK,
            body=ResponseBuilder._success_body(message, body),
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def created(
        body: JsonDict | None = None,
        *,
        message: str = "Created",
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=HTTPStatus.CREATED,
            body=ResponseBuilder._success_body(message, body),
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def no_content(*, cors_origin: str | None = None) -> JsonDict:
        response: JsonDict = {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": "",
        }
        return response

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: Any = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {
            "success": False,
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }

        if details:
            payload["details"] = details

        return ResponseBuilder._response(
            status=status,
            body=payload,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def bad_request(
        message: str,
        *,
        error: str | None = None,
        details: Any = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            error=error,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def validation_error(
        *,
        message: str,
        details: Any = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """400 request payload validation error."""
        return ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            error=ERROR_CODE_VALIDATION_FAILED,
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def domain_error(
        exc: ImageServiceError,
        *,
        status: HTTPStatus,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Response for a domain error; 5xx statuses go through ``internal_error``."""
        if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            return ResponseBuilder.internal_error(
                exc.message,
                status=status,
                error=exc.error_code,
                details=exc.details,
                request_id=request_id,
                cors_origin=cors_origin,
            )
        return ResponseBuilder.error(
            status=status,
            message=exc.message,
            error=exc.error_code,
            details=exc.details or None,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def internal_error(
        message: str = "Internal server error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        error: str | None = None,
        details: Any = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """5xx response; internal details are dropped in production."""
        return ResponseBuilder.error(
            status=status,
            message=message,
            error=error,
            details=None if is_production() else details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def binary_response(
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        response_headers: dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
        }

        response_headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)
        if cors_origin:
            response_headers["Access-Control-Allow-Origin"] = cors_origin

        if headers:
            response_headers.update(headers)

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }

"""Helpers for reading API Gateway proxy events."""

import base64
import binascii
import json
from typing import Any

from core.models.errors import UnauthorizedError, ValidationError

JsonDict = dict[str, Any]


def request_log_extra(event: JsonDict, context: Any) -> JsonDict:
    """Structured fields logged when a handler receives a request."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "path_params": event.get("pathParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }


def get_path_params(event: JsonDict) -> JsonDict:
    return event.get("pathParameters") or {}


def get_header(event: JsonDict, name: str) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_body_bytes(event: JsonDict) -> bytes:
    """Return the raw request body, undoing API Gateway base64 encoding."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(message="Invalid base64 request body") from exc

    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def parse_json_body(event: JsonDict) -> JsonDict:
    """Decode a JSON object body; an absent body is an empty object."""
    raw = get_body_bytes(event)
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(message="Invalid JSON body") from exc

    if not isinstance(body, dict):
        raise ValidationError(message="Request body must be a JSON object")

    return body


def get_principal_id(event: JsonDict) -> str:
    """
    Return the authenticated caller id set by the API Gateway authorizer.

    Lambda authorizers expose ``principalId``; Cognito / JWT authorizers
    expose the ``sub`` claim.

    Raises:
        UnauthorizedError: If the request carries no principal
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}

    principal = authorizer.get("principalId")
    if not principal:
        claims = authorizer.get("claims") or (authorizer.get("jwt") or {}).get("claims") or {}
        principal = claims.get("sub")

    if not principal or not isinstance(principal, str):
        raise UnauthorizedError()

    return principal

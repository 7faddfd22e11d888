"""Shared response utilities for Lambda handlers."""

from __future__ import annotations

import json
from dataclasses import asdict
from dataclasses import is_dataclass
from typing import Any
from typing import Optional

from pydantic import BaseModel

from user_service.exceptions import AppError
from user_service.exceptions import SerializationError
from user_service.utils.logging import get_logger

logger = get_logger(__name__)


def get_security_headers() -> dict[str, str]:
    """Get security headers for all responses.

    Returns:
        Dictionary of security headers.
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store, no-cache, must-revalidate",
        "Pragma": "no-cache",
    }


def json_response(
    status_code: int,
    body: Any = None,
    headers: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    """Create a JSON API Gateway response.

    A body that cannot be encoded is replaced by a fixed error payload and
    the status is forced to 500.

    Args:
        status_code: HTTP status code.
        body: Response body (dict, Pydantic model, dataclass, or None for
            an empty body).
        headers: Optional additional headers to include.

    Returns:
        API Gateway response dictionary.
    """
    response_headers = {"Content-Type": "application/json"}
    response_headers.update(get_security_headers())
    if headers:
        response_headers.update(headers)

    try:
        payload = serialize_body(body)
    except SerializationError as exc:
        logger.error(
            "Error marshaling response body",
            extra={"status_code": status_code, "reason": exc.detail},
        )
        status_code = exc.status_code
        payload = json.dumps({"error": exc.message})

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": payload,
    }


def serialize_body(body: Any) -> str:
    """Serialize a response body to JSON text.

    Raises:
        SerializationError: If the body is not JSON-encodable.
    """
    if body is None:
        return ""

    if isinstance(body, BaseModel):
        body = body.model_dump(by_alias=True, exclude_none=True)
    elif is_dataclass(body) and not isinstance(body, type):
        body = asdict(body)

    try:
        return json.dumps(body, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(detail=str(exc)) from exc


def error_response(
    status_code: int,
    message: str,
    detail: Optional[str] = None,
) -> dict[str, Any]:
    """Create an error response with an ``{"error": ...}`` body."""
    body: dict[str, Any] = {"error": message}
    if detail:
        body["detail"] = detail
    return json_response(status_code, body)


def app_error_response(
    exc: AppError,
    status_code: Optional[int] = None,
) -> dict[str, Any]:
    """Create an error response from an application exception."""
    return json_response(status_code or exc.status_code, exc.to_dict())

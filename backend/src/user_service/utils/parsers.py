"""Shared parsing utilities for request handling."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any
from typing import Mapping
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from user_service.exceptions import ValidationError
from user_service.models import User

DEFAULT_PAGE_LIMIT = 10
MAX_INT32 = 2**31 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def query_param(event: Mapping[str, Any], name: str) -> Optional[str]:
    """Return a query string parameter, treating empty values as absent.

    Args:
        event: The API Gateway event dictionary.
        name: The parameter name to look up.

    Returns:
        The parameter value, or None if missing or empty.
    """
    params = event.get("queryStringParameters") or {}
    value = params.get(name)
    return value or None


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer from a string.

    Only an optional sign followed by ASCII digits is accepted, within the
    signed 32-bit range.

    Raises:
        ValueError: If the string is not such an integer.
    """
    if value is None or value == "":
        return None
    if not _INTEGER_PATTERN.fullmatch(value):
        raise ValueError(f"invalid integer: {value!r}")
    number = int(value)
    if not -MAX_INT32 - 1 <= number <= MAX_INT32:
        raise ValueError(f"integer out of range: {value!r}")
    return number


def parse_limit(value: Optional[str], default: int = DEFAULT_PAGE_LIMIT) -> int:
    """Parse a page size, falling back to ``default``.

    Missing, unparsable and non-positive values all yield the default.
    """
    try:
        limit = parse_int(value)
    except ValueError:
        return default
    if limit is None or limit <= 0:
        return default
    return limit


def read_body(event: Mapping[str, Any]) -> str:
    """Return the raw request body, decoding base64 payloads."""
    raw = event.get("body") or ""
    if raw and event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValidationError("Invalid request body") from exc
    return raw


def parse_user_body(event: Mapping[str, Any]) -> User:
    """Parse the request body into a User.

    Missing or null fields are left empty for validation to report, and a
    null body reads as an empty object. Anything else that is not a JSON
    object of string fields is rejected outright.

    Raises:
        ValidationError: If the body is not a well-formed user object.
    """
    raw = read_body(event)
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid request body") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")
    try:
        return User.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid request body") from exc

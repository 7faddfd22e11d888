"""Pagination cursor encoding/decoding.

A cursor is the JSON text of a DynamoDB ``LastEvaluatedKey`` in
attribute-value form, e.g. ``{"email": {"S": "a@b.com"}}``. Clients treat
it as opaque and hand it back unchanged.
"""

from __future__ import annotations

import json
from typing import Any
from typing import Mapping
from typing import Optional

from user_service.exceptions import InvalidCursorError


def encode_cursor(last_evaluated_key: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Encode a LastEvaluatedKey, or return None when the scan is exhausted."""
    if not last_evaluated_key:
        return None
    return json.dumps(last_evaluated_key, separators=(",", ":"), sort_keys=True)


def decode_cursor(cursor: Optional[str]) -> Optional[dict[str, Any]]:
    """Decode a cursor into an ExclusiveStartKey.

    Raises:
        InvalidCursorError: If the cursor is not a JSON object of
            attribute values.
    """
    if cursor is None or cursor == "":
        return None
    try:
        payload = json.loads(cursor)
    except json.JSONDecodeError as exc:
        raise InvalidCursorError("Cursor is not valid JSON") from exc

    if not isinstance(payload, dict) or not payload:
        raise InvalidCursorError("Cursor must be a non-empty JSON object")

    start_key: dict[str, Any] = {}
    for name, value in payload.items():
        if isinstance(value, dict):
            # Some SDKs write every member and leave the unused ones null.
            value = {member: item for member, item in value.items() if item is not None}
        if not isinstance(value, dict) or len(value) != 1:
            raise InvalidCursorError(f"Malformed attribute value for {name!r}")
        start_key[name] = value
    return start_key

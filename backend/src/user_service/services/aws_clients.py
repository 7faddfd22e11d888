"""Cached boto3 clients shared across Lambda invocations.

boto3 low-level clients are thread-safe, so one client per
(service, region, endpoint) lives for the lifetime of the container.
"""

from __future__ import annotations

from typing import Any

import boto3

_ClientKey = tuple[str, str | None, str | None]

_CLIENT_CACHE: dict[_ClientKey, Any] = {}


def get_client(
    service: str,
    region_name: str | None = None,
    endpoint_url: str | None = None,
) -> Any:
    """Return a cached boto3 client for the given service.

    Args:
        service: AWS service name, e.g. ``"dynamodb"``.
        region_name: Region to bind the client to.
        endpoint_url: Optional endpoint override (DynamoDB Local).
    """
    cache_key = (service, region_name, endpoint_url)
    client = _CLIENT_CACHE.get(cache_key)
    if client is None:
        client = boto3.client(  # type: ignore[call-overload]
            service,
            region_name=region_name,
            endpoint_url=endpoint_url,
        )
        _CLIENT_CACHE[cache_key] = client
    return client


def clear_client_cache() -> None:
    """Clear cached boto3 clients (useful in tests)."""
    _CLIENT_CACHE.clear()


def get_dynamodb_client(
    region_name: str | None = None,
    endpoint_url: str | None = None,
) -> Any:
    return get_client("dynamodb", region_name=region_name, endpoint_url=endpoint_url)

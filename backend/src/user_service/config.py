"""Environment-backed configuration for the user service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from user_service.exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the process environment."""

    aws_region: str
    table_name: str
    log_level: str = "INFO"
    # Points the DynamoDB client at DynamoDB Local when set.
    dynamodb_endpoint_url: Optional[str] = None


_SETTINGS: Optional[Settings] = None


def _require_env(*names: str) -> str:
    """Return the first non-blank value among the given variables."""
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    raise ConfigurationError(names[0])


def load_settings() -> Settings:
    """Load settings from environment variables.

    Raises:
        ConfigurationError: If AWS_REGION or DYNAMODB_TABLE_NAME is unset.
    """
    return Settings(
        aws_region=_require_env("AWS_REGION", "AWS_DEFAULT_REGION"),
        table_name=_require_env("DYNAMODB_TABLE_NAME"),
        log_level=os.getenv("LOG_LEVEL") or "INFO",
        dynamodb_endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
    )


def get_settings() -> Settings:
    """Return cached settings, loading them on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def clear_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    global _SETTINGS
    _SETTINGS = None

"""Structured logging utilities for the user service Lambda.

Log lines are JSON objects so they can be queried with CloudWatch Logs
Insights. Email addresses are primary keys here, so they are PII in every
log line: pass them through mask_email() first.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Mapping
from typing import MutableMapping
from typing import Optional


def mask_email(email: str) -> str:
    """Mask an email address for safe logging.

    Examples:
        >>> mask_email("john.doe@example.com")
        'jo***@***.com'
        >>> mask_email("a@b.co")
        'a***@***.co'
    """
    if not email or "@" not in email:
        return "***"

    local, domain = email.rsplit("@", 1)
    visible_local = local[:2] if len(local) > 2 else local[:1]
    tld = domain.rsplit(".", 1)[-1] if "." in domain else ""

    return f"{visible_local}***@***.{tld}" if tld else f"{visible_local}***@***"


request_id: ContextVar[str] = ContextVar("request_id", default="")


class StructuredLogFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    # Attributes every LogRecord has; anything else came in via ``extra``.
    _RESERVED = frozenset(
        logging.LogRecord("", 0, "", 0, "", None, None).__dict__
    ) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        req_id = request_id.get()
        if req_id:
            log_data["request_id"] = req_id

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._RESERVED
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that merges adapter-level context into ``extra``."""

    def process(
        self,
        msg: str,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Install the JSON formatter on the root logger.

    Args:
        level: Log level name. Defaults to LOG_LEVEL or INFO.
    """
    log_level: str = level or os.getenv("LOG_LEVEL") or "INFO"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredLogFormatter())
    root_logger.addHandler(handler)

    for noisy in ("boto3", "botocore", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Return a ContextLogger bound to ``extra``."""
    return ContextLogger(logging.getLogger(name), extra)


def set_request_context(req_id: Optional[str] = None) -> None:
    """Attach the invocation's request id to subsequent log lines."""
    if req_id:
        request_id.set(req_id)


def clear_request_context() -> None:
    request_id.set("")


def log_lambda_event(logger: ContextLogger, event: Mapping[str, Any]) -> None:
    """Log the shape of an API Gateway event at DEBUG level.

    Query values are not logged since ``email`` is one of them.
    """
    params = event.get("queryStringParameters") or {}
    logger.debug(
        "Lambda event received",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_keys": sorted(params),
            "body_length": len(event.get("body") or ""),
        },
    )


def log_response(
    logger: ContextLogger,
    status_code: int,
    duration_ms: Optional[float] = None,
) -> None:
    """Log the response status, at WARNING for 4xx/5xx."""
    response: dict[str, Any] = {"status_code": status_code}
    if duration_ms is not None:
        response["duration_ms"] = round(duration_ms, 2)

    level = logging.INFO if status_code < 400 else logging.WARNING
    logger.log(level, "Lambda response", extra=response)

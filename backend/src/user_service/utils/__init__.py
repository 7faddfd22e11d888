"""Utility modules for the user service."""

from user_service.utils.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    mask_email,
    set_request_context,
)
from user_service.utils.parsers import (
    parse_int,
    parse_limit,
    parse_user_body,
    query_param,
)
from user_service.utils.responses import error_response, json_response
from user_service.utils.validators import is_email_valid, validate_user

__all__ = [
    "clear_request_context",
    "configure_logging",
    "error_response",
    "get_logger",
    "is_email_valid",
    "json_response",
    "mask_email",
    "parse_int",
    "parse_limit",
    "parse_user_body",
    "query_param",
    "set_request_context",
    "validate_user",
]

"""Lambda handler for the users endpoint.

A single API Gateway resource is routed by HTTP method:

    GET     ?email=...                      fetch one user
    GET     ?limit=...&lastEvaluatedKey=... list users a page at a time
    POST    user JSON                       create a user
    PUT     user JSON                       replace an existing user
    DELETE  ?email=...                      delete a user
"""

from __future__ import annotations

import time
from functools import lru_cache
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional

from user_service.config import Settings
from user_service.config import get_settings
from user_service.db.repositories import DynamoDBUserRepository
from user_service.db.repositories import UserRepository
from user_service.exceptions import AppError
from user_service.exceptions import ErrorKind
from user_service.exceptions import ValidationError
from user_service.models import UserPage
from user_service.services.aws_clients import get_dynamodb_client
from user_service.utils.logging import clear_request_context
from user_service.utils.logging import configure_logging
from user_service.utils.logging import get_logger
from user_service.utils.logging import log_lambda_event
from user_service.utils.logging import log_response
from user_service.utils.logging import mask_email
from user_service.utils.logging import set_request_context
from user_service.utils.parsers import parse_limit
from user_service.utils.parsers import parse_user_body
from user_service.utils.parsers import query_param
from user_service.utils.responses import app_error_response
from user_service.utils.responses import error_response
from user_service.utils.responses import json_response
from user_service.utils.validators import validate_user

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)

Response = dict[str, Any]


def _failure(exc: AppError, not_found_message: Optional[str] = None) -> Response:
    """Map a repository error to 404 for missing users and 400 otherwise."""
    if exc.kind is ErrorKind.NOT_FOUND:
        return error_response(404, not_found_message or exc.message)
    logger.warning(f"Request failed: {exc.message}", extra={"kind": exc.kind.value})
    return app_error_response(exc, status_code=400)


class UserHandler:
    """Translates API Gateway events into repository calls."""

    def __init__(self, repository: UserRepository):
        self._repository = repository
        self._routes: dict[str, Callable[[Mapping[str, Any]], Response]] = {
            "GET": self.get_user,
            "POST": self.create_user,
            "PUT": self.update_user,
            "DELETE": self.delete_user,
        }

    def handle(self, event: Mapping[str, Any]) -> Response:
        """Dispatch an event on its HTTP method."""
        route = self._routes.get(event.get("httpMethod") or "")
        if route is None:
            return error_response(405, "Method Not Allowed")
        try:
            return route(event)
        except Exception:
            logger.exception("Unexpected error in users handler")
            return error_response(500, "Internal server error")

    def get_user(self, event: Mapping[str, Any]) -> Response:
        """Fetch one user by email, or a page of users."""
        email = query_param(event, "email")
        if email:
            try:
                user = self._repository.fetch_user(email)
            except AppError as exc:
                return _failure(exc)
            if user is None:
                logger.info("User not found", extra={"email": mask_email(email)})
                return error_response(404, "User not found")
            return json_response(200, user)

        limit = parse_limit(query_param(event, "limit"))
        cursor = query_param(event, "lastEvaluatedKey")
        try:
            users, next_cursor = self._repository.fetch_users(limit, cursor)
        except AppError as exc:
            return _failure(exc)

        logger.info(
            f"Listed {len(users)} users",
            extra={"count": len(users), "has_more": next_cursor is not None},
        )
        page = UserPage(users=list(users), last_evaluated_key=next_cursor)
        return json_response(200, page)

    def create_user(self, event: Mapping[str, Any]) -> Response:
        """Create a user from the request body."""
        try:
            user = parse_user_body(event)
            validate_user(user)
        except ValidationError as exc:
            return error_response(400, exc.message)

        try:
            created = self._repository.create_user(user)
        except AppError as exc:
            # Duplicates are reported as 400 like every other create failure.
            return app_error_response(exc, status_code=400)
        return json_response(201, created)

    def update_user(self, event: Mapping[str, Any]) -> Response:
        """Replace an existing user with the request body."""
        try:
            user = parse_user_body(event)
        except ValidationError as exc:
            return error_response(400, exc.message)

        if not user.email:
            return error_response(400, "Email is required for user update")

        try:
            validate_user(user)
        except ValidationError as exc:
            return error_response(400, exc.message)

        try:
            updated = self._repository.update_user(user)
        except AppError as exc:
            return _failure(exc, not_found_message="User not found for update")
        return json_response(200, updated)

    def delete_user(self, event: Mapping[str, Any]) -> Response:
        """Delete the user named by the ``email`` query parameter."""
        email = query_param(event, "email")
        if not email:
            return error_response(
                400, "Email query parameter is required for deletion"
            )

        try:
            self._repository.delete_user(email)
        except AppError as exc:
            return _failure(exc, not_found_message="User not found for deletion")
        return json_response(204)


def build_user_handler(settings: Settings) -> UserHandler:
    """Wire the DynamoDB repository into a UserHandler."""
    client = get_dynamodb_client(
        settings.aws_region,
        endpoint_url=settings.dynamodb_endpoint_url,
    )
    return UserHandler(DynamoDBUserRepository(client, settings.table_name))


@lru_cache(maxsize=1)
def get_user_handler() -> UserHandler:
    """Return the handler shared by every invocation in this container.

    Raises:
        ConfigurationError: If required environment variables are missing.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Users handler initialised", extra={"table": settings.table_name})
    return build_user_handler(settings)


def lambda_handler(event: Mapping[str, Any], context: Any) -> Response:
    """Handle API Gateway request for users."""

    request_id = (event.get("requestContext") or {}).get("requestId") or getattr(
        context, "aws_request_id", ""
    )
    set_request_context(req_id=request_id)
    start_time = time.perf_counter()

    try:
        log_lambda_event(logger, event)
        logger.info(f"Received request: {event.get('httpMethod')} {event.get('path')}")
        response = get_user_handler().handle(event)
        log_response(
            logger,
            response["statusCode"],
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return response
    finally:
        clear_request_context()

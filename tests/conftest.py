"""Pytest configuration and fixtures for user service tests.

This module provides shared fixtures: API Gateway events, a stubbed
DynamoDB client, and an in-memory UserRepository double.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Optional
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from user_service.db.cursor import decode_cursor  # noqa: E402
from user_service.db.cursor import encode_cursor  # noqa: E402
from user_service.exceptions import AlreadyExistsError  # noqa: E402
from user_service.exceptions import NotFoundError  # noqa: E402
from user_service.models import User  # noqa: E402


TABLE_NAME = 'users-test'


class InMemoryUserRepository:
    """UserRepository double keeping users in a dict, scanned in email order."""

    def __init__(self, users: Optional[list[User]] = None):
        self.users: dict[str, User] = {}
        for user in users or []:
            self.users[user.email] = user

    def fetch_user(self, email: str) -> Optional[User]:
        return self.users.get(email)

    def fetch_users(self, limit: int = 10, cursor: Optional[str] = None):
        start_key = decode_cursor(cursor)
        emails = sorted(self.users)
        if start_key is not None:
            after = start_key['email']['S']
            emails = [email for email in emails if email > after]
        page = emails[:limit]
        next_cursor = None
        if len(emails) > limit:
            next_cursor = encode_cursor({'email': {'S': page[-1]}})
        return [self.users[email] for email in page], next_cursor

    def create_user(self, user: User) -> User:
        if user.email in self.users:
            raise AlreadyExistsError()
        self.users[user.email] = user
        return user

    def update_user(self, user: User) -> User:
        if user.email not in self.users:
            raise NotFoundError()
        self.users[user.email] = user
        return user

    def delete_user(self, email: str) -> None:
        if email not in self.users:
            raise NotFoundError()
        del self.users[email]


# --- Sample Data ---


@pytest.fixture
def sample_user_data() -> dict[str, str]:
    """Wire representation of a valid user."""
    return {
        'email': 'a@b.com',
        'firstName': 'A',
        'lastName': 'B',
    }


@pytest.fixture
def sample_user(sample_user_data) -> User:
    return User.model_validate(sample_user_data)


@pytest.fixture
def sample_item() -> dict[str, Any]:
    """DynamoDB attribute-value form of the sample user."""
    return {
        'email': {'S': 'a@b.com'},
        'firstName': {'S': 'A'},
        'lastName': {'S': 'B'},
    }


# --- Repository Fixtures ---


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def aws_credentials(monkeypatch) -> None:
    """Fake credentials so boto3 never looks for real ones."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture
def dynamodb_client(aws_credentials):
    import boto3

    return boto3.client('dynamodb', region_name='us-east-1')


@pytest.fixture
def dynamodb_stubber(dynamodb_client):
    """Stubber activated on the DynamoDB client; asserts no calls remain."""
    from botocore.stub import Stubber

    stubber = Stubber(dynamodb_client)
    stubber.activate()
    yield stubber
    stubber.assert_no_pending_responses()
    stubber.deactivate()


# --- API Event Fixtures ---


@pytest.fixture
def api_gateway_event() -> Callable[..., dict[str, Any]]:
    """Factory for API Gateway proxy events."""

    def _make(
        method: str = 'GET',
        query: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> dict[str, Any]:
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            'httpMethod': method,
            'path': '/users',
            'queryStringParameters': query,
            'headers': {'Content-Type': 'application/json'},
            'requestContext': {'requestId': str(uuid4())},
            'body': body,
            'isBase64Encoded': False,
        }

    return _make

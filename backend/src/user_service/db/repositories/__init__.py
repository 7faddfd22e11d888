"""Repository pattern implementations for user storage.

Repositories keep handlers independent of the persistence layer.
"""

from user_service.db.repositories.base import UserRepository
from user_service.db.repositories.user import DynamoDBUserRepository

__all__ = [
    "DynamoDBUserRepository",
    "UserRepository",
]

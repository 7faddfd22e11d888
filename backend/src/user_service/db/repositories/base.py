"""Repository protocol for user storage.

Handlers depend on this protocol rather than on DynamoDB, so any object
with these methods (an in-memory double in tests, for instance) can be
injected in place of the DynamoDB implementation.
"""

from __future__ import annotations

from typing import Optional
from typing import Protocol
from typing import Sequence
from typing import Tuple

from user_service.models import User


class UserRepository(Protocol):
    """Storage capabilities for user records, keyed by email."""

    def fetch_user(self, email: str) -> Optional[User]:
        """Return the user for ``email``, or None when absent.

        Raises:
            FetchError: On store failure.
        """
        ...

    def fetch_users(
        self,
        limit: int = 10,
        cursor: Optional[str] = None,
    ) -> Tuple[Sequence[User], Optional[str]]:
        """Return up to ``limit`` users and the cursor for the next page.

        Raises:
            InvalidCursorError: If ``cursor`` is malformed.
            FetchError: On store failure.
        """
        ...

    def create_user(self, user: User) -> User:
        """Store a new user.

        Raises:
            AlreadyExistsError: If the email is already stored.
            WriteError: On store failure.
        """
        ...

    def update_user(self, user: User) -> User:
        """Replace every field of an existing user.

        Raises:
            NotFoundError: If the email is not stored.
            WriteError: On store failure.
        """
        ...

    def delete_user(self, email: str) -> None:
        """Delete an existing user.

        Raises:
            NotFoundError: If the email is not stored.
            DeleteError: On store failure.
        """
        ...

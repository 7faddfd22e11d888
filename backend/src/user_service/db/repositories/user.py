"""DynamoDB-backed user repository."""

from __future__ import annotations

from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import Tuple

from boto3.dynamodb.types import TypeDeserializer
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError
from botocore.exceptions import ParamValidationError
from pydantic import ValidationError as PydanticValidationError

from user_service.db.cursor import decode_cursor
from user_service.db.cursor import encode_cursor
from user_service.exceptions import AlreadyExistsError
from user_service.exceptions import AppError
from user_service.exceptions import DeleteError
from user_service.exceptions import FetchError
from user_service.exceptions import InvalidCursorError
from user_service.exceptions import NotFoundError
from user_service.exceptions import WriteError
from user_service.models import User
from user_service.utils.logging import get_logger
from user_service.utils.logging import mask_email

logger = get_logger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()

_CONDITION_FAILED = "ConditionalCheckFailedException"


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class DynamoDBUserRepository:
    """User repository over a DynamoDB table keyed by ``email``.

    Writes and deletes check existence first, which gives deterministic
    404-vs-400 answers, and also carry a condition expression so that two
    concurrent writers for the same email cannot both succeed.
    """

    def __init__(self, client: Any, table_name: str):
        """Initialize the repository.

        Args:
            client: A boto3 DynamoDB low-level client.
            table_name: Name of the users table.
        """
        self._client = client
        self._table_name = table_name

    @property
    def table_name(self) -> str:
        return self._table_name

    def fetch_user(self, email: str) -> Optional[User]:
        try:
            response = self._client.get_item(
                TableName=self._table_name,
                Key=self._key(email),
                ConsistentRead=True,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                "DynamoDB GetItem error",
                extra={"email": mask_email(email), "error": str(exc)},
            )
            raise FetchError(
                "failed to fetch record from DynamoDB", detail=str(exc)
            ) from exc

        item = response.get("Item")
        if not item:
            return None
        return self._to_user(item)

    def fetch_users(
        self,
        limit: int = 10,
        cursor: Optional[str] = None,
    ) -> Tuple[list[User], Optional[str]]:
        start_key = decode_cursor(cursor)
        params: dict[str, Any] = {"TableName": self._table_name, "Limit": limit}
        if start_key is not None:
            params["ExclusiveStartKey"] = start_key

        try:
            response = self._client.scan(**params)
        except (ClientError, BotoCoreError) as exc:
            if start_key is not None and _is_rejected_start_key(exc):
                logger.warning("DynamoDB rejected ExclusiveStartKey")
                raise InvalidCursorError(str(exc)) from exc
            logger.error("DynamoDB Scan error", extra={"error": str(exc)})
            raise FetchError(
                "could not scan items from DynamoDB", detail=str(exc)
            ) from exc

        users = [self._to_user(item) for item in response.get("Items", [])]
        return users, encode_cursor(response.get("LastEvaluatedKey"))

    def create_user(self, user: User) -> User:
        if self.fetch_user(user.email) is not None:
            raise AlreadyExistsError()
        self._put(user, "attribute_not_exists(email)", AlreadyExistsError)
        logger.info("User created", extra={"email": mask_email(user.email)})
        return user

    def update_user(self, user: User) -> User:
        if self.fetch_user(user.email) is None:
            raise NotFoundError()
        self._put(user, "attribute_exists(email)", NotFoundError)
        logger.info("User updated", extra={"email": mask_email(user.email)})
        return user

    def delete_user(self, email: str) -> None:
        if self.fetch_user(email) is None:
            raise NotFoundError()
        try:
            self._client.delete_item(
                TableName=self._table_name,
                Key=self._key(email),
                ConditionExpression="attribute_exists(email)",
            )
        except ClientError as exc:
            if _error_code(exc) == _CONDITION_FAILED:
                raise NotFoundError() from exc
            self._log_write_error("DeleteItem", email, exc)
            raise DeleteError("could not delete item", detail=str(exc)) from exc
        except BotoCoreError as exc:
            self._log_write_error("DeleteItem", email, exc)
            raise DeleteError("could not delete item", detail=str(exc)) from exc
        logger.info("User deleted", extra={"email": mask_email(email)})

    def _put(
        self,
        user: User,
        condition: str,
        on_condition_failed: Callable[[], AppError],
    ) -> None:
        try:
            self._client.put_item(
                TableName=self._table_name,
                Item=self._to_item(user),
                ConditionExpression=condition,
            )
        except ClientError as exc:
            if _error_code(exc) == _CONDITION_FAILED:
                raise on_condition_failed() from exc
            self._log_write_error("PutItem", user.email, exc)
            raise WriteError(
                "could not put item into DynamoDB", detail=str(exc)
            ) from exc
        except BotoCoreError as exc:
            self._log_write_error("PutItem", user.email, exc)
            raise WriteError(
                "could not put item into DynamoDB", detail=str(exc)
            ) from exc

    @staticmethod
    def _log_write_error(operation: str, email: str, exc: Exception) -> None:
        logger.error(
            f"DynamoDB {operation} error",
            extra={"email": mask_email(email), "error": str(exc)},
        )

    @staticmethod
    def _key(email: str) -> dict[str, Any]:
        return {"email": _serializer.serialize(email)}

    @staticmethod
    def _to_item(user: User) -> dict[str, Any]:
        return {
            name: _serializer.serialize(value)
            for name, value in user.to_wire().items()
        }

    @staticmethod
    def _to_user(item: Mapping[str, Any]) -> User:
        try:
            plain = {name: _deserializer.deserialize(value) for name, value in item.items()}
            return User.model_validate(plain)
        except (TypeError, PydanticValidationError) as exc:
            logger.error("DynamoDB item unmarshal error", extra={"error": str(exc)})
            raise FetchError("failed to unmarshal record", detail=str(exc)) from exc


def _is_rejected_start_key(exc: Exception) -> bool:
    """Return True when a scan failed because of its ExclusiveStartKey."""
    if isinstance(exc, ClientError):
        return _error_code(exc) == "ValidationException"
    return isinstance(exc, ParamValidationError)

"""Pydantic models for user records and paged listings."""

from __future__ import annotations

from typing import Any
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class User(BaseModel):
    """A user record keyed by email.

    Missing and null fields become empty strings so that validation, not
    parsing, reports which field is absent.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    @field_validator("email", "first_name", "last_name", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_wire(self) -> dict[str, str]:
        """Return the JSON shape used on the wire and in DynamoDB."""
        return self.model_dump(by_alias=True)


class UserPage(BaseModel):
    """One page of a user listing."""

    model_config = ConfigDict(populate_by_name=True)

    users: List[User]
    last_evaluated_key: Optional[str] = Field(
        default=None,
        alias="lastEvaluatedKey",
    )

"""Account record model and its JSON encoding."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Account(BaseModel):
    """Persisted account: username, bcrypt hash and creation time."""

    model_config = ConfigDict(
        populate_by_name=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    username: str = Field(min_length=1)
    hashed_password: Optional[bytes] = Field(default=None, alias="hashedPassword")
    created: datetime = Field(default_factory=_now)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Encode with field tags; an absent hash is omitted."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Account":
        return cls.model_validate_json(data)

    def redacted(self) -> "Account":
        """Copy of the record without the password hash, safe to display."""
        return self.model_copy(update={"hashed_password": None})

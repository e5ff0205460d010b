"""Profile Record document model."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Text fields arrive as a single string, or a list when the form repeats them
FieldValue = str | list[str]


class ProfileRecord(BaseModel):
    """One form submission as persisted in the profile collection."""

    model_config = ConfigDict(populate_by_name=True)

    name: FieldValue | None = None
    email: FieldValue | None = None
    interests: FieldValue | None = None
    profile_image: str | None = Field(default=None, alias="profileImage")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), alias="createdAt")

    @classmethod
    def from_submission(cls, fields: dict[str, FieldValue], image_path: str | None) -> "ProfileRecord":
        return cls(
            name=fields.get("name"),
            email=fields.get("email"),
            interests=fields.get("interests"),
            profile_image=image_path,
        )

    def to_document(self) -> dict[str, Any]:
        """Mongo document with camelCase keys; absent fields are stored as null."""
        return self.model_dump(by_alias=True)

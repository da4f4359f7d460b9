# =============================================================================
# core/models/documents.py - Console Document Schemas
# =============================================================================
# Read models for the documents the console manages:
# - Avatar: simulated prospect persona used by challenges
# - Category: grouping of challenges
# - Challenge: training scenario; references an avatar and a category
# - User: platform user shown in the paginated users list
#
# Stores return loosely-shaped rows. Unknown fields are ignored and missing or
# null optional fields fall back to the defaults the console has always shown.
# =============================================================================

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class StoreDocument(BaseModel):
    """Base for documents read from the store."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1, description="Opaque document id")

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        # Postgres returns unset columns as null; treat them as missing
        if not isinstance(data, dict):
            return data
        return {
            key: value for key, value in data.items()
            if value is not None
            or key not in cls.model_fields
            or cls.model_fields[key].is_required()
        }

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @classmethod
    def from_row(cls, row: dict[str, Any]):
        return cls.model_validate(row)


class Avatar(StoreDocument):
    """
    Prospect persona.

    Example:
        {"id": "A1", "name": "Skeptical Steve", "book_rate": "Hard"}
    """

    name: str = ""
    age: int = 0
    gender: str = ""
    description: str = ""
    image_url: str = ""
    voice_id: str = ""
    book_rate: Literal["Easy", "Medium", "Hard"] | None = None


class Category(StoreDocument):
    """Challenge category."""

    name: str = ""
    description: str = ""
    category_icon: str = ""
    image_url: str | None = None


class Challenge(StoreDocument):
    """
    Training challenge.

    `avatar` and `category_id` are soft foreign keys into the avatars and
    categories collections.
    """

    title: str = ""
    type: str = "Cold Call"
    avatar: str = ""
    category_id: str = ""
    credits: int = 0


class User(StoreDocument):
    """Platform user as listed by the console."""

    email: str = ""
    firstName: str = ""
    lastName: str = ""
    createdTime: datetime | None = None
    role: Literal["admin", "user"] = "user"
    user_credits: int = 0
    is_credits_locked: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def _default_role(cls, value: Any) -> Any:
        return value or "user"

    @property
    def full_name(self) -> str:
        return f"{self.firstName} {self.lastName}".strip()

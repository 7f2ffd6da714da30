"""Book record and draft schemas."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_rating(value: Any) -> float:
    """Turn loosely typed rating input into a number; junk becomes 0."""
    if value is None or value == "" or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return number


class Book(BaseModel):
    """A book record as confirmed by the remote resource.

    Unknown fields returned by the server are kept so that a full-record
    ``replace`` sends them back untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str = Field(description="Identifier assigned by the remote resource")
    title: str = Field(default="", description="Book title")
    author: str = Field(default="", description="Book author")
    cover_image: str = Field(default="", alias="coverImage", description="Cover image URL")
    description: str = Field(default="")
    rating: int = Field(default=0, description="Star rating, 0 means unrated")
    is_favorite: bool = Field(default=False, alias="isFavorite")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("title", "author", "cover_image", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("rating", mode="before")
    @classmethod
    def _rating_as_int(cls, value: Any) -> int:
        return int(coerce_rating(value))

    def to_payload(self) -> dict[str, Any]:
        """Full JSON body for a PUT, including ``id`` and extra fields."""
        return self.model_dump(by_alias=True)


class BookDraft(BaseModel):
    """Staged field values while creating or editing a book."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    author: str = ""
    cover_image: str = Field(default="", alias="coverImage")
    description: str = ""
    rating: float = 0

    @field_validator("title", "author", "cover_image", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("rating", mode="before")
    @classmethod
    def _loose_rating(cls, value: Any) -> float:
        return coerce_rating(value)

    @classmethod
    def from_book(cls, book: Book) -> "BookDraft":
        """Seed a draft from an existing record."""
        return cls(
            title=book.title,
            author=book.author,
            cover_image=book.cover_image,
            description=book.description,
            rating=book.rating,
        )


class DraftUpdate(BaseModel):
    """Partial draft edit; only fields that were sent are applied."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    author: str | None = None
    cover_image: str | None = Field(default=None, alias="coverImage")
    description: str | None = None
    rating: float | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def _loose_rating(cls, value: Any) -> float | None:
        if value is None:
            return None
        return coerce_rating(value)

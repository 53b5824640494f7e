"""
Entry Schemas.

Pydantic schemas for entry API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jotter.backend.schemas.category import CategoryResponse


class EntryCreate(BaseModel):
    """Schema for creating a new entry."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Entry title",
        examples=["Photosynthesis"],
    )
    synopsis: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Short summary shown in lists",
    )
    content: str = Field(..., min_length=1, description="Entry body (Markdown)")
    category_id: str = Field(..., min_length=1, description="Category to file the entry under")
    pinned: bool = Field(default=False, description="Show the entry at the top of lists")
    is_public: bool = Field(default=False, description="Publish under a public share link")


class EntryUpdate(BaseModel):
    """
    Schema for updating an entry. Only provided fields change.

    Setting is_public to true always issues a new share link, even when
    the entry is already public.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    synopsis: str | None = Field(default=None, min_length=1, max_length=1000)
    content: str | None = Field(default=None, min_length=1)
    category_id: str | None = Field(default=None, min_length=1)
    pinned: bool | None = None
    is_public: bool | None = None


class EntryResponse(BaseModel):
    """Entry as seen by its owner."""

    id: str
    title: str
    synopsis: str
    content: str
    category_id: str
    category: CategoryResponse
    pinned: bool
    is_public: bool
    public_share_id: str | None
    is_deleted: bool
    bookmarked: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def for_reader(cls, entry, reader_id: str, **overrides) -> "EntryResponse":
        """
        Entry as seen by `reader_id`. Only the owner gets the share token;
        anyone else reaches a public entry through the owner's link.
        """
        response = cls.model_validate(entry)
        if entry.user_id != reader_id:
            overrides["public_share_id"] = None
        return response.model_copy(update=overrides) if overrides else response


class AuthorResponse(BaseModel):
    """Public profile of an entry's author."""

    username: str
    first_name: str
    last_name: str
    avatar: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PublicEntryResponse(BaseModel):
    """Read-only view of a shared entry."""

    id: str
    title: str
    synopsis: str
    content: str
    pinned: bool
    is_public: bool
    category: CategoryResponse
    user: AuthorResponse
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EntryShareResponse(BaseModel):
    """Result of publishing an entry."""

    entry: EntryResponse
    public_url: str


class MessageResponse(BaseModel):
    message: str

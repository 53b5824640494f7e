"""
Note Generation Schemas.
"""

from typing import Literal

from pydantic import BaseModel, Field

NoteLength = Literal["short", "medium", "long"]


class NoteGenerateRequest(BaseModel):
    """Options for drafting a note with the writer agent."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    synopsis: str | None = Field(default=None, min_length=1, max_length=1000)
    audience: str | None = Field(default=None, max_length=200, examples=["first-year students"])
    tone: str | None = Field(default=None, max_length=100, examples=["friendly"])
    length: NoteLength | None = None
    save: bool = Field(default=False, description="Save the draft as a private entry")
    category_id: str | None = Field(default=None, description="Required when save is true")


class SavedEntryRef(BaseModel):
    id: str


class NoteGenerateResponse(BaseModel):
    """Generated note and, when saved, the new entry's ID."""

    note: str
    saved: SavedEntryRef | None = None

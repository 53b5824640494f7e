"""
Note Generation Service.

Drafts notes with the writer agent and optionally files the draft as a
private entry.
"""

import re
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from jotter.backend.agents.note_writer import NoteDraftRequest, write_note
from jotter.backend.core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from jotter.backend.repositories.category import CategoryRepository
from jotter.backend.repositories.entry import EntryRepository
from jotter.backend.schemas.note import NoteGenerateRequest, NoteGenerateResponse, SavedEntryRef
from jotter.backend.services.base import BaseService

FALLBACK_TITLE_MAX_LENGTH = 100
_TITLE_MARKUP = re.compile(r"^[#>\-*]+\s*")

NoteWriter = Callable[[NoteDraftRequest], Awaitable[str]]


def fallback_title(note: str) -> str:
    """Title derived from the first line of a note, Markdown markers stripped."""
    first_line = note.split("\n", 1)[0]
    return _TITLE_MARKUP.sub("", first_line).strip()[:FALLBACK_TITLE_MAX_LENGTH]


class NoteGenerationService(BaseService):
    """Service for AI-assisted note drafting."""

    def __init__(self, session: AsyncSession, writer: NoteWriter | None = None) -> None:
        super().__init__(session)
        self.entries = EntryRepository(session)
        self.categories = CategoryRepository(session)
        self.writer = writer or write_note

    async def generate(self, user_id: str, data: NoteGenerateRequest) -> NoteGenerateResponse:
        """
        Draft a note and save it if asked.

        Raises:
            ValidationError: If saving without a category
            NotFoundError: If the category does not exist
            ExternalServiceError: If the writer fails
        """
        if data.save and not data.category_id:
            raise ValidationError(
                "Saving requires a category_id",
                details={"missing_fields": ["category_id"]},
            )
        if data.save and not await self.categories.exists(data.category_id):
            raise NotFoundError("Invalid category_id provided")

        request = NoteDraftRequest(
            title=data.title,
            synopsis=data.synopsis,
            audience=data.audience,
            tone=data.tone,
            length=data.length,
        )

        self._log_operation("Generating note", user_id=user_id, save=data.save)
        try:
            note = await self.writer(request)
        except Exception as e:
            self._logger.error(
                "Note generation failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise ExternalServiceError("Failed to generate note") from e

        if not data.save:
            return NoteGenerateResponse(note=note)

        title = data.title or fallback_title(note) or "Untitled note"
        entry = await self._execute_db_operation(
            "save_generated_note",
            self.entries.create(
                title=title,
                synopsis=data.synopsis or title,
                content=note,
                category_id=data.category_id,
                user_id=user_id,
            ),
        )
        self._log_debug("Generated note saved", entry_id=entry.id)
        return NoteGenerateResponse(note=note, saved=SavedEntryRef(id=entry.id))

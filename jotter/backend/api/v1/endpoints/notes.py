"""
Notes API Endpoints.

AI-assisted note drafting.
"""

from fastapi import APIRouter

from jotter.backend.core.dependencies import CurrentUser, DbSession, RequestId
from jotter.backend.schemas.base import ApiResponse
from jotter.backend.schemas.note import NoteGenerateRequest, NoteGenerateResponse
from jotter.backend.services.note import NoteGenerationService

router = APIRouter()


@router.post(
    "/generate",
    response_model=ApiResponse[NoteGenerateResponse],
    summary="Generate a note",
    description=(
        "Draft a note with the writer agent. With save=true the draft is stored "
        "as a private entry in the given category."
    ),
)
async def generate_note(
    data: NoteGenerateRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteGenerateResponse]:
    service = NoteGenerationService(db)
    result = await service.generate(user.id, data)
    return ApiResponse.ok(result, request_id)

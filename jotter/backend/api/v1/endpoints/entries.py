"""
Entries API Endpoints.

REST API for entry management, trash, bookmarks, and public sharing.
Static paths are declared before `/{entry_id}` so they are not captured
by it.
"""

from fastapi import APIRouter

from jotter.backend.core.config import get_public_entry_url
from jotter.backend.core.dependencies import CurrentUser, DbSession, RequestId
from jotter.backend.schemas.base import ApiResponse
from jotter.backend.schemas.entry import (
    EntryCreate,
    EntryResponse,
    EntryShareResponse,
    EntryUpdate,
    MessageResponse,
    PublicEntryResponse,
)
from jotter.backend.services.entry import EntryService

router = APIRouter()


def _entry(entry, request_id: str) -> ApiResponse[EntryResponse]:
    return ApiResponse.ok(EntryResponse.model_validate(entry), request_id)


def _entries(entries, request_id: str) -> ApiResponse[list[EntryResponse]]:
    return ApiResponse.ok([EntryResponse.model_validate(entry) for entry in entries], request_id)


# =============================================================================
# Public
# =============================================================================


@router.get(
    "/public/{share_id}",
    response_model=ApiResponse[PublicEntryResponse],
    summary="View a shared entry",
    description="Read-only view of a public entry by its share token. No authentication.",
)
async def get_public_entry(
    share_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[PublicEntryResponse]:
    service = EntryService(db)
    entry = await service.get_public_entry(share_id)
    return ApiResponse.ok(PublicEntryResponse.model_validate(entry), request_id)


# =============================================================================
# Collection
# =============================================================================


@router.post(
    "",
    response_model=ApiResponse[EntryResponse],
    status_code=201,
    summary="Create an entry",
)
async def create_entry(
    data: EntryCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryResponse]:
    """Create an entry. Public entries get a share token immediately."""
    service = EntryService(db)
    entry = await service.create_entry(user.id, data)
    return _entry(entry, request_id)


@router.get(
    "",
    response_model=ApiResponse[list[EntryResponse]],
    summary="List entries",
    description="Entries not in the trash, pinned first then newest.",
)
async def list_entries(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[EntryResponse]]:
    service = EntryService(db)
    return _entries(await service.list_entries(user.id), request_id)


@router.get(
    "/trash",
    response_model=ApiResponse[list[EntryResponse]],
    summary="List trashed entries",
)
async def list_trash(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[EntryResponse]]:
    service = EntryService(db)
    return _entries(await service.list_trash(user.id), request_id)


@router.get(
    "/bookmarks/all",
    response_model=ApiResponse[list[EntryResponse]],
    summary="List bookmarked entries",
)
async def list_bookmarked_entries(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[EntryResponse]]:
    service = EntryService(db)
    entries = await service.list_bookmarked_entries(user.id)
    items = [EntryResponse.for_reader(entry, user.id, bookmarked=True) for entry in entries]
    return ApiResponse.ok(items, request_id)


@router.patch(
    "/restore/{entry_id}",
    response_model=ApiResponse[EntryResponse],
    summary="Restore an entry from the trash",
)
async def restore_entry(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryResponse]:
    service = EntryService(db)
    return _entry(await service.restore_entry(user.id, entry_id), request_id)


@router.delete(
    "/permanent/{entry_id}",
    status_code=204,
    summary="Delete an entry permanently",
)
async def delete_entry_permanently(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
) -> None:
    service = EntryService(db)
    await service.delete_entry_permanently(user.id, entry_id)


# =============================================================================
# Single entry
# =============================================================================


@router.get(
    "/{entry_id}",
    response_model=ApiResponse[EntryResponse],
    summary="Get an entry",
)
async def get_entry(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryResponse]:
    service = EntryService(db)
    return _entry(await service.get_entry(user.id, entry_id), request_id)


@router.patch(
    "/{entry_id}",
    response_model=ApiResponse[EntryResponse],
    summary="Update an entry",
    description=(
        "Update an entry. Only provided fields change. Setting is_public to true "
        "always issues a new share token; setting it to false revokes the token."
    ),
)
async def update_entry(
    entry_id: str,
    data: EntryUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryResponse]:
    service = EntryService(db)
    return _entry(await service.update_entry(user.id, entry_id, data), request_id)


@router.delete(
    "/{entry_id}",
    response_model=ApiResponse[EntryResponse],
    summary="Move an entry to the trash",
)
async def soft_delete_entry(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryResponse]:
    service = EntryService(db)
    return _entry(await service.soft_delete_entry(user.id, entry_id), request_id)


@router.post(
    "/{entry_id}/share",
    response_model=ApiResponse[EntryShareResponse],
    summary="Share an entry",
    description="Publish an entry under a new share token. Any previous link stops working.",
)
async def share_entry(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryShareResponse]:
    service = EntryService(db)
    entry = await service.share_entry(user.id, entry_id)
    shared = EntryShareResponse(
        entry=EntryResponse.model_validate(entry),
        public_url=get_public_entry_url(entry.public_share_id),
    )
    return ApiResponse.ok(shared, request_id)


@router.delete(
    "/{entry_id}/share",
    response_model=ApiResponse[EntryResponse],
    summary="Stop sharing an entry",
)
async def unshare_entry(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[EntryResponse]:
    service = EntryService(db)
    return _entry(await service.unshare_entry(user.id, entry_id), request_id)


@router.post(
    "/{entry_id}/bookmark",
    response_model=ApiResponse[MessageResponse],
    summary="Bookmark an entry",
)
async def bookmark_entry(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[MessageResponse]:
    service = EntryService(db)
    await service.bookmark_entry(user.id, entry_id)
    return ApiResponse.ok(MessageResponse(message="Entry bookmarked"), request_id)


@router.delete(
    "/{entry_id}/bookmark",
    response_model=ApiResponse[MessageResponse],
    summary="Remove a bookmark",
)
async def remove_bookmark(
    entry_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[MessageResponse]:
    service = EntryService(db)
    await service.remove_bookmark(user.id, entry_id)
    return ApiResponse.ok(MessageResponse(message="Bookmark removed"), request_id)

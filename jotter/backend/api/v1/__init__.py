"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from jotter.backend.api.v1.endpoints import categories, entries, notes


def build_router(notes_generation_enabled: bool = True) -> APIRouter:
    """Assemble the v1 router, leaving out feature-flagged endpoints."""
    router = APIRouter()
    router.include_router(entries.router, prefix="/entries", tags=["entries"])
    router.include_router(categories.router, prefix="/categories", tags=["categories"])
    if notes_generation_enabled:
        router.include_router(notes.router, prefix="/notes", tags=["notes"])
    return router

"""
Categories API Endpoints.
"""

from fastapi import APIRouter

from jotter.backend.core.dependencies import CurrentUser, DbSession, RequestId
from jotter.backend.schemas.base import ApiResponse
from jotter.backend.schemas.category import CategoryCreate, CategoryResponse
from jotter.backend.services.category import CategoryService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[CategoryResponse]],
    summary="List categories",
)
async def list_categories(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[CategoryResponse]]:
    service = CategoryService(db)
    categories = await service.list_categories()
    items = [CategoryResponse.model_validate(category) for category in categories]
    return ApiResponse.ok(items, request_id)


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=201,
    summary="Create a category",
)
async def create_category(
    data: CategoryCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[CategoryResponse]:
    service = CategoryService(db)
    category = await service.create_category(data)
    return ApiResponse.ok(CategoryResponse.model_validate(category), request_id)

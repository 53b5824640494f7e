"""
Category Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name",
        examples=["Biology"],
    )


class CategoryResponse(BaseModel):
    """Category in API responses."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)

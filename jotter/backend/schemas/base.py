"""
Response envelope.

Every body the API returns, success or failure, has the same four keys:

    {"success": ..., "data": ..., "error": ..., "metadata": {"timestamp", "request_id"}}
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from jotter.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Machine readable `code`, human readable `message`."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    model_config = ConfigDict(from_attributes=True)

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    @classmethod
    def ok(cls, data: DataT, request_id: str | None) -> "ApiResponse[DataT]":
        return cls(data=data, metadata=ResponseMetadata(request_id=request_id))


class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

"""
Base models and common schemas
"""
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Model serialized with the camelCase keys the admin front end reads"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetaInfo(BaseModel):
    """Response metadata"""
    request_id: str = Field(..., description="Unique request identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorDetail(BaseModel):
    """Error details"""
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = None


class SuccessResponse(BaseModel, Generic[DataT]):
    """Standard success response wrapper"""
    success: bool = True
    data: DataT
    meta: Optional[MetaInfo] = None


class ErrorResponse(BaseModel):
    """Standard error response wrapper"""
    success: bool = False
    error: ErrorDetail
    meta: Optional[MetaInfo] = None

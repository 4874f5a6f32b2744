from enum import IntEnum
from typing import Generic, TypeVar, List, Optional
from pydantic import BaseModel

T = TypeVar("T")


class ResponseErrorCode(IntEnum):
    """Error codes carried in the envelope of the lookup endpoints."""
    SUCCESSFUL = 0
    INVALID_DATA = 1
    SYSTEM_ERROR = 2


class BaseResponse(BaseModel):
    """Base response model."""
    pass


class PaginatedResponse(BaseResponse, Generic[T]):
    """Standard pagination response."""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class EnvelopeResponse(BaseResponse, Generic[T]):
    """
    Envelope returned (always with HTTP 200) by the lookup endpoints.
    The outcome is reported through error/message, the payload through data.
    """
    error: ResponseErrorCode
    message: str
    data: Optional[T] = None
    exception: Optional[str] = None

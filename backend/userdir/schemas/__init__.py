from .common import EnvelopeResponse, PaginatedResponse, ResponseErrorCode
from .user import MobileExistence, UserCreate, UserResponse, UserUpdate

__all__ = [
    "EnvelopeResponse",
    "PaginatedResponse",
    "ResponseErrorCode",
    "MobileExistence",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]

# Storefront Pydantic Schemas
from app.schemas.auth import (
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenData,
    TokenResponse,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.schemas.user import UserProfile, UserResponse

__all__ = [
    # Auth
    "LoginRequest",
    "LogoutRequest",
    "RefreshRequest",
    "RegisterRequest",
    "RegisterResponse",
    "TokenData",
    "TokenResponse",
    # Common
    "ErrorResponse",
    "MessageResponse",
    # Product
    "ProductCreate",
    "ProductEnvelope",
    "ProductListResponse",
    "ProductResponse",
    "ProductUpdate",
    # User
    "UserProfile",
    "UserResponse",
]

"""User API endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_auth_service, get_current_claims
from app.schemas.user import UserProfile, UserResponse
from app.services.auth import AuthService
from app.services.token_codec import AccessClaims

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    claims: AccessClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Get the authenticated user's profile."""
    user = await auth_service.me(claims.subject)
    return UserResponse(user=UserProfile.model_validate(user))

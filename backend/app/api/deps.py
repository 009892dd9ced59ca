"""Shared FastAPI dependencies: token services and the current caller."""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import get_db, settings
from app.services.auth import AuthService
from app.services.product import ProductService
from app.services.revocation import RevocationStore
from app.services.token_codec import AccessClaims, TokenCodec
from app.services.token_lifecycle import TokenLifecycleManager

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide token codec built from settings.

    Raises:
        ConfigError: If JWT_SECRET_KEY is not set.
    """
    return TokenCodec(settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def get_revocation_store(db: AsyncSession = Depends(get_db)) -> RevocationStore:
    """Dependency to get the revocation store for this request's session."""
    return RevocationStore(db)


def get_token_lifecycle(
    codec: TokenCodec = Depends(get_token_codec),
    revocations: RevocationStore = Depends(get_revocation_store),
) -> TokenLifecycleManager:
    """Dependency to get the token lifecycle manager."""
    return TokenLifecycleManager(
        codec,
        revocations,
        access_ttl=timedelta(seconds=settings.access_token_ttl_seconds),
        refresh_ttl=timedelta(seconds=settings.refresh_token_ttl_seconds),
    )


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    lifecycle: TokenLifecycleManager = Depends(get_token_lifecycle),
) -> AuthService:
    """Dependency to get auth service."""
    return AuthService(db, lifecycle)


def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    """Dependency to get product service."""
    return ProductService(db)


def extract_access_token(request: Request) -> str | None:
    """Bearer token from the Authorization header, else the access cookie."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()  # Remove "Bearer " prefix
        if token:
            return token
    return request.cookies.get(ACCESS_COOKIE) or None


async def get_current_claims(
    request: Request,
    lifecycle: TokenLifecycleManager = Depends(get_token_lifecycle),
) -> AccessClaims:
    """Dependency to get the verified, unrevoked access claims of the caller."""
    return await lifecycle.authenticate(extract_access_token(request))

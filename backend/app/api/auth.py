"""Authentication API endpoints: register, login, refresh, logout and me."""

import logging
import time
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.deps import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_auth_service,
    get_current_claims,
)
from app.core import settings
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
from app.schemas.user import UserProfile, UserResponse
from app.services.auth import AuthService
from app.services.token_codec import AccessClaims
from app.services.token_lifecycle import TokenPair

logger = logging.getLogger(__name__)

# Rate limiting for login attempts, keyed by client IP
_login_attempts: dict[str, list[float]] = defaultdict(list)

REFRESH_COOKIE_PATH = "/auth"


def _check_login_rate_limit(client_ip: str) -> None:
    """Check if a client IP has exceeded the login attempt rate limit."""
    now = time.monotonic()
    window = settings.login_rate_limit_window_seconds
    attempts = [t for t in _login_attempts.get(client_ip, ()) if now - t < window]
    if attempts:
        _login_attempts[client_ip] = attempts
    else:
        _login_attempts.pop(client_ip, None)
    if len(attempts) >= settings.login_rate_limit_attempts:
        logger.warning("Login rate limit exceeded for %s", client_ip)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
        )


def _record_login_attempt(client_ip: str) -> None:
    """Record a login attempt for rate limiting."""
    _login_attempts[client_ip].append(time.monotonic())


def reset_login_attempts() -> None:
    """Forget all recorded login attempts."""
    _login_attempts.clear()


def _set_auth_cookies(response: Response, pair: TokenPair) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        pair.access_token,
        max_age=settings.access_token_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        pair.refresh_token,
        max_age=settings.refresh_token_ttl_seconds,
        path=REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def _clear_auth_cookies(response: Response) -> None:
    for key, path in ((ACCESS_COOKIE, "/"), (REFRESH_COOKIE, REFRESH_COOKIE_PATH)):
        response.delete_cookie(
            key,
            path=path,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
        )


def _token_response(message: str, pair: TokenPair) -> TokenResponse:
    return TokenResponse(
        message=message,
        data=TokenData(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
        ),
    )


router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Create a new account."""
    message, user = await auth_service.register(
        email=request.email,
        password=request.password,
        confirm_password=request.confirm_password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return RegisterResponse(message=message, data=UserProfile.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Authenticate and get JWT tokens.

    Tokens are returned in the body and set as HttpOnly cookies.
    Rate limited per client IP.
    """
    client_ip = http_request.client.host if http_request.client else "unknown"
    _check_login_rate_limit(client_ip)
    _record_login_attempt(client_ip)

    message, pair = await auth_service.login(request.email, request.password)
    _set_auth_cookies(response, pair)
    return _token_response(message, pair)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_tokens(
    http_request: Request,
    response: Response,
    request: RefreshRequest | None = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange a refresh token for a new pair (token rotation).

    The token is read from the body, falling back to the refresh cookie.
    """
    refresh_token = (request.refresh_token if request else None) or http_request.cookies.get(
        REFRESH_COOKIE
    )
    message, pair = await auth_service.refresh(refresh_token)
    _set_auth_cookies(response, pair)
    return _token_response(message, pair)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    http_request: Request,
    response: Response,
    request: LogoutRequest | None = None,
    claims: AccessClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Log out the current user.

    Revokes the current access token, and the refresh token when one is
    supplied in the body or cookie, for the rest of their lifetimes.
    """
    refresh_token = (request.refresh_token if request else None) or http_request.cookies.get(
        REFRESH_COOKIE
    )
    message = await auth_service.logout(claims, refresh_token)
    _clear_auth_cookies(response)
    return MessageResponse(message=message)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    claims: AccessClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Get the current user's profile."""
    user = await auth_service.me(claims.subject)
    return UserResponse(user=UserProfile.model_validate(user))

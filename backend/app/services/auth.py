"""Authentication service - register, login, refresh, logout and profile."""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.services.errors import ConflictError, UnauthorizedError, ValidationError
from app.services.passwords import burn_verify, hash_password, verify_password
from app.services.token_codec import AccessClaims
from app.services.token_lifecycle import TokenLifecycleManager, TokenPair
from app.services.user import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    """Trim and lower-case an email for storage and lookup."""
    return email.strip().lower()


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession, lifecycle: TokenLifecycleManager):
        self.db = db
        self.users = UserService(db)
        self.lifecycle = lifecycle

    async def register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        first_name: str,
        last_name: str,
    ) -> tuple[str, User]:
        """Create an account.

        Raises:
            ValidationError: If the password confirmation does not match.
            ConflictError: If the email is already registered.
        """
        if password != confirm_password:
            raise ValidationError(
                "The confirm password does not match the password",
                errors={"confirm_password": ["Passwords do not match"]},
            )

        email = normalize_email(email)
        if await self.users.find_by_email(email) is not None:
            raise ConflictError(
                "User with this email already exists",
                errors={"email": ["User with this email already exists"]},
            )

        # Argon2 is CPU-bound; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, password)
        user = await self.users.create(
            email=email,
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
        )

        logger.info(f"Registered user {user.id}", extra={"event": "register", "user_id": user.id})
        return "User registered successfully", user

    async def login(self, email: str, password: str) -> tuple[str, TokenPair]:
        """Verify credentials and issue a token pair.

        Raises UnauthorizedError for both "user not found" and "wrong
        password" to prevent user enumeration.
        """
        user = await self.users.find_by_email(normalize_email(email))

        if user is None:
            await asyncio.to_thread(burn_verify, password)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info(f"User logged in: {user.id}", extra={"event": "login", "user_id": user.id})
        return "Login successful", self.lifecycle.issue_pair(user)

    async def refresh(self, refresh_token: str | None) -> tuple[str, TokenPair]:
        """Rotate a refresh token."""
        pair = await self.lifecycle.refresh(refresh_token)
        return "Tokens refreshed", pair

    async def logout(self, access_claims: AccessClaims | None, refresh_token: str | None = None) -> str:
        """Revoke the current tokens."""
        return await self.lifecycle.logout(access_claims, refresh_token)

    async def me(self, user_id: int) -> User:
        """Get the profile of the authenticated user."""
        return await self.users.get_profile(user_id)

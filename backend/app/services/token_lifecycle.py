"""Token lifecycle: issuing, authenticating, rotating and revoking tokens.

The manager is the only place that combines the codec with the revocation
store. Codec errors stop here and leave as ``UnauthorizedError``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from sqlalchemy.exc import IntegrityError

from app.services.errors import UnauthorizedError
from app.services.revocation import RevocationStore
from app.services.token_codec import (
    AccessClaims,
    InvalidTokenError,
    RefreshClaims,
    TokenClaims,
    TokenCodec,
)

logger = logging.getLogger(__name__)

LOGOUT_MESSAGE = "Logout successful"

# Callers are never told which token check failed
INVALID_TOKEN = "Invalid or expired token"


class Identity(Protocol):
    """Anything with an id and an email can hold tokens."""

    id: int
    email: str


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh tokens issued together."""

    access_token: str
    refresh_token: str
    access_claims: AccessClaims
    refresh_claims: RefreshClaims
    token_type: str = "bearer"

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int((self.access_claims.expires_at - self.access_claims.issued_at).total_seconds())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenLifecycleManager:
    """Issues token pairs and enforces kind, expiry and revocation checks."""

    def __init__(
        self,
        codec: TokenCodec,
        revocations: RevocationStore,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.codec = codec
        self.revocations = revocations
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock

    def issue_pair(self, identity: Identity) -> TokenPair:
        """Issue a fresh access/refresh pair for an identity."""
        now = self._clock()
        access = self.codec.issue(
            AccessClaims,
            subject=identity.id,
            email=identity.email,
            ttl=self.access_ttl,
            now=now,
        )
        refresh = self.codec.issue(
            RefreshClaims,
            subject=identity.id,
            email=identity.email,
            ttl=self.refresh_ttl,
            now=now,
        )
        return TokenPair(
            access_token=access.token,
            refresh_token=refresh.token,
            access_claims=access.claims,  # type: ignore[arg-type]
            refresh_claims=refresh.claims,  # type: ignore[arg-type]
        )

    async def authenticate(self, token: str | None) -> AccessClaims:
        """Resolve an access token to its claims.

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired,
                not an access token, or revoked.
        """
        claims = await self._verify(token, AccessClaims)
        return claims  # type: ignore[return-value]

    async def refresh(self, refresh_token: str | None) -> TokenPair:
        """Rotate a refresh token into a brand-new pair.

        The presented token is revoked before the new pair is issued, so it
        can be used exactly once.
        """
        claims = await self._verify(refresh_token, RefreshClaims)

        try:
            await self._revoke_remaining(claims)
        except IntegrityError as e:
            # Another request revoked the same token between our check and insert
            logger.warning(
                f"Concurrent refresh token reuse for user {claims.subject}",
                extra={"event": "refresh_replay", "user_id": claims.subject},
            )
            raise UnauthorizedError(INVALID_TOKEN) from e

        logger.info(
            f"Rotated refresh token for user {claims.subject}",
            extra={"event": "token_rotated", "user_id": claims.subject},
        )
        return self.issue_pair(_ClaimsIdentity(claims.subject, claims.email))

    async def logout(
        self,
        access_claims: TokenClaims | None,
        refresh_token: str | None = None,
    ) -> str:
        """Revoke the caller's access token and, if given, its refresh token."""
        if not isinstance(access_claims, AccessClaims) or not access_claims.token_id:
            raise UnauthorizedError(INVALID_TOKEN)

        await self._revoke_remaining(access_claims)

        if refresh_token:
            try:
                refresh_claims = self.codec.verify(refresh_token)
            except InvalidTokenError as e:
                # A bad refresh token must not block logout
                logger.debug(f"Ignoring unusable refresh token on logout: {e}")
            else:
                if isinstance(refresh_claims, RefreshClaims):
                    await self._revoke_remaining(refresh_claims)

        logger.info(
            f"User {access_claims.subject} logged out",
            extra={"event": "logout", "user_id": access_claims.subject},
        )
        return LOGOUT_MESSAGE

    async def _verify(self, token: str | None, expected: type[TokenClaims]) -> TokenClaims:
        if not token:
            raise UnauthorizedError(INVALID_TOKEN)

        try:
            claims = self.codec.verify(token)
        except InvalidTokenError as e:
            # Covers TokenExpiredError; the reason only reaches the debug log
            logger.debug(f"Rejected {expected.kind.value} token: {e}")
            raise UnauthorizedError(INVALID_TOKEN) from e

        if not isinstance(claims, expected):
            logger.debug(f"Rejected {claims.kind.value} token where {expected.kind.value} was required")
            raise UnauthorizedError(INVALID_TOKEN)

        if await self.revocations.is_revoked(claims.token_id):
            logger.warning(
                f"Revoked {claims.kind.value} token presented for user {claims.subject}",
                extra={"event": "revoked_token_reuse", "user_id": claims.subject},
            )
            raise UnauthorizedError(INVALID_TOKEN)

        return claims

    async def _revoke_remaining(self, claims: TokenClaims) -> None:
        await self.revocations.revoke(claims.token_id, claims.remaining_seconds(self._clock()))


@dataclass(frozen=True)
class _ClaimsIdentity:
    id: int
    email: str

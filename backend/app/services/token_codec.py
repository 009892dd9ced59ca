"""JWT encoding and verification for access and refresh tokens.

The codec is a pure transform over one signing secret: it never touches
the database and knows nothing about revocation. Claims come back as one of
two closed classes, ``AccessClaims`` or ``RefreshClaims``, so callers check
the kind with ``isinstance`` rather than comparing strings.
"""

import math
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, ClassVar

import jwt
from jwt.exceptions import PyJWTError

from app.services.errors import ConfigError


class TokenKind(str, Enum):
    """Value of the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


class InvalidTokenError(Exception):
    """Token is malformed, tampered with, or carries unusable claims."""


class TokenExpiredError(InvalidTokenError):
    """Token signature is fine but ``exp`` has passed."""


@dataclass(frozen=True)
class TokenClaims:
    """Claims shared by every token kind."""

    kind: ClassVar[TokenKind]

    subject: int
    email: str
    token_id: str
    issued_at: datetime
    expires_at: datetime

    def remaining_seconds(self, now: datetime) -> int:
        """Seconds until expiry, rounded up and never negative.

        Rounding up keeps a revocation record alive at least as long as the
        token it covers.
        """
        return max(0, math.ceil((self.expires_at - now).total_seconds()))

    def to_payload(self) -> dict[str, Any]:
        return {
            "sub": str(self.subject),
            "email": self.email,
            "jti": self.token_id,
            "type": self.kind.value,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }


@dataclass(frozen=True)
class AccessClaims(TokenClaims):
    kind: ClassVar[TokenKind] = TokenKind.ACCESS


@dataclass(frozen=True)
class RefreshClaims(TokenClaims):
    kind: ClassVar[TokenKind] = TokenKind.REFRESH


_CLAIMS_BY_KIND: dict[str, type[TokenClaims]] = {
    TokenKind.ACCESS.value: AccessClaims,
    TokenKind.REFRESH.value: RefreshClaims,
}


@dataclass(frozen=True)
class IssuedToken:
    """An encoded token together with the claims it carries."""

    token: str
    claims: TokenClaims


def new_token_id() -> str:
    """Random, collision-resistant token identifier."""
    return uuid.uuid4().hex


class TokenCodec:
    """Signs and verifies tokens with a single HMAC secret."""

    def __init__(self, secret: str | None, algorithm: str = "HS256"):
        if not secret:
            raise ConfigError("JWT signing secret is not configured (set JWT_SECRET_KEY)")
        self._secret = secret
        self._algorithm = algorithm

    def issue(
        self,
        claims_cls: type[TokenClaims],
        *,
        subject: int,
        email: str,
        ttl: timedelta,
        now: datetime | None = None,
    ) -> IssuedToken:
        """Mint a token of the given kind with a fresh identifier."""
        # JWT timestamps are whole seconds; truncate so claims match the wire
        issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
        claims = claims_cls(
            subject=subject,
            email=email,
            token_id=new_token_id(),
            issued_at=issued_at,
            expires_at=issued_at + ttl,
        )
        token = jwt.encode(claims.to_payload(), self._secret, algorithm=self._algorithm)
        # PyJWT 2.x returns str; older type stubs may declare bytes
        return IssuedToken(token=str(token), claims=claims)

    def verify(self, token: str) -> AccessClaims | RefreshClaims:
        """Check signature and expiry and return the typed claims."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        claims_cls = _CLAIMS_BY_KIND.get(str(payload.get("type")))
        if claims_cls is None:
            raise InvalidTokenError("Unknown token type")

        try:
            subject = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token subject") from e

        token_id = payload["jti"]
        if not isinstance(token_id, str) or not token_id:
            raise InvalidTokenError("Invalid token identifier")

        return claims_cls(  # type: ignore[return-value]
            subject=subject,
            email=str(payload.get("email", "")),
            token_id=token_id,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )

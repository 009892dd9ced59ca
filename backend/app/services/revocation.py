"""Database-backed revocation store for token identifiers.

Records are keyed by the SHA-256 digest of the token id so a leaked table
dump cannot be matched back to live tokens. A record only matters until the
revoked token would have expired on its own; after that it is stale and
gets removed either lazily on read or by the periodic sweep.
"""

import hashlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


def hash_token_id(token_id: str) -> str:
    """SHA-256 hex digest of a token identifier."""
    return hashlib.sha256(token_id.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class RevocationStore:
    """Revocation records in the ``revoked_tokens`` table."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = _utcnow):
        self.db = db
        self._clock = clock

    async def revoke(self, token_id: str | None, ttl_seconds: int) -> None:
        """Mark a token id revoked for ``ttl_seconds``.

        Nothing is recorded for an empty id or a non-positive TTL: such a
        token is either unidentifiable or already expired. Revoking an id
        twice keeps the later expiry.
        """
        if not token_id or ttl_seconds <= 0:
            return

        token_id_hash = hash_token_id(token_id)
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)

        existing = await self.db.get(RevokedToken, token_id_hash)
        if existing is None:
            self.db.add(RevokedToken(token_id_hash=token_id_hash, expires_at=expires_at))
        elif _as_utc(existing.expires_at) < expires_at:
            existing.expires_at = expires_at
        await self.db.flush()

    async def is_revoked(self, token_id: str | None) -> bool:
        """Check whether a token id is currently revoked.

        A missing id counts as revoked. A stale record is deleted and
        reported as not revoked.
        """
        if not token_id:
            return True

        record = await self.db.get(RevokedToken, hash_token_id(token_id))
        if record is None:
            return False

        if _as_utc(record.expires_at) <= self._clock():
            await self.db.delete(record)
            await self.db.flush()
            return False

        return True

    async def purge_expired(self) -> int:
        """Delete every stale record. Returns the number removed."""
        result: CursorResult[Any] = await self.db.execute(  # type: ignore[assignment]
            delete(RevokedToken)
            .where(RevokedToken.expires_at <= self._clock())
            .execution_options(synchronize_session=False)
        )
        removed = result.rowcount or 0
        if removed:
            logger.debug(f"Purged {removed} expired revocation records")
        return removed

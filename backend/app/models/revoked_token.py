"""Revoked JWT identifiers, persisted so revocation survives restarts."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class RevokedToken(Base):
    """A revoked token, identified by the SHA-256 hex digest of its JTI.

    The raw JTI is never stored. ``expires_at`` is the revoked token's own
    expiry: past that instant the row is meaningless and may be purged.
    The primary key makes a concurrent duplicate insert fail at flush.
    """

    __tablename__ = "revoked_tokens"

    token_id_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<RevokedToken {self.token_id_hash[:12]}... until {self.expires_at}>"

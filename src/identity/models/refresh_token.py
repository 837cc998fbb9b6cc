from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from ..utils.time import now_db_utc


class RefreshToken(Base):
    """Ledger entry for one opaque refresh token.

    Only the SHA-256 digest of the token is stored. A record moves from active
    to revoked (explicitly) or expired (by time); neither state is left again.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    token_hash: Mapped[str] = mapped_column(
        String(128),
        unique=True,
        index=True,
        nullable=False,
        comment="Hex SHA-256 digest of the opaque token",
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_db_utc, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    replaced_by_token_hash: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
        comment="Digest of the successor issued by rotation",
    )

    def is_expired_at(self, moment: datetime) -> bool:
        return moment >= self.expires_at

    @property
    def is_expired(self) -> bool:
        return self.is_expired_at(now_db_utc())

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def is_active(self) -> bool:
        return not self.is_revoked and not self.is_expired


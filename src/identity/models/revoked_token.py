from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from ..utils.time import now_db_utc


class RevokedToken(Base):
    """Denylist entry for a self-describing (JWT) refresh token."""

    __tablename__ = "revoked_tokens"

    id: Mapped[int] = mapped_column(primary_key=True)
    jti: Mapped[str] = mapped_column(
        String(128),
        unique=True,
        index=True,
        nullable=False,
        comment="JWT ID of the revoked token",
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        index=True,
        comment="Expiry of the revoked token; the entry is useless after it",
    )
    revoked_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=now_db_utc,
        nullable=False,
    )

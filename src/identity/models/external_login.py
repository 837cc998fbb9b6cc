from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from ..utils.time import now_db_utc

if TYPE_CHECKING:
    from .user import User


class ExternalLogin(Base):
    """Link between a local user and an external identity provider account."""

    __tablename__ = "external_logins"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    provider_key: Mapped[str] = mapped_column(String(256), nullable=False, comment="Subject id at the provider")
    display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_db_utc, nullable=False)

    user: Mapped["User"] = relationship(back_populates="external_logins")

    __table_args__ = (
        UniqueConstraint("provider", "provider_key", name="uq_external_logins_provider_key"),
    )

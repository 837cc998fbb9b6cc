from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from ..utils.time import now_db_utc

if TYPE_CHECKING:
    from .external_login import ExternalLogin
    from .user_role import UserRole


class User(Base):
    """Account known to the credential store."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(
        String(256),
        unique=True,
        index=True,
        nullable=False,
        comment="Login email, stored normalized (lower-case)",
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(256),
        nullable=True,
        comment="argon2 hash; NULL for accounts provisioned through an external login",
    )
    email_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    banned_until: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="Account is banned while this is in the future",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_db_utc, nullable=False)

    roles: Mapped[list["UserRole"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    external_logins: Mapped[list["ExternalLogin"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def is_banned_at(self, moment: datetime) -> bool:
        return self.banned_until is not None and self.banned_until > moment

# src/heartline/models/account.py
"""SQLAlchemy model for authenticated user accounts."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from heartline.db.session import Base
from heartline.db.time import utcnow

if TYPE_CHECKING:
    from .profile import Profile


def new_account_id() -> str:
    """Return a fresh 32-character hex identifier."""
    return uuid.uuid4().hex


class Account(Base):
    """End-user identity with credentials and public profile fields."""

    __tablename__ = "account"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_account_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    gender: Mapped[str] = mapped_column(String(32), nullable=False)
    birthday: Mapped[date] = mapped_column(Date, nullable=False)
    # Derived from birthday whenever it is set.
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    profile: Mapped[Profile | None] = relationship(
        "Profile",
        back_populates="owner",
        cascade="all, delete-orphan",
        uselist=False,
    )

    def public_fields(self) -> dict[str, object]:
        """Return the fields other accounts are allowed to see."""
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "bio": self.bio or "",
            "photo_url": self.photo_url,
        }

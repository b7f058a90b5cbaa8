# src/heartline/models/profile.py
"""Matching profiles and their swipe-history sets."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from heartline.db.session import Base
from heartline.db.time import utcnow

if TYPE_CHECKING:
    from .account import Account

EDGE_LIKED = "liked"
EDGE_PASSED = "passed"
EDGE_MATCHED = "matched"
EDGE_KINDS = (EDGE_LIKED, EDGE_PASSED, EDGE_MATCHED)


class Profile(Base):
    """Matching-specific record attached 1:1 to an account."""

    __tablename__ = "profile"

    owner_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    interests: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    owner: Mapped[Account] = relationship("Account", back_populates="profile")
    edges: Mapped[list[ProfileEdge]] = relationship(
        "ProfileEdge",
        back_populates="profile",
        cascade="all, delete-orphan",
    )

    def _targets(self, kind: str) -> frozenset[str]:
        return frozenset(edge.target_id for edge in self.edges if edge.kind == kind)

    @property
    def liked_profiles(self) -> frozenset[str]:
        """Accounts this profile has liked."""
        return self._targets(EDGE_LIKED)

    @property
    def passed_profiles(self) -> frozenset[str]:
        """Accounts this profile has passed on."""
        return self._targets(EDGE_PASSED)

    @property
    def matches(self) -> frozenset[str]:
        """Accounts currently matched with this profile."""
        return self._targets(EDGE_MATCHED)


class ProfileEdge(Base):
    """Membership of ``target_id`` in one of a profile's identity sets.

    The composite primary key makes each (owner, kind) collection a true set.
    """

    __tablename__ = "profile_edge"
    __table_args__ = (
        CheckConstraint("owner_id <> target_id", name="ck_profile_edge_not_self"),
        CheckConstraint("kind IN ('liked', 'passed', 'matched')", name="ck_profile_edge_kind"),
        Index("ix_profile_edge_target", "target_id"),
    )

    owner_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("profile.owner_id", ondelete="CASCADE"),
        primary_key=True,
    )
    kind: Mapped[str] = mapped_column(String(16), primary_key=True)
    # Not a foreign key: swipes on unknown identities are recorded as-is.
    target_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    profile: Mapped[Profile] = relationship("Profile", back_populates="edges")

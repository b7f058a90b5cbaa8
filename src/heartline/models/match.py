# src/heartline/models/match.py
"""Models recording mutual interest between two accounts."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from heartline.db.session import Base
from heartline.db.time import utcnow


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """Return the pair ordered so the smaller identity comes first."""
    if user_a <= user_b:
        return user_a, user_b
    return user_b, user_a


class Match(Base):
    """Mutual like between two accounts, stored once per unordered pair.

    Unmatching clears ``active`` instead of deleting the row.
    """

    __tablename__ = "account_match"
    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_match_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_match_canonical_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user1_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user2_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    matched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def counterpart_of(self, user_id: str) -> str:
        """Return the other participant of the match."""
        return self.user2_id if user_id == self.user1_id else self.user1_id

# src/heartline/models/message.py
"""Models describing chat messages between matched accounts."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from heartline.db.session import Base
from heartline.db.time import utcnow


class Message(Base):
    """Chat message keyed by the derived conversation id.

    Append-only except for the read flag.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_conversation_created", "conversation_id", "created_at"),
        Index("ix_message_unread", "conversation_id", "receiver_id", "is_read"),
    )

    # Autoincrement id breaks ties between messages sharing a timestamp.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[str] = mapped_column(String(65), nullable=False)

    sender_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("account.id", ondelete="CASCADE"), nullable=False
    )
    receiver_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("account.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

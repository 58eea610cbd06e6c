from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, Boolean, Index
from sqlalchemy.orm import relationship
from lynix.database.connection import Base
from lynix.utils.timestamps import utcnow


class DirectMessage(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    sender = relationship("User", foreign_keys=[sender_id])

    # Alerts scan unread rows per recipient
    __table_args__ = (
        Index('idx_messages_recipient_unread', 'recipient_id', 'is_read'),
    )

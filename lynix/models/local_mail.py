from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, Boolean
from sqlalchemy.orm import relationship
from lynix.database.connection import Base
from lynix.utils.timestamps import utcnow


class LocalMail(Base):
    __tablename__ = "localmails"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_username = Column(String(255), nullable=False, index=True)  # Local part of the address
    subject = Column(Text, nullable=False)
    body = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    sender = relationship("User")

from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from lynix.database.connection import Base


class Note(Base):
    __tablename__ = "notes"

    # One notepad per user
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    content = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

from sqlalchemy import Column, String, ForeignKey, Integer, Text, Index
from lynix.database.connection import Base


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index('idx_contacts_user_name', 'user_id', 'name'),
    )

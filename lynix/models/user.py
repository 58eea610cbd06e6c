import enum
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from lynix.database.connection import Base
from lynix.utils.timestamps import utcnow


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    STANDARD = "standard"
    TRIAL = "trial"
    GUEST = "guest"


class User(Base):
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)  # Lower-cased username
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.STANDARD.value, index=True)
    plan = Column(JSON, nullable=True)  # {"name", "cost", "details"}
    email = Column(String(255), nullable=True)
    sip = Column(String(255), nullable=True)
    billing = Column(JSON, nullable=True)  # {"status", "owes"}
    chat_enabled = Column(Boolean, default=False, nullable=False)
    ai_enabled = Column(Boolean, default=False, nullable=False)
    localmail_enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

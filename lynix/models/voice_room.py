from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, LargeBinary, Index
from sqlalchemy.orm import relationship
from lynix.database.connection import Base
from lynix.utils.timestamps import utcnow


class VoiceRoom(Base):
    __tablename__ = "voice_servers"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)


class VoiceRoomParticipant(Base):
    __tablename__ = "voice_server_participants"

    room_id = Column(String(255), ForeignKey("voice_servers.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    user = relationship("User")


class VoiceMessage(Base):
    __tablename__ = "voice_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(String(255), ForeignKey("voice_servers.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    audio_data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    sender = relationship("User")

    __table_args__ = (
        Index('idx_voice_messages_room_created', 'room_id', 'created_at'),
    )

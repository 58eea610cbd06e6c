import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Index
from sqlalchemy.orm import relationship
from lynix.database.connection import Base
from lynix.utils.timestamps import utcnow


class CallStatus(str, enum.Enum):
    RINGING = "ringing"
    ACTIVE = "active"
    DECLINED = "declined"
    ENDED = "ended"


# Legal forward moves; declined and ended are terminal
CALL_TRANSITIONS = {
    CallStatus.RINGING: frozenset({CallStatus.ACTIVE, CallStatus.DECLINED}),
    CallStatus.ACTIVE: frozenset({CallStatus.ENDED}),
    CallStatus.DECLINED: frozenset(),
    CallStatus.ENDED: frozenset(),
}

TERMINAL_CALL_STATUSES = frozenset(
    status for status, targets in CALL_TRANSITIONS.items() if not targets
)


def can_transition(current: CallStatus, target: CallStatus) -> bool:
    return target in CALL_TRANSITIONS[current]


class Call(Base):
    __tablename__ = "calls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    caller_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    callee_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    status = Column(String(20), nullable=False, default=CallStatus.RINGING.value, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    answered_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)

    caller = relationship("User", foreign_keys=[caller_id])
    callee = relationship("User", foreign_keys=[callee_id])

    __table_args__ = (
        Index('idx_calls_caller_status', 'caller_id', 'status'),
        Index('idx_calls_callee_status', 'callee_id', 'status'),
    )

"""
Call Service - VoIP call signaling between two users

Calls move through a small state machine (see lynix.models.call.CALL_TRANSITIONS).
Both parties learn about changes by polling get_call_status or through the
call.updated push event published after every write.
"""
import logging
from typing import Optional, Dict
from sqlalchemy import select, or_, and_, desc
from sqlalchemy.orm import selectinload
from lynix.database.connection import AsyncSessionLocal
from lynix.models.call import (
    Call,
    CallStatus,
    TERMINAL_CALL_STATUSES,
    can_transition,
)
from lynix.models.user import User
from lynix.services.events.hub import event_hub, CALL_UPDATED
from lynix.services.exceptions import (
    InvalidCallTransitionError,
    NotFoundError,
    ValidationFailedError,
)
from lynix.utils.timestamps import to_iso, utcnow

logger = logging.getLogger(__name__)


def _call_to_dict(call: Call) -> Dict:
    return {
        "id": call.id,
        "caller_id": call.caller_id,
        "callee_id": call.callee_id,
        "caller_username": call.caller.username if call.caller else None,
        "callee_username": call.callee.username if call.callee else None,
        "status": call.status,
        "created_at": to_iso(call.created_at),
        "answered_at": to_iso(call.answered_at),
        "ended_at": to_iso(call.ended_at),
    }


def _with_parties(stmt):
    return stmt.options(selectinload(Call.caller), selectinload(Call.callee))


def _parse_status(raw: str) -> CallStatus:
    try:
        return CallStatus(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in CallStatus)
        raise ValidationFailedError(f"Unknown call status '{raw}'. Expected one of: {allowed}")


async def initiate_call(caller_id: str, callee_id: str) -> Dict:
    """
    Start a call in the ringing state.

    No check is made for an in-flight call of either party, so two users
    dialing each other at the same moment produce two ringing rows.
    """
    if caller_id == callee_id:
        raise ValidationFailedError("You cannot call yourself")

    async with AsyncSessionLocal() as session:
        callee = await session.get(User, callee_id)
        if not callee:
            raise NotFoundError(f"User '{callee_id}' not found")

        new_call = Call(
            caller_id=caller_id,
            callee_id=callee_id,
            status=CallStatus.RINGING.value,
        )
        session.add(new_call)
        await session.commit()

        stmt = _with_parties(select(Call).where(Call.id == new_call.id))
        call = (await session.execute(stmt)).scalar_one()
        call_dict = _call_to_dict(call)

    logger.info(f"📞 Call {call_dict['id']} ringing: {caller_id} -> {callee_id}")
    event_hub.publish_many([caller_id, callee_id], CALL_UPDATED, call_dict)
    return call_dict


async def get_call_status(user_id: str) -> Optional[Dict]:
    """Most recent non-terminal call where the user is caller or callee"""
    async with AsyncSessionLocal() as session:
        stmt = _with_parties(
            select(Call)
            .where(
                and_(
                    or_(Call.caller_id == user_id, Call.callee_id == user_id),
                    Call.status.not_in([s.value for s in TERMINAL_CALL_STATUSES])
                )
            )
            .order_by(desc(Call.created_at), desc(Call.id))
            .limit(1)
        )
        call = (await session.execute(stmt)).scalar_one_or_none()
        return _call_to_dict(call) if call else None


async def update_call_status(call_id: int, user_id: str, status: str) -> Dict:
    """
    Move a call to a new status.

    Only the two parties may change a call. answered_at is stamped on entry to
    active and ended_at on entry to ended; other transitions leave both alone.
    """
    target = _parse_status(status)

    async with AsyncSessionLocal() as session:
        stmt = _with_parties(
            select(Call).where(Call.id == call_id).with_for_update()
        )
        call = (await session.execute(stmt)).scalar_one_or_none()

        if not call or user_id not in (call.caller_id, call.callee_id):
            raise NotFoundError("Call not found")

        current = CallStatus(call.status)
        if not can_transition(current, target):
            raise InvalidCallTransitionError(current.value, target.value)

        call.status = target.value
        if target == CallStatus.ACTIVE:
            call.answered_at = utcnow()
        elif target == CallStatus.ENDED:
            call.ended_at = utcnow()

        await session.commit()
        call_dict = _call_to_dict(call)

    logger.info(f"Call {call_id}: {current.value} -> {target.value} (by {user_id})")
    event_hub.publish_many([call_dict["caller_id"], call_dict["callee_id"]], CALL_UPDATED, call_dict)
    return call_dict

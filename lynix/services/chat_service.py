"""
Chat Service - Direct messages between users and the unread-alert digest
"""
import logging
from typing import List, Dict
from sqlalchemy import select, update, or_, and_, desc
from sqlalchemy.orm import selectinload
from lynix.database.connection import AsyncSessionLocal
from lynix.models.message import DirectMessage
from lynix.models.user import User
from lynix.services.events.hub import event_hub, CHAT_MESSAGE
from lynix.services.exceptions import NotFoundError, ValidationFailedError
from lynix.utils.timestamps import to_iso

logger = logging.getLogger(__name__)

ALERT_SNIPPET_LENGTH = 50


def _message_to_dict(message: DirectMessage) -> Dict:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "recipient_id": message.recipient_id,
        "text": message.text,
        "is_read": bool(message.is_read),
        "timestamp": to_iso(message.timestamp),
    }


async def send_message(sender_id: str, recipient_id: str, text: str) -> Dict:
    """Store a direct message and notify both parties"""
    if not text or not text.strip():
        raise ValidationFailedError("Message text is required")

    async with AsyncSessionLocal() as session:
        recipient = await session.get(User, recipient_id)
        if not recipient:
            raise NotFoundError(f"User '{recipient_id}' not found")

        message = DirectMessage(
            sender_id=sender_id,
            recipient_id=recipient_id,
            text=text,
            is_read=False,
        )
        session.add(message)
        await session.commit()
        await session.refresh(message)
        message_dict = _message_to_dict(message)

    event_hub.publish_many([sender_id, recipient_id], CHAT_MESSAGE, message_dict)
    return message_dict


async def get_conversation(viewer_id: str, other_id: str) -> List[Dict]:
    """
    Return every message between viewer and other, oldest first.

    Reading the conversation marks the other party's unread messages to the
    viewer as read. The select and the update share one transaction, and the
    rows are returned as they were before the update.
    """
    async with AsyncSessionLocal() as session:
        async with session.begin():
            stmt = (
                select(DirectMessage)
                .where(
                    or_(
                        and_(DirectMessage.sender_id == viewer_id, DirectMessage.recipient_id == other_id),
                        and_(DirectMessage.sender_id == other_id, DirectMessage.recipient_id == viewer_id),
                    )
                )
                .order_by(DirectMessage.timestamp.asc(), DirectMessage.id.asc())
            )
            result = await session.execute(stmt)
            messages = [_message_to_dict(m) for m in result.scalars().all()]

            mark_read = (
                update(DirectMessage)
                .where(
                    DirectMessage.recipient_id == viewer_id,
                    DirectMessage.sender_id == other_id,
                    DirectMessage.is_read.is_(False)
                )
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            marked = await session.execute(mark_read)

    if marked.rowcount:
        logger.debug(f"Marked {marked.rowcount} message(s) from {other_id} to {viewer_id} as read")
    return messages


async def get_alerts(user_id: str) -> List[Dict]:
    """Unread messages addressed to the user, newest first. Never marks anything read."""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(DirectMessage)
            .options(selectinload(DirectMessage.sender))
            .where(
                DirectMessage.recipient_id == user_id,
                DirectMessage.is_read.is_(False)
            )
            .order_by(desc(DirectMessage.timestamp), desc(DirectMessage.id))
        )
        result = await session.execute(stmt)

        return [
            {
                "sender_id": message.sender_id,
                "sender_username": message.sender.username if message.sender else message.sender_id,
                "message_snippet": message.text[:ALERT_SNIPPET_LENGTH],
            }
            for message in result.scalars().all()
        ]

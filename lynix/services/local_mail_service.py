"""
Local Mail Service - Internal mailbox addressed by username
"""
import logging
from typing import List, Dict
from sqlalchemy import select, func, desc
from sqlalchemy.orm import selectinload
from lynix.database.connection import AsyncSessionLocal
from lynix.models.local_mail import LocalMail
from lynix.models.user import User
from lynix.services.exceptions import NotFoundError, ValidationFailedError
from lynix.utils.timestamps import to_iso

logger = logging.getLogger(__name__)

INBOX = "inbox"
SENT = "sent"


def recipient_local_part(address: str) -> str:
    """'bob@lynix.local' -> 'bob'"""
    return address.strip().split("@")[0]


def _mail_to_dict(mail: LocalMail) -> Dict:
    return {
        "id": mail.id,
        "sender_id": mail.sender_id,
        "sender_username": mail.sender.username if mail.sender else mail.sender_id,
        "recipient_username": mail.recipient_username,
        "subject": mail.subject,
        "body": mail.body,
        "timestamp": to_iso(mail.timestamp),
        "is_read": bool(mail.is_read),
    }


async def _username_of(session, user_id: str) -> str:
    user = await session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User '{user_id}' not found")
    return user.username


async def get_mailbox(user_id: str, view: str = INBOX) -> List[Dict]:
    """Inbox (addressed to the user's username) or sent mail, newest first"""
    async with AsyncSessionLocal() as session:
        stmt = select(LocalMail).options(selectinload(LocalMail.sender))

        if view == SENT:
            stmt = stmt.where(LocalMail.sender_id == user_id)
        else:
            username = await _username_of(session, user_id)
            stmt = stmt.where(func.lower(LocalMail.recipient_username) == username.lower())

        stmt = stmt.order_by(desc(LocalMail.timestamp), desc(LocalMail.id))
        result = await session.execute(stmt)
        return [_mail_to_dict(m) for m in result.scalars().all()]


async def send_mail(sender_id: str, recipients: List[str], subject: str, body: str) -> int:
    """Store one row per recipient. Returns the number of rows written."""
    local_parts = [recipient_local_part(r) for r in (recipients or []) if r and r.strip()]
    local_parts = [p for p in local_parts if p]
    if not local_parts or not subject or not body:
        raise ValidationFailedError("All fields required.")

    async with AsyncSessionLocal() as session:
        session.add_all([
            LocalMail(
                sender_id=sender_id,
                recipient_username=recipient,
                subject=subject,
                body=body,
            )
            for recipient in local_parts
        ])
        await session.commit()

    logger.info(f"✉️ {sender_id} sent mail to {len(local_parts)} recipient(s)")
    return len(local_parts)


async def mark_mail_read(mail_id: int, user_id: str) -> bool:
    """Mark an inbox mail read; only its recipient may do so"""
    async with AsyncSessionLocal() as session:
        username = await _username_of(session, user_id)
        stmt = select(LocalMail).where(
            LocalMail.id == mail_id,
            func.lower(LocalMail.recipient_username) == username.lower()
        )
        mail = (await session.execute(stmt)).scalar_one_or_none()
        if not mail:
            return False

        mail.is_read = True
        await session.commit()
        return True

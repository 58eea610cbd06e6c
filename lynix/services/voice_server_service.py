"""
Voice Server Service - Voice rooms, membership and the audio message log

Audio clips are opaque blobs. They travel as base64 and are stored as bytes.
Clients fetch everything after their last-seen created_at mark; members who hold
an event stream also get a voice.message push for each new clip.
"""
import base64
import binascii
import logging
from typing import List, Dict
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from lynix.database.connection import AsyncSessionLocal
from lynix.models.voice_room import VoiceRoom, VoiceRoomParticipant, VoiceMessage
from lynix.services.events.hub import event_hub, VOICE_MESSAGE
from lynix.services.exceptions import NotFoundError, ValidationFailedError
from lynix.utils.timestamps import parse_since, to_iso

logger = logging.getLogger(__name__)

DEFAULT_ROOMS = [
    ("general", "General"),
    ("tech", "Tech"),
    ("support", "Support"),
]

JOIN = "join"
LEAVE = "leave"


def decode_audio(audio_data: str) -> bytes:
    """Decode a base64 clip, accepting data-URL prefixed input"""
    if not audio_data:
        raise ValidationFailedError("audio_data is required")

    if audio_data.startswith("data:") and "," in audio_data:
        audio_data = audio_data.split(",", 1)[1]

    try:
        decoded = base64.b64decode(audio_data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationFailedError("audio_data must be valid base64")

    if not decoded:
        raise ValidationFailedError("audio_data is empty")
    return decoded


def _voice_message_to_dict(message: VoiceMessage) -> Dict:
    return {
        "id": message.id,
        "room_id": message.room_id,
        "sender_id": message.sender_id,
        "sender_username": message.sender.username if message.sender else message.sender_id,
        "audio_data": base64.b64encode(message.audio_data).decode("ascii"),
        "created_at": to_iso(message.created_at),
    }


async def _require_room(session, room_id: str) -> VoiceRoom:
    room = await session.get(VoiceRoom, room_id)
    if not room:
        raise NotFoundError(f"Room '{room_id}' not found")
    return room


async def ensure_default_rooms() -> int:
    """Seed the static rooms once, when the room table is empty"""
    async with AsyncSessionLocal() as session:
        count = (await session.execute(select(func.count(VoiceRoom.id)))).scalar_one()
        if count:
            return 0

        session.add_all([VoiceRoom(id=room_id, name=name) for room_id, name in DEFAULT_ROOMS])
        await session.commit()
        logger.info(f"Seeded {len(DEFAULT_ROOMS)} voice rooms")
        return len(DEFAULT_ROOMS)


async def list_rooms() -> List[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(VoiceRoom).order_by(VoiceRoom.name))
        return [{"id": room.id, "name": room.name} for room in result.scalars().all()]


async def list_participants(room_id: str) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        await _require_room(session, room_id)
        stmt = (
            select(VoiceRoomParticipant)
            .options(selectinload(VoiceRoomParticipant.user))
            .where(VoiceRoomParticipant.room_id == room_id)
        )
        result = await session.execute(stmt)
        return [
            {
                "user_id": participant.user_id,
                "username": participant.user.username if participant.user else participant.user_id,
            }
            for participant in result.scalars().all()
        ]


async def set_membership(room_id: str, user_id: str, action: str) -> bool:
    """
    Join (insert if absent) or leave (delete) a room.

    Returns True when the membership row changed.
    """
    if action not in (JOIN, LEAVE):
        raise ValidationFailedError(f"Unknown action '{action}'. Expected 'join' or 'leave'")

    async with AsyncSessionLocal() as session:
        await _require_room(session, room_id)

        if action == LEAVE:
            result = await session.execute(
                delete(VoiceRoomParticipant).where(
                    VoiceRoomParticipant.room_id == room_id,
                    VoiceRoomParticipant.user_id == user_id
                )
            )
            await session.commit()
            return bool(result.rowcount)

        existing = await session.get(VoiceRoomParticipant, (room_id, user_id))
        if existing:
            return False

        session.add(VoiceRoomParticipant(room_id=room_id, user_id=user_id))
        try:
            await session.commit()
        except IntegrityError:
            # A concurrent join won the race; membership already exists
            await session.rollback()
            return False

    logger.info(f"🎙️ {user_id} joined room {room_id}")
    return True


async def post_voice_message(room_id: str, sender_id: str, audio_data: str) -> Dict:
    """Append a clip to the room log and push it to current members"""
    audio_bytes = decode_audio(audio_data)

    async with AsyncSessionLocal() as session:
        await _require_room(session, room_id)

        message = VoiceMessage(room_id=room_id, sender_id=sender_id, audio_data=audio_bytes)
        session.add(message)
        await session.commit()

        stmt = (
            select(VoiceMessage)
            .options(selectinload(VoiceMessage.sender))
            .where(VoiceMessage.id == message.id)
        )
        stored = (await session.execute(stmt)).scalar_one()
        message_dict = _voice_message_to_dict(stored)

        members = await session.execute(
            select(VoiceRoomParticipant.user_id).where(VoiceRoomParticipant.room_id == room_id)
        )
        member_ids = [row[0] for row in members.all()]

    logger.debug(f"Voice message {message_dict['id']} in {room_id} ({len(audio_bytes)} bytes)")
    event_hub.publish_many(member_ids, VOICE_MESSAGE, message_dict)
    return message_dict


async def get_messages_since(room_id: str, since: str = None) -> List[Dict]:
    """Every clip in the room created strictly after `since`, oldest first"""
    try:
        threshold = parse_since(since)
    except ValueError as e:
        raise ValidationFailedError(str(e))

    async with AsyncSessionLocal() as session:
        await _require_room(session, room_id)
        stmt = (
            select(VoiceMessage)
            .options(selectinload(VoiceMessage.sender))
            .where(
                VoiceMessage.room_id == room_id,
                VoiceMessage.created_at > threshold
            )
            .order_by(VoiceMessage.created_at.asc(), VoiceMessage.id.asc())
        )
        result = await session.execute(stmt)
        return [_voice_message_to_dict(m) for m in result.scalars().all()]

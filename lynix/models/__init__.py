# Database models
from lynix.models.user import User, UserRole
from lynix.models.message import DirectMessage
from lynix.models.call import Call, CallStatus
from lynix.models.voice_room import VoiceRoom, VoiceRoomParticipant, VoiceMessage
from lynix.models.note import Note
from lynix.models.contact import Contact
from lynix.models.local_mail import LocalMail

__all__ = [
    "User",
    "UserRole",
    "DirectMessage",
    "Call",
    "CallStatus",
    "VoiceRoom",
    "VoiceRoomParticipant",
    "VoiceMessage",
    "Note",
    "Contact",
    "LocalMail",
]

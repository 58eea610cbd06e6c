from lynix.database.connection import AsyncSessionLocal
from lynix.models.note import Note
from lynix.utils.timestamps import utcnow


async def get_note(user_id: str) -> str:
    """Get the user's notepad content ('' when nothing saved yet)"""
    async with AsyncSessionLocal() as session:
        note = await session.get(Note, user_id)
        return (note.content or "") if note else ""


async def save_note(user_id: str, content: str) -> None:
    """Insert or replace the user's notepad content"""
    async with AsyncSessionLocal() as session:
        note = await session.get(Note, user_id)
        if note:
            note.content = content
            note.updated_at = utcnow()
        else:
            session.add(Note(user_id=user_id, content=content, updated_at=utcnow()))
        await session.commit()

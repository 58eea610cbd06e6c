"""
Contact Service - Per-user address book
"""
from typing import Optional, List, Dict
from sqlalchemy import select
from lynix.database.connection import AsyncSessionLocal
from lynix.models.contact import Contact
from lynix.services.exceptions import ValidationFailedError


def _contact_to_dict(contact: Contact) -> Dict:
    return {
        "id": contact.id,
        "user_id": contact.user_id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "notes": contact.notes,
    }


def _require_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        raise ValidationFailedError("Name is required.")
    return name.strip()


async def get_contacts(user_id: str) -> List[Dict]:
    """Get all contacts owned by the user, ordered by name"""
    async with AsyncSessionLocal() as session:
        stmt = select(Contact).where(Contact.user_id == user_id).order_by(Contact.name.asc(), Contact.id.asc())
        result = await session.execute(stmt)
        return [_contact_to_dict(c) for c in result.scalars().all()]


async def create_contact(
    user_id: str,
    name: str,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    notes: Optional[str] = None
) -> Dict:
    """Create a new contact"""
    contact = Contact(
        user_id=user_id,
        name=_require_name(name),
        email=email.lower() if email else None,
        phone=phone,
        notes=notes
    )

    async with AsyncSessionLocal() as session:
        session.add(contact)
        await session.commit()
        await session.refresh(contact)
        return _contact_to_dict(contact)


async def update_contact(
    contact_id: int,
    user_id: str,
    name: str,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    notes: Optional[str] = None
) -> Optional[Dict]:
    """Replace a contact's fields with ownership validation"""
    name = _require_name(name)

    async with AsyncSessionLocal() as session:
        stmt = select(Contact).where(
            Contact.id == contact_id,
            Contact.user_id == user_id
        )
        result = await session.execute(stmt)
        contact = result.scalar_one_or_none()

        if not contact:
            return None

        contact.name = name
        contact.email = email.lower() if email else None
        contact.phone = phone
        contact.notes = notes

        await session.commit()
        await session.refresh(contact)
        return _contact_to_dict(contact)


async def delete_contact(contact_id: int, user_id: str) -> bool:
    """Delete contact with ownership validation"""
    async with AsyncSessionLocal() as session:
        stmt = select(Contact).where(
            Contact.id == contact_id,
            Contact.user_id == user_id
        )
        result = await session.execute(stmt)
        contact = result.scalar_one_or_none()

        if not contact:
            return False

        await session.delete(contact)
        await session.commit()
        return True

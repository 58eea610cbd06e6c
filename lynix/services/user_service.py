"""
User Service - User directory, credential checks and profile CRUD
"""
import logging
from typing import Optional, List, Dict
from sqlalchemy import select, func, or_
from lynix.database.connection import AsyncSessionLocal
from lynix.models.user import User, UserRole
from lynix.services.exceptions import (
    DuplicateError,
    PermissionDeniedError,
    ValidationFailedError,
)
from lynix.utils.security import verify_password, get_password_hash

logger = logging.getLogger(__name__)

# Only administrators may change these
PRIVILEGED_FIELDS = {"role", "plan", "billing", "chat_enabled", "ai_enabled", "localmail_enabled"}

DEFAULT_PLAN = {"name": "", "cost": "", "details": ""}
DEFAULT_BILLING = {"status": "On Time"}

# Columns an update may never clear
NON_NULLABLE_FIELDS = {"username", "role", "plan", "billing", "chat_enabled", "ai_enabled", "localmail_enabled"}


def _user_to_dict(user: User) -> Dict:
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "plan": user.plan or dict(DEFAULT_PLAN),
        "email": user.email,
        "sip": user.sip,
        "billing": user.billing or dict(DEFAULT_BILLING),
        "chat_enabled": bool(user.chat_enabled),
        "ai_enabled": bool(user.ai_enabled),
        "localmail_enabled": bool(user.localmail_enabled),
    }


async def authenticate_user(username: str, password: str) -> Optional[Dict]:
    """Authenticate by case-insensitive username and return the profile if valid"""
    async with AsyncSessionLocal() as session:
        stmt = select(User).where(func.lower(User.username) == username.lower())
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            return None

        if not verify_password(password, user.password_hash):
            logger.info(f"Rejected login for {user.id}: password mismatch")
            return None

        return _user_to_dict(user)


async def get_user_by_id(user_id: str) -> Optional[Dict]:
    """Get user profile by ID"""
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None
        return _user_to_dict(user)


async def list_users() -> List[Dict]:
    """All users ordered by role, then username (admin view)"""
    async with AsyncSessionLocal() as session:
        stmt = select(User).order_by(User.role, User.username)
        result = await session.execute(stmt)
        return [_user_to_dict(user) for user in result.scalars().all()]


async def list_chat_users() -> List[Dict]:
    """Users that have chat enabled"""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(User.id, User.username)
            .where(User.chat_enabled.is_(True))
            .order_by(User.username.asc())
        )
        result = await session.execute(stmt)
        return [{"id": row.id, "username": row.username} for row in result.all()]


async def list_other_users(user_id: str) -> List[Dict]:
    """Everyone except the given user (phone directory)"""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(User.id, User.username)
            .where(User.id != user_id)
            .order_by(User.username.asc())
        )
        result = await session.execute(stmt)
        return [{"id": row.id, "username": row.username} for row in result.all()]


async def create_user(user_data: Dict, password: str) -> Dict:
    """Create a user; the id is the lower-cased username"""
    username = (user_data.get("username") or "").strip()
    if not username:
        raise ValidationFailedError("Username is required")
    if not password:
        raise ValidationFailedError("Password is required")

    user_id = username.lower()

    async with AsyncSessionLocal() as session:
        stmt = select(User.id).where(
            or_(User.id == user_id, func.lower(User.username) == user_id)
        )
        if (await session.execute(stmt)).first():
            raise DuplicateError(f"User '{username}' already exists")

        new_user = User(
            id=user_id,
            username=username,
            password_hash=get_password_hash(password),
            role=user_data.get("role") or UserRole.STANDARD.value,
            plan=user_data.get("plan") or dict(DEFAULT_PLAN),
            email=user_data.get("email"),
            sip=user_data.get("sip"),
            billing=user_data.get("billing") or dict(DEFAULT_BILLING),
            chat_enabled=bool(user_data.get("chat_enabled")),
            ai_enabled=bool(user_data.get("ai_enabled")),
            localmail_enabled=bool(user_data.get("localmail_enabled")),
        )

        session.add(new_user)
        await session.commit()
        await session.refresh(new_user)

        logger.info(f"Created user {user_id} with role {new_user.role}")
        return _user_to_dict(new_user)


async def update_user(user_id: str, update_data: Dict, acting_user: Dict) -> Optional[Dict]:
    """Update profile fields; non-admins may only edit their own non-privileged fields"""
    is_admin = acting_user["role"] == UserRole.ADMIN.value

    if not is_admin:
        if acting_user["id"] != user_id:
            raise PermissionDeniedError("You may only update your own profile")
        blocked = PRIVILEGED_FIELDS.intersection(update_data)
        if blocked:
            raise PermissionDeniedError(
                f"Only administrators may change: {', '.join(sorted(blocked))}"
            )

    cleared = sorted(field for field in NON_NULLABLE_FIELDS.intersection(update_data) if update_data[field] is None)
    if cleared:
        raise ValidationFailedError(f"Fields cannot be null: {', '.join(cleared)}")

    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None

        if "username" in update_data:
            username = (update_data["username"] or "").strip()
            if not username:
                raise ValidationFailedError("Username cannot be empty")
            stmt = select(User.id).where(
                func.lower(User.username) == username.lower(),
                User.id != user_id
            )
            if (await session.execute(stmt)).first():
                raise DuplicateError(f"User '{username}' already exists")
            user.username = username

        for field in ("email", "sip", "role", "plan", "billing"):
            if field in update_data:
                setattr(user, field, update_data[field])
        for flag in ("chat_enabled", "ai_enabled", "localmail_enabled"):
            if flag in update_data:
                setattr(user, flag, bool(update_data[flag]))

        await session.commit()
        await session.refresh(user)
        return _user_to_dict(user)


async def change_password(user_id: str, password: str) -> bool:
    """Replace a user's password hash"""
    if not password:
        raise ValidationFailedError("Password is required")

    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return False

        user.password_hash = get_password_hash(password)
        await session.commit()
        logger.info(f"Password updated for {user_id}")
        return True


async def delete_user(user_id: str) -> bool:
    """Delete a user"""
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return False

        await session.delete(user)
        await session.commit()
        logger.info(f"Deleted user {user_id}")
        return True


async def ensure_bootstrap_admin(username: Optional[str], password: Optional[str]) -> bool:
    """Create the configured admin on startup if no user with that id exists"""
    if not username or not password:
        return False

    async with AsyncSessionLocal() as session:
        if await session.get(User, username.lower()):
            return False

    await create_user({"username": username, "role": UserRole.ADMIN.value}, password)
    logger.info(f"✅ Bootstrap admin '{username}' created")
    return True

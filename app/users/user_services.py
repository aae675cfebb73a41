# app/users/user_services.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.db import commit_or_conflict, get_or_404
from app.helpers.exceptions import ConflictError, ValidationError
from app.helpers.responses import PageParams
from app.users.security import get_password_hash
from app.users.user_models.schemas import UserCreate, UserUpdate
from app.users.user_models.user_model import User

logger = logging.getLogger(__name__)


async def _username_taken(db: AsyncSession, username: str, exclude_id: Optional[int] = None) -> bool:
    query = select(User.id).where(User.username == username)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def list_users(
    db: AsyncSession, params: PageParams, role: Optional[str] = None
) -> Tuple[List[User], int]:
    query = select(User)
    if role:
        query = query.where(User.role == role)

    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(
        query.order_by(User.created_at.desc(), User.id.desc()).offset(params.offset).limit(params.limit)
    )
    return list(result.scalars().all()), total


async def get_user(db: AsyncSession, user_id: int) -> User:
    return await get_or_404(db, User, user_id, "User")


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    if await _username_taken(db, data.username):
        raise ConflictError("Username already exists")

    user = User(
        username=data.username,
        hashed_password=get_password_hash(data.password),
        role=data.role,
    )
    db.add(user)
    await commit_or_conflict(db, "Username already exists")
    await db.refresh(user)
    logger.info(f"User {user.username} created with role {user.role}")
    return user


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> User:
    user = await get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "username" in changes and await _username_taken(db, changes["username"], exclude_id=user_id):
        raise ConflictError("Username already exists")

    for field, value in changes.items():
        setattr(user, field, value)
    await commit_or_conflict(db, "Username already exists")
    await db.refresh(user)
    return user


async def reset_user_password(db: AsyncSession, user_id: int, new_password: str) -> None:
    user = await get_user(db, user_id)
    user.hashed_password = get_password_hash(new_password)
    await db.commit()
    logger.info(f"Password reset for user {user.username}")


async def deactivate_user(db: AsyncSession, user_id: int, acting_user: User) -> None:
    if user_id == acting_user.id:
        raise ValidationError("Cannot delete your own account")
    user = await get_user(db, user_id)
    user.is_active = False
    await db.commit()
    logger.info(f"User {user.username} deactivated by {acting_user.username}")

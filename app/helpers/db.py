# app/helpers/db.py
from typing import Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import Base
from app.helpers.exceptions import ConflictError, NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(db: AsyncSession, model: Type[ModelT], obj_id: int, label: str) -> ModelT:
    obj = await db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(f"{label} not found")
    return obj


async def commit_or_conflict(db: AsyncSession, message: str) -> None:
    """Commit; a unique violation from a racing writer becomes a ConflictError."""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(message)

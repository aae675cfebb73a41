# app/users/auth_services.py
import logging
from typing import Tuple

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.exceptions import UnauthorizedError, ValidationError
from app.users.user_models.schemas import UserLogin
from app.users.user_models.user_model import User
from app.users.auth_token_model.token_model import Token
from app.users.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


# ============================================================
# ✅ AUTHENTICATE USER
# ============================================================
async def authenticate_user(username: str, password: str, db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()

    if not user or not verify_password(password, user.hashed_password):
        raise UnauthorizedError("Invalid username or password")

    if not user.is_active:
        raise UnauthorizedError("User account is inactive")

    return user


# ============================================================
# ✅ LOGIN USER
# ============================================================
async def login_user(user_data: UserLogin, db: AsyncSession) -> Tuple[str, User]:
    user = await authenticate_user(user_data.username, user_data.password, db)

    access_token = await create_access_token(
        data={"sub": user.username, "user_id": user.id, "role": user.role},
        db=db
    )
    await db.commit()

    logger.info(f"User {user.username} logged in")
    return access_token, user


# ============================================================
# ✅ LOGOUT USER (Global Revocation)
# ============================================================
async def logout_user(user: User, db: AsyncSession) -> None:
    await db.execute(
        update(Token)
        .where(Token.user_id == user.id)
        .values(is_revoked=True)
    )
    await db.commit()
    logger.info(f"User {user.username} logged out; tokens revoked")


# ============================================================
# ✅ CHANGE/UPDATE PASSWORD
# ============================================================
async def update_password(
    user: User, current_password: str, new_password: str, db: AsyncSession
) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")

    user.hashed_password = get_password_hash(new_password)
    db.add(user)
    await db.commit()

# app/users/auth_dependencies.py
# Centralized Authentication Dependencies

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.exceptions import ForbiddenError, UnauthorizedError
from app.users.user_models.user_model import User
from app.users.auth_token_model.token_model import Token
from app.users.security import decode_token

logger = logging.getLogger(__name__)

# Security schemes
security_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the acting user from the Authorization: Bearer header.

    Validates:
    1. JWT signature and expiry
    2. Token exists in database and is not revoked
    3. User exists and is active

    Raises 401 if any validation fails.
    """
    if not credentials:
        raise UnauthorizedError("Access token required")
    token_string = credentials.credentials

    # 1. Decode JWT (validates signature + expiry)
    payload = decode_token(token_string)
    if not payload or payload.get("type") != "access" or not payload.get("user_id"):
        raise UnauthorizedError("Invalid or expired access token")

    # 2. Revocation check
    token_record = await db.execute(
        select(Token).where(
            and_(
                Token.token_string == token_string,
                Token.token_type == "access"
            )
        )
    )
    token_obj = token_record.scalars().first()
    if not token_obj or token_obj.is_revoked:
        raise UnauthorizedError("Token has been revoked. Please log in again.")

    # 3. Fetch user
    user = await db.get(User, payload["user_id"])
    if not user or not user.is_active:
        raise UnauthorizedError("User not found or inactive")

    return user


def require_roles(*roles: str):
    """
    Build a dependency that only lets the listed roles through.

        @router.post("", dependencies=[Depends(require_roles("receptionist", "admin"))])
    """
    allowed = set(roles)

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"User {current_user.username} ({current_user.role}) denied; requires one of {sorted(allowed)}"
            )
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return role_checker


get_current_admin = require_roles("admin")
get_front_desk_user = require_roles("receptionist", "admin")
get_clinician = require_roles("doctor", "admin")

"""Login flow: password check and token issuance for admin users."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidCredentialsError, NotFoundError
from app.core.security import issue_token, verify_password
from app.models.user import AdminUser
from app.services.directory import find_user_by_email

logger = logging.getLogger(__name__)


async def authenticate(db: AsyncSession, email: str, password: str) -> AdminUser:
    try:
        user = await find_user_by_email(db, email)
    except NotFoundError as exc:
        logger.info("Login attempt for unknown email %r", email)
        raise InvalidCredentialsError("unknown email") from exc

    if not verify_password(password, user.password_hash):
        logger.info("Password mismatch for admin user %s", user.id)
        raise InvalidCredentialsError("password mismatch")
    return user


async def generate_token(db: AsyncSession, email: str, password: str) -> str:
    user = await authenticate(db, email, password)
    logger.info("Token issued for admin user %s", user.id)
    return issue_token(user.id)

"""CRUD over the admin_users table."""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.models.user import AdminUser
from app.schemas.user import AdminUserCreate, AdminUserUpdate, UserFilter
from app.services.directory import find_user_by_id

logger = logging.getLogger(__name__)


async def list_admin_users(
    db: AsyncSession,
    filters: UserFilter | None = None,
    skip: int = 0,
    limit: int = 100,
) -> list[AdminUser]:
    query = select(AdminUser)
    if filters is not None:
        if filters.id is not None:
            query = query.where(AdminUser.id == filters.id)
        if filters.email is not None:
            query = query.where(AdminUser.email == filters.email.strip().lower())
        if filters.username is not None:
            query = query.where(AdminUser.username == filters.username)
        if filters.first_name is not None:
            query = query.where(AdminUser.first_name == filters.first_name)
        if filters.last_name is not None:
            query = query.where(AdminUser.last_name == filters.last_name)
    result = await db.execute(query.order_by(AdminUser.created_at).offset(skip).limit(limit))
    return list(result.scalars().all())


async def _ensure_email_free(db: AsyncSession, email: str) -> None:
    existing = await db.execute(select(AdminUser.id).where(AdminUser.email == email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Email already registered")


async def create_admin_user(db: AsyncSession, body: AdminUserCreate) -> AdminUser:
    await _ensure_email_free(db, body.email)
    user = AdminUser(
        username=body.username,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password_hash=hash_password(body.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Admin user created: %s (%s)", user.id, user.email)
    return user


async def update_admin_user(
    db: AsyncSession, user_id: uuid.UUID, body: AdminUserUpdate
) -> AdminUser:
    user = await find_user_by_id(db, user_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and changes["email"] != user.email:
        await _ensure_email_free(db, changes["email"])
    if "password" in changes:
        user.password_hash = hash_password(changes.pop("password"))
    for field, value in changes.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    logger.info("Admin user %s updated: %s", user.id, sorted(changes))
    return user


async def delete_admin_user(db: AsyncSession, user_id: uuid.UUID) -> None:
    user = await find_user_by_id(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info("Admin user %s deleted", user_id)

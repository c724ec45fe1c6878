"""
Directory lookups — translate names to ids and fetch admin users / roles.

Each function is one filtered read against a single table.  "Not found" is
reported as ``NotFoundError``; driver / pool / deadline failures arrive as
``DataAccessError`` from ``run_query``.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.session import run_query
from app.models.rbac import Action, ProtectedEntity, UserRole
from app.models.user import AdminUser

logger = logging.getLogger(__name__)


async def find_action_id_by_name(db: AsyncSession, name: str) -> uuid.UUID:
    result = await run_query(db, select(Action.id).where(Action.name == name))
    action_id = result.scalar_one_or_none()
    if action_id is None:
        raise NotFoundError("action", name)
    logger.debug("Action %r resolved to %s", name, action_id)
    return action_id


async def find_entity_id_by_name(db: AsyncSession, name: str) -> uuid.UUID:
    result = await run_query(
        db, select(ProtectedEntity.id).where(ProtectedEntity.name == name)
    )
    entity_id = result.scalar_one_or_none()
    if entity_id is None:
        raise NotFoundError("entity", name)
    logger.debug("Entity %r resolved to %s", name, entity_id)
    return entity_id


async def find_user_roles(db: AsyncSession, user_id: uuid.UUID) -> list[UserRole]:
    """Role assignments of *user_id*; empty when the user holds none."""
    result = await run_query(db, select(UserRole).where(UserRole.admin_user_id == user_id))
    return list(result.scalars().all())


async def find_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> AdminUser:
    result = await run_query(db, select(AdminUser).where(AdminUser.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("user", user_id)
    return user


async def find_user_by_email(db: AsyncSession, email: str) -> AdminUser:
    result = await run_query(
        db, select(AdminUser).where(AdminUser.email == email.strip().lower())
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("user", email)
    return user

"""
Reference listings and grant management.

Grant rows are only written after every referenced user / role / action /
entity has been found, so a dangling grant is reported as ``NotFoundError``
instead of surfacing as a constraint violation.  Inserting an existing grant
is a no-op.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.session import run_query
from app.models.rbac import (
    Action,
    ProtectedEntity,
    Role,
    RolePermission,
    UserPermission,
    UserRole,
)
from app.services.directory import (
    find_action_id_by_name,
    find_entity_id_by_name,
    find_user_by_id,
)

logger = logging.getLogger(__name__)


# ── Reference data ──────────────────────────────────────────────────
async def list_roles(db: AsyncSession) -> list[Role]:
    result = await run_query(db, select(Role).order_by(Role.name))
    return list(result.scalars().all())


async def list_actions(db: AsyncSession) -> list[Action]:
    result = await run_query(db, select(Action).order_by(Action.name))
    return list(result.scalars().all())


async def list_entities(db: AsyncSession) -> list[ProtectedEntity]:
    result = await run_query(db, select(ProtectedEntity).order_by(ProtectedEntity.name))
    return list(result.scalars().all())


async def get_role(db: AsyncSession, role_id: uuid.UUID) -> Role:
    role = await db.get(Role, role_id)
    if role is None:
        raise NotFoundError("role", role_id)
    return role


# ── Role assignments ────────────────────────────────────────────────
async def assign_role(db: AsyncSession, user_id: uuid.UUID, role_id: uuid.UUID) -> UserRole:
    await find_user_by_id(db, user_id)
    await get_role(db, role_id)

    existing = await db.get(UserRole, (user_id, role_id))
    if existing is not None:
        return existing

    assignment = UserRole(admin_user_id=user_id, role_id=role_id)
    db.add(assignment)
    await db.commit()
    logger.info("Role %s assigned to admin user %s", role_id, user_id)
    return assignment


async def revoke_role(db: AsyncSession, user_id: uuid.UUID, role_id: uuid.UUID) -> bool:
    result = await db.execute(
        delete(UserRole).where(
            UserRole.admin_user_id == user_id,
            UserRole.role_id == role_id,
        )
    )
    await db.commit()
    removed = result.rowcount > 0
    if removed:
        logger.info("Role %s revoked from admin user %s", role_id, user_id)
    return removed


# ── Permission grants ───────────────────────────────────────────────
async def grant_role_permission(
    db: AsyncSession,
    role_id: uuid.UUID,
    action_name: str,
    entity_name: str,
) -> RolePermission:
    await get_role(db, role_id)
    action_id = await find_action_id_by_name(db, action_name)
    entity_id = await find_entity_id_by_name(db, entity_name)

    existing = await db.get(RolePermission, (role_id, action_id, entity_id))
    if existing is not None:
        return existing

    grant = RolePermission(role_id=role_id, action_id=action_id, entity_id=entity_id)
    db.add(grant)
    await db.commit()
    logger.info("Role %s granted %s on %s", role_id, action_name, entity_name)
    return grant


async def grant_user_permission(
    db: AsyncSession,
    user_id: uuid.UUID,
    action_name: str,
    entity_name: str,
) -> UserPermission:
    await find_user_by_id(db, user_id)
    action_id = await find_action_id_by_name(db, action_name)
    entity_id = await find_entity_id_by_name(db, entity_name)

    existing = await db.get(UserPermission, (user_id, action_id, entity_id))
    if existing is not None:
        return existing

    grant = UserPermission(user_id=user_id, action_id=action_id, entity_id=entity_id)
    db.add(grant)
    await db.commit()
    logger.info("Admin user %s granted %s on %s directly", user_id, action_name, entity_name)
    return grant


async def revoke_user_permission(
    db: AsyncSession,
    user_id: uuid.UUID,
    action_name: str,
    entity_name: str,
) -> bool:
    action_id = await find_action_id_by_name(db, action_name)
    entity_id = await find_entity_id_by_name(db, entity_name)
    result = await db.execute(
        delete(UserPermission).where(
            UserPermission.user_id == user_id,
            UserPermission.action_id == action_id,
            UserPermission.entity_id == entity_id,
        )
    )
    await db.commit()
    return result.rowcount > 0

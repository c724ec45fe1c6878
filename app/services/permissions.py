"""
Permission resolver — decides whether an admin user may perform an action
on a protected entity.

Two grant paths are consulted, OR-ed together:

1. **Role path** — a ``RolePermission`` row for any role the user holds.
2. **User-direct path** — a ``UserPermission`` row for the user itself.

The role path is tried first since most operators are authorized through
role membership.  The direct path is only consulted when the role path
yields nothing (no roles at all, or roles without a matching grant), so a
narrow per-user grant still authorizes a user whose roles do not.

Unknown action or entity names stop the check with ``NotFoundError``
before any grant is looked at; they are never reported as a denial.
"""

from __future__ import annotations

import enum
import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PermissionDeniedError
from app.db.session import run_query
from app.models.rbac import RolePermission, UserPermission
from app.models.user import AdminUser
from app.services.directory import (
    find_action_id_by_name,
    find_entity_id_by_name,
    find_user_by_id,
    find_user_roles,
)

logger = logging.getLogger(__name__)


class GrantPath(str, enum.Enum):
    ROLE = "role"
    USER = "user"


async def role_grant_exists(
    db: AsyncSession,
    role_ids: Sequence[uuid.UUID],
    action_id: uuid.UUID,
    entity_id: uuid.UUID,
) -> bool:
    """True if any of *role_ids* holds ``(action_id, entity_id)``."""
    if not role_ids:
        return False
    stmt = (
        select(RolePermission.role_id)
        .where(
            RolePermission.role_id.in_(list(role_ids)),
            RolePermission.action_id == action_id,
            RolePermission.entity_id == entity_id,
        )
        .limit(1)
    )
    result = await run_query(db, stmt)
    return result.first() is not None


async def user_grant_exists(
    db: AsyncSession,
    user_id: uuid.UUID,
    action_id: uuid.UUID,
    entity_id: uuid.UUID,
) -> bool:
    """True if *user_id* holds ``(action_id, entity_id)`` directly."""
    stmt = (
        select(UserPermission.user_id)
        .where(
            UserPermission.user_id == user_id,
            UserPermission.action_id == action_id,
            UserPermission.entity_id == entity_id,
        )
        .limit(1)
    )
    result = await run_query(db, stmt)
    return result.first() is not None


async def resolve_grant_path(
    db: AsyncSession,
    user_id: uuid.UUID,
    action_name: str,
    entity_name: str,
) -> GrantPath:
    """Return the path that authorizes the request or raise.

    Raises ``NotFoundError`` for an unknown action / entity,
    ``PermissionDeniedError`` when neither path grants access and
    ``DataAccessError`` when a lookup fails.
    """
    action_id = await find_action_id_by_name(db, action_name)
    entity_id = await find_entity_id_by_name(db, entity_name)

    roles = await find_user_roles(db, user_id)
    role_ids = [assignment.role_id for assignment in roles]
    if role_ids and await role_grant_exists(db, role_ids, action_id, entity_id):
        return GrantPath.ROLE

    if await user_grant_exists(db, user_id, action_id, entity_id):
        return GrantPath.USER

    if not role_ids:
        raise PermissionDeniedError(PermissionDeniedError.NO_ROLES)
    raise PermissionDeniedError(PermissionDeniedError.NO_MATCHING_PERMISSION)


async def authorize(
    db: AsyncSession,
    user_id: uuid.UUID,
    action_name: str,
    entity_name: str,
) -> AdminUser:
    """Check ``(action_name, entity_name)`` for *user_id* and return the user.

    The fetched record is handed back so callers need no second lookup.
    """
    path = await resolve_grant_path(db, user_id, action_name, entity_name)
    user = await find_user_by_id(db, user_id)
    logger.debug(
        "User %s granted %s on %s via %s path",
        user_id,
        action_name,
        entity_name,
        path.value,
    )
    return user

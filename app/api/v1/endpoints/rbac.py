"""
RBAC endpoints — reference data, grant management and access checks.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_bearer_token, get_db, require_permission
from app.core import rbac
from app.models.rbac import Action, ProtectedEntity, Role, UserPermission
from app.models.user import AdminUser
from app.schemas.rbac import (
    AccessCheckRequest,
    AccessCheckResponse,
    ActionRead,
    EntityRead,
    GrantRead,
    OperationResult,
    PermissionGrant,
    RoleAssignment,
    RoleRead,
)
from app.schemas.user import AdminUserRead
from app.services import grants
from app.services.access import check_access

router = APIRouter(prefix="/admin", tags=["rbac"])

_can_read_dashboard = require_permission(rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD)
_can_manage_users = require_permission(rbac.CAN_UPDATE, rbac.ENTITY_ADMIN_USERS_PAGE)


# ── Access check ────────────────────────────────────────────────────
@router.post("/access/check", response_model=AccessCheckResponse)
async def access_check(
    body: AccessCheckRequest,
    token: str | None = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
) -> AccessCheckResponse:
    """Ask whether the caller may perform ``action`` on ``entity``."""
    user = await check_access(db, token, body.action, body.entity)
    return AccessCheckResponse(allowed=True, user=AdminUserRead.model_validate(user))


# ── Reference data ──────────────────────────────────────────────────
@router.get("/roles", response_model=list[RoleRead])
async def list_roles(
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_read_dashboard),
) -> list[Role]:
    return await grants.list_roles(db)


@router.get("/actions", response_model=list[ActionRead])
async def list_actions(
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_read_dashboard),
) -> list[Action]:
    return await grants.list_actions(db)


@router.get("/entities", response_model=list[EntityRead])
async def list_entities(
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_read_dashboard),
) -> list[ProtectedEntity]:
    return await grants.list_entities(db)


# ── Role assignments ────────────────────────────────────────────────
@router.post("/users/{user_id}/roles", response_model=OperationResult, status_code=201)
async def assign_role(
    user_id: uuid.UUID,
    body: RoleAssignment,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_manage_users),
) -> OperationResult:
    await grants.assign_role(db, user_id, body.role_id)
    return OperationResult(message=f"Role {body.role_id} assigned")


@router.delete("/users/{user_id}/roles/{role_id}", response_model=OperationResult)
async def revoke_role(
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_manage_users),
) -> OperationResult:
    removed = await grants.revoke_role(db, user_id, role_id)
    return OperationResult(
        success=removed,
        message="Role revoked" if removed else "Role was not assigned",
    )


# ── Direct user grants ──────────────────────────────────────────────
@router.post("/users/{user_id}/permissions", response_model=GrantRead, status_code=201)
async def grant_user_permission(
    user_id: uuid.UUID,
    body: PermissionGrant,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_manage_users),
) -> UserPermission:
    return await grants.grant_user_permission(db, user_id, body.action, body.entity)


@router.delete("/users/{user_id}/permissions", response_model=OperationResult)
async def revoke_user_permission(
    user_id: uuid.UUID,
    body: PermissionGrant,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(_can_manage_users),
) -> OperationResult:
    removed = await grants.revoke_user_permission(db, user_id, body.action, body.entity)
    return OperationResult(
        success=removed,
        message="Permission revoked" if removed else "Permission was not granted",
    )

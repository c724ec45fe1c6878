"""
Admin user CRUD endpoints.

Every route is guarded by a permission on the ``/admin/dashboard/users``
page: ``can_list`` for the collection, ``can_read`` / ``can_create`` /
``can_update`` / ``can_delete`` for the matching operation.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, require_permission
from app.core import rbac
from app.models.user import AdminUser
from app.schemas.rbac import OperationResult
from app.schemas.user import AdminUserCreate, AdminUserRead, AdminUserUpdate, UserFilter
from app.services import admin_users as service
from app.services.directory import find_user_by_id

router = APIRouter(prefix="/admin/users", tags=["admin-users"])

_PAGE = rbac.ENTITY_ADMIN_USERS_PAGE


@router.get("", response_model=list[AdminUserRead])
async def list_admin_users(
    id: uuid.UUID | None = None,
    email: str | None = None,
    username: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_LIST, _PAGE)),
) -> list[AdminUser]:
    """List admin users, optionally filtered by exact field values."""
    filters = UserFilter(
        id=id, email=email, username=username, first_name=first_name, last_name=last_name
    )
    return await service.list_admin_users(db, filters, skip=skip, limit=limit)


@router.get("/{user_id}", response_model=AdminUserRead)
async def get_admin_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_READ, _PAGE)),
) -> AdminUser:
    return await find_user_by_id(db, user_id)


@router.post("", response_model=AdminUserRead, status_code=201)
async def create_admin_user(
    body: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_CREATE, _PAGE)),
) -> AdminUser:
    return await service.create_admin_user(db, body)


@router.put("/{user_id}", response_model=AdminUserRead)
async def update_admin_user(
    user_id: uuid.UUID,
    body: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_UPDATE, _PAGE)),
) -> AdminUser:
    return await service.update_admin_user(db, user_id, body)


@router.delete("/{user_id}", response_model=OperationResult)
async def delete_admin_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_DELETE, _PAGE)),
) -> OperationResult:
    await service.delete_admin_user(db, user_id)
    return OperationResult(message=f"Admin user {user_id} deleted")

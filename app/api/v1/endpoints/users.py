"""
Storefront user endpoints.

- POST /users is public (signup).
- Every other route needs the matching action on ``Resource::User``.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, require_permission
from app.core import rbac
from app.models.user import AdminUser, User
from app.schemas.rbac import OperationResult
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services import users as service

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

_RESOURCE = rbac.ENTITY_USER_RESOURCE


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Register a storefront account."""
    if await service.find_user_by_email(db, body.email) is not None:
        raise HTTPException(status_code=400, detail="Email already registered")
    return await service.create_user(db, body)


@router.get("", response_model=list[UserRead])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_LIST, _RESOURCE)),
) -> list[User]:
    return await service.list_users(db, skip=skip, limit=limit)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_READ, _RESOURCE)),
) -> User:
    user = await service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    _caller: AdminUser = Depends(require_permission(rbac.CAN_UPDATE, _RESOURCE)),
) -> User:
    if body.email is not None:
        owner = await service.find_user_by_email(db, body.email)
        if owner is not None and owner.id != user_id:
            raise HTTPException(status_code=400, detail="Email already registered")

    user = await service.update_user(db, user_id, body)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/{user_id}", response_model=OperationResult)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: AdminUser = Depends(require_permission(rbac.CAN_DELETE, _RESOURCE)),
) -> OperationResult:
    if not await service.delete_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("User %s deleted by admin %s", user_id, caller.id)
    return OperationResult(message=f"User {user_id} deleted")

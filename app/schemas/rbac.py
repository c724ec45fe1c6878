"""Pydantic schemas for roles, actions, entities and grants."""

from __future__ import annotations

import uuid

from pydantic import BaseModel

from app.schemas.user import AdminUserRead


class RoleRead(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None

    model_config = {"from_attributes": True}


class ActionRead(RoleRead):
    pass


class EntityRead(RoleRead):
    pass


class RoleAssignment(BaseModel):
    role_id: uuid.UUID


class PermissionGrant(BaseModel):
    action: str
    entity: str


class GrantRead(BaseModel):
    user_id: uuid.UUID
    action_id: uuid.UUID
    entity_id: uuid.UUID

    model_config = {"from_attributes": True}


class AccessCheckRequest(BaseModel):
    action: str
    entity: str


class AccessCheckResponse(BaseModel):
    allowed: bool
    user: AdminUserRead


class OperationResult(BaseModel):
    success: bool = True
    message: str

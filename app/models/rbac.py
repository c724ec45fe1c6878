"""
RBAC reference data and grant tables.

Roles, actions and protected entities are static reference data seeded at
deployment.  The three junction tables carry no lifecycle beyond insert /
delete; their composite primary keys make every grant unique.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(Base):
    __tablename__ = "admin_roles"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    name: str = Column(String(100), unique=True, nullable=False)  # type: ignore[assignment]
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)  # type: ignore[assignment]


class Action(Base):
    """A capability verb such as ``can_read``."""

    __tablename__ = "admin_actions"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    name: str = Column(String(100), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)  # type: ignore[assignment]


class ProtectedEntity(Base):
    """A page path or logical resource tag (``/admin/dashboard``, ``Resource::User``)."""

    __tablename__ = "admin_entities"

    id: uuid.UUID = Column(Uuid, primary_key=True, default=uuid.uuid4)  # type: ignore[assignment]
    name: str = Column(String(255), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)  # type: ignore[assignment]


class UserRole(Base):
    __tablename__ = "admin_users_roles"

    admin_user_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_users.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_roles.id", ondelete="CASCADE"), primary_key=True
    )


class RolePermission(Base):
    __tablename__ = "admin_roles_permissions_entities"
    __table_args__ = (Index("ix_role_perm_action_entity", "action_id", "entity_id"),)

    role_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_roles.id", ondelete="CASCADE"), primary_key=True
    )
    action_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_actions.id", ondelete="CASCADE"), primary_key=True
    )
    entity_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_entities.id", ondelete="CASCADE"), primary_key=True
    )


class UserPermission(Base):
    __tablename__ = "admin_users_permissions_entities"

    user_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_users.id", ondelete="CASCADE"), primary_key=True
    )
    action_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_actions.id", ondelete="CASCADE"), primary_key=True
    )
    entity_id: uuid.UUID = Column(  # type: ignore[assignment]
        Uuid, ForeignKey("admin_entities.id", ondelete="CASCADE"), primary_key=True
    )

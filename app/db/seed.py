"""
Seed data — RBAC reference rows and development fixtures.

Reference data (roles, actions, entities) is inserted on every startup;
development fixtures only when ``settings.seed_development_data`` is set.
Both functions are idempotent.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import rbac
from app.core.security import hash_password
from app.db.base import Base
from app.models.rbac import Action, ProtectedEntity, Role, RolePermission, UserPermission, UserRole
from app.models.user import AdminUser

logger = logging.getLogger(__name__)

ROLE_ADMINS = uuid.UUID("123e4567-e89b-12d3-a456-426614174000")
ROLE_PRODUCT_MANAGERS = uuid.UUID("123e4567-e89b-12d3-a456-426614174001")

ROLES = [
    (ROLE_ADMINS, "Admins", "Users with full access to the platform, able to manage all functionalities."),
    (ROLE_PRODUCT_MANAGERS, "Product Managers", "Responsible for managing the product catalog (add, remove, update products)."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174002"), "Order Processing", "Users who handle customer orders and order-related tasks."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174003"), "Customer Support", "Handles customer relations, including support and return management."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174004"), "Marketing", "Responsible for advertising campaigns, promotions, and digital marketing efforts."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174005"), "Inventory Managers", "Manages stock levels, inventory control, and reordering processes."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174006"), "Sales", "Responsible for sales, customer relationships (B2B), and special offers."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174007"), "Finance", "Handles payments, invoicing, and financial reporting."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174008"), "Logistics", "Responsible for managing shipments, deliveries, and overall logistics."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174009"), "Developers", "Technical team maintaining and improving the e-commerce platform."),
]

ACTIONS = [
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174100"), rbac.CAN_CREATE, "Allows the user to create a new resource."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174101"), rbac.CAN_READ, "Allows the user to read or view resources."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174102"), rbac.CAN_UPDATE, "Allows the user to update or modify an existing resource."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174103"), rbac.CAN_DELETE, "Allows the user to delete an existing resource."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174104"), rbac.CAN_LIST, "Allows the user to list all resources without viewing their details."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174105"), rbac.CAN_UPLOAD, "Allows the user to upload files or resources."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174106"), rbac.CAN_DOWNLOAD, "Allows the user to download files or resources."),
]

ENTITIES = [
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174110"), rbac.ENTITY_ADMIN_DASHBOARD, "Represents the Admin space."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174111"), rbac.ENTITY_ADMIN_USERS_PAGE, "Represents the Users page."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174112"), rbac.ENTITY_USER_RESOURCE, "Represents the User resource."),
    (uuid.UUID("123e4567-e89b-12d3-a456-426614174113"), rbac.ENTITY_INVOICE_RESOURCE, "Represents the Invoice resource."),
]

DEV_ADMIN_USERS = [
    (uuid.UUID("223e4567-e89b-12d3-a456-426614174001"), "admin1", "AdminFirst1", "AdminLast1", "admin1@example.com", "password123", ROLE_ADMINS),
    (uuid.UUID("223e4567-e89b-12d3-a456-426614174002"), "admin2", "AdminFirst2", "AdminLast2", "admin2@example.com", "password456", ROLE_PRODUCT_MANAGERS),
]


async def _merge_missing(db: AsyncSession, model: type[Base], rows: list) -> int:
    """Add each ``(id, name, description)`` row whose id is not stored yet."""
    existing = set((await db.execute(select(model.id))).scalars().all())  # type: ignore[attr-defined]
    added = 0
    for row_id, name, description in rows:
        if row_id not in existing:
            db.add(model(id=row_id, name=name, description=description))
            added += 1
    return added


async def seed_reference_data(db: AsyncSession) -> None:
    added = 0
    added += await _merge_missing(db, Role, ROLES)
    added += await _merge_missing(db, Action, ACTIONS)
    added += await _merge_missing(db, ProtectedEntity, ENTITIES)
    await db.commit()
    if added:
        logger.info("Seeded %d RBAC reference rows", added)


async def seed_development_data(db: AsyncSession) -> None:
    """Two admin users: admin1 through the Admins role, admin2 through direct grants."""
    for user_id, username, first, last, email, password, role_id in DEV_ADMIN_USERS:
        if await db.get(AdminUser, user_id) is not None:
            continue
        db.add(
            AdminUser(
                id=user_id,
                username=username,
                first_name=first,
                last_name=last,
                email=email,
                password_hash=hash_password(password),
            )
        )
        await db.flush()
        db.add(UserRole(admin_user_id=user_id, role_id=role_id))
        logger.info("Development admin created: %s (password: <redacted>)", email)

    dashboard_id = ENTITIES[0][0]
    admin2_id = DEV_ADMIN_USERS[1][0]
    for action_id, _name, _desc in ACTIONS:
        for entity_id, _ename, _edesc in ENTITIES:
            if await db.get(RolePermission, (ROLE_ADMINS, action_id, entity_id)) is None:
                db.add(RolePermission(role_id=ROLE_ADMINS, action_id=action_id, entity_id=entity_id))
        if await db.get(UserPermission, (admin2_id, action_id, dashboard_id)) is None:
            db.add(UserPermission(user_id=admin2_id, action_id=action_id, entity_id=dashboard_id))

    await db.commit()

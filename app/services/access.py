"""
Authorization facade — the per-request entry point.

Verifies the bearer token, resolves the caller and runs the permission
resolver.  Failures keep their internal kind for the audit log and are
re-raised unchanged; ``app.core.exceptions`` turns them into the outward
codes.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AccessError, DataAccessError, TokenMalformedError
from app.core.security import verify_token
from app.models.user import AdminUser
from app.services.permissions import authorize

logger = logging.getLogger(__name__)


async def check_access(
    db: AsyncSession,
    token: str | None,
    action_name: str,
    entity_name: str,
) -> AdminUser:
    if not token:
        raise TokenMalformedError("missing bearer token")

    claims = verify_token(token)

    try:
        user = await authorize(db, claims.subject, action_name, entity_name)
    except DataAccessError:
        logger.error(
            "Access check for user %s (%s on %s) failed on data access",
            claims.subject,
            action_name,
            entity_name,
        )
        raise
    except AccessError as exc:
        logger.info(
            "Access refused for user %s: %s on %s (%s)",
            claims.subject,
            action_name,
            entity_name,
            exc,
        )
        raise

    logger.info("Access granted for user %s: %s on %s", user.id, action_name, entity_name)
    return user

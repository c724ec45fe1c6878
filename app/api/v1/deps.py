"""
FastAPI dependencies — database session, bearer token and permission guards.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import async_session_factory
from app.models.user import AdminUser
from app.services.access import check_access

# auto_error=False so a missing header can fall back to the cookie
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/admin/auth/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth dependencies ───────────────────────────────────────────────
async def get_bearer_token(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # HttpOnly cookie set at login
) -> str | None:
    """Bearer token from the Authorization header, else from the cookie."""
    if token:
        return token
    if access_token:
        if access_token.startswith("Bearer "):
            return access_token.split(" ", 1)[1]
        return access_token
    return None


def require_permission(
    action: str, entity: str
) -> Callable[..., Awaitable[AdminUser]]:
    """Guard that lets the request through only if the caller may do *action* on *entity*."""

    async def _guard(
        token: str | None = Depends(get_bearer_token),
        db: AsyncSession = Depends(get_db),
    ) -> AdminUser:
        return await check_access(db, token, action, entity)

    _guard.__name__ = f"require_{action}_{entity}"
    return _guard

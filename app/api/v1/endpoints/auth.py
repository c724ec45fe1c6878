"""
Admin auth endpoints — login (OAuth2 password flow), logout, token check.
"""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import OAuth2PasswordRequestForm
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, require_permission
from app.core import rbac
from app.core.config import settings
from app.core.security import verify_token
from app.models.user import AdminUser
from app.schemas.token import LogoutResponse, Token, TokenClaimsRead, VerifyTokenRequest
from app.schemas.user import AdminUserRead
from app.services.auth import generate_token

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/admin/auth", tags=["auth"])


@router.post("/login", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_for_access_token(
    request: Request,
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate with email/password. Returns the token and sets an HttpOnly cookie."""
    access_token = await generate_token(db, form_data.username, form_data.password)

    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    )
    return Token(access_token=access_token, expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Clear the auth cookie and end the session."""
    response.delete_cookie("access_token")
    return LogoutResponse(message="Logged out")


@router.post("/verify", response_model=TokenClaimsRead)
async def verify(body: VerifyTokenRequest) -> TokenClaimsRead:
    """Check a token's signature and expiry without touching the database."""
    claims = verify_token(body.token)
    return TokenClaimsRead(sub=claims.subject, exp=claims.expires_at)


@router.get("/me", response_model=AdminUserRead)
async def read_current_admin(
    current_user: AdminUser = Depends(
        require_permission(rbac.CAN_READ, rbac.ENTITY_ADMIN_DASHBOARD)
    ),
) -> AdminUser:
    """Return the profile of the authenticated admin."""
    return current_user

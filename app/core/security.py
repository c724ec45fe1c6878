"""
JWT token issuance / verification and password hashing (bcrypt).
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import TokenExpiredError, TokenMalformedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class TokenClaims:
    subject: uuid.UUID
    expires_at: int


def issue_token(
    user_id: uuid.UUID | str,
    secret: str | None = None,
    ttl: int | None = None,
) -> str:
    """Sign ``{sub, exp}`` for *user_id*; *ttl* is in seconds."""
    lifetime = settings.ACCESS_TOKEN_EXPIRE_SECONDS if ttl is None else ttl
    expires_at = int(time.time()) + lifetime
    return jwt.encode(
        {"sub": str(user_id), "exp": expires_at},
        secret or settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str, secret: str | None = None) -> TokenClaims:
    """Return the claims of a valid token.

    Raises ``TokenExpiredError`` for a correctly signed token past its
    ``exp`` and ``TokenMalformedError`` for anything else.  Expiry is checked
    again after decoding so a token without library-side expiry validation
    can never slip through.
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise TokenMalformedError(f"token rejected: {exc}") from exc

    exp = payload.get("exp")
    if not isinstance(exp, int) or isinstance(exp, bool):
        raise TokenMalformedError("token has no valid exp claim")
    if exp < int(time.time()):
        raise TokenExpiredError()

    try:
        subject = uuid.UUID(str(payload.get("sub")))
    except ValueError as exc:
        raise TokenMalformedError("token subject is not a UUID") from exc

    return TokenClaims(subject=subject, expires_at=exp)

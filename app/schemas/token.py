"""Pydantic schemas for JWT tokens."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class VerifyTokenRequest(BaseModel):
    token: str


class TokenClaimsRead(BaseModel):
    valid: bool = True
    sub: uuid.UUID
    exp: int


class LogoutResponse(BaseModel):
    message: str
    success: bool = True

"""Pydantic schemas for storefront and admin user CRUD."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, field_validator


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


class UserCreate(BaseModel):
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class UserUpdate(BaseModel):
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str | None) -> str | None:
        return None if v is None else _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str | None) -> str | None:
        if v is not None and len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class UserRead(BaseModel):
    id: uuid.UUID
    username: str
    first_name: str
    last_name: str
    email: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


# Admin users share the storefront shapes; the tables differ.
AdminUserCreate = UserCreate
AdminUserUpdate = UserUpdate
AdminUserRead = UserRead


class UserFilter(BaseModel):
    id: uuid.UUID | None = None
    email: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None

"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import admin_users, auth, rbac, users

api_router = APIRouter()

# Admin login, logout, token verification
api_router.include_router(auth.router)

# Access checks, roles / actions / entities, grants
api_router.include_router(rbac.router)

# Admin user management
api_router.include_router(admin_users.router)

# Storefront users
api_router.include_router(users.router)

"""API v1 routes."""

from fastapi import APIRouter

from docvault.api.v1 import auth, diagnostics, documents, health, managers, profile, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(managers.router, prefix="/management/managers", tags=["managers"])
router.include_router(users.router, prefix="/management/users", tags=["users"])
router.include_router(documents.management_router, prefix="/management/json", tags=["json"])
router.include_router(profile.router, prefix="/authenticated/user", tags=["profile"])
router.include_router(documents.authenticated_router, prefix="/authenticated/json", tags=["json"])
router.include_router(documents.public_router, prefix="/public/json", tags=["json"])
router.include_router(diagnostics.router, prefix="/test", tags=["test"])

"""API routers for the CyberShield backend."""
from fastapi import APIRouter

from . import audit, auth, contact, health, root, users


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(root.router)
    api_router.include_router(health.router)
    api_router.include_router(auth.router)
    api_router.include_router(contact.router)
    api_router.include_router(users.router)
    api_router.include_router(audit.router)
    return api_router

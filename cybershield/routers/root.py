"""Service banner."""
from fastapi import APIRouter

from cybershield.config import AppInfo

router = APIRouter(tags=["root"])

ENDPOINTS = [
    "GET /health - Server status",
    "POST /api/contact - Contact form",
    "POST /api/auth/register - User registration",
    "POST /api/auth/login - User login",
    "POST /api/audit/request - Request a free audit",
]


@router.get("/", summary="API banner")
def index() -> dict[str, object]:
    return {
        "message": "CyberShield API - Protecting your digital world",
        "version": AppInfo().version,
        "endpoints": ENDPOINTS,
    }

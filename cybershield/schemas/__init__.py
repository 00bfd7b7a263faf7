"""Pydantic schemas for request validation and responses."""
from .audit import AuditRequestCreate, AuditRequestCreated, AuditRequestRead, AuditStatusRead
from .common import ListResponse, SuccessResponse
from .contact import ContactCreate, ContactCreated, ContactRead
from .user import AuthData, LoginRequest, ProfileData, RegisterRequest, TokenClaims, UserRead, UserStats

__all__ = [
    "AuditRequestCreate",
    "AuditRequestCreated",
    "AuditRequestRead",
    "AuditStatusRead",
    "AuthData",
    "ContactCreate",
    "ContactCreated",
    "ContactRead",
    "ListResponse",
    "LoginRequest",
    "ProfileData",
    "RegisterRequest",
    "SuccessResponse",
    "TokenClaims",
    "UserRead",
    "UserStats",
]

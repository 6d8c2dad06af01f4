"""User and auth schemas."""
from uuid import UUID
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import APIModel, check_password_strength, normalize_email
from app.schemas.tenant import TenantSummary

AssignableRole = Literal["user", "tenant_admin"]
RoleValue = Literal["user", "tenant_admin", "super_admin"]


class UserCreate(APIModel):
    """Create user request (tenant admins only)."""
    email: EmailStr
    password: str
    full_name: str = Field(min_length=2, max_length=100)
    role: AssignableRole = "user"

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class UserUpdate(APIModel):
    """Update user request.

    ``full_name`` and ``password`` are profile fields (self only);
    ``role`` and ``is_active`` are access fields (tenant admins).
    """
    full_name: str | None = Field(None, min_length=2, max_length=100)
    password: str | None = None
    role: AssignableRole | None = None
    is_active: bool | None = None

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str | None) -> str | None:
        return check_password_strength(v) if v is not None else v


class UserRead(APIModel):
    """User response."""
    id: UUID
    email: str
    full_name: str
    role: str
    tenant_id: UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None


class UserWithTenant(UserRead):
    """User row for the cross-tenant listing."""
    tenant_name: str | None = None
    tenant_subdomain: str | None = None


class CurrentUser(UserRead):
    tenant: TenantSummary | None = None


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(min_length=1)
    tenant_subdomain: str | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("tenant_subdomain")
    @classmethod
    def lower_subdomain(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip().lower() or None


class Token(APIModel):
    """Login response."""
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead


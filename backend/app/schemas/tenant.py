"""Tenant schemas."""
from uuid import UUID
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import APIModel, check_password_strength, normalize_email

TenantStatusValue = Literal["active", "suspended", "trial", "inactive"]
PlanValue = Literal["free", "pro", "enterprise"]

SUBDOMAIN_PATTERN = r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$"


class TenantRegister(APIModel):
    """Self-service registration of a tenant and its first admin."""
    tenant_name: str = Field(min_length=3, max_length=100)
    subdomain: str = Field(min_length=3, max_length=63, pattern=SUBDOMAIN_PATTERN)
    admin_email: EmailStr
    admin_password: str
    admin_full_name: str = Field(min_length=2, max_length=100)

    @field_validator("tenant_name", "admin_full_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("admin_email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("admin_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class TenantUpdate(APIModel):
    """Update tenant request. Only ``name`` is open to tenant admins."""
    name: str | None = Field(None, min_length=3, max_length=100)
    status: TenantStatusValue | None = None
    subscription_plan: PlanValue | None = None
    max_users: int | None = Field(None, ge=1)
    max_projects: int | None = Field(None, ge=1)


class TenantStatusUpdate(APIModel):
    status: TenantStatusValue


class TenantStats(APIModel):
    total_users: int
    total_projects: int
    total_tasks: int


class TenantSummary(APIModel):
    """Tenant as seen by its own members."""
    id: UUID
    name: str
    subdomain: str
    created_at: datetime
    updated_at: datetime | None = None


class TenantRead(TenantSummary):
    """Tenant response including subscription fields."""
    status: str
    subscription_plan: str
    max_users: int
    max_projects: int


class TenantDetail(TenantRead):
    stats: TenantStats | None = None


class TenantSummaryDetail(TenantSummary):
    stats: TenantStats | None = None


class SystemStats(APIModel):
    total_tenants: int
    active_tenants: int
    tenants_by_status: dict[str, int]
    total_users: int
    total_projects: int
    total_tasks: int

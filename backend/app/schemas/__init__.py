"""Pydantic schemas for API request/response."""
from app.schemas.common import APIModel, envelope
from app.schemas.tenant import (
    TenantRegister, TenantUpdate, TenantStatusUpdate, TenantStats,
    TenantSummary, TenantRead, TenantDetail, TenantSummaryDetail, SystemStats,
)
from app.schemas.user import (
    UserCreate, UserUpdate, UserRead, UserWithTenant, CurrentUser,
    LoginRequest, Token,
)
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectRead
from app.schemas.task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskRead

__all__ = [
    "APIModel", "envelope",
    "TenantRegister", "TenantUpdate", "TenantStatusUpdate", "TenantStats",
    "TenantSummary", "TenantRead", "TenantDetail", "TenantSummaryDetail", "SystemStats",
    "UserCreate", "UserUpdate", "UserRead", "UserWithTenant", "CurrentUser",
    "LoginRequest", "Token",
    "ProjectCreate", "ProjectUpdate", "ProjectRead",
    "TaskCreate", "TaskUpdate", "TaskStatusUpdate", "TaskRead",
]

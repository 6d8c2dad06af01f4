"""Tenant-scoped repositories."""
from app.repositories.base import Page, PageParams
from app.repositories.tenant import TenantRepository, TenantFilters
from app.repositories.user import UserRepository, UserFilters
from app.repositories.project import ProjectRepository, ProjectFilters
from app.repositories.task import TaskRepository, TaskFilters

__all__ = [
    "Page",
    "PageParams",
    "TenantRepository",
    "TenantFilters",
    "UserRepository",
    "UserFilters",
    "ProjectRepository",
    "ProjectFilters",
    "TaskRepository",
    "TaskFilters",
]

"""Database models."""
from app.models.tenant import Tenant, TenantStatus, SubscriptionPlan, PLAN_LIMITS
from app.models.user import User, UserRole
from app.models.project import Project, ProjectStatus
from app.models.task import Task, TaskStatus, TaskPriority
from app.models.audit_log import AuditLog, AuditAction

__all__ = [
    "Tenant",
    "TenantStatus",
    "SubscriptionPlan",
    "PLAN_LIMITS",
    "User",
    "UserRole",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "AuditLog",
    "AuditAction",
]

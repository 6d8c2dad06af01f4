"""Tenant persistence."""
import uuid
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.task import Task
from app.models.tenant import PLAN_LIMITS, SubscriptionPlan, Tenant, TenantStatus
from app.models.user import User
from app.repositories.base import Page, PageParams, paginate, search_pattern
from app.services.scope import TenantScope


@dataclass(frozen=True)
class TenantFilters:
    status: str | None = None
    plan: str | None = None
    search: str | None = None

    def conditions(self) -> list:
        conditions = []
        if self.status:
            conditions.append(Tenant.status == self.status)
        if self.plan:
            conditions.append(Tenant.subscription_plan == self.plan)
        if self.search:
            pattern = search_pattern(self.search)
            conditions.append(or_(Tenant.name.ilike(pattern), Tenant.subdomain.ilike(pattern)))
        return conditions


class TenantRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, scope: TenantScope, tenant_id: uuid.UUID) -> Tenant | None:
        if not scope.allows(tenant_id):
            return None
        return self.db.get(Tenant, tenant_id)

    def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        return self.db.scalar(select(Tenant).where(Tenant.subdomain == subdomain.lower()))

    def list(self, scope: TenantScope, filters: TenantFilters, params: PageParams) -> Page:
        stmt = select(Tenant).where(*filters.conditions())
        if not scope.is_all_tenants:
            stmt = stmt.where(Tenant.id == scope.tenant_id)
        return paginate(self.db, stmt.order_by(Tenant.created_at.desc()), params)

    def create(
        self,
        name: str,
        subdomain: str,
        plan: str = SubscriptionPlan.FREE.value,
        status: str = TenantStatus.ACTIVE.value,
        max_users: int | None = None,
        max_projects: int | None = None,
    ) -> Tenant:
        """Add a tenant; quotas default from the plan unless given."""
        default_users, default_projects = PLAN_LIMITS[plan]
        tenant = Tenant(
            name=name,
            subdomain=subdomain.lower(),
            subscription_plan=plan,
            status=status,
            max_users=max_users if max_users is not None else default_users,
            max_projects=max_projects if max_projects is not None else default_projects,
        )
        self.db.add(tenant)
        self.db.flush()
        return tenant

    def update(self, tenant: Tenant, changes: dict) -> Tenant:
        for field, value in changes.items():
            setattr(tenant, field, value)
        self.db.flush()
        return tenant

    def stats(self, tenant_id: uuid.UUID) -> dict:
        return {
            "total_users": self._count(User, User.tenant_id == tenant_id),
            "total_projects": self._count(Project, Project.tenant_id == tenant_id),
            "total_tasks": self._count(Task, Task.tenant_id == tenant_id),
        }

    def system_stats(self) -> dict:
        tenants_by_status = dict(
            self.db.execute(select(Tenant.status, func.count()).group_by(Tenant.status)).all()
        )
        return {
            "total_tenants": self._count(Tenant),
            "active_tenants": tenants_by_status.get(TenantStatus.ACTIVE.value, 0),
            "tenants_by_status": tenants_by_status,
            "total_users": self._count(User),
            "total_projects": self._count(Project),
            "total_tasks": self._count(Task),
        }

    def _count(self, model, *conditions) -> int:
        return self.db.scalar(select(func.count()).select_from(model).where(*conditions))

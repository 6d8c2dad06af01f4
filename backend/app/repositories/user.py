"""User persistence."""
import uuid
from dataclasses import dataclass

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.task import Task
from app.models.user import User, UserRole
from app.repositories.base import Page, PageParams, paginate, search_pattern
from app.services.scope import TenantScope


@dataclass(frozen=True)
class UserFilters:
    role: str | None = None
    is_active: bool | None = None
    search: str | None = None

    def conditions(self) -> list:
        conditions = []
        if self.role:
            conditions.append(User.role == self.role)
        if self.is_active is not None:
            conditions.append(User.is_active == self.is_active)
        if self.search:
            pattern = search_pattern(self.search)
            conditions.append(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
        return conditions


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, scope: TenantScope, user_id: uuid.UUID) -> User | None:
        user = self.db.get(User, user_id)
        if user is None or not scope.allows(user.tenant_id):
            return None
        return user

    def get_by_email(self, email: str, tenant_id: uuid.UUID | None) -> User | None:
        """Find by email within a tenant, or among super admins when ``tenant_id`` is None."""
        stmt = select(User).where(User.email == email.lower())
        if tenant_id is None:
            stmt = stmt.where(User.tenant_id.is_(None))
        else:
            stmt = stmt.where(User.tenant_id == tenant_id)
        return self.db.scalar(stmt)

    def email_in_any_tenant(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower(), User.tenant_id.is_not(None)).limit(1)
        return self.db.scalar(stmt) is not None

    def list(self, scope: TenantScope, filters: UserFilters, params: PageParams) -> Page:
        stmt = select(User).where(*filters.conditions())
        if not scope.is_all_tenants:
            stmt = stmt.where(User.tenant_id == scope.tenant_id)
        return paginate(self.db, stmt.order_by(User.created_at.desc()), params)

    def create(
        self,
        tenant_id: uuid.UUID | None,
        email: str,
        hashed_password: str,
        full_name: str,
        role: str = UserRole.USER.value,
    ) -> User:
        user = User(
            tenant_id=tenant_id,
            email=email.lower(),
            hashed_password=hashed_password,
            full_name=full_name,
            role=role,
            is_active=True,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def update(self, user: User, changes: dict) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        self.db.flush()
        return user

    def delete(self, user: User) -> None:
        """Detach the user's tasks and projects, then delete the row.

        Runs inside the caller's transaction; nothing is committed here.
        """
        self.db.execute(update(Task).where(Task.assigned_to == user.id).values(assigned_to=None))
        self.db.execute(update(Project).where(Project.created_by == user.id).values(created_by=None))
        self.db.delete(user)
        self.db.flush()

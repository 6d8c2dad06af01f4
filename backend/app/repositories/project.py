"""Project persistence."""
import uuid
from dataclasses import dataclass

from sqlalchemy import case, delete, func, or_, select
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.task import Task, TaskStatus
from app.repositories.base import Page, PageParams, paginate, search_pattern
from app.services.scope import TenantScope


@dataclass(frozen=True)
class ProjectFilters:
    status: str | None = None
    search: str | None = None
    created_by: uuid.UUID | None = None

    def conditions(self) -> list:
        conditions = []
        if self.status:
            conditions.append(Project.status == self.status)
        if self.created_by:
            conditions.append(Project.created_by == self.created_by)
        if self.search:
            pattern = search_pattern(self.search)
            conditions.append(or_(Project.name.ilike(pattern), Project.description.ilike(pattern)))
        return conditions


class ProjectRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, scope: TenantScope, project_id: uuid.UUID) -> Project | None:
        project = self.db.get(Project, project_id)
        if project is None or not scope.allows(project.tenant_id):
            return None
        return project

    def task_counts(self, project_ids: list[uuid.UUID]) -> dict[uuid.UUID, tuple[int, int]]:
        """Map project id to (task count, completed task count)."""
        if not project_ids:
            return {}
        completed = func.sum(case((Task.status == TaskStatus.COMPLETED.value, 1), else_=0))
        rows = self.db.execute(
            select(Task.project_id, func.count(Task.id), completed)
            .where(Task.project_id.in_(project_ids))
            .group_by(Task.project_id)
        ).all()
        return {project_id: (total, int(done or 0)) for project_id, total, done in rows}

    def list(self, scope: TenantScope, filters: ProjectFilters, params: PageParams) -> Page:
        stmt = select(Project).where(*filters.conditions())
        if not scope.is_all_tenants:
            stmt = stmt.where(Project.tenant_id == scope.tenant_id)
        return paginate(self.db, stmt.order_by(Project.created_at.desc()), params)

    def create(
        self,
        tenant_id: uuid.UUID,
        name: str,
        created_by: uuid.UUID | None,
        description: str | None = None,
        status: str | None = None,
    ) -> Project:
        project = Project(
            tenant_id=tenant_id,
            name=name,
            description=description,
            created_by=created_by,
        )
        if status:
            project.status = status
        self.db.add(project)
        self.db.flush()
        return project

    def update(self, project: Project, changes: dict) -> Project:
        for field, value in changes.items():
            setattr(project, field, value)
        self.db.flush()
        return project

    def delete(self, project: Project) -> None:
        """Delete the project's tasks, then the project, in the caller's transaction."""
        self.db.execute(delete(Task).where(Task.project_id == project.id))
        self.db.delete(project)
        self.db.flush()

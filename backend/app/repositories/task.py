"""Task persistence."""
import uuid
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.task import Task, TaskPriority
from app.repositories.base import Page, PageParams, paginate, search_pattern
from app.services.scope import TenantScope


@dataclass(frozen=True)
class TaskFilters:
    project_id: uuid.UUID | None = None
    status: str | None = None
    priority: str | None = None
    assigned_to: uuid.UUID | None = None
    search: str | None = None

    def conditions(self) -> list:
        conditions = []
        if self.project_id:
            conditions.append(Task.project_id == self.project_id)
        if self.status:
            conditions.append(Task.status == self.status)
        if self.priority:
            conditions.append(Task.priority == self.priority)
        if self.assigned_to:
            conditions.append(Task.assigned_to == self.assigned_to)
        if self.search:
            pattern = search_pattern(self.search)
            conditions.append(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))
        return conditions


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, scope: TenantScope, task_id: uuid.UUID) -> Task | None:
        task = self.db.get(Task, task_id)
        if task is None or not scope.allows(task.tenant_id):
            return None
        return task

    def list(self, scope: TenantScope, filters: TaskFilters, params: PageParams) -> Page:
        stmt = select(Task).where(*filters.conditions())
        if not scope.is_all_tenants:
            stmt = stmt.where(Task.tenant_id == scope.tenant_id)
        return paginate(self.db, stmt.order_by(Task.created_at.desc()), params)

    def create(
        self,
        project: Project,
        title: str,
        description: str | None = None,
        priority: str = TaskPriority.MEDIUM.value,
        assigned_to: uuid.UUID | None = None,
        due_date: date | None = None,
    ) -> Task:
        """Add a task under ``project``; the tenant is always the project's."""
        task = Task(
            project_id=project.id,
            tenant_id=project.tenant_id,
            title=title,
            description=description,
            priority=priority,
            assigned_to=assigned_to,
            due_date=due_date,
        )
        self.db.add(task)
        self.db.flush()
        return task

    def update(self, task: Task, changes: dict) -> Task:
        for field, value in changes.items():
            setattr(task, field, value)
        self.db.flush()
        return task

    def set_status(self, task: Task, status: str) -> Task:
        # onupdate does not fire when the value is unchanged
        task.status = status
        task.updated_at = datetime.utcnow()
        self.db.flush()
        return task

    def delete(self, task: Task) -> None:
        self.db.delete(task)
        self.db.flush()

"""Project router, including the project's task collection."""
import logging
from dataclasses import replace
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db, transaction
from app.deps import (
    Auditor, get_app_settings, get_auditor, get_current_principal, get_page_params, get_scope,
)
from app.exceptions import NotFoundError, ValidationFailedError
from app.models.audit_log import AuditAction
from app.models.project import Project
from app.models.user import User
from app.repositories.base import PageParams
from app.repositories.project import ProjectFilters, ProjectRepository
from app.repositories.task import TaskFilters, TaskRepository
from app.routers.tasks import check_assignee, task_filters
from app.schemas.common import envelope
from app.schemas.project import ProjectCreate, ProjectRead, ProjectStatusValue, ProjectUpdate
from app.schemas.task import TaskCreate, TaskRead
from app.services.authorization import Action, Resource, authorize
from app.services.limits import ResourceKind, check_creation_allowed
from app.services.principal import Principal
from app.services.scope import TenantScope

router = APIRouter(prefix="/projects", tags=["projects"])
logger = logging.getLogger(__name__)


def project_reads(db: Session, projects: list[Project]) -> list[ProjectRead]:
    """Attach creator names and task counts to project rows."""
    counts = ProjectRepository(db).task_counts([p.id for p in projects])
    creator_ids = {p.created_by for p in projects if p.created_by}
    names = {}
    if creator_ids:
        names = dict(db.execute(select(User.id, User.full_name).where(User.id.in_(creator_ids))).all())

    reads = []
    for project in projects:
        read = ProjectRead.model_validate(project)
        read.created_by_name = names.get(project.created_by)
        read.task_count, read.completed_task_count = counts.get(project.id, (0, 0))
        reads.append(read)
    return reads


def _get_project(db: Session, scope: TenantScope, project_id: UUID) -> Project:
    project = ProjectRepository(db).get(scope, project_id)
    if project is None:
        raise NotFoundError("Project")
    return project


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auditor: Auditor = Depends(get_auditor),
):
    """Create a project in the caller's tenant (super admins pass ``tenantId``)."""
    authorize(principal, Action.CREATE_PROJECT)
    tenant_id = scope.require_tenant()
    authorize(principal, Action.CREATE_PROJECT, Resource(tenant_id=tenant_id))

    with transaction(db):
        check_creation_allowed(db, tenant_id, ResourceKind.PROJECT, lock=settings.strict_quotas)
        project = ProjectRepository(db).create(
            tenant_id=tenant_id,
            name=payload.name,
            description=payload.description,
            status=payload.status,
            created_by=principal.id,
        )

    auditor.later(AuditAction.CREATE_PROJECT, principal.id, tenant_id, "project", project.id)
    return envelope(project_reads(db, [project])[0], message="Project created successfully")


@router.get("")
def list_projects(
    status: ProjectStatusValue | None = Query(None),
    search: str | None = Query(None),
    created_by: UUID | None = Query(None, alias="createdBy"),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List projects with task counts, newest first."""
    authorize(principal, Action.VIEW_PROJECT)
    page = ProjectRepository(db).list(
        scope, ProjectFilters(status=status, search=search, created_by=created_by), params
    )
    return envelope(project_reads(db, page.items), pagination=page.pagination)


@router.get("/{project_id}")
def get_project(
    project_id: UUID,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    authorize(principal, Action.VIEW_PROJECT)
    project = _get_project(db, scope, project_id)
    return envelope(project_reads(db, [project])[0])


@router.put("/{project_id}")
def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Update a project. Plain users may only update projects they created."""
    authorize(principal, Action.UPDATE_PROJECT)
    project = _get_project(db, scope, project_id)
    authorize(
        principal,
        Action.UPDATE_PROJECT,
        Resource(tenant_id=project.tenant_id, owner_id=project.created_by),
    )

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationFailedError("No valid fields to update")
    if changes.get("name", "") is None or changes.get("status", "") is None:
        raise ValidationFailedError("Name and status cannot be empty")

    with transaction(db):
        ProjectRepository(db).update(project, changes)

    auditor.later(AuditAction.UPDATE_PROJECT, principal.id, project.tenant_id, "project", project.id)
    return envelope(project_reads(db, [project])[0], message="Project updated successfully")


@router.delete("/{project_id}")
def delete_project(
    project_id: UUID,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Delete a project and all of its tasks."""
    authorize(principal, Action.DELETE_PROJECT)
    project = _get_project(db, scope, project_id)
    authorize(
        principal,
        Action.DELETE_PROJECT,
        Resource(tenant_id=project.tenant_id, owner_id=project.created_by),
    )

    tenant_id = project.tenant_id
    with transaction(db):
        ProjectRepository(db).delete(project)
        auditor.within(db, AuditAction.DELETE_PROJECT, principal.id, tenant_id, "project", project_id)

    logger.info(f"Project {project_id} deleted by {principal.id}")
    return envelope(message="Project deleted successfully")


@router.post("/{project_id}/tasks", status_code=status.HTTP_201_CREATED)
def create_task(
    project_id: UUID,
    payload: TaskCreate,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Create a task under a project; the task inherits the project's tenant."""
    authorize(principal, Action.CREATE_TASK)
    project = _get_project(db, scope, project_id)
    authorize(principal, Action.CREATE_TASK, Resource(tenant_id=project.tenant_id))
    check_assignee(db, payload.assigned_to, project.tenant_id)

    with transaction(db):
        task = TaskRepository(db).create(
            project,
            title=payload.title,
            description=payload.description,
            priority=payload.priority,
            assigned_to=payload.assigned_to,
            due_date=payload.due_date,
        )

    auditor.later(AuditAction.CREATE_TASK, principal.id, task.tenant_id, "task", task.id)
    return envelope(TaskRead.model_validate(task), message="Task created successfully")


@router.get("/{project_id}/tasks")
def list_project_tasks(
    project_id: UUID,
    filters: TaskFilters = Depends(task_filters),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    authorize(principal, Action.VIEW_TASK)
    project = _get_project(db, scope, project_id)
    page = TaskRepository(db).list(scope, replace(filters, project_id=project.id), params)
    return envelope(
        [TaskRead.model_validate(t) for t in page.items],
        pagination=page.pagination,
    )

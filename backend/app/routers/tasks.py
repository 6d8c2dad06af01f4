"""Task router: tenant-wide listing and per-task operations."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db, transaction
from app.deps import Auditor, get_auditor, get_current_principal, get_page_params, get_scope
from app.exceptions import NotFoundError, ValidationFailedError
from app.models.audit_log import AuditAction
from app.models.task import Task
from app.models.user import User
from app.repositories.base import PageParams
from app.repositories.task import TaskFilters, TaskRepository
from app.schemas.common import envelope
from app.schemas.task import PriorityValue, TaskRead, TaskStatusUpdate, TaskStatusValue, TaskUpdate
from app.services.authorization import Action, Resource, authorize
from app.services.principal import Principal
from app.services.scope import TenantScope

router = APIRouter(prefix="/tasks", tags=["tasks"])

NON_NULL_FIELDS = ("title", "status", "priority")


def check_assignee(db: Session, assignee_id: UUID | None, tenant_id: UUID) -> None:
    """An assignee must be a user of the task's tenant."""
    if assignee_id is None:
        return
    assignee = db.get(User, assignee_id)
    if assignee is None or assignee.tenant_id != tenant_id:
        raise ValidationFailedError("Assigned user does not belong to this tenant")


def task_filters(
    status: TaskStatusValue | None = Query(None),
    priority: PriorityValue | None = Query(None),
    assigned_to: UUID | None = Query(None, alias="assignedTo"),
    search: str | None = Query(None),
) -> TaskFilters:
    return TaskFilters(status=status, priority=priority, assigned_to=assigned_to, search=search)


def _get_task(db: Session, scope: TenantScope, task_id: UUID) -> Task:
    task = TaskRepository(db).get(scope, task_id)
    if task is None:
        raise NotFoundError("Task")
    return task


@router.get("")
def list_tasks(
    filters: TaskFilters = Depends(task_filters),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List tasks across the caller's tenant."""
    authorize(principal, Action.VIEW_TASK)
    page = TaskRepository(db).list(scope, filters, params)
    return envelope(
        [TaskRead.model_validate(t) for t in page.items],
        pagination=page.pagination,
    )


@router.get("/{task_id}")
def get_task(
    task_id: UUID,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    authorize(principal, Action.VIEW_TASK)
    task = _get_task(db, scope, task_id)
    return envelope(TaskRead.model_validate(task))


@router.patch("/{task_id}/status")
def update_task_status(
    task_id: UUID,
    payload: TaskStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Set the task status. Setting the current status again only touches ``updatedAt``."""
    authorize(principal, Action.UPDATE_TASK)
    task = _get_task(db, scope, task_id)
    authorize(principal, Action.UPDATE_TASK, Resource(tenant_id=task.tenant_id))

    with transaction(db):
        TaskRepository(db).set_status(task, payload.status)

    auditor.later(AuditAction.UPDATE_TASK_STATUS, principal.id, task.tenant_id, "task", task.id)
    return envelope(TaskRead.model_validate(task), message="Task status updated successfully")


@router.put("/{task_id}")
def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    authorize(principal, Action.UPDATE_TASK)
    task = _get_task(db, scope, task_id)
    authorize(principal, Action.UPDATE_TASK, Resource(tenant_id=task.tenant_id))

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationFailedError("No valid fields to update")
    if any(changes.get(field, "") is None for field in NON_NULL_FIELDS):
        raise ValidationFailedError("Title, status and priority cannot be empty")
    if "assigned_to" in changes:
        check_assignee(db, changes["assigned_to"], task.tenant_id)

    with transaction(db):
        TaskRepository(db).update(task, changes)

    auditor.later(AuditAction.UPDATE_TASK, principal.id, task.tenant_id, "task", task.id)
    return envelope(TaskRead.model_validate(task), message="Task updated successfully")


@router.delete("/{task_id}")
def delete_task(
    task_id: UUID,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    authorize(principal, Action.DELETE_TASK)
    task = _get_task(db, scope, task_id)
    authorize(principal, Action.DELETE_TASK, Resource(tenant_id=task.tenant_id))

    tenant_id = task.tenant_id
    with transaction(db):
        TaskRepository(db).delete(task)

    auditor.later(AuditAction.DELETE_TASK, principal.id, tenant_id, "task", task_id)
    return envelope(message="Task deleted successfully")

"""Super-admin router: system statistics and cross-tenant listings."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db, transaction
from app.deps import Auditor, get_auditor, get_current_principal, get_page_params
from app.exceptions import ConflictError, NotFoundError
from app.models.audit_log import AuditAction
from app.models.tenant import STATUS_TRANSITIONS
from app.repositories.base import PageParams
from app.repositories.project import ProjectFilters, ProjectRepository
from app.repositories.task import TaskFilters, TaskRepository
from app.repositories.tenant import TenantFilters, TenantRepository
from app.repositories.user import UserFilters, UserRepository
from app.routers.projects import project_reads
from app.routers.tasks import task_filters
from app.schemas.common import envelope
from app.schemas.project import ProjectStatusValue
from app.schemas.task import TaskRead
from app.schemas.tenant import (
    PlanValue, SystemStats, TenantDetail, TenantStats, TenantStatusUpdate, TenantStatusValue,
)
from app.schemas.user import RoleValue, UserWithTenant
from app.services.authorization import Action, authorize
from app.services.principal import Principal
from app.services.scope import TenantScope, resolve_scope

router = APIRouter(prefix="/superadmin", tags=["superadmin"])
logger = logging.getLogger(__name__)


@router.get("/stats")
def system_stats(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """System-wide counts."""
    authorize(principal, Action.VIEW_SYSTEM_STATS)
    stats = TenantRepository(db).system_stats()
    auditor.later(AuditAction.GET_SYSTEM_STATS, principal.id, None, "system", "stats")
    return envelope(SystemStats(**stats))


@router.get("/tenants")
def all_tenants(
    status: TenantStatusValue | None = Query(None),
    plan: PlanValue | None = Query(None),
    search: str | None = Query(None),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Every tenant with its usage statistics."""
    authorize(principal, Action.LIST_ALL_TENANTS)
    tenants = TenantRepository(db)
    page = tenants.list(
        TenantScope.all_tenants(), TenantFilters(status=status, plan=plan, search=search), params
    )
    data = []
    for tenant in page.items:
        read = TenantDetail.model_validate(tenant)
        read.stats = TenantStats(**tenants.stats(tenant.id))
        data.append(read)

    auditor.later(AuditAction.GET_ALL_TENANTS, principal.id, None, "tenant", "all")
    return envelope(data, pagination=page.pagination)


@router.get("/users")
def all_users(
    role: RoleValue | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None),
    tenant_id: UUID | None = Query(None, alias="tenantId"),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Users across tenants, with the tenant each belongs to."""
    authorize(principal, Action.LIST_ALL_USERS)
    scope = resolve_scope(principal, tenant_id)
    page = UserRepository(db).list(scope, UserFilters(role=role, is_active=is_active, search=search), params)

    data = []
    for user in page.items:
        read = UserWithTenant.model_validate(user)
        if user.tenant is not None:
            read.tenant_name = user.tenant.name
            read.tenant_subdomain = user.tenant.subdomain
        data.append(read)

    auditor.later(AuditAction.GET_ALL_USERS, principal.id, None, "user", "all")
    return envelope(data, pagination=page.pagination)


@router.get("/projects")
def all_projects(
    status: ProjectStatusValue | None = Query(None),
    search: str | None = Query(None),
    tenant_id: UUID | None = Query(None, alias="tenantId"),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    authorize(principal, Action.LIST_ALL_PROJECTS)
    scope = resolve_scope(principal, tenant_id)
    page = ProjectRepository(db).list(scope, ProjectFilters(status=status, search=search), params)
    auditor.later(AuditAction.GET_ALL_PROJECTS, principal.id, None, "project", "all")
    return envelope(project_reads(db, page.items), pagination=page.pagination)


@router.get("/tasks")
def all_tasks(
    filters: TaskFilters = Depends(task_filters),
    tenant_id: UUID | None = Query(None, alias="tenantId"),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    authorize(principal, Action.LIST_ALL_TASKS)
    scope = resolve_scope(principal, tenant_id)
    page = TaskRepository(db).list(scope, filters, params)
    auditor.later(AuditAction.GET_ALL_TASKS, principal.id, None, "task", "all")
    return envelope(
        [TaskRead.model_validate(t) for t in page.items],
        pagination=page.pagination,
    )


@router.put("/tenants/{tenant_id}/status")
def update_tenant_status(
    tenant_id: UUID,
    payload: TenantStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Move a tenant through its lifecycle.

    trial -> active, active -> suspended | inactive, suspended -> active.
    Nothing leaves inactive. Re-applying the current status is a no-op.
    """
    authorize(principal, Action.UPDATE_TENANT_STATUS)
    tenants = TenantRepository(db)
    tenant = tenants.get(TenantScope.all_tenants(), tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant")

    current = tenant.status
    if payload.status != current:
        if payload.status not in STATUS_TRANSITIONS[current]:
            raise ConflictError(f"Cannot change tenant status from {current} to {payload.status}")
        with transaction(db):
            tenants.update(tenant, {"status": payload.status})
        logger.info(f"Tenant {tenant.id} status {current} -> {payload.status}")

    auditor.later(AuditAction.UPDATE_TENANT_STATUS, principal.id, tenant.id, "tenant", tenant.id)
    return envelope(TenantDetail.model_validate(tenant), message="Tenant status updated successfully")

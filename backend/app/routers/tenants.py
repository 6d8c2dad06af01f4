"""Tenant router."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db, transaction
from app.deps import Auditor, get_auditor, get_current_principal, get_page_params
from app.exceptions import NotFoundError, ValidationFailedError
from app.models.audit_log import AuditAction
from app.models.tenant import Tenant
from app.repositories.base import PageParams
from app.repositories.tenant import TenantFilters, TenantRepository
from app.schemas.common import envelope
from app.schemas.tenant import (
    TenantDetail, TenantRead, TenantStats, TenantStatusValue, TenantSummaryDetail, TenantUpdate,
)
from app.services.authorization import Action, Resource, authorize, is_allowed
from app.services.principal import Principal
from app.services.scope import TenantScope, resolve_scope

router = APIRouter(prefix="/tenants", tags=["tenants"])

SUBSCRIPTION_FIELDS = {"status", "subscription_plan", "max_users", "max_projects"}


def _get_tenant(db: Session, principal: Principal, tenant_id: UUID) -> Tenant:
    scope = resolve_scope(principal, tenant_id)
    tenant = TenantRepository(db).get(scope, tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant")
    return tenant


def tenant_view(principal: Principal, tenant: Tenant, stats: dict | None = None):
    """Subscription fields are only shown to those allowed to see them."""
    if is_allowed(principal, Action.VIEW_TENANT_SUBSCRIPTION):
        read = TenantDetail.model_validate(tenant)
    else:
        read = TenantSummaryDetail.model_validate(tenant)
    read.stats = TenantStats(**stats) if stats else None
    return read


@router.get("")
def list_tenants(
    status: TenantStatusValue | None = Query(None),
    search: str | None = Query(None),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List all tenants (super admin only)."""
    authorize(principal, Action.LIST_ALL_TENANTS)
    page = TenantRepository(db).list(
        TenantScope.all_tenants(), TenantFilters(status=status, search=search), params
    )
    return envelope(
        [TenantRead.model_validate(t) for t in page.items],
        pagination=page.pagination,
    )


@router.get("/{tenant_id}")
def get_tenant(
    tenant_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Tenant details with usage statistics."""
    authorize(principal, Action.VIEW_TENANT)
    tenant = _get_tenant(db, principal, tenant_id)
    stats = TenantRepository(db).stats(tenant.id)
    return envelope(tenant_view(principal, tenant, stats))


@router.put("/{tenant_id}")
def update_tenant(
    tenant_id: UUID,
    payload: TenantUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Update a tenant. Tenant admins may only rename their own tenant."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailedError("No valid fields to update")

    if "name" in changes:
        authorize(principal, Action.UPDATE_TENANT_NAME)
    if SUBSCRIPTION_FIELDS & changes.keys():
        authorize(principal, Action.UPDATE_TENANT_SUBSCRIPTION)

    tenant = _get_tenant(db, principal, tenant_id)
    if "name" in changes:
        authorize(principal, Action.UPDATE_TENANT_NAME, Resource(tenant_id=tenant.id))

    with transaction(db):
        TenantRepository(db).update(tenant, changes)

    auditor.later(AuditAction.UPDATE_TENANT, principal.id, tenant.id, "tenant", tenant.id)
    return envelope(tenant_view(principal, tenant), message="Tenant updated successfully")


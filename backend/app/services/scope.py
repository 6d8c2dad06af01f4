"""Tenant scope resolution."""
import uuid
from dataclasses import dataclass

from app.exceptions import ForbiddenError, ValidationFailedError
from app.services.principal import Principal


@dataclass(frozen=True)
class TenantScope:
    """The tenant a request may touch.

    ``tenant_id is None`` means all tenants, which only a super admin
    can obtain.
    """

    tenant_id: uuid.UUID | None

    @classmethod
    def all_tenants(cls) -> "TenantScope":
        return cls(tenant_id=None)

    @property
    def is_all_tenants(self) -> bool:
        return self.tenant_id is None

    def allows(self, tenant_id: uuid.UUID | None) -> bool:
        return self.is_all_tenants or tenant_id == self.tenant_id

    def require_tenant(self) -> uuid.UUID:
        """The concrete tenant id, for operations that create rows."""
        if self.tenant_id is None:
            raise ValidationFailedError("tenantId is required for this operation")
        return self.tenant_id


def resolve_scope(principal: Principal, requested_tenant_id: uuid.UUID | None = None) -> TenantScope:
    if principal.is_super_admin:
        return TenantScope(tenant_id=requested_tenant_id)
    if requested_tenant_id is not None and requested_tenant_id != principal.tenant_id:
        raise ForbiddenError("Access denied to this tenant")
    return TenantScope(tenant_id=principal.tenant_id)

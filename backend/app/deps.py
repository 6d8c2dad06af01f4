"""Request-scoped dependencies shared by the routers."""
from dataclasses import dataclass
from uuid import UUID

from fastapi import BackgroundTasks, Depends, Header, Query, Request
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db
from app.models.audit_log import AuditAction
from app.repositories.base import PageParams
from app.services.audit import AuditEvent, AuditRecorder, client_ip
from app.services.principal import Principal, extract_bearer_token, resolve_principal
from app.services.scope import TenantScope, resolve_scope


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_principal(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Principal:
    """Resolve the bearer token into a Principal."""
    token = extract_bearer_token(authorization)
    return resolve_principal(db, token, settings.secret_key)


def get_scope(
    principal: Principal = Depends(get_current_principal),
    tenant_id: UUID | None = Query(None, alias="tenantId"),
) -> TenantScope:
    """Scope from the ``tenantId`` query parameter, if any."""
    return resolve_scope(principal, tenant_id)


def get_page_params(
    page: str | None = Query(None),
    limit: str | None = Query(None),
) -> PageParams:
    return PageParams.parse(page, limit)


@dataclass
class Auditor:
    """Binds the audit recorder to the current request."""

    recorder: AuditRecorder
    background_tasks: BackgroundTasks
    ip_address: str | None

    def _event(self, action, user_id, tenant_id, entity_type, entity_id) -> AuditEvent:
        return AuditEvent(
            action=action,
            user_id=user_id,
            tenant_id=tenant_id,
            entity_type=entity_type,
            entity_id=entity_id,
            ip_address=self.ip_address,
        )

    def later(
        self,
        action: AuditAction,
        user_id: UUID | None,
        tenant_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id=None,
    ) -> None:
        """Record on a separate session once the response has been produced."""
        event = self._event(action, user_id, tenant_id, entity_type, entity_id)
        self.background_tasks.add_task(self.recorder.record, event)

    def within(
        self,
        db: Session,
        action: AuditAction,
        user_id: UUID | None,
        tenant_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id=None,
    ) -> None:
        """Record in the caller's open transaction on ``db``."""
        self.recorder.record(self._event(action, user_id, tenant_id, entity_type, entity_id), db=db)


def get_auditor(request: Request, background_tasks: BackgroundTasks) -> Auditor:
    return Auditor(
        recorder=request.app.state.audit_recorder,
        background_tasks=background_tasks,
        ip_address=client_ip(request),
    )

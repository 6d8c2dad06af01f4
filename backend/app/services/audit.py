"""Audit trail recording.

Audit entries are observational: ``AuditRecorder.record`` never raises.
"""
import logging
import uuid
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.orm import Session, sessionmaker

from app.models.audit_log import AuditAction, AuditLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEvent:
    action: AuditAction
    user_id: uuid.UUID | None
    tenant_id: uuid.UUID | None = None
    entity_type: str | None = None
    entity_id: str | uuid.UUID | None = None
    ip_address: str | None = None

    def to_model(self) -> AuditLog:
        return AuditLog(
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            action=self.action.value,
            entity_type=self.entity_type,
            entity_id=str(self.entity_id) if self.entity_id is not None else None,
            ip_address=self.ip_address,
        )


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45] or None
    if request.client:
        return request.client.host
    return None


class AuditRecorder:
    """Writes audit entries.

    Given the caller's session, the entry is written inside a SAVEPOINT on
    it, so it commits or rolls back together with the caller's transaction
    and a failed insert leaves that transaction usable. Without a session
    the entry is committed on a session of its own.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def record(self, event: AuditEvent, db: Session | None = None) -> None:
        try:
            if db is not None:
                with db.begin_nested():
                    db.add(event.to_model())
            else:
                self._record_standalone(event)
        except Exception as e:
            logger.error(f"Failed to record audit event {event.action.value}: {e}")

    def _record_standalone(self, event: AuditEvent) -> None:
        session = self.session_factory()
        try:
            session.add(event.to_model())
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

"""Per-plan quota checks."""
import logging
import uuid
from enum import Enum

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.exceptions import LimitReachedError, NotFoundError
from app.models.project import Project
from app.models.tenant import Tenant
from app.models.user import User

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    USER = "user"
    PROJECT = "project"


def check_creation_allowed(
    db: Session,
    tenant_id: uuid.UUID,
    kind: ResourceKind,
    lock: bool = False,
) -> None:
    """Raise ``LimitReachedError`` if the tenant is at its quota for ``kind``.

    This is a read-then-decide check: two concurrent creations can both
    pass it. With ``lock=True`` the tenant row is locked for the rest of the
    caller's transaction, which serializes creations on databases that
    support ``SELECT ... FOR UPDATE``.
    """
    stmt = select(Tenant).where(Tenant.id == tenant_id)
    if lock:
        stmt = stmt.with_for_update()
    tenant = db.execute(stmt).scalar_one_or_none()
    if tenant is None:
        raise NotFoundError("Tenant")

    if kind == ResourceKind.USER:
        limit = tenant.max_users
        count = db.scalar(select(func.count()).select_from(User).where(User.tenant_id == tenant_id))
    else:
        limit = tenant.max_projects
        count = db.scalar(select(func.count()).select_from(Project).where(Project.tenant_id == tenant_id))

    if count >= limit:
        logger.info(f"Tenant {tenant_id} reached its {kind.value} limit ({count}/{limit})")
        raise LimitReachedError(kind.value, limit)

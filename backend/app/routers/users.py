"""User management router."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db, transaction
from app.deps import (
    Auditor, get_app_settings, get_auditor, get_current_principal, get_page_params, get_scope,
)
from app.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models.audit_log import AuditAction
from app.models.user import User
from app.repositories.base import PageParams
from app.repositories.user import UserFilters, UserRepository
from app.schemas.common import envelope
from app.schemas.user import RoleValue, UserCreate, UserRead, UserUpdate
from app.services.authorization import Action, Resource, authorize
from app.services.credentials import hash_password
from app.services.limits import ResourceKind, check_creation_allowed
from app.services.principal import Principal
from app.services.scope import TenantScope

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

PROFILE_FIELDS = {"full_name", "password"}
ACCESS_FIELDS = {"role", "is_active"}


def _get_user(db: Session, scope: TenantScope, user_id: UUID) -> User:
    user = UserRepository(db).get(scope, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


def _target(user: User) -> Resource:
    return Resource(tenant_id=user.tenant_id, user_id=user.id, role=user.role)


@router.post("", status_code=status.HTTP_201_CREATED)
def add_user(
    payload: UserCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auditor: Auditor = Depends(get_auditor),
):
    """Add a user to the tenant admin's own tenant."""
    authorize(principal, Action.ADD_USER)
    tenant_id = principal.tenant_id
    users = UserRepository(db)

    if users.get_by_email(payload.email, tenant_id):
        raise ConflictError("User with this email already exists in this tenant")

    with transaction(db):
        check_creation_allowed(db, tenant_id, ResourceKind.USER, lock=settings.strict_quotas)
        user = users.create(
            tenant_id=tenant_id,
            email=payload.email,
            hashed_password=hash_password(payload.password, settings.bcrypt_rounds),
            full_name=payload.full_name,
            role=payload.role,
        )

    auditor.later(AuditAction.CREATE_USER, principal.id, tenant_id, "user", user.id)
    return envelope(UserRead.model_validate(user), message="User created successfully")


@router.get("")
def list_users(
    role: RoleValue | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None),
    params: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List users of the caller's tenant."""
    authorize(principal, Action.VIEW_USER)
    filters = UserFilters(role=role, is_active=is_active, search=search)
    page = UserRepository(db).list(scope, filters, params)
    return envelope(
        [UserRead.model_validate(u) for u in page.items],
        pagination=page.pagination,
    )


@router.get("/{user_id}")
def get_user(
    user_id: UUID,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    authorize(principal, Action.VIEW_USER)
    return envelope(UserRead.model_validate(_get_user(db, scope, user_id)))


@router.put("/{user_id}")
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auditor: Auditor = Depends(get_auditor),
):
    """Update profile fields (self) and/or access fields (tenant admins)."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailedError("No valid fields to update")

    actions = []
    if PROFILE_FIELDS & changes.keys():
        actions.append(Action.UPDATE_PROFILE)
    if ACCESS_FIELDS & changes.keys():
        actions.append(Action.UPDATE_USER_ACCESS)
    for action in actions:
        authorize(principal, action)

    user = _get_user(db, scope, user_id)
    for action in actions:
        authorize(principal, action, _target(user))

    if "password" in changes:
        changes["hashed_password"] = hash_password(changes.pop("password"), settings.bcrypt_rounds)

    with transaction(db):
        UserRepository(db).update(user, changes)

    auditor.later(AuditAction.UPDATE_USER, principal.id, user.tenant_id, "user", user.id)
    return envelope(UserRead.model_validate(user), message="User updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: UUID,
    principal: Principal = Depends(get_current_principal),
    scope: TenantScope = Depends(get_scope),
    db: Session = Depends(get_db),
    auditor: Auditor = Depends(get_auditor),
):
    """Delete a user; their tasks are unassigned and their projects kept."""
    authorize(principal, Action.DELETE_USER)
    user = _get_user(db, scope, user_id)
    authorize(principal, Action.DELETE_USER, _target(user))

    tenant_id = user.tenant_id
    with transaction(db):
        UserRepository(db).delete(user)
        auditor.within(db, AuditAction.DELETE_USER, principal.id, tenant_id, "user", user_id)

    logger.info(f"User {user_id} deleted by {principal.id}")
    return envelope(message="User deleted successfully")

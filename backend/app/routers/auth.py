"""Authentication router: tenant registration, login, current user, logout."""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db, transaction
from app.deps import Auditor, get_app_settings, get_auditor, get_current_principal
from app.exceptions import (
    ConflictError, ForbiddenError, InactiveAccountError, NotFoundError, UnauthenticatedError,
    ValidationFailedError,
)
from app.models.audit_log import AuditAction
from app.models.tenant import LOGIN_ALLOWED_STATUSES
from app.models.user import User, UserRole
from app.repositories.tenant import TenantRepository
from app.repositories.user import UserRepository
from app.schemas.common import envelope
from app.schemas.tenant import TenantRegister
from app.schemas.user import CurrentUser, LoginRequest, Token, UserRead
from app.services.credentials import create_access_token, hash_password, verify_password
from app.services.principal import Principal

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register-tenant", status_code=status.HTTP_201_CREATED)
def register_tenant(
    payload: TenantRegister,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auditor: Auditor = Depends(get_auditor),
):
    """Create a tenant together with its first tenant admin."""
    tenants = TenantRepository(db)
    users = UserRepository(db)

    if tenants.get_by_subdomain(payload.subdomain):
        raise ConflictError("Subdomain already exists")
    if users.email_in_any_tenant(payload.admin_email):
        raise ConflictError("Email already registered")

    with transaction(db):
        tenant = tenants.create(name=payload.tenant_name, subdomain=payload.subdomain)
        admin = users.create(
            tenant_id=tenant.id,
            email=payload.admin_email,
            hashed_password=hash_password(payload.admin_password, settings.bcrypt_rounds),
            full_name=payload.admin_full_name,
            role=UserRole.TENANT_ADMIN.value,
        )
        auditor.within(db, AuditAction.CREATE_TENANT, admin.id, tenant.id, "tenant", tenant.id)

    logger.info(f"Registered tenant {tenant.subdomain} ({tenant.id})")
    return envelope(
        {
            "tenantId": tenant.id,
            "subdomain": tenant.subdomain,
            "adminUser": UserRead.model_validate(admin),
        },
        message="Tenant registered successfully",
    )


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    auditor: Auditor = Depends(get_auditor),
):
    """Exchange credentials for an access token.

    Tenant users log in with their tenant's subdomain; super admins log in
    without one.
    """
    users = UserRepository(db)
    if payload.tenant_subdomain:
        tenant = TenantRepository(db).get_by_subdomain(payload.tenant_subdomain)
        if tenant is None:
            raise NotFoundError("Tenant")
        if tenant.status not in LOGIN_ALLOWED_STATUSES:
            raise ForbiddenError(f"Tenant account is {tenant.status}")
        user = users.get_by_email(payload.email, tenant.id)
    else:
        user = users.get_by_email(payload.email, None)
        if user is None and users.email_in_any_tenant(payload.email):
            raise ValidationFailedError("Tenant subdomain is required")

    if user is None or not verify_password(payload.password, user.hashed_password):
        raise UnauthenticatedError("Invalid email or password")
    if not user.is_active:
        raise InactiveAccountError()

    expires = timedelta(minutes=settings.access_token_expire_minutes)
    token = create_access_token(
        data={
            "sub": str(user.id),
            "tenant_id": str(user.tenant_id) if user.tenant_id else None,
            "role": user.role,
        },
        secret_key=settings.secret_key,
        expires_delta=expires,
    )
    auditor.later(AuditAction.USER_LOGIN, user.id, user.tenant_id, "user", user.id)

    return envelope(
        Token(token=token, expires_in=int(expires.total_seconds()), user=UserRead.model_validate(user)),
        message="Login successful",
    )


@router.get("/me")
def get_me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get current user info, with the tenant for tenant users."""
    user = db.get(User, principal.id)
    return envelope(CurrentUser.model_validate(user))


@router.post("/logout")
def logout(
    principal: Principal = Depends(get_current_principal),
    auditor: Auditor = Depends(get_auditor),
):
    """Tokens are stateless; logout only leaves a trace in the audit log."""
    auditor.later(AuditAction.USER_LOGOUT, principal.id, principal.tenant_id, "user", principal.id)
    return envelope(message="Logged out successfully")

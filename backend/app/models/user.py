"""User model with RBAC roles."""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Boolean, CheckConstraint, Column, String, DateTime, ForeignKey, Index,
    UniqueConstraint, Uuid, Enum as SQLEnum, text,
)
from sqlalchemy.orm import relationship

from app.database import Base


class UserRole(str, Enum):
    """User roles for RBAC."""
    USER = "user"
    TENANT_ADMIN = "tenant_admin"
    SUPER_ADMIN = "super_admin"


class User(Base):
    """User with tenant association and role.

    Super admins are the only users without a tenant; they are keyed by
    email alone, tenant users by (email, tenant_id).
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", "tenant_id", name="uq_users_email_tenant"),
        Index(
            "uq_users_email_no_tenant",
            "email",
            unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
        CheckConstraint(
            "(role = 'super_admin' AND tenant_id IS NULL) OR "
            "(role <> 'super_admin' AND tenant_id IS NOT NULL)",
            name="ck_users_role_tenant",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=True, index=True)
    email = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(*[r.value for r in UserRole], name="userrole"),
        nullable=False,
        default=UserRole.USER.value,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="users")

"""Tenant model for multi-tenancy."""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Integer, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.database import Base


class TenantStatus(str, Enum):
    """Tenant lifecycle status."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    TRIAL = "trial"
    INACTIVE = "inactive"


class SubscriptionPlan(str, Enum):
    """Subscription plans with their default quotas."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


# plan -> (max_users, max_projects)
PLAN_LIMITS: dict[str, tuple[int, int]] = {
    SubscriptionPlan.FREE.value: (5, 3),
    SubscriptionPlan.PRO.value: (25, 15),
    SubscriptionPlan.ENTERPRISE.value: (100, 50),
}

# current status -> statuses reachable from the super-admin status endpoint
STATUS_TRANSITIONS: dict[str, set[str]] = {
    TenantStatus.TRIAL.value: {TenantStatus.ACTIVE.value},
    TenantStatus.ACTIVE.value: {TenantStatus.SUSPENDED.value, TenantStatus.INACTIVE.value},
    TenantStatus.SUSPENDED.value: {TenantStatus.ACTIVE.value},
    TenantStatus.INACTIVE.value: set(),
}

LOGIN_ALLOWED_STATUSES = {TenantStatus.ACTIVE.value, TenantStatus.TRIAL.value}


class Tenant(Base):
    """Tenant for multi-tenant isolation."""

    __tablename__ = "tenants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    subdomain = Column(String(63), nullable=False, unique=True)
    status = Column(
        SQLEnum(*[s.value for s in TenantStatus], name="tenantstatus"),
        nullable=False,
        default=TenantStatus.ACTIVE.value,
    )
    subscription_plan = Column(
        SQLEnum(*[p.value for p in SubscriptionPlan], name="subscriptionplan"),
        nullable=False,
        default=SubscriptionPlan.FREE.value,
    )
    max_users = Column(Integer, nullable=False, default=PLAN_LIMITS["free"][0])
    max_projects = Column(Integer, nullable=False, default=PLAN_LIMITS["free"][1])
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    users = relationship("User", back_populates="tenant")

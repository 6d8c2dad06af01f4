"""Append-only audit trail."""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Uuid

from app.database import Base


class AuditAction(str, Enum):
    """Action tags written to the audit trail."""
    CREATE_TENANT = "CREATE_TENANT"
    UPDATE_TENANT = "UPDATE_TENANT"
    UPDATE_TENANT_STATUS = "UPDATE_TENANT_STATUS"
    USER_LOGIN = "USER_LOGIN"
    USER_LOGOUT = "USER_LOGOUT"
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"
    CREATE_PROJECT = "CREATE_PROJECT"
    UPDATE_PROJECT = "UPDATE_PROJECT"
    DELETE_PROJECT = "DELETE_PROJECT"
    CREATE_TASK = "CREATE_TASK"
    UPDATE_TASK = "UPDATE_TASK"
    UPDATE_TASK_STATUS = "UPDATE_TASK_STATUS"
    DELETE_TASK = "DELETE_TASK"
    GET_SYSTEM_STATS = "GET_SYSTEM_STATS"
    GET_ALL_TENANTS = "GET_ALL_TENANTS"
    GET_ALL_USERS = "GET_ALL_USERS"
    GET_ALL_PROJECTS = "GET_ALL_PROJECTS"
    GET_ALL_TASKS = "GET_ALL_TASKS"


class AuditLog(Base):
    """One recorded action. No foreign keys: entries outlive the rows they mention."""

    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, nullable=True, index=True)
    user_id = Column(Uuid, nullable=True, index=True)
    action = Column(String(64), nullable=False)
    entity_type = Column(String(64), nullable=True)
    entity_id = Column(String(64), nullable=True)
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

"""Task model."""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Uuid, Enum as SQLEnum

from app.database import Base


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(Base):
    """Task inside a project.

    ``tenant_id`` is a copy of the parent project's tenant so that scoped
    queries do not need a join.
    """

    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SQLEnum(*[s.value for s in TaskStatus], name="taskstatus"),
        nullable=False,
        default=TaskStatus.TODO.value,
    )
    priority = Column(
        SQLEnum(*[p.value for p in TaskPriority], name="taskpriority"),
        nullable=False,
        default=TaskPriority.MEDIUM.value,
    )
    assigned_to = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

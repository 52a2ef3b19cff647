"""SQLAlchemy ORM models for taskboard."""

from app.models.base import Base, TimestampMixin
from app.models.auth import User
from app.models.project import Project, KanbanColumn, Task

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Project",
    "KanbanColumn",
    "Task",
]

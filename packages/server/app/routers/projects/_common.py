"""Shared utilities, models, and helpers for project routers."""

from __future__ import annotations

import json
from typing import Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.logging_config import get_logger
from app.models import Project, Task, KanbanColumn
from app import dependencies
from app.utils import now_ms

logger = get_logger(__name__)

__all__ = [
    # Router
    "router",
    # Logger
    "logger",
    # Pydantic Models
    "CreateProjectRequest",
    "UpdateProjectRequest",
    "CreateTaskRequest",
    "UpdateTaskRequest",
    "MoveTaskRequest",
    "CreateColumnRequest",
    "UpdateColumnRequest",
    # Constants
    "DEFAULT_COLUMNS",
    "EVENTS_STREAM",
    # Helper functions
    "get_project_or_404",
    "get_column_or_404",
    "get_task_or_404",
    "get_owned_task_or_404",
    "list_columns_ordered",
    "list_tasks_ordered",
    "_serialize_project",
    "_serialize_task",
    "_serialize_column",
    "_publish_event",
]

PROJECT_NAME_MAX = 100
PROJECT_DESCRIPTION_MAX = 500
COLUMN_NAME_MAX = 50
TASK_TITLE_MAX = 200
TASK_DESCRIPTION_MAX = 1000


def _required_text(value: str, limit: int) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    if len(value) > limit:
        raise ValueError(f"must be at most {limit} characters")
    return value


def _optional_text(value: Optional[str], limit: int) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > limit:
        raise ValueError(f"must be at most {limit} characters")
    return value


# ══════════════════════════════════════════════════════════════════════════
# PYDANTIC MODELS
# ══════════════════════════════════════════════════════════════════════════


class CreateProjectRequest(BaseModel):
    name: str
    description: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, PROJECT_NAME_MAX)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _optional_text(v, PROJECT_DESCRIPTION_MAX)


class UpdateProjectRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _required_text(v, PROJECT_NAME_MAX)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v, PROJECT_DESCRIPTION_MAX)


class CreateTaskRequest(BaseModel):
    # Required: a task is always created into an explicit column
    columnId: str
    title: str
    description: str = ""

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _required_text(v, TASK_TITLE_MAX)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _optional_text(v, TASK_DESCRIPTION_MAX)


class UpdateTaskRequest(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _required_text(v, TASK_TITLE_MAX)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v, TASK_DESCRIPTION_MAX)


class MoveTaskRequest(BaseModel):
    columnId: str
    order: int = Field(ge=0)


class CreateColumnRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, COLUMN_NAME_MAX)


class UpdateColumnRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, COLUMN_NAME_MAX)


# ══════════════════════════════════════════════════════════════════════════
# CONSTANTS
# ══════════════════════════════════════════════════════════════════════════

DEFAULT_COLUMNS = [
    {"name": "To Do", "order": 0},
    {"name": "In Progress", "order": 1},
    {"name": "Done", "order": 2},
]

EVENTS_STREAM = "taskboard:events:global"


# ══════════════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ══════════════════════════════════════════════════════════════════════════


async def get_project_or_404(
    session: AsyncSession, project_id: str, owner_id: str
) -> Project:
    """Get a project owned by ``owner_id`` or raise 404."""
    result = await session.execute(
        select(Project).where(Project.id == project_id, Project.owner_id == owner_id)
    )
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(status_code=404, detail=f"Project {project_id} not found")
    return project


async def get_column_or_404(
    session: AsyncSession, project_id: str, column_id: str, *, for_update: bool = False
) -> KanbanColumn:
    """Get column by ID within project or raise 404.

    ``for_update`` locks the column row until the transaction ends, which
    serialises concurrent moves into the same column on PostgreSQL.
    """
    query = select(KanbanColumn).where(
        KanbanColumn.id == column_id, KanbanColumn.project_id == project_id
    )
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    column = result.scalar_one_or_none()
    if not column:
        raise HTTPException(status_code=404, detail=f"Column {column_id} not found")
    return column


async def get_task_or_404(session: AsyncSession, project_id: str, task_id: str) -> Task:
    """Get task by ID within project or raise 404."""
    result = await session.execute(
        select(Task).where(Task.id == task_id, Task.project_id == project_id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


async def get_owned_task_or_404(
    session: AsyncSession, task_id: str, owner_id: str
) -> Task:
    """Get a task whose project is owned by ``owner_id`` or raise 404."""
    result = await session.execute(
        select(Task)
        .join(Project, Project.id == Task.project_id)
        .where(Task.id == task_id, Project.owner_id == owner_id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


async def list_columns_ordered(
    session: AsyncSession, project_id: str
) -> list[KanbanColumn]:
    result = await session.execute(
        select(KanbanColumn)
        .where(KanbanColumn.project_id == project_id)
        .order_by(KanbanColumn.order, KanbanColumn.created_at, KanbanColumn.id)
    )
    return list(result.scalars().all())


async def list_tasks_ordered(
    session: AsyncSession, project_id: str
) -> list[tuple[Task, KanbanColumn]]:
    """All tasks of a project with their columns, ascending by order."""
    result = await session.execute(
        select(Task, KanbanColumn)
        .join(KanbanColumn, KanbanColumn.id == Task.column_id)
        .where(Task.project_id == project_id)
        .order_by(Task.order, Task.created_at, Task.id)
    )
    return [(task, column) for task, column in result.all()]


def _serialize_project(project: Project) -> dict:
    """Serialize a Project model to dict."""
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


def _serialize_column(col: KanbanColumn) -> dict:
    """Serialize a KanbanColumn model to dict."""
    return {
        "id": col.id,
        "project_id": col.project_id,
        "name": col.name,
        "order": col.order,
        "created_at": col.created_at,
    }


def _serialize_task(task: Task, column: KanbanColumn) -> dict:
    """Serialize a Task with its column reference expanded."""
    return {
        "id": task.id,
        "project_id": task.project_id,
        "title": task.title,
        "description": task.description,
        "order": task.order,
        "column": {"id": column.id, "name": column.name, "order": column.order},
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }


async def _publish_event(event_type: str, data: dict):
    """Publish event to the global stream for live board updates."""
    if dependencies.redis_client:
        try:
            logger.debug(f"Publishing Redis event: type={event_type}")
            event = {"type": event_type, **data, "timestamp": now_ms()}
            await dependencies.redis_client.xadd(
                EVENTS_STREAM, {"data": json.dumps(event)}
            )
        except Exception as e:
            logger.warning(f"Failed to publish {event_type}: {e}")

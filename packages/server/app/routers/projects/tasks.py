"""Task and column management endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import AuthUser, get_current_user
from app.database import get_async_session
from app.models import Task, KanbanColumn
from app.ordering import next_order
from app.utils import now_ms, gen_id
from app.logging_config import get_logger
from ._common import (
    get_project_or_404,
    get_column_or_404,
    get_task_or_404,
    list_columns_ordered,
    list_tasks_ordered,
    _serialize_task,
    _serialize_column,
    _publish_event,
    CreateTaskRequest,
    UpdateTaskRequest,
    CreateColumnRequest,
    UpdateColumnRequest,
)

logger = get_logger(__name__)
router = APIRouter()


# ══════════════════════════════════════════════════════════════════════════
# COLUMN ENDPOINTS
# ══════════════════════════════════════════════════════════════════════════


@router.get("/{project_id}/columns")
async def list_columns(
    project_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """List a project's columns in display order."""
    logger.debug(f"Listing columns: project_id={project_id}")
    await get_project_or_404(session, project_id, user.id)
    columns = await list_columns_ordered(session, project_id)
    return [_serialize_column(c) for c in columns]


@router.post("/{project_id}/columns", status_code=201)
async def create_column(
    project_id: str,
    req: CreateColumnRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Append a kanban column to a project."""
    logger.debug(f"Creating column: project_id={project_id}, name={req.name}")
    project = await get_project_or_404(session, project_id, user.id)

    result = await session.execute(
        select(KanbanColumn.order).where(KanbanColumn.project_id == project.id)
    )
    now = now_ms()
    column = KanbanColumn(
        id=gen_id("col_"),
        project_id=project_id,
        name=req.name,
        order=next_order(result.scalars().all()),
        created_at=now,
        updated_at=now,
    )
    session.add(column)
    await session.commit()

    await _publish_event(
        "COLUMN_CREATED", {"projectId": project_id, "columnId": column.id}
    )
    return _serialize_column(column)


@router.put("/{project_id}/columns/{column_id}")
async def update_column(
    project_id: str,
    column_id: str,
    req: UpdateColumnRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Rename a kanban column. Its order is never changed."""
    logger.debug(f"Updating column: project_id={project_id}, column_id={column_id}")
    await get_project_or_404(session, project_id, user.id)
    column = await get_column_or_404(session, project_id, column_id)

    column.name = req.name
    column.updated_at = now_ms()
    await session.commit()

    await _publish_event(
        "COLUMN_UPDATED", {"projectId": project_id, "columnId": column_id}
    )
    return _serialize_column(column)


@router.delete("/{project_id}/columns/{column_id}")
async def delete_column(
    project_id: str,
    column_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Delete a kanban column together with every task in it."""
    logger.debug(f"Deleting column: project_id={project_id}, column_id={column_id}")
    await get_project_or_404(session, project_id, user.id)
    column = await get_column_or_404(session, project_id, column_id)

    result = await session.execute(delete(Task).where(Task.column_id == column_id))
    await session.delete(column)
    await session.commit()
    logger.info(f"Deleted column {column_id} and {result.rowcount} tasks")

    await _publish_event(
        "COLUMN_DELETED", {"projectId": project_id, "columnId": column_id}
    )
    return {"status": "deleted", "column_id": column_id}


# ══════════════════════════════════════════════════════════════════════════
# TASK ENDPOINTS
# ══════════════════════════════════════════════════════════════════════════


@router.post("/{project_id}/tasks", status_code=201)
async def create_task(
    project_id: str,
    req: CreateTaskRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Create a task at the bottom of the given column."""
    logger.debug(
        f"Creating task: project_id={project_id}, column={req.columnId}, title={req.title}"
    )
    await get_project_or_404(session, project_id, user.id)
    column = await get_column_or_404(session, project_id, req.columnId, for_update=True)

    result = await session.execute(
        select(Task.order).where(Task.column_id == column.id)
    )
    now = now_ms()
    task = Task(
        id=gen_id("task_"),
        project_id=project_id,
        column_id=column.id,
        title=req.title,
        description=req.description,
        order=next_order(result.scalars().all()),
        created_at=now,
        updated_at=now,
    )
    session.add(task)
    await session.commit()

    await _publish_event(
        "TASK_CREATED",
        {"projectId": project_id, "taskId": task.id, "columnId": column.id},
    )
    return _serialize_task(task, column)


@router.get("/{project_id}/tasks")
async def list_tasks(
    project_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """List a project's tasks ascending by order, column expanded."""
    logger.debug(f"Listing tasks: project_id={project_id}")
    await get_project_or_404(session, project_id, user.id)
    rows = await list_tasks_ordered(session, project_id)
    return [_serialize_task(task, column) for task, column in rows]


@router.get("/{project_id}/tasks/{task_id}")
async def get_task(
    project_id: str,
    task_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    logger.debug(f"Getting task: project_id={project_id}, task_id={task_id}")
    await get_project_or_404(session, project_id, user.id)
    task = await get_task_or_404(session, project_id, task_id)
    column = await session.get(KanbanColumn, task.column_id)
    return _serialize_task(task, column)


@router.put("/{project_id}/tasks/{task_id}")
async def update_task(
    project_id: str,
    task_id: str,
    req: UpdateTaskRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Update a task's title and description. Position is left untouched."""
    logger.debug(f"Updating task: project_id={project_id}, task_id={task_id}")
    await get_project_or_404(session, project_id, user.id)
    task = await get_task_or_404(session, project_id, task_id)

    task.title = req.title
    if req.description is not None:
        task.description = req.description
    task.updated_at = now_ms()
    await session.commit()

    column = await session.get(KanbanColumn, task.column_id)
    await _publish_event("TASK_UPDATED", {"projectId": project_id, "taskId": task_id})
    return _serialize_task(task, column)


@router.delete("/{project_id}/tasks/{task_id}")
async def delete_task(
    project_id: str,
    task_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Delete a task. Remaining siblings keep their orders."""
    logger.debug(f"Deleting task: project_id={project_id}, task_id={task_id}")
    await get_project_or_404(session, project_id, user.id)
    task = await get_task_or_404(session, project_id, task_id)

    await session.delete(task)
    await session.commit()

    await _publish_event("TASK_DELETED", {"projectId": project_id, "taskId": task_id})
    return {"status": "deleted", "task_id": task_id}


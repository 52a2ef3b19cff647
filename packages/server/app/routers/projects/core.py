"""Core project CRUD endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import AuthUser, get_current_user
from app.database import get_async_session
from app.models import Project, KanbanColumn
from app.utils import now_ms, gen_id

from ._common import (
    logger,
    get_project_or_404,
    list_columns_ordered,
    list_tasks_ordered,
    _serialize_project,
    _serialize_task,
    _serialize_column,
    _publish_event,
    CreateProjectRequest,
    UpdateProjectRequest,
    DEFAULT_COLUMNS,
)

router = APIRouter()


@router.post("/", status_code=201)
async def create_project(
    req: CreateProjectRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Create a new project seeded with the default board columns."""
    logger.debug(f"Creating project: name={req.name}, owner={user.id}")
    now = now_ms()

    project = Project(
        id=gen_id("proj_"),
        owner_id=user.id,
        name=req.name,
        description=req.description,
        created_at=now,
        updated_at=now,
    )
    session.add(project)

    columns = []
    for col_def in DEFAULT_COLUMNS:
        column = KanbanColumn(
            id=gen_id("col_"),
            project_id=project.id,
            name=col_def["name"],
            order=col_def["order"],
            created_at=now,
            updated_at=now,
        )
        session.add(column)
        columns.append(column)

    await session.commit()

    await _publish_event(
        "PROJECT_CREATED", {"projectId": project.id, "name": project.name}
    )

    return {
        **_serialize_project(project),
        "columns": [_serialize_column(c) for c in columns],
    }


@router.get("/")
async def list_projects(
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """List the caller's projects, newest first."""
    logger.debug(f"Listing projects for owner={user.id}")
    result = await session.execute(
        select(Project)
        .where(Project.owner_id == user.id)
        .order_by(Project.created_at.desc(), Project.id)
    )
    projects = result.scalars().all()
    logger.debug(f"Found {len(projects)} projects")
    return [_serialize_project(p) for p in projects]


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Get project with full board state (columns and tasks)."""
    logger.debug(f"Getting project: project_id={project_id}")
    project = await get_project_or_404(session, project_id, user.id)

    columns = await list_columns_ordered(session, project_id)
    tasks = await list_tasks_ordered(session, project_id)
    logger.debug(
        f"Retrieved project {project_id}: columns={len(columns)}, tasks={len(tasks)}"
    )

    return {
        **_serialize_project(project),
        "columns": [_serialize_column(c) for c in columns],
        "tasks": [_serialize_task(t, c) for t, c in tasks],
    }


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    req: UpdateProjectRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Update project name and/or description."""
    logger.debug(f"Updating project: project_id={project_id}, name={req.name}")
    project = await get_project_or_404(session, project_id, user.id)

    if req.name is not None:
        project.name = req.name
    if req.description is not None:
        project.description = req.description
    project.updated_at = now_ms()

    await session.commit()

    await _publish_event("PROJECT_UPDATED", {"projectId": project_id})
    return _serialize_project(project)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Permanently delete a project with all of its columns and tasks."""
    logger.debug(f"Deleting project: project_id={project_id}")
    project = await get_project_or_404(session, project_id, user.id)
    await session.delete(project)
    await session.commit()

    await _publish_event("PROJECT_DELETED", {"projectId": project_id})
    return {"status": "deleted", "project_id": project_id}

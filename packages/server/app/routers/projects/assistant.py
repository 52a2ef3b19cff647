"""Project assistant endpoints: summarize the board, answer questions."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import AuthUser, get_current_user
from app.database import get_async_session
from app.dependencies import get_assistant
from app.logging_config import get_logger
from app.services.assistant import AssistantError, AssistantService
from ._common import get_project_or_404, list_columns_ordered, list_tasks_ordered

logger = get_logger(__name__)
router = APIRouter()

NO_TASKS_SUMMARY = "No tasks found in this project."


class AskRequest(BaseModel):
    question: str
    taskId: Optional[str] = None

    @field_validator("question")
    @classmethod
    def validate_question(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


def _assistant_failed(e: AssistantError) -> HTTPException:
    logger.warning(f"Assistant request failed: {e}")
    return HTTPException(status_code=502, detail="Assistant request failed")


@router.post("/{project_id}/assistant/summarize")
async def summarize_project(
    project_id: str,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    assistant: AssistantService = Depends(get_assistant),
):
    """Summarize every task of the project grouped by column name."""
    logger.debug(f"Summarizing project: project_id={project_id}")
    project = await get_project_or_404(session, project_id, user.id)
    rows = await list_tasks_ordered(session, project_id)
    if not rows:
        return {"summary": NO_TASKS_SUMMARY}

    by_column_id: dict[str, list[dict]] = {}
    for task, column in rows:
        by_column_id.setdefault(column.id, []).append(
            {"title": task.title, "description": task.description}
        )

    # Sections follow board order; columns without tasks are left out
    tasks_by_column: dict[str, list[dict]] = {}
    for column in await list_columns_ordered(session, project_id):
        if column.id in by_column_id:
            tasks_by_column.setdefault(column.name, []).extend(by_column_id[column.id])

    try:
        summary = await assistant.summarize(
            project.name, project.description, tasks_by_column
        )
    except AssistantError as e:
        raise _assistant_failed(e)
    return {"summary": summary}


@router.post("/{project_id}/assistant/ask")
async def ask_project(
    project_id: str,
    req: AskRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    assistant: AssistantService = Depends(get_assistant),
):
    """Answer a question using the project, or one of its tasks, as context."""
    logger.debug(f"Asking about project: project_id={project_id}, task={req.taskId}")
    project = await get_project_or_404(session, project_id, user.id)

    context = (
        f"Project: {project.name}\n"
        f"Description: {project.description or 'No description'}\n\n"
    )
    rows = await list_tasks_ordered(session, project_id)

    if req.taskId:
        focus = next(((t, c) for t, c in rows if t.id == req.taskId), None)
        if focus is None:
            raise HTTPException(status_code=404, detail=f"Task {req.taskId} not found")
        task, column = focus
        context += (
            "Specific Task Context:\n"
            f"Title: {task.title}\n"
            f"Description: {task.description or 'No description'}\n"
            f"Column: {column.name}\n\n"
        )
    elif rows:
        context += "All Tasks in Project:\n"
        for task, column in rows:
            context += f"- {task.title} ({column.name})"
            if task.description:
                context += f": {task.description}"
            context += "\n"
        context += "\n"

    try:
        answer = await assistant.ask(context, req.question)
    except AssistantError as e:
        raise _assistant_failed(e)
    return {"answer": answer}

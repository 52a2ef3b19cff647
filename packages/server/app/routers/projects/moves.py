"""Task move endpoint: the authoritative reordering of a column."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import AuthUser, get_current_user
from app.database import get_async_session
from app.models import Task
from app.ordering import Slot, reorder, changed_orders
from app.utils import now_ms
from app.logging_config import get_logger
from ._common import (
    get_column_or_404,
    get_owned_task_or_404,
    _serialize_task,
    _publish_event,
    MoveTaskRequest,
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("/{task_id}/move")
async def move_task(
    task_id: str,
    req: MoveTaskRequest,
    user: AuthUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Move a task to ``order`` inside ``columnId``.

    The destination column is renumbered with ``reorder`` whether or not the
    task came from another column; the source column keeps its gap.
    """
    logger.debug(
        f"Moving task: task_id={task_id}, column={req.columnId}, order={req.order}"
    )
    task = await get_owned_task_or_404(session, task_id, user.id)
    # Row lock on the destination column for the rest of the transaction
    column = await get_column_or_404(
        session, task.project_id, req.columnId, for_update=True
    )
    source_column_id = task.column_id

    result = await session.execute(
        select(Task)
        .where(Task.column_id == column.id)
        .order_by(Task.order, Task.created_at, Task.id)
    )
    siblings = {t.id: t for t in result.scalars().all()}
    siblings[task.id] = task

    before = [Slot(t.id, t.order) for t in siblings.values() if t.column_id == column.id]
    after = reorder(before, task.id, req.order)
    changes = changed_orders(before, after)

    now = now_ms()
    task.column_id = column.id
    task.order = req.order
    task.updated_at = now
    for sibling_id, order in changes.items():
        if sibling_id == task.id:
            continue
        siblings[sibling_id].order = order
        siblings[sibling_id].updated_at = now

    await session.commit()

    shifted = len([k for k in changes if k != task.id])
    logger.info(
        f"Moved task {task_id} from {source_column_id} to {column.id} at order "
        f"{req.order}, shifted {shifted} siblings"
    )

    await _publish_event(
        "TASK_MOVED",
        {
            "projectId": task.project_id,
            "taskId": task_id,
            "fromColumnId": source_column_id,
            "columnId": column.id,
            "order": req.order,
        },
    )
    return _serialize_task(task, column)

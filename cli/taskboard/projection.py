"""Client-side mirror of a board that applies moves before the server confirms.

A drop is planned against the rendered list, applied locally with the same
``reorder`` the server runs, and then confirmed through an async ``mover``.
When the mover fails, the list captured right before the apply is restored
as-is; nothing from the speculative arrangement survives.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Union

from app.ordering import Slot, next_order, reorder

logger = logging.getLogger(__name__)

# A task's column as it arrives on the wire: a bare id or an expanded record
ColumnRef = Union[str, Mapping[str, Any]]

Mover = Callable[[str, str, int], Awaitable[dict]]
Listener = Callable[[str, tuple], None]


def column_id_of(ref: ColumnRef) -> str:
    """Resolve a ``ColumnRef`` to a bare column id."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, Mapping) and ref.get("id"):
        return ref["id"]
    raise ValueError(f"Unrecognised column reference: {ref!r}")


@dataclass(frozen=True)
class BoardColumn:
    id: str
    name: str
    order: int

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "BoardColumn":
        return cls(id=data["id"], name=data.get("name", ""), order=data.get("order", 0))


@dataclass(frozen=True)
class BoardTask:
    id: str
    column_id: str
    order: int
    title: str = ""
    description: Optional[str] = None
    created_at: int = 0

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "BoardTask":
        """Build from a task payload whose ``column`` may be an id or a record."""
        ref = data.get("column")
        if ref is None:
            ref = data.get("column_id") or data.get("columnId")
        return cls(
            id=data["id"],
            column_id=column_id_of(ref),
            order=data.get("order", 0),
            title=data.get("title", ""),
            description=data.get("description"),
            created_at=data.get("created_at") or 0,
        )


@dataclass(frozen=True)
class MoveIntent:
    task_id: str
    from_column_id: str
    column_id: str
    order: int

    @property
    def cross_column(self) -> bool:
        return self.from_column_id != self.column_id


@dataclass(frozen=True)
class MoveOutcome:
    intent: MoveIntent
    ok: bool
    task: Optional[dict] = None
    error: Optional[BaseException] = None


def _display_key(task: BoardTask):
    return (task.order, task.created_at, task.id)


class BoardProjection:
    """Rendered and confirmed views of one project's tasks.

    ``tasks`` is what a presentation layer should draw. ``confirmed`` is the
    last layout the server agreed with. Listeners are called with
    ``(event, tasks)`` where event is one of ``apply``, ``confirm``,
    ``rollback`` or ``reload``.
    """

    def __init__(self, columns: Iterable[Mapping], tasks: Iterable[Mapping]):
        self._listeners: list[Listener] = []
        self._snapshots: dict[str, tuple[BoardTask, ...]] = {}
        self.columns: tuple[BoardColumn, ...] = ()
        self.tasks: tuple[BoardTask, ...] = ()
        self.confirmed: tuple[BoardTask, ...] = ()
        self._load(columns, tasks)

    def _load(self, columns: Iterable[Mapping], tasks: Iterable[Mapping]) -> None:
        self.columns = tuple(
            sorted((BoardColumn.from_api(c) for c in columns), key=lambda c: c.order)
        )
        self.tasks = tuple(BoardTask.from_api(t) for t in tasks)
        self.confirmed = self.tasks
        self._snapshots.clear()

    # ── Queries ─────────────────────────────────────────────────────────

    def get_task(self, task_id: str) -> Optional[BoardTask]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def get_column(self, column_id: str) -> Optional[BoardColumn]:
        return next((c for c in self.columns if c.id == column_id), None)

    def tasks_in(self, column_id: str) -> list[BoardTask]:
        """Tasks of one column in display order."""
        return sorted(
            (t for t in self.tasks if t.column_id == column_id), key=_display_key
        )

    def layout(self) -> dict[str, list[str]]:
        """Column id -> task ids in display order, for every known column."""
        return {c.id: [t.id for t in self.tasks_in(c.id)] for c in self.columns}

    # ── Listeners ───────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self.tasks)

    # ── Moves ───────────────────────────────────────────────────────────

    def plan_drop(self, task_id: str, over_id: Optional[str]) -> Optional[MoveIntent]:
        """Resolve a drop of ``task_id`` onto ``over_id`` into a move.

        Dropping on a task targets that task's column and order, so the dragged
        task lands in front of it. Dropping on a column appends: the target
        order follows the highest order among the column's other tasks, so
        gaps left by deletes do not pull the task upward. Returns None when
        there is nothing to do.
        """
        task = self.get_task(task_id)
        if task is None or not over_id or over_id == task_id:
            return None

        over_task = self.get_task(over_id)
        if over_task is not None:
            return MoveIntent(task.id, task.column_id, over_task.column_id, over_task.order)

        if self.get_column(over_id) is not None:
            end = next_order(
                t.order for t in self.tasks if t.column_id == over_id and t.id != task.id
            )
            return MoveIntent(task.id, task.column_id, over_id, end)

        return None

    def apply(self, intent: MoveIntent) -> None:
        """Rearrange the rendered tasks as if ``intent`` already succeeded."""
        self._snapshots[intent.task_id] = self.tasks

        siblings = [
            Slot(t.id, t.order) for t in self.tasks if t.column_id == intent.column_id
        ]
        new_orders = {
            s.id: s.order for s in reorder(siblings, intent.task_id, intent.order)
        }

        arranged = []
        for task in self.tasks:
            if task.id == intent.task_id:
                task = replace(task, column_id=intent.column_id, order=intent.order)
            elif task.id in new_orders and task.order != new_orders[task.id]:
                task = replace(task, order=new_orders[task.id])
            arranged.append(task)
        self.tasks = tuple(arranged)
        self._notify("apply")

    async def confirm(self, intent: MoveIntent, mover: Mover) -> MoveOutcome:
        """Send ``intent`` through ``mover`` and settle the rendered state.

        Never raises: every failure of ``mover`` rolls the board back to the
        tasks captured when ``intent`` was applied.
        """
        snapshot = self._snapshots.pop(intent.task_id, self.tasks)
        try:
            result = await mover(intent.task_id, intent.column_id, intent.order)
        except Exception as e:
            logger.warning(
                f"Move of task {intent.task_id} to {intent.column_id}@{intent.order} "
                f"failed, restoring previous layout: {e}"
            )
            self.tasks = snapshot
            self._notify("rollback")
            return MoveOutcome(intent, ok=False, error=e)

        if isinstance(result, Mapping) and result.get("id") == intent.task_id:
            moved = BoardTask.from_api(result)
            self.tasks = tuple(moved if t.id == moved.id else t for t in self.tasks)
        self.confirmed = self.tasks
        self._notify("confirm")
        return MoveOutcome(intent, ok=True, task=result)

    async def drop(
        self, task_id: str, over_id: Optional[str], mover: Mover
    ) -> Optional[MoveOutcome]:
        """Plan, apply and confirm a drop. Returns None when nothing moved."""
        intent = self.plan_drop(task_id, over_id)
        if intent is None:
            return None
        self.apply(intent)
        return await self.confirm(intent, mover)

    def reload(self, columns: Iterable[Mapping], tasks: Iterable[Mapping]) -> None:
        """Replace everything with fresh server state."""
        self._load(columns, tasks)
        self._notify("reload")

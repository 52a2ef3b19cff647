"""Project board endpoints.

The endpoints are split across:
- core.py: Project CRUD (create, list, get, update, delete)
- tasks.py: Column and task CRUD
- moves.py: Task moves (mounted separately under /v1/tasks)
- assistant.py: Summaries and questions answered by the completion service
"""

from fastapi import APIRouter

from .core import router as core_router
from .tasks import router as tasks_router
from .assistant import router as assistant_router
from .moves import router as moves_router

router = APIRouter()

# Include sub-routers (no prefix needed - paths are already correct)
router.include_router(core_router)
router.include_router(tasks_router)
router.include_router(assistant_router)

__all__ = ["router", "moves_router"]

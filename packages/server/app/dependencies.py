"""FastAPI dependencies for the taskboard API."""
import redis.asyncio as redis

from app.services.assistant import AssistantService, assistant_settings

# Global Redis client (initialized in main.py lifespan)
redis_client: redis.Redis | None = None


def get_assistant() -> AssistantService:
    """
    FastAPI dependency that builds a completion-service client per request.

    Tests replace it through ``app.dependency_overrides``.
    """
    return AssistantService(assistant_settings)

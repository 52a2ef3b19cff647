"""Shared utility functions."""
import uuid
from datetime import datetime, timezone


def gen_id(prefix: str = "") -> str:
    """Generate a short prefixed ID."""
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def now_ms() -> int:
    """Get current timestamp in milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)

"""Database migration verification utilities."""
import os
import sys
import subprocess
from pathlib import Path

from app.logging_config import get_logger

logger = get_logger(__name__)


def get_alembic_dir() -> Path:
    """Get path to the directory holding alembic.ini."""
    return Path(__file__).parent.parent


def ensure_migrations() -> None:
    """
    Ensure migrations are applied by running alembic upgrade head.

    Uses subprocess to avoid async issues in FastAPI lifespan.
    """
    if os.getenv("AUTO_MIGRATE", "true").lower() == "false":
        logger.info("AUTO_MIGRATE=false, skipping migration check")
        return

    require = os.getenv("REQUIRE_MIGRATIONS", "true").lower() == "true"
    logger.info("Running database migrations...")

    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            cwd=get_alembic_dir(),
            capture_output=True,
            text=True,
            timeout=60,
        )
    except subprocess.TimeoutExpired:
        logger.error("Migration timed out after 60s")
        sys.exit(1)
    except FileNotFoundError:
        logger.warning("alembic not found - skipping migrations")
        return

    if result.returncode != 0:
        logger.error(f"Migration failed: {result.stderr}")
        if require:
            sys.exit(1)
        return

    for line in (result.stdout + result.stderr).splitlines():
        if line.strip():
            logger.info(f"  {line}")
    logger.info("Migrations complete")

"""
Database reachability check used by the readiness endpoint.
"""

from aggie_nexus.db.helpers import DatabaseError, fetch_val
from aggie_nexus.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


async def check_db():
    """
    Returns True if SELECT 1 succeeds, otherwise the error string.
    """
    try:
        value = await fetch_val("SELECT 1")
    except (DatabaseError, RuntimeError) as e:
        logger.error("Database health check failed", error=str(e))
        return str(e)

    if value == 1:
        return True
    return "Unexpected result from database check"

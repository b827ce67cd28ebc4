"""Health service: liveness plus a store ping"""
import logging
from datetime import datetime, timezone

from core.errors import DataAccessFailure
from core.store import Store
from service.dto import HealthResponseDTO

logger = logging.getLogger(__name__)


def get_health(store: Store, version: str = None) -> HealthResponseDTO:
    """
    Get health status.

    The service is reported not ok when the database cannot be reached.

    Args:
        store: Request-scoped store
        version: Application version to report

    Returns:
        HealthResponseDTO: Health check result
    """
    logger.info("Health check requested")

    try:
        database = store.ping()
    except DataAccessFailure:
        database = False

    return HealthResponseDTO(
        ok=database,
        database=database,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=version
    )

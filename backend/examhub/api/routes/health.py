"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the remote store is unreachable (readiness)
    - Both live outside the API prefix and skip identity resolution
"""

import logging

from fastapi import APIRouter, Depends, status

from examhub.api.responses import error, success
from examhub.infrastructure.remote_tables import RemoteTableClient, get_table_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic liveness probe."""
    return success("Server is running")


@router.get("/ready")
async def readiness_check(tables: RemoteTableClient = Depends(get_table_client)):
    """Readiness probe — includes remote store connectivity."""
    if not await tables.health_check():
        logger.warning("Readiness check failed: remote store unavailable")
        return error(
            "Remote store unavailable",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            {"message": "remote_store_unavailable"},
        )
    return success("Ready", {"checks": {"remote_store": "healthy"}})

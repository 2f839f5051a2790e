# routers/health.py

from datetime import datetime, timezone
from fastapi import APIRouter
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

SERVICE_NAME = "GitHub-Confluence Connector"


@router.get("/health", summary="Health Check Endpoint")
@router.get("/", include_in_schema=False)
def health_check():
    logger.debug("Health check endpoint was called.")
    return {
        "status": "running",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

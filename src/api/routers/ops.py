import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import get_cleaner
from braindump.models import DEFAULT_TIMEZONE, Cleaner
from llm.llm_client import LLM_PROVIDER

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(cleaner: Optional[Cleaner] = Depends(get_cleaner)) -> dict:
    """Health check endpoint for container orchestration."""
    health = {
        "status": "healthy",
        "default_timezone": DEFAULT_TIMEZONE,
        "cleaner": LLM_PROVIDER if cleaner is not None else "rules-only",
    }
    if LLM_PROVIDER and cleaner is None:
        # configured but failed to start; extraction still works on rules alone
        health["status"] = "degraded"
    return health


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

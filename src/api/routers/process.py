import logging
import time
from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from api.dependencies import get_cleaner
from api.metrics import (
    FOLLOWUPS_TOTAL,
    INFERRED_TYPE_TOTAL,
    ITEMS_EXTRACTED_TOTAL,
    REQUEST_LATENCY_SECONDS,
    REQUESTS_TOTAL,
)
from braindump.errors import InputValidationError
from braindump.models import Cleaner, ProcessResult
from orchestration.pipeline import process_text

router = APIRouter()
logger = logging.getLogger(__name__)

ENDPOINT = "/process_text"
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _record(status: str, start: float, result: Optional[ProcessResult] = None) -> None:
    # best-effort, never fails the request
    try:
        REQUESTS_TOTAL.labels(endpoint=ENDPOINT, status=status).inc()
        REQUEST_LATENCY_SECONDS.labels(endpoint=ENDPOINT).observe(time.time() - start)
        if result is not None:
            for kind, count in Counter(item.type for item in result.items).items():
                ITEMS_EXTRACTED_TOTAL.labels(type=kind).inc(count)
            FOLLOWUPS_TOTAL.inc(len(result.followups))
            INFERRED_TYPE_TOTAL.labels(type=result.suggestion.inferred_type).inc()
    except Exception as e:
        logger.debug(f"Failed to record metrics: {e}")


def _bad_request(message: str, start: float) -> JSONResponse:
    logger.info(f"Rejected {ENDPOINT} request: {message}")
    _record("rejected", start)
    return JSONResponse(status_code=400, content={"error": message}, headers=CORS_HEADERS)


@router.options(ENDPOINT)
async def process_text_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post(ENDPOINT)
async def process_text_endpoint(
    request: Request,
    cleaner: Optional[Cleaner] = Depends(get_cleaner),
) -> JSONResponse:
    """Body: {"input": str, "options": {...}} -> {cleaned_text, items, suggestion, followups}."""
    start = time.time()

    try:
        body = await request.json()
    except ValueError:
        return _bad_request("Request body must be valid JSON", start)
    if not isinstance(body, dict):
        return _bad_request("Request body must be a JSON object", start)

    try:
        result = await process_text(body.get("input"), body.get("options"), cleaner=cleaner)
    except InputValidationError as e:
        return _bad_request(str(e), start)

    _record("processed", start, result)
    return JSONResponse(content=result.to_wire(), headers=CORS_HEADERS)

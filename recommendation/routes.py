"""
Recommendation API Routes

Exposes the recommendation engine via REST API.
Single endpoint: POST /recommendations
"""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from utils.crm_bridge import fetch_schedule_options
from .catalog.store import get_catalog_store
from .logic.contracts import PrescreenAnswers, RecommendationBundle
from .logic.runner import run_recommendation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("", summary="Get course recommendation", response_model=RecommendationBundle)
@router.post("/", summary="Get course recommendation", include_in_schema=False, response_model=RecommendationBundle)
async def get_recommendation(answers: PrescreenAnswers):
    """
    Produce the recommendation bundle for a learner's pre-screen answers.

    **Request Body:**
    - `certificateGoals`: Certificate labels selected in the pre-screen
    - `availability`: `daysOff` with day names, `noSetSchedule`, or `notWorking`

    **Response:**
    - Matched course(s), payment summary for the primary course,
      and up to two schedule options
    - `requires_staff_handoff` set instead when staff must follow up
    """
    try:
        snapshot = await run_in_threadpool(get_catalog_store().get_snapshot)
    except Exception as e:
        logger.error(f"Catalog unavailable: {e}")
        return JSONResponse(status_code=503, content={"error": "Course catalog unavailable"})

    return await run_recommendation(answers, snapshot, fetch_schedule_options)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Recommendation engine health check")
def health_check():
    """Check if recommendation engine is operational and the catalog loads."""
    try:
        snapshot = get_catalog_store().get_snapshot()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Catalog unavailable: {e}")
    return {
        "status": "ok",
        "engine": "recommendation",
        "version": "1.0.0",
        "catalog_source": snapshot.source,
        "catalog_loaded_at": snapshot.loaded_at.isoformat(),
        "courses": len(snapshot.courses),
    }

"""
Engine Runner

Orchestrates the recommendation pipeline around the I/O:
1. Accepts PrescreenAnswers and a CatalogSnapshot
2. Runs the engine (pure decision)
3. Fetches schedule offerings for the primary course
4. Attaches the best two schedule options

This is a pure orchestration layer - NO matching, NO payment math.
"""

import logging
import os
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .adapter import to_schedule_options
from .constants import (
    DEFAULT_DOWN_PAYMENT_PERCENT,
    DEFAULT_MAX_COURSES,
    DEFAULT_PIF_DISCOUNT_AMOUNT,
)
from .contracts import CatalogSnapshot, PaymentConfig, PrescreenAnswers, RecommendationBundle
from .engine import RecommendationEngine

load_dotenv()

logger = logging.getLogger(__name__)

ScheduleFetcher = Callable[[str], Awaitable[List[Dict[str, Any]]]]


def _env_number(name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(f"⚠️ Invalid {name}={raw!r}, using default {default}")
        return default


def payment_config_from_env() -> PaymentConfig:
    """
    Payment settings from DOWN_PAYMENT_PERCENT, PIF_DISCOUNT_AMOUNT and MAX_RECOMMENDED_COURSES.
    Malformed or out-of-range values fall back to the defaults.
    """
    values = {
        "down_payment_percent": _env_number("DOWN_PAYMENT_PERCENT", DEFAULT_DOWN_PAYMENT_PERCENT, float),
        "pay_in_full_discount_amount": _env_number("PIF_DISCOUNT_AMOUNT", DEFAULT_PIF_DISCOUNT_AMOUNT, int),
        "max_courses": _env_number("MAX_RECOMMENDED_COURSES", DEFAULT_MAX_COURSES, int),
    }
    try:
        return PaymentConfig(**values)
    except ValidationError as e:
        logger.warning(f"⚠️ Payment settings out of range, using defaults: {e}")
        return PaymentConfig()


async def run_recommendation(
    answers: PrescreenAnswers,
    snapshot: CatalogSnapshot,
    fetch_schedules: Optional[ScheduleFetcher] = None,
    config: Optional[PaymentConfig] = None
) -> RecommendationBundle:
    """
    Main entry point: run the full recommendation pipeline.

    Args:
        answers: Learner's pre-screen answers
        snapshot: Catalog snapshot for this request
        fetch_schedules: Async callable returning raw schedule offerings
            for a course code. Skipped when None.
        config: Payment settings, read from the environment when None

    Returns:
        RecommendationBundle
    """
    start_time = time.perf_counter()
    engine = RecommendationEngine(config or payment_config_from_env())

    bundle = engine.recommend(answers, snapshot)
    outcome = bundle.match_outcome

    if outcome.requires_staff_handoff:
        logger.info(f"🙋 Request {bundle.request_id} routed to staff (goals: {bundle.normalized_goals})")
        return bundle

    primary = outcome.primary_course
    if primary is None:
        logger.warning(f"⚠️ No course available for goals {bundle.normalized_goals} (catalog from {snapshot.source})")
        return bundle

    if fetch_schedules is not None:
        try:
            raw_options = await fetch_schedules(primary.course_code)
        except Exception as e:
            # Schedule lookup is best-effort; the learner still gets course and payment info
            logger.warning(f"⚠️ Schedule fetch failed for {primary.course_code}: {e}")
            raw_options = []
        options = to_schedule_options(raw_options)
        bundle = engine.with_schedule(bundle, options, answers.availability)

    processing_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"✨ Recommendation {bundle.request_id}: {outcome.match_type} "
        f"{[c.course_code for c in outcome.courses]}, "
        f"payment={'yes' if bundle.payment_summary else 'contact staff'}, "
        f"schedules={len(bundle.schedule_options)} ({processing_time:.2f}ms)"
    )

    return bundle

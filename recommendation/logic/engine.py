"""
Recommendation Engine

Main orchestrator that combines the matching components into a single pipeline.
This is the primary entry point for producing a RecommendationBundle.

Pipeline flow:
1. Goal Normalization - Fold raw labels into canonical certificates
2. Course Matching    - Perfect match / greedy cover / last resort
3. Handoff Gate       - Escalated requests stop here
4. Payment Planning   - Tuition summary for the primary course
5. Schedule Selection - Best two sessions for the primary course

The engine is stateless: every call receives the full catalog snapshot and
performs no I/O.
"""

import logging
from typing import Optional, Sequence

from .contracts import (
    AvailabilityConstraint,
    CatalogSnapshot,
    PaymentConfig,
    PrescreenAnswers,
    RecommendationBundle,
    ScheduleOption,
)
from .matcher import match_courses
from .normalizer import normalize_goals
from .payment import compute_payment
from .schedule import select_best_two

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Deterministic course and payment recommendation engine.
    """

    def __init__(self, config: Optional[PaymentConfig] = None):
        """
        Initialize the recommendation engine.

        Args:
            config: Payment and matching settings. Defaults apply when None.
        """
        self.config = config or PaymentConfig()
        self.version = "1.0.0"

    def recommend(
        self,
        answers: PrescreenAnswers,
        snapshot: CatalogSnapshot,
        schedule_options: Optional[Sequence[ScheduleOption]] = None
    ) -> RecommendationBundle:
        """
        Produce the recommendation bundle for one learner.

        Args:
            answers: Pre-screen answers (goals and availability are used)
            snapshot: Catalog snapshot; treated as read-only
            schedule_options: Offerings for the primary course, if already known

        Returns:
            RecommendationBundle. Payment and schedule are left empty when
            the request is escalated to staff.
        """
        goals = normalize_goals(answers.certificate_goals)
        outcome = match_courses(snapshot.courses, goals, self.config.max_courses)

        bundle = RecommendationBundle(
            normalized_goals=sorted(goals),
            match_outcome=outcome,
        )

        if outcome.requires_staff_handoff or outcome.primary_course is None:
            return bundle

        payment = compute_payment(outcome.primary_course, snapshot.payments, self.config)
        bundle = bundle.model_copy(update={"payment_summary": payment})

        if schedule_options is not None:
            bundle = self.with_schedule(bundle, schedule_options, answers.availability)

        return bundle

    def with_schedule(
        self,
        bundle: RecommendationBundle,
        schedule_options: Sequence[ScheduleOption],
        availability: AvailabilityConstraint
    ) -> RecommendationBundle:
        """
        Return a copy of the bundle with the best two schedule options.

        Escalated bundles are returned unchanged.
        """
        if bundle.requires_staff_handoff:
            return bundle
        selected = select_best_two(schedule_options, availability)
        return bundle.model_copy(update={"schedule_options": selected})


# Convenience function for simple usage
def get_recommendation(
    answers: PrescreenAnswers,
    snapshot: CatalogSnapshot,
    schedule_options: Optional[Sequence[ScheduleOption]] = None,
    config: Optional[PaymentConfig] = None
) -> RecommendationBundle:
    """
    Convenience function to get a recommendation bundle.
    """
    engine = RecommendationEngine(config)
    return engine.recommend(answers, snapshot, schedule_options)

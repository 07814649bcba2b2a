"""
Recommendation Logic Module

Provides the deterministic course, payment and schedule recommendation engine.
"""

from .contracts import (
    AvailabilityConstraint,
    AvailabilityType,
    CatalogSnapshot,
    CertificateGoal,
    CourseRow,
    MatchOutcome,
    PaymentConfig,
    PaymentFrequency,
    PaymentRow,
    PaymentSummary,
    PrescreenAnswers,
    RecommendationBundle,
    ScheduleOption,
)
from .engine import RecommendationEngine, get_recommendation
from .constants import MatchType
from .normalizer import normalize_goal, normalize_goals, is_cma
from .matcher import match_courses
from .payment import compute_payment
from .schedule import select_best_two

__all__ = [
    # Main engine
    "RecommendationEngine",
    "get_recommendation",

    # Pipeline steps
    "normalize_goal",
    "normalize_goals",
    "is_cma",
    "match_courses",
    "compute_payment",
    "select_best_two",

    # Contracts
    "AvailabilityConstraint",
    "AvailabilityType",
    "CatalogSnapshot",
    "CertificateGoal",
    "CourseRow",
    "MatchOutcome",
    "PaymentConfig",
    "PaymentFrequency",
    "PaymentRow",
    "PaymentSummary",
    "PrescreenAnswers",
    "RecommendationBundle",
    "ScheduleOption",

    # Enums
    "MatchType",
]

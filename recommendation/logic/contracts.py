"""
Data Contracts for the Course Recommendation Engine

Defines Pydantic models for the pre-screen answers (input), catalog rows,
schedule options, and the RecommendationBundle (output).
These contracts are the API boundary for the recommendation engine.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, NewType, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_DOWN_PAYMENT_PERCENT,
    DEFAULT_MAX_COURSES,
    DEFAULT_PIF_DISCOUNT_AMOUNT,
    DEFAULT_PLAN_LENGTH_WEEKS,
    DEFAULT_PRIORITY,
    MatchType,
)

# Canonical lowercase certificate label. Only the goal normalizer produces these.
CertificateGoal = NewType("CertificateGoal", str)


# =============================================================================
# CATALOG CONTRACTS
# =============================================================================

class CourseRow(BaseModel):
    """One offered course from the course index."""
    course_code: str = Field(min_length=1)
    course_name: str = ""
    certificates_included: List[str] = Field(default_factory=list)
    link: Optional[str] = None
    priority: int = DEFAULT_PRIORITY  # Lower is preferred
    pif_discount_available: bool = False

    class Config:
        frozen = True


class PaymentFrequency(str, Enum):
    """Installment cadence for a payment plan."""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


class PaymentRow(BaseModel):
    """Payment terms for one course code."""
    course_code: str = Field(min_length=1)
    tuition_price: int = Field(gt=0)
    discount_applicable: bool = False
    payment_plan_applicable: bool = False
    plan_length_weeks: int = Field(default=DEFAULT_PLAN_LENGTH_WEEKS, gt=0)
    frequency: PaymentFrequency = PaymentFrequency.WEEKLY

    class Config:
        frozen = True


class CatalogSnapshot(BaseModel):
    """
    Immutable view of the course index and payment table.

    Handed to the engine by reference; a refresh builds a new snapshot
    instead of mutating this one.
    """
    courses: List[CourseRow] = Field(default_factory=list)
    payments: List[PaymentRow] = Field(default_factory=list)
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = "memory"

    class Config:
        frozen = True


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class ScheduleOption(BaseModel):
    """
    One offered session instance, scoped to a course by the CRM bridge.
    Extra CRM fields are kept so they can be echoed back to the widget.
    """
    start_date_time_iso: Optional[str] = Field(default=None, alias="startDateTimeISO")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    day_of_week: Optional[str] = Field(default=None, alias="dayOfWeek")
    label: Optional[str] = None
    location: Optional[str] = None
    course_code: Optional[str] = Field(default=None, alias="courseCode")

    class Config:
        frozen = True
        extra = "allow"
        populate_by_name = True

    @field_validator("day_of_week", "label", "location", "course_code", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        # CRM sends numbers or nulls here at times
        if value is None or isinstance(value, str):
            return value
        return str(value)


class AvailabilityType(str, Enum):
    """Learner availability selection from the pre-screen."""
    DAYS_OFF = "daysOff"
    NO_SET_SCHEDULE = "noSetSchedule"
    NOT_WORKING = "notWorking"


class AvailabilityConstraint(BaseModel):
    availability_type: AvailabilityType = Field(
        default=AvailabilityType.NO_SET_SCHEDULE, alias="availabilityType"
    )
    days_off: List[str] = Field(default_factory=list, alias="daysOff")

    class Config:
        populate_by_name = True


class PrescreenAnswers(BaseModel):
    """
    Input contract for the recommendation engine.
    Contact fields are opaque here and passed through untouched.
    """
    language: str = "en"
    certificate_goals: List[str] = Field(default_factory=list, alias="certificateGoals")
    availability: AvailabilityConstraint = Field(default_factory=AvailabilityConstraint)
    marketing_consent: bool = Field(default=False, alias="marketingConsent")
    contact: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True


class PaymentConfig(BaseModel):
    """School-wide payment and matching settings."""
    down_payment_percent: float = Field(default=DEFAULT_DOWN_PAYMENT_PERCENT, ge=0, le=100)
    pay_in_full_discount_amount: int = Field(default=DEFAULT_PIF_DISCOUNT_AMOUNT, ge=0)
    max_courses: int = Field(default=DEFAULT_MAX_COURSES, ge=1)


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class MatchOutcome(BaseModel):
    """Result of the course matcher."""
    requires_staff_handoff: bool = False
    courses: List[CourseRow] = Field(default_factory=list)
    match_type: MatchType = MatchType.NONE
    uncovered_goals: List[str] = Field(default_factory=list)

    class Config:
        use_enum_values = True

    @property
    def primary_course(self) -> Optional[CourseRow]:
        """Head of the course list; payment and schedule use this one."""
        return self.courses[0] if self.courses else None


class PaymentSummary(BaseModel):
    """
    Deterministic tuition summary for the primary course.
    Plan fields are None when the course has no installment plan.
    """
    course_code: str
    tuition_price: int
    discount_eligible: bool
    pay_in_full_discount_amount: int = 0
    pay_in_full_price: int
    payment_plan_available: bool
    down_payment: Optional[int] = None
    remaining_balance: Optional[int] = None
    installments: Optional[int] = None
    installment_amount: Optional[int] = None
    frequency: Optional[PaymentFrequency] = None

    class Config:
        use_enum_values = True


class RecommendationBundle(BaseModel):
    """
    Output contract for the recommendation engine.
    Consumed by prompt assembly and by the CRM sync step.
    """
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    normalized_goals: List[str] = Field(default_factory=list)
    match_outcome: MatchOutcome = Field(default_factory=MatchOutcome)
    payment_summary: Optional[PaymentSummary] = None
    schedule_options: List[ScheduleOption] = Field(default_factory=list, max_length=2)

    @property
    def primary_course(self) -> Optional[CourseRow]:
        return self.match_outcome.primary_course

    @property
    def requires_staff_handoff(self) -> bool:
        return self.match_outcome.requires_staff_handoff

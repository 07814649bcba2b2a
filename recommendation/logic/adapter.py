"""
Data Adapter for Recommendation Engine

Reads raw tabular rows (spreadsheet records or CSV dicts) and CRM schedule
payloads and transforms them into the engine's contracts.

This is a pure TRANSFORM layer:
- NO matching logic
- NO payment math
- NO network or file access
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .constants import (
    BIWEEKLY_TOKENS,
    DEFAULT_PLAN_LENGTH_WEEKS,
    DEFAULT_PRIORITY,
    TRUTHY_TOKENS,
)
from .contracts import (
    CatalogSnapshot,
    CourseRow,
    PaymentFrequency,
    PaymentRow,
    ScheduleOption,
)

logger = logging.getLogger(__name__)


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Lower-case and trim header names so 'Course Code ' matches 'course_code'."""
    return {
        str(k).strip().lower().replace(" ", "_"): v
        for k, v in (raw or {}).items()
        if k is not None
    }


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_bool(value: Any) -> bool:
    """Interpret a boolean-ish spreadsheet token."""
    if isinstance(value, bool):
        return value
    return _text(value).lower() in TRUTHY_TOKENS


def parse_priority(value: Any) -> int:
    text = _text(value)
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return DEFAULT_PRIORITY


def parse_price(value: Any) -> Optional[int]:
    """Parse '$2,000.00' style prices to whole currency units."""
    text = _text(value).replace("$", "").replace(",", "")
    try:
        price = round(float(text))
    except (ValueError, OverflowError):
        return None
    return price if price > 0 else None


def parse_plan_length(value: Any) -> int:
    text = _text(value)
    try:
        weeks = int(float(text))
    except (ValueError, OverflowError):
        return DEFAULT_PLAN_LENGTH_WEEKS
    return weeks if weeks > 0 else DEFAULT_PLAN_LENGTH_WEEKS


def parse_frequency(value: Any) -> PaymentFrequency:
    if _text(value).lower() in BIWEEKLY_TOKENS:
        return PaymentFrequency.BIWEEKLY
    return PaymentFrequency.WEEKLY


def split_certificates(value: Any) -> List[str]:
    """Split a comma list of certificate names, dropping blanks."""
    if isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = _text(value).split(",")
    return [p.strip().lower() for p in parts if str(p).strip()]


def to_course_row(raw: Dict[str, Any]) -> Optional[CourseRow]:
    """
    Convert one course-index record to a CourseRow.

    Returns None for rows without a course code or certificates.
    """
    data = _normalize_keys(raw)
    code = _text(data.get("course_code"))
    certificates = split_certificates(data.get("certificates_included"))

    if not code or not certificates:
        logger.warning(f"Skipping course row without code or certificates: {raw}")
        return None

    return CourseRow(
        course_code=code,
        course_name=_text(data.get("course_name")) or code,
        certificates_included=certificates,
        link=_text(data.get("link")) or None,
        priority=parse_priority(data.get("priority")),
        pif_discount_available=parse_bool(data.get("pif_discount_available")),
    )


def to_payment_row(raw: Dict[str, Any]) -> Optional[PaymentRow]:
    """
    Convert one payment-table record to a PaymentRow.

    Returns None for rows without a course code or a positive tuition.
    """
    data = _normalize_keys(raw)
    code = _text(data.get("course_code"))
    tuition = parse_price(data.get("tuition_price"))

    if not code or tuition is None:
        logger.warning(f"Skipping payment row without code or tuition: {raw}")
        return None

    return PaymentRow(
        course_code=code,
        tuition_price=tuition,
        discount_applicable=parse_bool(data.get("paidinfull_discountapplicable")),
        payment_plan_applicable=parse_bool(data.get("paymentplan_applicable")),
        plan_length_weeks=parse_plan_length(data.get("planlength_weeks")),
        frequency=parse_frequency(data.get("frequency")),
    )


def to_schedule_options(raw_options: Iterable[Dict[str, Any]]) -> List[ScheduleOption]:
    """Convert CRM schedule payloads, skipping entries that fail validation."""
    options: List[ScheduleOption] = []
    for raw in raw_options or []:
        if not isinstance(raw, dict):
            continue
        try:
            options.append(ScheduleOption.model_validate(raw))
        except ValidationError as e:
            logger.debug(f"Skipping invalid schedule option {raw}: {e}")
    return options


def build_snapshot(
    course_records: Iterable[Dict[str, Any]],
    payment_records: Iterable[Dict[str, Any]],
    source: str = "memory",
    loaded_at: Optional[datetime] = None
) -> CatalogSnapshot:
    """
    Transform raw course and payment records into a CatalogSnapshot.

    Args:
        course_records: Course index rows
        payment_records: Payment table rows
        source: Label for logging (e.g. 'sheets', 'csv')
        loaded_at: Snapshot timestamp, defaults to now (UTC)

    Returns:
        CatalogSnapshot with invalid rows dropped
    """
    courses = [c for c in (to_course_row(r) for r in course_records) if c is not None]
    payments = [p for p in (to_payment_row(r) for r in payment_records) if p is not None]

    return CatalogSnapshot(
        courses=courses,
        payments=payments,
        loaded_at=loaded_at or datetime.now(timezone.utc),
        source=source,
    )

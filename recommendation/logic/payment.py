"""
Payment Planner

Computes the tuition summary for a matched course: pay-in-full discount
eligibility and the optional installment schedule. All amounts are whole
currency units, rounded where they are computed.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from .contracts import (
    CourseRow,
    PaymentConfig,
    PaymentFrequency,
    PaymentRow,
    PaymentSummary,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def find_payment_row(course_code: str, payment_table: Sequence[PaymentRow]) -> Optional[PaymentRow]:
    """First row with an exactly matching course code."""
    for row in payment_table:
        if row.course_code == course_code:
            return row
    return None


def count_installments(plan_length_weeks: int, frequency: str) -> int:
    weeks = max(1, plan_length_weeks)
    if frequency == PaymentFrequency.BIWEEKLY:
        return max(1, _ceil_div(weeks, 2))
    return weeks


def compute_payment(
    course: CourseRow,
    payment_table: Sequence[PaymentRow],
    config: Optional[PaymentConfig] = None
) -> Optional[PaymentSummary]:
    """
    Build the payment summary for a course.

    Args:
        course: The primary recommended course
        payment_table: Payment terms snapshot
        config: Down payment percent and pay-in-full discount amount

    Returns:
        PaymentSummary, or None when the course has no payment row
        (callers must ask the learner to contact staff for pricing)
    """
    config = config or PaymentConfig()

    row = find_payment_row(course.course_code, payment_table)
    if row is None:
        logger.debug(f"No payment row for {course.course_code}")
        return None

    tuition = row.tuition_price
    discount_eligible = row.discount_applicable or course.pif_discount_available
    discount = config.pay_in_full_discount_amount if discount_eligible else 0

    summary = dict(
        course_code=course.course_code,
        tuition_price=tuition,
        discount_eligible=discount_eligible,
        pay_in_full_discount_amount=discount,
        pay_in_full_price=max(0, tuition - discount),
        payment_plan_available=row.payment_plan_applicable,
    )

    if not row.payment_plan_applicable:
        return PaymentSummary(**summary)

    down_payment = _round_half_up(
        Decimal(tuition) * Decimal(str(config.down_payment_percent)) / Decimal(100)
    )
    remaining = max(0, tuition - down_payment)
    installments = count_installments(row.plan_length_weeks, row.frequency)

    return PaymentSummary(
        **summary,
        down_payment=down_payment,
        remaining_balance=remaining,
        installments=installments,
        installment_amount=_ceil_div(remaining, installments),
        frequency=row.frequency,
    )

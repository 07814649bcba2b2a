"""
Shared fixtures for the recommendation engine tests.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pytest

from recommendation.logic.contracts import CatalogSnapshot, CourseRow, PaymentRow, ScheduleOption


def course(code, certs, priority=999, pif=False, name=None):
    return CourseRow(
        course_code=code,
        course_name=name or code,
        certificates_included=certs,
        priority=priority,
        pif_discount_available=pif,
    )


def option(iso, day, label=None):
    return ScheduleOption(startDateTimeISO=iso, dayOfWeek=day, label=label or f"{day} {iso}")


@pytest.fixture
def school_catalog():
    """Catalog shaped like the school's course index."""
    return [
        course("NAT_101", ["nursing assistant training"], priority=1, pif=True),
        course("PHL_110", ["phlebotomy technician"], priority=2),
        course("EKG_120", ["ekg technician"], priority=3),
        course("PCT_200", ["CNA", "phlebotomy technician", "ekg technician"], priority=2),
        course("MAP_130", ["medication administration"], priority=4),
    ]


@pytest.fixture
def school_payments():
    return [
        PaymentRow(course_code="NAT_101", tuition_price=2000, discount_applicable=True,
                   payment_plan_applicable=True, plan_length_weeks=10, frequency="weekly"),
        PaymentRow(course_code="PHL_110", tuition_price=1200, discount_applicable=False,
                   payment_plan_applicable=True, plan_length_weeks=8, frequency="biweekly"),
        PaymentRow(course_code="MAP_130", tuition_price=650, payment_plan_applicable=False),
    ]


@pytest.fixture
def snapshot(school_catalog, school_payments):
    return CatalogSnapshot(courses=school_catalog, payments=school_payments, source="test")


@pytest.fixture
def week_of_options():
    """Five sessions Monday through Friday of one week, listed out of order."""
    return [
        option("2026-11-06T09:00:00", "Friday"),
        option("2026-11-03T09:00:00", "Tuesday"),
        option("2026-11-05T09:00:00", "Thursday"),
        option("2026-11-02T09:00:00", "Monday"),
        option("2026-11-04T18:00:00", "Wednesday"),
    ]

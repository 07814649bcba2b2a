"""
Tests for raw row adaptation and the catalog store.
"""

import os

import pytest

from recommendation.catalog.loader import CsvCatalogSource
from recommendation.catalog.store import CatalogStore
from recommendation.logic.adapter import (
    build_snapshot,
    parse_bool,
    parse_priority,
    to_course_row,
    to_payment_row,
    to_schedule_options,
)
from recommendation.logic.contracts import AvailabilityConstraint
from recommendation.logic.schedule import select_best_two

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "data")


def test_course_row_from_sheet_record():
    row = to_course_row({
        "Course Code": "PCT_200",
        "course_name": "Patient Care Technician",
        "certificates_included": "CNA,  Phlebotomy Technician , ,EKG Technician",
        "link": "",
        "priority": "2",
        "pif_discount_available": "Yes",
    })

    assert row.course_code == "PCT_200"
    assert row.certificates_included == ["cna", "phlebotomy technician", "ekg technician"]
    assert row.link is None
    assert row.priority == 2
    assert row.pif_discount_available


@pytest.mark.parametrize("value", [None, "", "n/a", "first"])
def test_priority_defaults_to_999(value):
    assert parse_priority(value) == 999


@pytest.mark.parametrize("value,expected", [
    ("TRUE", True), ("yes", True), ("Y", True), ("1", True), (True, True),
    ("no", False), ("", False), (None, False), ("maybe", False),
])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_rows_without_code_or_certificates_are_skipped():
    assert to_course_row({"course_code": "", "certificates_included": "EKG Technician"}) is None
    assert to_course_row({"course_code": "X", "certificates_included": " , "}) is None


def test_payment_row_defaults():
    row = to_payment_row({
        "course_code": "NAT_101",
        "tuition_price": "$2,000.40",
        "paidinfull_discountapplicable": "yes",
        "paymentplan_applicable": "TRUE",
        "planlength_weeks": "abc",
        "frequency": "",
    })

    assert row.tuition_price == 2000
    assert row.discount_applicable
    assert row.payment_plan_applicable
    assert row.plan_length_weeks == 10
    assert row.frequency == "weekly"


def test_payment_row_biweekly_and_invalid_tuition():
    assert to_payment_row({"course_code": "A", "tuition_price": "900", "frequency": "Bi-Weekly"}).frequency == "biweekly"
    assert to_payment_row({"course_code": "A", "tuition_price": "TBD"}) is None
    assert to_payment_row({"course_code": "A", "tuition_price": "0"}) is None


def test_schedule_options_keep_missing_or_numeric_descriptions():
    options = to_schedule_options([
        {"startDateTimeISO": "2026-11-02T09:00:00", "dayOfWeek": None, "label": "soonest"},
        {"startDateTimeISO": "2026-11-09T09:00:00", "dayOfWeek": "Monday", "label": "later", "location": 12},
        {"startDateTimeISO": "2026-11-03T09:00:00", "label": 42, "courseCode": 101},
        "not an option",
    ])

    assert [o.label for o in options] == ["soonest", "later", "42"]
    assert options[0].day_of_week is None
    assert options[1].location == "12"
    assert options[2].course_code == "101"

    picked = select_best_two(options, AvailabilityConstraint(availabilityType="noSetSchedule"))
    assert [o.label for o in picked] == ["soonest", "42"]


def test_option_without_day_is_skipped_only_by_days_off_filter():
    options = to_schedule_options([
        {"startDateTimeISO": "2026-11-02T09:00:00", "dayOfWeek": None, "label": "no day"},
        {"startDateTimeISO": "2026-11-04T09:00:00", "dayOfWeek": "Wednesday", "label": "wednesday"},
    ])

    picked = select_best_two(options, AvailabilityConstraint(availabilityType="daysOff", daysOff=["Wednesday"]))

    assert [o.label for o in picked] == ["wednesday"]


def test_sample_csv_catalog_loads():
    courses, payments = CsvCatalogSource(DATA_DIR).fetch()
    snapshot = build_snapshot(courses, payments, source="csv")

    assert {c.course_code for c in snapshot.courses} >= {"NAT_101", "PCT_200"}
    nat = next(p for p in snapshot.payments if p.course_code == "NAT_101")
    assert nat.tuition_price == 2000


class FakeSource:
    name = "fake"

    def __init__(self):
        self.calls = 0
        self.fail = False

    def fetch(self):
        self.calls += 1
        if self.fail:
            raise ConnectionError("sheet unavailable")
        return (
            [{"course_code": f"C{self.calls}", "certificates_included": "ekg technician"}],
            [],
        )


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_store_refreshes_only_when_stale():
    source, clock = FakeSource(), FakeClock()
    store = CatalogStore(source, refresh_seconds=60, clock=clock)

    first = store.get_snapshot()
    clock.now = 30
    assert store.get_snapshot() is first

    clock.now = 61
    second = store.get_snapshot()
    assert second is not first
    assert second.courses[0].course_code == "C2"
    # The earlier snapshot is untouched
    assert first.courses[0].course_code == "C1"


def test_store_keeps_previous_snapshot_when_refresh_fails():
    source, clock = FakeSource(), FakeClock()
    store = CatalogStore(source, refresh_seconds=60, clock=clock)
    first = store.get_snapshot()

    source.fail = True
    clock.now = 120
    assert store.get_snapshot() is first


def test_store_raises_without_any_snapshot():
    source = FakeSource()
    source.fail = True
    store = CatalogStore(source)

    with pytest.raises(ConnectionError):
        store.get_snapshot()

"""
Tests for the recommendation engine pipeline and the async runner.
"""

import asyncio

import pytest

from conftest import option

from recommendation.logic import (
    AvailabilityConstraint,
    MatchType,
    PaymentConfig,
    PrescreenAnswers,
    RecommendationEngine,
    get_recommendation,
)
from recommendation.logic.runner import payment_config_from_env, run_recommendation


def _answers(goals, availability=None):
    return PrescreenAnswers(
        certificateGoals=goals,
        availability=availability or AvailabilityConstraint(),
        contact={"email": "learner@example.com"},
    )


def test_perfect_match_bundle(snapshot, week_of_options):
    bundle = get_recommendation(_answers(["CNA"]), snapshot, week_of_options)

    assert bundle.normalized_goals == ["nursing assistant training"]
    assert bundle.match_outcome.match_type == MatchType.PERFECT
    assert bundle.primary_course.course_code == "NAT_101"
    assert bundle.payment_summary.installment_amount == 180
    assert [o.day_of_week for o in bundle.schedule_options] == ["Monday", "Tuesday"]


def test_handoff_skips_payment_and_schedule(snapshot, week_of_options):
    bundle = get_recommendation(_answers(["Clinical Medical Assistant"]), snapshot, week_of_options)

    assert bundle.requires_staff_handoff
    assert bundle.match_outcome.courses == []
    assert bundle.payment_summary is None
    assert bundle.schedule_options == []


def test_payment_uses_primary_course_only(snapshot):
    bundle = get_recommendation(_answers(["Phlebotomy Technician", "Medication Administration"]), snapshot)

    assert [c.course_code for c in bundle.match_outcome.courses] == ["PHL_110", "MAP_130"]
    assert bundle.payment_summary.course_code == "PHL_110"


def test_missing_payment_row_leaves_summary_empty(snapshot):
    bundle = get_recommendation(_answers(["EKG Technician"]), snapshot)

    assert bundle.primary_course.course_code == "EKG_120"
    assert bundle.payment_summary is None


def test_without_schedule_options_leaves_schedule_empty(snapshot):
    bundle = get_recommendation(_answers(["CNA"]), snapshot)

    assert bundle.schedule_options == []


def test_engine_config_is_applied(snapshot):
    engine = RecommendationEngine(PaymentConfig(down_payment_percent=50, pay_in_full_discount_amount=300, max_courses=1))
    bundle = engine.recommend(_answers(["Phlebotomy Technician", "Medication Administration"]), snapshot)

    assert len(bundle.match_outcome.courses) == 1
    assert bundle.payment_summary.down_payment == 600


def test_engine_does_not_mutate_snapshot(snapshot, week_of_options):
    before = snapshot.model_dump_json()
    get_recommendation(_answers(["CNA", "EKG Technician"]), snapshot, week_of_options)

    assert snapshot.model_dump_json() == before


def test_runner_fetches_schedules_for_primary_course(snapshot):
    requested = []

    async def fetch(code):
        requested.append(code)
        return [
            {"startDateTimeISO": "2026-11-04T09:00:00", "dayOfWeek": "Wednesday", "label": "Evening cohort", "room": "B2"},
            {"startDateTimeISO": "2026-11-02T09:00:00", "dayOfWeek": "Monday"},
            "garbage",
        ]

    answers = _answers(["CNA"], AvailabilityConstraint(availabilityType="daysOff", daysOff=["Wednesday"]))
    bundle = asyncio.run(run_recommendation(answers, snapshot, fetch, PaymentConfig()))

    assert requested == ["NAT_101"]
    assert [o.label for o in bundle.schedule_options] == ["Evening cohort"]
    assert bundle.schedule_options[0].model_extra["room"] == "B2"


def test_runner_does_not_fetch_for_handoff(snapshot):
    async def fetch(code):
        raise AssertionError("schedule fetch should not run for staff handoff")

    bundle = asyncio.run(run_recommendation(_answers(["clinical medical assistant"]), snapshot, fetch, PaymentConfig()))

    assert bundle.requires_staff_handoff


def test_runner_treats_fetch_failure_as_no_options(snapshot):
    async def fetch(code):
        raise RuntimeError("bridge down")

    bundle = asyncio.run(run_recommendation(_answers(["CNA"]), snapshot, fetch, PaymentConfig()))

    assert bundle.primary_course.course_code == "NAT_101"
    assert bundle.payment_summary is not None
    assert bundle.schedule_options == []


def test_runner_reads_payment_config_from_env(snapshot, monkeypatch):
    monkeypatch.setenv("DOWN_PAYMENT_PERCENT", "20")
    monkeypatch.setenv("PIF_DISCOUNT_AMOUNT", "250")

    bundle = asyncio.run(run_recommendation(_answers(["CNA"]), snapshot))

    assert bundle.payment_summary.down_payment == 400
    assert bundle.payment_summary.pay_in_full_discount_amount == 250


@pytest.mark.parametrize("name, value", [
    ("DOWN_PAYMENT_PERCENT", "ten"),
    ("DOWN_PAYMENT_PERCENT", "150"),
    ("PIF_DISCOUNT_AMOUNT", "$100"),
    ("MAX_RECOMMENDED_COURSES", "0"),
])
def test_bad_payment_env_falls_back_to_defaults(snapshot, monkeypatch, name, value):
    for var in ("DOWN_PAYMENT_PERCENT", "PIF_DISCOUNT_AMOUNT", "MAX_RECOMMENDED_COURSES"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv(name, value)

    assert payment_config_from_env() == PaymentConfig()
    bundle = asyncio.run(run_recommendation(_answers(["CNA"]), snapshot))
    assert bundle.payment_summary.down_payment == 200


def test_bundle_caps_schedule_options():
    from recommendation.logic.contracts import RecommendationBundle

    with pytest.raises(ValueError):
        RecommendationBundle(schedule_options=[option("2026-11-0%dT09:00:00" % d, "Monday") for d in (2, 3, 4)])

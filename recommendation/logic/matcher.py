"""
Course Matcher

Selects the course(s) that best satisfy a learner's certificate goals.

Policy, evaluated in order:
1. Staff handoff  - CMA goals are never recommended automatically
2. Perfect match  - certificate set exactly equals the goal set
3. Greedy cover   - repeatedly take the highest-overlap course
4. Last resort    - the most comprehensive course in the catalog
"""

import logging
from typing import List, Sequence, Set, Tuple

from .constants import DEFAULT_MAX_COURSES, MatchType
from .contracts import CertificateGoal, CourseRow, MatchOutcome
from .normalizer import is_cma, normalize_goals

logger = logging.getLogger(__name__)


def course_certificates(course: CourseRow) -> Set[CertificateGoal]:
    """Certificate set of a catalog row in the canonical vocabulary."""
    return normalize_goals(course.certificates_included)


def find_perfect_matches(
    catalog: Sequence[CourseRow],
    goals: Set[CertificateGoal]
) -> List[CourseRow]:
    """
    Rows whose certificate set equals the goal set, best priority first.

    Overlap always equals the goal-set size here, so priority is the only
    tie-break; equal priorities keep catalog order.
    """
    matches = [row for row in catalog if course_certificates(row) == goals]
    return sorted(matches, key=lambda row: row.priority)


def greedy_cover(
    catalog: Sequence[CourseRow],
    goals: Set[CertificateGoal],
    max_courses: int = DEFAULT_MAX_COURSES
) -> Tuple[List[CourseRow], Set[CertificateGoal]]:
    """
    Cover the goal set with as few courses as the greedy rule allows.

    Each round picks the row with the highest overlap against the goals
    still uncovered (lower priority value wins ties, then catalog order).
    Stops when everything is covered, nothing overlaps, or max_courses
    rows have been picked.

    Returns:
        Tuple of (picked rows, goals left uncovered)
    """
    remaining = set(goals)
    picked: List[CourseRow] = []
    certificates = [(row, course_certificates(row)) for row in catalog]

    while remaining and len(picked) < max_courses:
        best = None
        best_key = None
        for row, certs in certificates:
            overlap = len(certs & remaining)
            if overlap == 0:
                continue
            key = (overlap, -row.priority)
            if best_key is None or key > best_key:
                best, best_key = (row, certs), key

        if best is None:
            break

        row, certs = best
        picked.append(row)
        remaining -= certs
        logger.debug(f"Greedy pick {row.course_code} (overlap={best_key[0]}, remaining={len(remaining)})")

    return picked, remaining


def most_comprehensive(catalog: Sequence[CourseRow]) -> CourseRow:
    """Row with the most certificates; ties keep catalog order."""
    best = catalog[0]
    best_count = len(course_certificates(best))
    for row in catalog[1:]:
        count = len(course_certificates(row))
        if count > best_count:
            best, best_count = row, count
    return best


def match_courses(
    catalog: Sequence[CourseRow],
    goals: Set[CertificateGoal],
    max_courses: int = DEFAULT_MAX_COURSES
) -> MatchOutcome:
    """
    Run the full matching policy.

    Args:
        catalog: Course index snapshot (not mutated)
        goals: Normalized certificate goals
        max_courses: Cap for the greedy cover

    Returns:
        MatchOutcome; courses[0] is the primary recommendation
    """
    if is_cma(goals):
        logger.debug("CMA goal present, routing to staff")
        return MatchOutcome(
            requires_staff_handoff=True,
            match_type=MatchType.STAFF_HANDOFF,
        )

    if not catalog:
        return MatchOutcome(match_type=MatchType.NONE, uncovered_goals=sorted(goals))

    perfect = find_perfect_matches(catalog, goals)
    if perfect:
        return MatchOutcome(courses=perfect, match_type=MatchType.PERFECT)

    picked, remaining = greedy_cover(catalog, goals, max_courses)
    if picked:
        return MatchOutcome(
            courses=picked,
            match_type=MatchType.FALLBACK,
            uncovered_goals=sorted(remaining),
        )

    # Nothing overlaps at all
    return MatchOutcome(
        courses=[most_comprehensive(catalog)],
        match_type=MatchType.FALLBACK,
        uncovered_goals=sorted(goals),
    )

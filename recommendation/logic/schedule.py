"""
Schedule Selector

Filters session offerings by the learner's availability and returns the
two soonest. Availability is a soft signal: if no offering fits the
learner's days off, the soonest offerings overall are returned instead.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from .constants import MAX_SCHEDULE_OPTIONS, SCHEDULE_DATETIME_FORMATS
from .contracts import AvailabilityConstraint, AvailabilityType, ScheduleOption

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so naive and aware values sort together
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_iso(text: str) -> Optional[datetime]:
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_wall_clock(option: ScheduleOption) -> Optional[datetime]:
    """
    Start time exactly as the CRM sent it, offset kept, or None if it
    cannot be parsed.

    Prefers the combined ISO timestamp; otherwise joins the separate
    date and time-of-day fields.
    """
    if option.start_date_time_iso:
        return _parse_iso(option.start_date_time_iso)

    if not option.start_date or not option.start_time:
        return None

    parsed = _parse_iso(f"{option.start_date.strip()}T{option.start_time.strip()}")
    if parsed is None:
        combined = f"{option.start_date.strip()} {option.start_time.strip()}"
        for fmt in SCHEDULE_DATETIME_FORMATS:
            try:
                parsed = datetime.strptime(combined, fmt)
                break
            except ValueError:
                continue
    return parsed


def parse_start(option: ScheduleOption) -> Optional[datetime]:
    """Start instant of an option in UTC, or None if it cannot be parsed."""
    parsed = parse_wall_clock(option)
    return _as_utc(parsed) if parsed else None


def rank_by_soonest(options: Sequence[ScheduleOption]) -> List[ScheduleOption]:
    """Sort by start instant ascending, dropping unparseable options."""
    dated: List[Tuple[datetime, int, ScheduleOption]] = []
    for index, option in enumerate(options):
        start = parse_start(option)
        if start is None:
            logger.debug(f"Dropping schedule option with unparseable start: {option.label or option}")
            continue
        dated.append((start, index, option))
    dated.sort(key=lambda item: (item[0], item[1]))
    return [option for _, _, option in dated]


def filter_by_availability(
    options: Sequence[ScheduleOption],
    availability: AvailabilityConstraint
) -> List[ScheduleOption]:
    """
    Keep options on the learner's days off.

    Only the daysOff variant with a non-empty day set filters anything.
    """
    if availability.availability_type != AvailabilityType.DAYS_OFF:
        return list(options)

    days = {d.strip().lower() for d in availability.days_off if d and d.strip()}
    if not days:
        return list(options)

    return [o for o in options if str(o.day_of_week or "").strip().lower() in days]


def select_best_two(
    options: Sequence[ScheduleOption],
    availability: AvailabilityConstraint
) -> List[ScheduleOption]:
    """
    Pick at most two schedule options for the learner.

    Args:
        options: Offerings already scoped to one course
        availability: Learner's availability selection

    Returns:
        Up to two options, soonest first
    """
    ranked = rank_by_soonest(filter_by_availability(options, availability))
    if not ranked:
        ranked = rank_by_soonest(options)
    return ranked[:MAX_SCHEDULE_OPTIONS]

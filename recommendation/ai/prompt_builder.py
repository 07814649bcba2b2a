from datetime import datetime
from typing import Any, Dict, List, Optional

from ..logic.contracts import PaymentSummary, RecommendationBundle, ScheduleOption
from ..logic.schedule import parse_wall_clock
from .safety_rules import (
    LANGUAGE_NAMES,
    SAFETY_RULES,
    STAFF_HANDOFF_INSTRUCTION,
    SYSTEM_ROLE_DEFINITION,
)

CONTACT_STAFF_FOR_PRICING = "Pricing for this course is not available in chat. A staff member will share tuition and payment options."
NO_SCHEDULE_OPTIONS = "No session dates are available in chat right now. We'll help you choose a session after enrollment."


def _money(amount: int) -> str:
    return f"${amount:,}"


def render_payment_terms(summary: Optional[PaymentSummary]) -> str:
    """
    Deterministic payment text, quoted verbatim by the assistant.
    Same summary in, same text out.
    """
    if summary is None:
        return CONTACT_STAFF_FOR_PRICING

    lines = [f"Tuition: {_money(summary.tuition_price)}."]

    if summary.discount_eligible and summary.pay_in_full_discount_amount > 0:
        lines.append(
            f"Pay-in-full discount: {_money(summary.pay_in_full_discount_amount)} off when tuition is paid in full "
            f"({_money(summary.pay_in_full_price)} total)."
        )

    if summary.payment_plan_available:
        cadence = "weekly" if summary.frequency == "weekly" else "every two weeks"
        lines.append(
            f"Payment plan: {_money(summary.down_payment)} down payment, then "
            f"{summary.installments} payments of {_money(summary.installment_amount)} {cadence} "
            f"(remaining balance {_money(summary.remaining_balance)})."
        )
    else:
        lines.append("No installment payment plan is offered for this course.")

    return "\n".join(lines)


def _format_start(start: datetime) -> str:
    # Local wall-clock time; the zone is named only when the CRM sent one
    when = start.strftime("%A, %B %d, %Y at %H:%M")
    if start.tzinfo is not None:
        when += f" {start.tzname()}"
    return when


def render_schedule(options: List[ScheduleOption]) -> str:
    if not options:
        return NO_SCHEDULE_OPTIONS

    lines = []
    for i, option in enumerate(options, 1):
        start = parse_wall_clock(option)
        when = _format_start(start) if start else "date to be confirmed"
        parts = [f"{i}. {option.label or 'Session'}: {when}"]
        if option.location:
            parts.append(f"at {option.location}")
        lines.append(" ".join(parts))
    return "\n".join(lines)


def render_courses(bundle: RecommendationBundle) -> str:
    lines = []
    for i, course in enumerate(bundle.match_outcome.courses):
        tag = "PRIMARY" if i == 0 else "ALSO"
        certs = ", ".join(course.certificates_included)
        line = f"- [{tag}] {course.course_name} ({course.course_code}) - certificates: {certs}"
        if course.link:
            line += f" - {course.link}"
        lines.append(line)
    return "\n".join(lines) or "- No course could be recommended. Offer to connect the learner with staff."


def build_system_prompt(bundle: RecommendationBundle, language: str = "en") -> str:
    """Constructs the system prompt from the recommendation bundle."""
    rules_str = "\n".join([f"- {rule}" for rule in SAFETY_RULES])
    language_name = LANGUAGE_NAMES.get(language, language)

    header = f"""{SYSTEM_ROLE_DEFINITION}
Respond in the learner's preferred language: {language_name}.

SAFETY RULES (NON-NEGOTIABLE):
{rules_str}
"""

    if bundle.requires_staff_handoff:
        return f"{header}\n{STAFF_HANDOFF_INSTRUCTION}"

    goals = ", ".join(bundle.normalized_goals) or "not specified"
    uncovered = bundle.match_outcome.uncovered_goals

    sections = [
        header,
        f"LEARNER GOALS: {goals}",
        f"MATCH TYPE: {bundle.match_outcome.match_type}",
    ]
    if uncovered:
        sections.append(f"GOALS NOT COVERED BY THESE COURSES: {', '.join(uncovered)}")
    sections.extend([
        f"RECOMMENDED COURSES:\n{render_courses(bundle)}",
        f"PAYMENT TERMS (primary course, quote verbatim):\n{render_payment_terms(bundle.payment_summary)}",
        f"SCHEDULE OPTIONS:\n{render_schedule(bundle.schedule_options)}",
    ])
    return "\n\n".join(sections)


def build_messages(
    system_prompt: str,
    message: str,
    history: Optional[List[Dict[str, Any]]] = None,
    history_limit: int = 10
) -> List[Dict[str, str]]:
    """
    Chat-completion message list. Only the last history_limit turns are
    sent, and only user/assistant roles are accepted from the client.
    """
    messages = [{"role": "system", "content": system_prompt}]
    for turn in (history or [])[-history_limit:]:
        role = turn.get("role")
        content = turn.get("content")
        if role in ("user", "assistant") and isinstance(content, str):
            messages.append({"role": role, "content": content})
    messages.append({"role": "user", "content": message})
    return messages

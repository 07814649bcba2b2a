from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String

from .base import Base


class RecDecisionLog(Base):
    __tablename__ = "rec_decision_log"

    # Identifiers
    id = Column(Integer, primary_key=True)
    request_id = Column(String, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Decision
    normalized_goals = Column(JSON)
    match_type = Column(String)
    course_codes = Column(JSON)
    requires_staff_handoff = Column(Boolean, default=False)
    payment_summary = Column(JSON)
    schedule_options = Column(JSON)

    # Opaque pre-screen fields
    language = Column(String)
    contact = Column(JSON)

    @classmethod
    def from_bundle(cls, bundle, answers) -> "RecDecisionLog":
        return cls(
            request_id=bundle.request_id,
            normalized_goals=list(bundle.normalized_goals),
            match_type=bundle.match_outcome.match_type,
            course_codes=[c.course_code for c in bundle.match_outcome.courses],
            requires_staff_handoff=bundle.requires_staff_handoff,
            payment_summary=bundle.payment_summary.model_dump() if bundle.payment_summary else None,
            schedule_options=[o.model_dump(mode="json", by_alias=True) for o in bundle.schedule_options],
            language=answers.language,
            contact=answers.contact,
        )

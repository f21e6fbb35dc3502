"""Matching model: FounderInvestorMatch."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from fundlink.models.base import BaseModel, pg_enum
from fundlink.models.enums import AllotmentMethod, MatchStatus


class FounderInvestorMatch(BaseModel):
    __tablename__ = "founder_investor_matches"
    __table_args__ = (
        UniqueConstraint(
            "funding_request_id",
            "founder_id",
            "investor_id",
            name="uq_founder_investor_matches_request_founder_investor",
        ),
        Index("ix_founder_investor_matches_funding_request_id", "funding_request_id"),
        Index("ix_founder_investor_matches_founder_status", "founder_id", "status"),
        Index("ix_founder_investor_matches_investor_status", "investor_id", "status"),
        Index("ix_founder_investor_matches_match_score", "match_score"),
        CheckConstraint(
            "match_score >= 0 AND match_score <= 100",
            name="ck_founder_investor_matches_score_range",
        ),
    )

    funding_request_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("funding_requests.id", ondelete="CASCADE"),
        nullable=False,
    )
    founder_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("founders.id", ondelete="CASCADE"),
        nullable=False,
    )
    investor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("investors.id", ondelete="CASCADE"),
        nullable=False,
    )
    match_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    # {"industry_match": bool, "stage_match": bool, ...}
    match_criteria: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, default=dict, server_default="{}"
    )
    assignment_method: Mapped[AllotmentMethod] = mapped_column(
        pg_enum(AllotmentMethod, "allotment_method"), nullable=False
    )
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    status: Mapped[MatchStatus] = mapped_column(
        pg_enum(MatchStatus, "match_status"),
        nullable=False,
        default=MatchStatus.ACTIVE,
    )
    contacted_at: Mapped[datetime | None] = mapped_column()
    response_at: Mapped[datetime | None] = mapped_column()
    notes: Mapped[str | None] = mapped_column(String(500))
    email_sent: Mapped[bool] = mapped_column(
        default=False, server_default="false", nullable=False
    )
    email_sent_at: Mapped[datetime | None] = mapped_column()

    def __repr__(self) -> str:
        return f"<FounderInvestorMatch(id={self.id}, score={self.match_score}, status={self.status.value})>"

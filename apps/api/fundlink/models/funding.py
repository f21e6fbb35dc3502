"""Funding request model."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fundlink.models.base import BaseModel, pg_enum
from fundlink.models.enums import AllotmentMethod, FundingRequestStatus, FundingStage


class FundingRequest(BaseModel):
    __tablename__ = "funding_requests"
    __table_args__ = (
        Index("ix_funding_requests_founder_id_status", "founder_id", "status"),
        Index("ix_funding_requests_status_created_at", "status", "created_at"),
        CheckConstraint("funding_amount > 0", name="ck_funding_requests_amount_positive"),
        CheckConstraint(
            "equity_offered IS NULL OR (equity_offered >= 0 AND equity_offered <= 100)",
            name="ck_funding_requests_equity_range",
        ),
        CheckConstraint("refresh_count >= 0", name="ck_funding_requests_refresh_count"),
    )

    founder_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("founders.id", ondelete="CASCADE"),
        nullable=False,
    )
    funding_amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    funding_stage: Mapped[FundingStage] = mapped_column(
        pg_enum(FundingStage, "funding_stage"), nullable=False
    )
    equity_offered: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    use_of_funds: Mapped[str] = mapped_column(Text, nullable=False)
    business_plan: Mapped[str | None] = mapped_column(Text)
    financial_projections: Mapped[str | None] = mapped_column(Text)
    additional_notes: Mapped[str | None] = mapped_column(Text)

    status: Mapped[FundingRequestStatus] = mapped_column(
        pg_enum(FundingRequestStatus, "funding_request_status"),
        nullable=False,
        default=FundingRequestStatus.OPEN,
    )
    allotted_at: Mapped[datetime | None] = mapped_column()
    allotted_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    allotment_method: Mapped[AllotmentMethod | None] = mapped_column(
        pg_enum(AllotmentMethod, "allotment_method")
    )
    ai_match_score: Mapped[float | None] = mapped_column()
    refresh_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    last_refreshed_at: Mapped[datetime | None] = mapped_column()

    def __repr__(self) -> str:
        return f"<FundingRequest(id={self.id}, status={self.status.value})>"

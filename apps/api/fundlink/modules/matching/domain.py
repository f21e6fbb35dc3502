"""Matching domain records.

Plain dataclasses passed between the matching core and its repository
ports. The SQLAlchemy adapters in ``repository.py`` map ORM rows onto these;
the core never touches a session or an ORM instance directly.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from fundlink.models.enums import (
    AllotmentMethod,
    FundingRequestStatus,
    MatchStatus,
    NotificationPriority,
    NotificationType,
    PartyType,
    RelatedEntityType,
)


# ── Profiles (read-only inputs) ──────────────────────────────────────────────


@dataclass(frozen=True)
class PreviousInvestment:
    company_name: str | None = None
    industry: str | None = None
    stage: str | None = None
    amount_invested: Decimal | None = None
    year: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PreviousInvestment:
        """Build from a stored JSON entry. Values of the wrong shape become None."""
        return cls(
            company_name=_as_text(data.get("company_name")),
            industry=_as_text(data.get("industry")),
            stage=_as_text(data.get("stage")),
            amount_invested=_as_decimal(data.get("amount_invested")),
            year=_as_year(data.get("year")),
        )


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def _as_year(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class FounderProfile:
    id: uuid.UUID
    company_name: str
    email: str | None = None
    industry: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class InvestorProfile:
    id: uuid.UUID
    full_name: str
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    company: str | None = None
    designation: str | None = None
    bio: str | None = None
    location: str | None = None
    photo_url: str | None = None
    investment_interests: tuple[str, ...] = ()
    amount_range: str | None = None
    previous_investments: tuple[PreviousInvestment, ...] = ()
    notable_exits: tuple[str, ...] = ()
    is_verified: bool = False


# ── Funding requests & matches ───────────────────────────────────────────────


@dataclass
class FundingRequestRecord:
    id: uuid.UUID
    founder_id: uuid.UUID
    funding_amount: Decimal
    funding_stage: str
    use_of_funds: str
    currency: str = "USD"
    equity_offered: Decimal | None = None
    business_plan: str | None = None
    financial_projections: str | None = None
    additional_notes: str | None = None
    status: FundingRequestStatus = FundingRequestStatus.OPEN
    allotted_at: datetime | None = None
    allotted_by: uuid.UUID | None = None
    allotment_method: AllotmentMethod | None = None
    ai_match_score: float | None = None
    refresh_count: int = 0
    last_refreshed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NewFundingRequest:
    founder_id: uuid.UUID
    funding_amount: Decimal
    funding_stage: str
    use_of_funds: str
    currency: str = "USD"
    equity_offered: Decimal | None = None
    business_plan: str | None = None
    financial_projections: str | None = None
    additional_notes: str | None = None


@dataclass(frozen=True)
class MatchCriteria:
    industry_match: bool = False
    stage_match: bool = False
    amount_match: bool = False
    location_match: bool = False
    experience_match: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "industry_match": self.industry_match,
            "stage_match": self.stage_match,
            "amount_match": self.amount_match,
            "location_match": self.location_match,
            "experience_match": self.experience_match,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MatchCriteria:
        data = data or {}
        return cls(
            industry_match=bool(data.get("industry_match", False)),
            stage_match=bool(data.get("stage_match", False)),
            amount_match=bool(data.get("amount_match", False)),
            location_match=bool(data.get("location_match", False)),
            experience_match=bool(data.get("experience_match", False)),
        )


@dataclass
class MatchRecord:
    id: uuid.UUID
    funding_request_id: uuid.UUID
    founder_id: uuid.UUID
    investor_id: uuid.UUID
    assignment_method: AllotmentMethod
    match_score: int = 0
    match_criteria: MatchCriteria = field(default_factory=MatchCriteria)
    assigned_by: uuid.UUID | None = None
    status: MatchStatus = MatchStatus.ACTIVE
    contacted_at: datetime | None = None
    response_at: datetime | None = None
    notes: str | None = None
    email_sent: bool = False
    email_sent_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NewMatch:
    funding_request_id: uuid.UUID
    founder_id: uuid.UUID
    investor_id: uuid.UUID
    assignment_method: AllotmentMethod
    match_score: int = 0
    match_criteria: MatchCriteria = field(default_factory=MatchCriteria)
    assigned_by: uuid.UUID | None = None


# ── Scoring & selection results ──────────────────────────────────────────────


@dataclass(frozen=True)
class MatchScore:
    score: int
    criteria: MatchCriteria
    points: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RankedCandidate:
    investor: InvestorProfile
    match_score: int
    match_criteria: MatchCriteria


@dataclass(frozen=True)
class ManualSelection:
    to_assign: list[uuid.UUID]
    skipped: list[uuid.UUID]
    investors: dict[uuid.UUID, InvestorProfile] = field(default_factory=dict)


@dataclass(frozen=True)
class ScoreSummary:
    count: int = 0
    average: float | None = None
    maximum: int | None = None
    minimum: int | None = None


# ── Notifications ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NotificationEvent:
    recipient_id: uuid.UUID | None
    recipient_type: PartyType
    type: NotificationType
    title: str
    message: str
    related_entity_id: uuid.UUID | None
    related_entity_type: RelatedEntityType = RelatedEntityType.FUNDING_REQUEST
    priority: NotificationPriority = NotificationPriority.MEDIUM
    sender_id: uuid.UUID | None = None
    sender_type: PartyType = PartyType.SYSTEM
    action_url: str | None = None
    action_text: str | None = None


# ── Engine outcomes ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AllotmentOutcome:
    funding_request: FundingRequestRecord
    total_assigned: int
    newly_assigned: int
    is_fully_allotted: bool
    became_allotted: bool
    remaining_needed: int


@dataclass(frozen=True)
class RefreshOutcome:
    funding_request: FundingRequestRecord
    cleared_matches: int
    remaining_refreshes: int


@dataclass(frozen=True)
class RemovalOutcome:
    funding_request: FundingRequestRecord
    remaining_matches: int
    reset_to_open: bool


@dataclass(frozen=True)
class StatusChangeOutcome:
    match: MatchRecord
    previous_status: MatchStatus
    changed: bool
    status_breakdown: dict[MatchStatus, int]
    total_matches: int
    next_actions: list[str]

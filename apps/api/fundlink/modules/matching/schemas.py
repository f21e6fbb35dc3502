"""Matching module API schemas."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from fundlink.models.enums import AllotmentMethod, FundingStage, MatchStatus


# ── Funding requests ─────────────────────────────────────────────────────────


class FundingRequestCreateRequest(BaseModel):
    founder_id: uuid.UUID | None = None  # admins create on a founder's behalf
    funding_amount: Decimal = Field(gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    funding_stage: FundingStage
    equity_offered: Decimal | None = Field(None, ge=0, le=100)
    use_of_funds: str = Field(max_length=5000)
    business_plan: str | None = None
    financial_projections: str | None = None
    additional_notes: str | None = Field(None, max_length=2000)
    investor_ids: list[uuid.UUID] = Field(default_factory=list, max_length=50)

    @field_validator("use_of_funds")
    @classmethod
    def _use_of_funds_length(cls, v: str) -> str:
        if len(v.strip()) < 10:
            raise ValueError("Use of funds description must be at least 10 characters")
        return v.strip()

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return v.upper()


class FundingRequestResponse(BaseModel):
    id: uuid.UUID
    founder_id: uuid.UUID
    funding_amount: Decimal
    currency: str
    funding_stage: str
    equity_offered: Decimal | None
    use_of_funds: str
    business_plan: str | None
    financial_projections: str | None
    additional_notes: str | None
    status: str
    allotted_at: datetime | None
    allotted_by: uuid.UUID | None
    allotment_method: str | None
    ai_match_score: float | None
    refresh_count: int
    last_refreshed_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


class FundingRequestListItem(FundingRequestResponse):
    can_refresh: bool


class FundingRequestStatusSummary(BaseModel):
    total_open: int
    total_allotted: int
    total_closed: int
    total: int


# ── Assignment ───────────────────────────────────────────────────────────────


class AssignInvestorsRequest(BaseModel):
    assignment_method: AllotmentMethod
    investor_ids: list[uuid.UUID] = Field(default_factory=list, max_length=100)
    investor_count: int | None = None  # AI only; clamped server-side
    replace_existing: bool = False


class InvestorSummary(BaseModel):
    """Investor card shown to founders. Contact fields are never included."""

    id: uuid.UUID
    full_name: str
    company: str | None
    designation: str | None
    location: str | None
    investment_interests: list[str]
    amount_range: str | None
    photo_url: str | None
    bio: str | None = None
    notable_exits: list[str] = []
    previous_investment_count: int = 0
    is_verified: bool = False


class MatchCriteriaResponse(BaseModel):
    industry_match: bool
    stage_match: bool
    amount_match: bool
    location_match: bool
    experience_match: bool


class AssignedInvestorResponse(BaseModel):
    match_id: uuid.UUID
    investor: InvestorSummary | None
    match_score: int
    match_criteria: MatchCriteriaResponse
    assignment_method: str
    status: str
    notes: str | None = None
    contacted_at: datetime | None = None
    response_at: datetime | None = None
    created_at: datetime | None
    is_newly_assigned: bool = False


class AssignmentSummary(BaseModel):
    total_assigned: int
    newly_assigned: int
    minimum_required: int
    is_fully_allotted: bool
    remaining_needed: int
    assignment_method: str
    average_match_score: float | None
    skipped_investors: list[uuid.UUID]
    skipped_count: int


class FundingRequestCreateResponse(BaseModel):
    funding_request: FundingRequestResponse
    warnings: list[str]
    assignment: AssignmentSummary | None = None


class AssignInvestorsResponse(BaseModel):
    message: str
    funding_request: FundingRequestResponse
    assigned_investors: list[AssignedInvestorResponse]
    summary: AssignmentSummary


# ── Refresh / removal / close ────────────────────────────────────────────────


class RefreshRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class RefreshResponse(BaseModel):
    message: str
    funding_request: FundingRequestResponse
    investors_removed: int
    max_refresh_count: int
    remaining_refreshes: int
    can_refresh_again: bool


class RemoveInvestorResponse(BaseModel):
    message: str
    removed_investor_id: uuid.UUID
    remaining_matches: int
    funding_request_status: str


class FundingRequestDeletedResponse(BaseModel):
    message: str
    funding_request_id: uuid.UUID
    matches_removed: int


# ── Founder view of assigned investors ───────────────────────────────────────


class ScoreStatistics(BaseModel):
    average: float | None
    maximum: int | None
    minimum: int | None


class FounderInvestorStatistics(BaseModel):
    total: int
    status_breakdown: dict[str, int]
    match_scores: ScoreStatistics


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool


class FundingRequestListResponse(BaseModel):
    message: str
    funding_requests: list[FundingRequestListItem]
    pagination: Pagination
    summary: FundingRequestStatusSummary


class FounderInvestorsResponse(BaseModel):
    funding_request: FundingRequestResponse
    investors: list[AssignedInvestorResponse]
    pagination: Pagination
    statistics: FounderInvestorStatistics
    can_refresh: bool
    minimum_investors_required: int


# ── Match status ─────────────────────────────────────────────────────────────


class MatchStatusUpdateRequest(BaseModel):
    status: MatchStatus
    notes: str | None = Field(None, max_length=500)


class FundingRequestStats(BaseModel):
    status_breakdown: dict[str, int]
    total_matches: int


class MatchStatusUpdateResponse(BaseModel):
    message: str
    match: AssignedInvestorResponse
    previous_status: str
    changed: bool
    funding_request_stats: FundingRequestStats
    next_actions: list[str]


# ── Founder statistics ───────────────────────────────────────────────────────


class StatusStatistic(BaseModel):
    count: int
    average_score: int


class FounderMatchStatisticsResponse(BaseModel):
    founder_id: uuid.UUID
    total_matches: int
    active_funding_requests: int
    status_breakdown: dict[str, StatusStatistic]
    average_match_score: int


SortField = Literal["match_score", "created_at", "investor_name"]
SortOrder = Literal["asc", "desc"]
FundingRequestSortField = Literal["created_at", "updated_at", "funding_amount", "refresh_count"]
FundingRequestStatusFilter = Literal["open", "allotted", "closed", "all"]

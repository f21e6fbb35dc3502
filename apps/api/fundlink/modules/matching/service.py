"""Matching service: funding request lifecycle, investor assignment, match workflow."""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

import structlog

from fundlink.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from fundlink.models.enums import AllotmentMethod, FundingRequestStatus, MatchStatus
from fundlink.modules.matching.allotment import AllotmentEngine, utcnow
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    InvestorProfile,
    MatchCriteria,
    MatchRecord,
    NewFundingRequest,
    NewMatch,
)
from fundlink.modules.matching.notifier import NotificationEmitter
from fundlink.modules.matching.party import (
    AdminParty,
    FounderParty,
    Party,
    ensure_admin,
    ensure_owner_or_admin,
    is_admin,
)
from fundlink.modules.matching.policy import AllotmentPolicy
from fundlink.modules.matching.ports import (
    Directory,
    FundingRequestFilter,
    FundingRequestSort,
    FundingRequestStore,
    InvestorFilter,
    MatchFilter,
    MatchSort,
    MatchStore,
    NotificationSink,
    Pagination,
)
from fundlink.modules.matching.schemas import (
    AssignedInvestorResponse,
    AssignInvestorsRequest,
    AssignInvestorsResponse,
    AssignmentSummary,
    FounderInvestorsResponse,
    FounderInvestorStatistics,
    FounderMatchStatisticsResponse,
    FundingRequestCreateRequest,
    FundingRequestCreateResponse,
    FundingRequestDeletedResponse,
    FundingRequestListItem,
    FundingRequestListResponse,
    FundingRequestResponse,
    FundingRequestStats,
    FundingRequestStatusSummary,
    InvestorSummary,
    MatchCriteriaResponse,
    MatchStatusUpdateRequest,
    MatchStatusUpdateResponse,
    RefreshResponse,
    RemoveInvestorResponse,
    ScoreStatistics,
    StatusStatistic,
)
from fundlink.modules.matching.schemas import Pagination as PaginationResponse
from fundlink.modules.matching.selection import InvestorSelector
from fundlink.modules.matching.status_machine import MatchStatusMachine

logger = structlog.get_logger()

_LARGE_AMOUNT = Decimal(100_000_000)

# Typical raise per stage: (min, max); None = unbounded
_STAGE_AMOUNT_RANGES: dict[str, tuple[Decimal | None, Decimal | None]] = {
    "Pre-Seed": (None, Decimal(1_000_000)),
    "Seed": (None, Decimal(5_000_000)),
    "Series A": (Decimal(1_000_000), Decimal(20_000_000)),
    "Series B": (Decimal(10_000_000), Decimal(50_000_000)),
    "Series C": (Decimal(20_000_000), None),
}


@dataclass
class MatchingDeps:
    """Ports and policy one request's use cases run against."""

    directory: Directory
    matches: MatchStore
    funding_requests: FundingRequestStore
    sink: NotificationSink
    policy: AllotmentPolicy = field(default_factory=AllotmentPolicy.from_settings)
    now: Callable[[], datetime] = utcnow

    @property
    def emitter(self) -> NotificationEmitter:
        return NotificationEmitter(self.sink)

    @property
    def allotment(self) -> AllotmentEngine:
        return AllotmentEngine(
            self.matches, self.funding_requests, self.emitter, self.policy, now=self.now
        )

    @property
    def selector(self) -> InvestorSelector:
        return InvestorSelector(self.directory)

    @property
    def status_machine(self) -> MatchStatusMachine:
        return MatchStatusMachine(self.matches, self.emitter, now=self.now)


# ── Helpers ───────────────────────────────────────────────────────────────────


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


async def _get_funding_request_or_raise(
    deps: MatchingDeps, funding_request_id: uuid.UUID
) -> FundingRequestRecord:
    fr = await deps.funding_requests.find_funding_request_by_id(funding_request_id)
    if fr is None:
        raise NotFoundError("Funding request not found")
    return fr


async def _get_founder_or_raise(deps: MatchingDeps, founder_id: uuid.UUID) -> FounderProfile:
    founder = await deps.directory.find_founder_by_id(founder_id)
    if founder is None:
        raise NotFoundError("Founder profile not found")
    return founder


async def _investors_by_id(
    deps: MatchingDeps, investor_ids: set[uuid.UUID]
) -> dict[uuid.UUID, InvestorProfile]:
    if not investor_ids:
        return {}
    found = await deps.directory.find_investors(
        InvestorFilter(verified_only=False, ids=frozenset(investor_ids))
    )
    return {inv.id: inv for inv in found}


def funding_request_to_response(fr: FundingRequestRecord) -> FundingRequestResponse:
    return FundingRequestResponse(
        id=fr.id,
        founder_id=fr.founder_id,
        funding_amount=fr.funding_amount,
        currency=fr.currency,
        funding_stage=str(fr.funding_stage),
        equity_offered=fr.equity_offered,
        use_of_funds=fr.use_of_funds,
        business_plan=fr.business_plan,
        financial_projections=fr.financial_projections,
        additional_notes=fr.additional_notes,
        status=fr.status.value,
        allotted_at=fr.allotted_at,
        allotted_by=fr.allotted_by,
        allotment_method=fr.allotment_method.value if fr.allotment_method else None,
        ai_match_score=fr.ai_match_score,
        refresh_count=fr.refresh_count,
        last_refreshed_at=fr.last_refreshed_at,
        created_at=fr.created_at,
        updated_at=fr.updated_at,
    )


def investor_to_summary(inv: InvestorProfile) -> InvestorSummary:
    """Founder-facing investor card; email, phone and linkedin are left out."""
    return InvestorSummary(
        id=inv.id,
        full_name=inv.full_name,
        company=inv.company,
        designation=inv.designation,
        location=inv.location,
        investment_interests=list(inv.investment_interests),
        amount_range=inv.amount_range,
        photo_url=inv.photo_url,
        bio=inv.bio,
        notable_exits=list(inv.notable_exits),
        previous_investment_count=len(inv.previous_investments),
        is_verified=inv.is_verified,
    )


def match_to_response(
    m: MatchRecord,
    investor: InvestorProfile | None,
    *,
    is_newly_assigned: bool = False,
) -> AssignedInvestorResponse:
    return AssignedInvestorResponse(
        match_id=m.id,
        investor=investor_to_summary(investor) if investor else None,
        match_score=m.match_score,
        match_criteria=MatchCriteriaResponse(**m.match_criteria.to_dict()),
        assignment_method=m.assignment_method.value,
        status=m.status.value,
        notes=m.notes,
        contacted_at=m.contacted_at,
        response_at=m.response_at,
        created_at=m.created_at,
        is_newly_assigned=is_newly_assigned,
    )


def validate_funding_request_data(body: FundingRequestCreateRequest) -> list[str]:
    """Advisory warnings; hard validation lives on the request schema."""
    warnings: list[str] = []
    amount = body.funding_amount
    stage = body.funding_stage.value

    if amount > _LARGE_AMOUNT:
        warnings.append("Large funding amounts may have limited investor matches")

    low, high = _STAGE_AMOUNT_RANGES.get(stage, (None, None))
    if low is not None and amount < low:
        warnings.append(f"{stage} typically raises more than {low:,.0f}")
    if high is not None and amount > high:
        warnings.append(f"{stage} typically raises less than {high:,.0f}")

    if not body.business_plan or len(body.business_plan) < 100:
        warnings.append("Consider adding a detailed business plan to improve investor matching")
    if not body.financial_projections:
        warnings.append("Financial projections can significantly improve your chances with investors")

    return warnings


# ── Assignment core ───────────────────────────────────────────────────────────


@dataclass
class _AssignmentResult:
    summary: AssignmentSummary
    funding_request: FundingRequestRecord
    new_match_ids: set[uuid.UUID]
    message: str


async def _assign(
    deps: MatchingDeps,
    actor: Party,
    fr: FundingRequestRecord,
    *,
    method: AllotmentMethod,
    investor_ids: list[uuid.UUID],
    investor_count: int | None,
    replace_existing: bool,
) -> _AssignmentResult:
    if fr.status == FundingRequestStatus.CLOSED:
        raise ValidationError("Cannot assign investors to a closed funding request")

    founder = await _get_founder_or_raise(deps, fr.founder_id)
    request_filter = MatchFilter(funding_request_id=fr.id)

    current_count = await deps.matches.count_matches(request_filter)
    existing = await deps.matches.find_matches(request_filter)
    assigned_ids = {m.investor_id for m in existing}

    # Select (and validate) before anything is deleted
    skipped: list[uuid.UUID] = []
    if method == AllotmentMethod.MANUAL:
        selection = await deps.selector.select_manual(
            fr, investor_ids, assigned_ids, replace_existing=replace_existing
        )
        skipped = selection.skipped
        new_records = [
            NewMatch(
                funding_request_id=fr.id,
                founder_id=fr.founder_id,
                investor_id=investor_id,
                assignment_method=method,
                match_score=0,
                match_criteria=MatchCriteria(),
                assigned_by=actor.id,
            )
            for investor_id in selection.to_assign
        ]
    else:
        count = deps.policy.clamp_ai_count(investor_count)
        exclude = set() if replace_existing else assigned_ids
        ranked = await deps.selector.select_ai_matches(fr, founder, count, exclude)
        if not ranked:
            raise ValidationError(
                "No suitable investors found using AI matching. "
                "All available investors may already be assigned."
            )
        new_records = [
            NewMatch(
                funding_request_id=fr.id,
                founder_id=fr.founder_id,
                investor_id=c.investor.id,
                assignment_method=method,
                match_score=c.match_score,
                match_criteria=c.match_criteria,
                assigned_by=actor.id,
            )
            for c in ranked
        ]

    if replace_existing:
        removed = await deps.matches.delete_matches(request_filter)
        logger.info(
            "existing_matches_replaced",
            funding_request_id=str(fr.id),
            removed=removed,
        )

    created = await deps.matches.create_matches(new_records)

    outcome = await deps.allotment.apply_assignment(
        fr,
        newly_assigned=len(created),
        current_count_before=current_count,
        method=method,
        actor=actor,
        replace_existing=replace_existing,
        new_match_ids=[m.id for m in created],
        new_scores=[m.match_score for m in created],
    )
    updated = outcome.funding_request
    minimum = deps.policy.min_investors_for_allotment

    if outcome.became_allotted:
        status_message = (
            f" Funding request marked as ALLOTTED ({outcome.total_assigned} investors assigned)."
        )
    elif not outcome.is_fully_allotted:
        status_message = (
            f" Funding request remains OPEN ({outcome.total_assigned}/{minimum} investors assigned)."
        )
    else:
        status_message = (
            f" Funding request already allotted ({outcome.total_assigned} investors total)."
        )
    message = (
        f"Successfully assigned {_plural(len(created), 'new investor')} to "
        f"{founder.company_name}.{status_message}"
    )
    if skipped:
        message += f" Note: Skipped {_plural(len(skipped), 'already assigned investor')}."

    return _AssignmentResult(
        summary=AssignmentSummary(
            total_assigned=outcome.total_assigned,
            newly_assigned=outcome.newly_assigned,
            minimum_required=minimum,
            is_fully_allotted=outcome.is_fully_allotted,
            remaining_needed=outcome.remaining_needed,
            assignment_method=method.value,
            average_match_score=updated.ai_match_score if method == AllotmentMethod.AI else None,
            skipped_investors=skipped,
            skipped_count=len(skipped),
        ),
        funding_request=updated,
        new_match_ids={m.id for m in created},
        message=message,
    )


# ── Funding requests ──────────────────────────────────────────────────────────


async def create_funding_request(
    deps: MatchingDeps,
    actor: Party,
    body: FundingRequestCreateRequest,
) -> FundingRequestCreateResponse:
    if isinstance(actor, AdminParty):
        if body.founder_id is None:
            raise ValidationError("founder_id is required when an admin creates a funding request")
        founder_id = body.founder_id
    elif isinstance(actor, FounderParty):
        founder_id = actor.id
    else:
        raise PermissionDeniedError("Only founders or admins can create funding requests")

    founder = await _get_founder_or_raise(deps, founder_id)

    active = await deps.funding_requests.find_active_for_founder(founder_id)
    if active is not None:
        raise ValidationError(
            "You already have an active funding request. "
            "Please close it before creating a new one.",
            detail={"active_funding_request_id": str(active.id)},
        )

    warnings = validate_funding_request_data(body)

    fr = await deps.funding_requests.create_funding_request(
        NewFundingRequest(
            founder_id=founder_id,
            funding_amount=body.funding_amount,
            funding_stage=body.funding_stage.value,
            use_of_funds=body.use_of_funds,
            currency=body.currency,
            equity_offered=body.equity_offered,
            business_plan=body.business_plan,
            financial_projections=body.financial_projections,
            additional_notes=body.additional_notes,
        )
    )
    logger.info(
        "funding_request_created",
        funding_request_id=str(fr.id),
        founder_id=str(founder_id),
        stage=fr.funding_stage,
        warnings=len(warnings),
    )
    await deps.emitter.request_created(fr, founder)

    assignment = None
    if body.investor_ids:
        result = await _assign(
            deps,
            actor,
            fr,
            method=AllotmentMethod.MANUAL,
            investor_ids=body.investor_ids,
            investor_count=None,
            replace_existing=False,
        )
        fr = result.funding_request
        assignment = result.summary

    return FundingRequestCreateResponse(
        funding_request=funding_request_to_response(fr),
        warnings=warnings,
        assignment=assignment,
    )


async def assign_investors(
    deps: MatchingDeps,
    actor: Party,
    funding_request_id: uuid.UUID,
    body: AssignInvestorsRequest,
) -> AssignInvestorsResponse:
    ensure_admin(actor)
    fr = await _get_funding_request_or_raise(deps, funding_request_id)

    result = await _assign(
        deps,
        actor,
        fr,
        method=body.assignment_method,
        investor_ids=body.investor_ids,
        investor_count=body.investor_count,
        replace_existing=body.replace_existing,
    )

    matches = await deps.matches.find_matches(
        MatchFilter(funding_request_id=fr.id),
        MatchSort(field="created_at", descending=True),
    )
    investors = await _investors_by_id(deps, {m.investor_id for m in matches})

    return AssignInvestorsResponse(
        message=result.message,
        funding_request=funding_request_to_response(result.funding_request),
        assigned_investors=[
            match_to_response(
                m,
                investors.get(m.investor_id),
                is_newly_assigned=m.id in result.new_match_ids,
            )
            for m in matches
        ],
        summary=result.summary,
    )


async def refresh_funding_request(
    deps: MatchingDeps,
    actor: Party,
    funding_request_id: uuid.UUID,
    reason: str | None = None,
) -> RefreshResponse:
    fr = await _get_funding_request_or_raise(deps, funding_request_id)
    outcome = await deps.allotment.refresh(fr, actor, reason)
    max_count = deps.policy.max_refresh_count

    return RefreshResponse(
        message="Funding request refreshed successfully",
        funding_request=funding_request_to_response(outcome.funding_request),
        investors_removed=outcome.cleared_matches,
        max_refresh_count=max_count,
        remaining_refreshes=outcome.remaining_refreshes,
        can_refresh_again=outcome.funding_request.refresh_count < max_count,
    )


async def remove_investor(
    deps: MatchingDeps,
    actor: Party,
    funding_request_id: uuid.UUID,
    investor_id: uuid.UUID,
) -> RemoveInvestorResponse:
    fr = await _get_funding_request_or_raise(deps, funding_request_id)
    ensure_owner_or_admin(actor, fr)

    outcome = await deps.allotment.remove_investor(fr, investor_id)
    return RemoveInvestorResponse(
        message="Investor successfully removed from funding request",
        removed_investor_id=investor_id,
        remaining_matches=outcome.remaining_matches,
        funding_request_status=outcome.funding_request.status.value,
    )


async def close_funding_request(
    deps: MatchingDeps,
    actor: Party,
    funding_request_id: uuid.UUID,
) -> FundingRequestResponse:
    fr = await _get_funding_request_or_raise(deps, funding_request_id)
    ensure_owner_or_admin(actor, fr)
    if fr.status == FundingRequestStatus.CLOSED:
        raise ValidationError("Funding request is already closed")

    updated = await deps.funding_requests.update_funding_request(
        fr.id, {"status": FundingRequestStatus.CLOSED}
    )
    logger.info(
        "funding_request_closed",
        funding_request_id=str(fr.id),
        closed_by=actor.party_type.value,
    )
    if is_admin(actor):
        await deps.emitter.request_closed(updated, actor_id=actor.id)
    return funding_request_to_response(updated)


async def delete_funding_request(
    deps: MatchingDeps,
    actor: Party,
    funding_request_id: uuid.UUID,
) -> FundingRequestDeletedResponse:
    fr = await _get_funding_request_or_raise(deps, funding_request_id)
    ensure_owner_or_admin(actor, fr)

    removed = await deps.matches.delete_matches(MatchFilter(funding_request_id=fr.id))
    await deps.funding_requests.delete_funding_request(fr.id)
    logger.info(
        "funding_request_deleted",
        funding_request_id=str(fr.id),
        matches_removed=removed,
        deleted_by=actor.party_type.value,
    )
    if is_admin(actor):
        await deps.emitter.request_deleted(fr, actor_id=actor.id)

    return FundingRequestDeletedResponse(
        message="Funding request deleted successfully",
        funding_request_id=fr.id,
        matches_removed=removed,
    )


# ── Listing ───────────────────────────────────────────────────────────────────


async def list_funding_requests(
    deps: MatchingDeps,
    actor: Party,
    *,
    status: str = "all",
    founder_id: uuid.UUID | None = None,
    funding_stage: str | None = None,
    min_amount: Decimal | None = None,
    max_amount: Decimal | None = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> FundingRequestListResponse:
    """Funding requests grouped open, allotted, closed, then ordered by ``sort_by``.

    Founders only ever see their own requests; admins see all of them and may
    narrow to one founder.
    """
    if not is_admin(actor):
        if founder_id is not None and founder_id != actor.id:
            raise PermissionDeniedError("Founders can only list their own funding requests")
        founder_id = actor.id
    if min_amount is not None and max_amount is not None and min_amount > max_amount:
        raise ValidationError("min_amount cannot be greater than max_amount")

    status_filter = None if status == "all" else FundingRequestStatus(status)
    scope = FundingRequestFilter(founder_id=founder_id)
    list_filter = FundingRequestFilter(
        founder_id=founder_id,
        status=status_filter,
        funding_stage=funding_stage,
        min_amount=min_amount,
        max_amount=max_amount,
    )

    total = await deps.funding_requests.count_funding_requests(list_filter)
    rows = await deps.funding_requests.find_funding_requests(
        list_filter,
        FundingRequestSort(field=sort_by, descending=sort_order == "desc"),
        Pagination(page=page, limit=limit),
    )
    counts = await deps.funding_requests.count_funding_requests_by_status(scope)
    pages = math.ceil(total / limit) if total else 0

    if total:
        message = f"Found {_plural(total, 'funding request')} (page {page} of {pages})"
    elif status_filter is not None:
        message = f"No funding requests found with status: {status_filter.value}"
    else:
        message = "No funding requests found"

    allotment = deps.allotment
    return FundingRequestListResponse(
        message=message,
        funding_requests=[
            FundingRequestListItem(
                **funding_request_to_response(fr).model_dump(),
                can_refresh=allotment.can_refresh(fr),
            )
            for fr in rows
        ],
        pagination=PaginationResponse(
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        ),
        summary=FundingRequestStatusSummary(
            total_open=counts.get(FundingRequestStatus.OPEN, 0),
            total_allotted=counts.get(FundingRequestStatus.ALLOTTED, 0),
            total_closed=counts.get(FundingRequestStatus.CLOSED, 0),
            total=sum(counts.values()),
        ),
    )


# ── Founder view ──────────────────────────────────────────────────────────────


async def list_founder_investors(
    deps: MatchingDeps,
    actor: Party,
    funding_request_id: uuid.UUID,
    *,
    page: int = 1,
    limit: int = 10,
    status: MatchStatus | None = None,
    min_score: int | None = None,
    sort_by: str = "match_score",
    sort_order: str = "desc",
) -> FounderInvestorsResponse:
    fr = await _get_funding_request_or_raise(deps, funding_request_id)
    ensure_owner_or_admin(actor, fr)

    request_filter = MatchFilter(funding_request_id=fr.id)
    list_filter = MatchFilter(funding_request_id=fr.id, status=status, min_score=min_score)

    total = await deps.matches.count_matches(list_filter)
    matches = await deps.matches.find_matches(
        list_filter,
        MatchSort(field=sort_by, descending=sort_order == "desc"),
        Pagination(page=page, limit=limit),
    )
    investors = await _investors_by_id(deps, {m.investor_id for m in matches})

    counts = await deps.matches.count_by_status(request_filter)
    scores = await deps.matches.score_summary(request_filter)
    pages = math.ceil(total / limit) if total else 0

    return FounderInvestorsResponse(
        funding_request=funding_request_to_response(fr),
        investors=[match_to_response(m, investors.get(m.investor_id)) for m in matches],
        pagination=PaginationResponse(
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        ),
        statistics=FounderInvestorStatistics(
            total=sum(counts.values()),
            status_breakdown={s.value: counts.get(s, 0) for s in MatchStatus},
            match_scores=ScoreStatistics(
                average=round(scores.average, 1) if scores.average is not None else None,
                maximum=scores.maximum,
                minimum=scores.minimum,
            ),
        ),
        can_refresh=deps.allotment.can_refresh(fr),
        minimum_investors_required=deps.policy.min_investors_for_allotment,
    )


# ── Match status ──────────────────────────────────────────────────────────────


async def update_match_status(
    deps: MatchingDeps,
    actor: Party,
    match_id: uuid.UUID,
    body: MatchStatusUpdateRequest,
) -> MatchStatusUpdateResponse:
    match = await deps.matches.find_one_match(MatchFilter(match_id=match_id))
    if match is None:
        raise NotFoundError("Match not found")
    if not (is_admin(actor) or (isinstance(actor, FounderParty) and actor.id == match.founder_id)):
        raise PermissionDeniedError("Match not found or access denied")

    investor = await deps.directory.find_investor_by_id(match.investor_id)
    outcome = await deps.status_machine.transition(
        match, body.status, notes=body.notes, investor=investor
    )

    if outcome.changed:
        message = (
            f"Match status updated from '{outcome.previous_status.value}' "
            f"to '{outcome.match.status.value}' successfully"
        )
    elif body.notes is not None:
        message = "Match notes updated successfully"
    else:
        message = "No changes made to match status"

    return MatchStatusUpdateResponse(
        message=message,
        match=match_to_response(outcome.match, investor),
        previous_status=outcome.previous_status.value,
        changed=outcome.changed,
        funding_request_stats=FundingRequestStats(
            status_breakdown={s.value: n for s, n in outcome.status_breakdown.items()},
            total_matches=outcome.total_matches,
        ),
        next_actions=outcome.next_actions,
    )


# ── Founder statistics ────────────────────────────────────────────────────────


async def get_founder_match_statistics(
    deps: MatchingDeps,
    actor: Party,
    founder_id: uuid.UUID,
) -> FounderMatchStatisticsResponse:
    if not (is_admin(actor) or (isinstance(actor, FounderParty) and actor.id == founder_id)):
        raise PermissionDeniedError("Access denied")

    founder_filter = MatchFilter(founder_id=founder_id)
    total = await deps.matches.count_matches(founder_filter)
    active = await deps.funding_requests.count_for_founder(
        founder_id, (FundingRequestStatus.OPEN, FundingRequestStatus.ALLOTTED)
    )

    breakdown: dict[str, StatusStatistic] = {}
    weighted = 0.0
    for s in MatchStatus:
        summary = await deps.matches.score_summary(
            MatchFilter(founder_id=founder_id, status=s)
        )
        if not summary.count:
            continue
        avg = summary.average or 0.0
        breakdown[s.value] = StatusStatistic(count=summary.count, average_score=_round_half_up(avg))
        weighted += avg * summary.count

    return FounderMatchStatisticsResponse(
        founder_id=founder_id,
        total_matches=total,
        active_funding_requests=active,
        status_breakdown=breakdown,
        average_match_score=_round_half_up(weighted / total) if total else 0,
    )

"""Matching API router: funding requests, investor allotment, match workflow.

Domain errors raised by the service are mapped onto HTTP status codes by the
handlers registered in ``fundlink.main``.
"""

import uuid
from decimal import Decimal

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fundlink.auth.dependencies import get_current_user, require_role
from fundlink.core.database import get_db
from fundlink.models.enums import FundingStage, MatchStatus, UserRole
from fundlink.modules.matching import service
from fundlink.modules.matching.party import Party, resolve_party
from fundlink.modules.matching.repository import (
    SqlDirectory,
    SqlFundingRequestStore,
    SqlMatchStore,
)
from fundlink.modules.matching.schemas import (
    AssignInvestorsRequest,
    AssignInvestorsResponse,
    FounderInvestorsResponse,
    FounderMatchStatisticsResponse,
    FundingRequestCreateRequest,
    FundingRequestCreateResponse,
    FundingRequestDeletedResponse,
    FundingRequestListResponse,
    FundingRequestResponse,
    FundingRequestSortField,
    FundingRequestStatusFilter,
    MatchStatusUpdateRequest,
    MatchStatusUpdateResponse,
    RefreshRequest,
    RefreshResponse,
    RemoveInvestorResponse,
    SortField,
    SortOrder,
)
from fundlink.modules.notifications.service import SqlNotificationSink
from fundlink.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/matching", tags=["matching"])


# ── Dependencies ──────────────────────────────────────────────────────────────


async def get_matching_deps(db: AsyncSession = Depends(get_db)) -> service.MatchingDeps:
    return service.MatchingDeps(
        directory=SqlDirectory(db),
        matches=SqlMatchStore(db),
        funding_requests=SqlFundingRequestStore(db),
        sink=SqlNotificationSink(db),
    )


async def get_party(
    current_user: CurrentUser = Depends(get_current_user),
    deps: service.MatchingDeps = Depends(get_matching_deps),
) -> Party:
    return await resolve_party(current_user, deps.directory)


# ── Funding requests ──────────────────────────────────────────────────────────


@router.get(
    "/funding-requests",
    response_model=FundingRequestListResponse,
    dependencies=[Depends(require_role([UserRole.FOUNDER, UserRole.ADMIN]))],
)
async def list_funding_requests(
    request_status: FundingRequestStatusFilter = Query("all", alias="status"),
    founder_id: uuid.UUID | None = Query(None),
    funding_stage: FundingStage | None = Query(None),
    min_amount: Decimal | None = Query(None, ge=0),
    max_amount: Decimal | None = Query(None, ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: FundingRequestSortField = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Funding requests, open first, then allotted, then closed."""
    return await service.list_funding_requests(
        deps,
        party,
        status=request_status,
        founder_id=founder_id,
        funding_stage=funding_stage.value if funding_stage else None,
        min_amount=min_amount,
        max_amount=max_amount,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post(
    "/funding-requests",
    response_model=FundingRequestCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role([UserRole.FOUNDER, UserRole.ADMIN]))],
)
async def create_funding_request(
    body: FundingRequestCreateRequest,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Open a funding request; optionally assign investors straight away."""
    return await service.create_funding_request(deps, party, body)


@router.post(
    "/funding-requests/{funding_request_id}/assign",
    response_model=AssignInvestorsResponse,
    dependencies=[Depends(require_role([UserRole.ADMIN]))],
)
async def assign_investors(
    funding_request_id: uuid.UUID,
    body: AssignInvestorsRequest,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Assign investors manually or by AI ranking."""
    return await service.assign_investors(deps, party, funding_request_id, body)


@router.post(
    "/funding-requests/{funding_request_id}/refresh",
    response_model=RefreshResponse,
    dependencies=[Depends(require_role([UserRole.FOUNDER]))],
)
async def refresh_funding_request(
    funding_request_id: uuid.UUID,
    body: RefreshRequest | None = None,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Clear the current allotment and reopen the request."""
    reason = body.reason if body else None
    return await service.refresh_funding_request(deps, party, funding_request_id, reason)


@router.delete(
    "/funding-requests/{funding_request_id}/investors/{investor_id}",
    response_model=RemoveInvestorResponse,
)
async def remove_investor(
    funding_request_id: uuid.UUID,
    investor_id: uuid.UUID,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Remove one investor from a funding request."""
    return await service.remove_investor(deps, party, funding_request_id, investor_id)


@router.get(
    "/funding-requests/{funding_request_id}/investors",
    response_model=FounderInvestorsResponse,
)
async def list_founder_investors(
    funding_request_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    match_status: MatchStatus | None = Query(None, alias="status"),
    min_score: int | None = Query(None, ge=0, le=100),
    sort_by: SortField = Query("match_score"),
    sort_order: SortOrder = Query("desc"),
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Investors assigned to a funding request, with status and score stats."""
    return await service.list_founder_investors(
        deps,
        party,
        funding_request_id,
        page=page,
        limit=limit,
        status=match_status,
        min_score=min_score,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post(
    "/funding-requests/{funding_request_id}/close",
    response_model=FundingRequestResponse,
)
async def close_funding_request(
    funding_request_id: uuid.UUID,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    return await service.close_funding_request(deps, party, funding_request_id)


@router.delete(
    "/funding-requests/{funding_request_id}",
    response_model=FundingRequestDeletedResponse,
)
async def delete_funding_request(
    funding_request_id: uuid.UUID,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Delete a funding request together with its matches."""
    return await service.delete_funding_request(deps, party, funding_request_id)


# ── Match status ──────────────────────────────────────────────────────────────


@router.put("/matches/{match_id}/status", response_model=MatchStatusUpdateResponse)
async def update_match_status(
    match_id: uuid.UUID,
    body: MatchStatusUpdateRequest,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    """Move a match through its status workflow."""
    return await service.update_match_status(deps, party, match_id, body)


# ── Statistics ────────────────────────────────────────────────────────────────


@router.get(
    "/founders/{founder_id}/statistics",
    response_model=FounderMatchStatisticsResponse,
)
async def get_founder_statistics(
    founder_id: uuid.UUID,
    party: Party = Depends(get_party),
    deps: service.MatchingDeps = Depends(get_matching_deps),
):
    return await service.get_founder_match_statistics(deps, party, founder_id)

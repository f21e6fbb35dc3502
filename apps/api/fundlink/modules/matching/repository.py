"""SQLAlchemy adapters for the matching ports."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import Select, case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundlink.core.errors import DuplicateMatchError, NotFoundError
from fundlink.models.enums import FundingRequestStatus, FundingStage, MatchStatus
from fundlink.models.funding import FundingRequest
from fundlink.models.matching import FounderInvestorMatch
from fundlink.models.profiles import Founder, Investor
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    InvestorProfile,
    MatchCriteria,
    MatchRecord,
    NewFundingRequest,
    NewMatch,
    PreviousInvestment,
    ScoreSummary,
)
from fundlink.modules.matching.ports import (
    FUNDING_REQUEST_PATCH_FIELDS,
    FUNDING_REQUEST_STATUS_PRIORITY,
    MATCH_PATCH_FIELDS,
    FundingRequestFilter,
    FundingRequestSort,
    InvestorFilter,
    MatchFilter,
    MatchSort,
    Pagination,
    validate_patch,
)

logger = structlog.get_logger()

ACTIVE_REQUEST_STATUSES = (FundingRequestStatus.OPEN, FundingRequestStatus.ALLOTTED)


# ── Row mappers ──────────────────────────────────────────────────────────────


def founder_to_profile(f: Founder) -> FounderProfile:
    return FounderProfile(
        id=f.id,
        company_name=f.company_name,
        email=f.email,
        industry=f.industry,
        address=f.address,
    )


def investor_to_profile(i: Investor) -> InvestorProfile:
    return InvestorProfile(
        id=i.id,
        full_name=i.full_name,
        email=i.email,
        phone=i.phone,
        linkedin=i.linkedin,
        company=i.company,
        designation=i.designation,
        bio=i.bio,
        location=i.location,
        photo_url=i.photo_url,
        investment_interests=tuple(i.investment_interests or ()),
        amount_range=i.amount_range,
        previous_investments=tuple(
            PreviousInvestment.from_dict(p)
            for p in (i.previous_investments or [])
            if isinstance(p, dict)
        ),
        notable_exits=tuple(i.notable_exits or ()),
        is_verified=i.is_verified,
    )


def funding_request_to_record(fr: FundingRequest) -> FundingRequestRecord:
    return FundingRequestRecord(
        id=fr.id,
        founder_id=fr.founder_id,
        funding_amount=fr.funding_amount,
        currency=fr.currency,
        funding_stage=fr.funding_stage.value,
        equity_offered=fr.equity_offered,
        use_of_funds=fr.use_of_funds,
        business_plan=fr.business_plan,
        financial_projections=fr.financial_projections,
        additional_notes=fr.additional_notes,
        status=fr.status,
        allotted_at=fr.allotted_at,
        allotted_by=fr.allotted_by,
        allotment_method=fr.allotment_method,
        ai_match_score=fr.ai_match_score,
        refresh_count=fr.refresh_count,
        last_refreshed_at=fr.last_refreshed_at,
        created_at=fr.created_at,
        updated_at=fr.updated_at,
    )


def match_to_record(m: FounderInvestorMatch) -> MatchRecord:
    return MatchRecord(
        id=m.id,
        funding_request_id=m.funding_request_id,
        founder_id=m.founder_id,
        investor_id=m.investor_id,
        assignment_method=m.assignment_method,
        match_score=m.match_score,
        match_criteria=MatchCriteria.from_dict(m.match_criteria),
        assigned_by=m.assigned_by,
        status=m.status,
        contacted_at=m.contacted_at,
        response_at=m.response_at,
        notes=m.notes,
        email_sent=m.email_sent,
        email_sent_at=m.email_sent_at,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _apply_match_filter(stmt: Select, f: MatchFilter) -> Select:
    m = FounderInvestorMatch
    if f.funding_request_id is not None:
        stmt = stmt.where(m.funding_request_id == f.funding_request_id)
    if f.founder_id is not None:
        stmt = stmt.where(m.founder_id == f.founder_id)
    if f.investor_id is not None:
        stmt = stmt.where(m.investor_id == f.investor_id)
    if f.match_id is not None:
        stmt = stmt.where(m.id == f.match_id)
    if f.investor_ids is not None:
        stmt = stmt.where(m.investor_id.in_(f.investor_ids))
    if f.exclude_ids:
        stmt = stmt.where(m.id.not_in(f.exclude_ids))
    if f.status is not None:
        stmt = stmt.where(m.status == f.status)
    if f.assignment_method is not None:
        stmt = stmt.where(m.assignment_method == f.assignment_method)
    if f.min_score is not None:
        stmt = stmt.where(m.match_score >= f.min_score)
    return stmt


def _apply_funding_request_filter(stmt: Select, f: FundingRequestFilter) -> Select:
    if f.founder_id is not None:
        stmt = stmt.where(FundingRequest.founder_id == f.founder_id)
    if f.status is not None:
        stmt = stmt.where(FundingRequest.status == f.status)
    if f.funding_stage is not None:
        stmt = stmt.where(FundingRequest.funding_stage == FundingStage(f.funding_stage))
    if f.min_amount is not None:
        stmt = stmt.where(FundingRequest.funding_amount >= f.min_amount)
    if f.max_amount is not None:
        stmt = stmt.where(FundingRequest.funding_amount <= f.max_amount)
    return stmt


# ── Directory ────────────────────────────────────────────────────────────────


class SqlDirectory:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_founder_by_id(self, founder_id: uuid.UUID) -> FounderProfile | None:
        founder = await self.db.get(Founder, founder_id)
        return founder_to_profile(founder) if founder else None

    async def find_investor_by_id(self, investor_id: uuid.UUID) -> InvestorProfile | None:
        investor = await self.db.get(Investor, investor_id)
        return investor_to_profile(investor) if investor else None

    async def find_investors(self, filter: InvestorFilter) -> list[InvestorProfile]:
        stmt = select(Investor)
        if filter.verified_only:
            stmt = stmt.where(Investor.is_verified.is_(True))
        if filter.ids is not None:
            if not filter.ids:
                return []
            stmt = stmt.where(Investor.id.in_(filter.ids))
        if filter.exclude_ids:
            stmt = stmt.where(Investor.id.not_in(filter.exclude_ids))
        # Stable pool order keeps ranking deterministic on full ties
        stmt = stmt.order_by(Investor.created_at, Investor.id)
        result = await self.db.execute(stmt)
        return [investor_to_profile(i) for i in result.scalars().all()]


# ── Matches ──────────────────────────────────────────────────────────────────


class SqlMatchStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_matches(self, records: list[NewMatch]) -> list[MatchRecord]:
        """Insert the whole batch inside a savepoint: all rows or none."""
        if not records:
            return []
        rows = [
            FounderInvestorMatch(
                funding_request_id=r.funding_request_id,
                founder_id=r.founder_id,
                investor_id=r.investor_id,
                match_score=r.match_score,
                match_criteria=r.match_criteria.to_dict(),
                assignment_method=r.assignment_method,
                assigned_by=r.assigned_by,
                status=MatchStatus.ACTIVE,
            )
            for r in records
        ]
        try:
            async with self.db.begin_nested():
                self.db.add_all(rows)
                await self.db.flush()
        except IntegrityError as e:
            logger.warning(
                "duplicate_match_on_insert",
                funding_request_id=str(records[0].funding_request_id),
                batch_size=len(records),
            )
            raise DuplicateMatchError(
                "One or more investors were already assigned to this funding request",
                detail={"investor_ids": [str(r.investor_id) for r in records]},
            ) from e
        for row in rows:
            await self.db.refresh(row)
        return [match_to_record(r) for r in rows]

    async def delete_matches(self, filter: MatchFilter) -> int:
        stmt = _apply_match_filter(delete(FounderInvestorMatch), filter)
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def count_matches(self, filter: MatchFilter) -> int:
        stmt = _apply_match_filter(
            select(func.count()).select_from(FounderInvestorMatch), filter
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def find_matches(
        self,
        filter: MatchFilter,
        sort: MatchSort | None = None,
        pagination: Pagination | None = None,
    ) -> list[MatchRecord]:
        stmt = _apply_match_filter(select(FounderInvestorMatch), filter)
        sort = sort or MatchSort(field="created_at", descending=True)
        if sort.field == "investor_name":
            stmt = stmt.join(Investor, Investor.id == FounderInvestorMatch.investor_id)
            column = Investor.full_name
        elif sort.field == "match_score":
            column = FounderInvestorMatch.match_score
        else:
            column = FounderInvestorMatch.created_at
        stmt = stmt.order_by(column.desc() if sort.descending else column.asc(), FounderInvestorMatch.id)
        if pagination is not None:
            stmt = stmt.offset(pagination.offset).limit(pagination.limit)
        result = await self.db.execute(stmt)
        return [match_to_record(m) for m in result.scalars().all()]

    async def find_one_match(self, filter: MatchFilter) -> MatchRecord | None:
        stmt = _apply_match_filter(select(FounderInvestorMatch), filter).limit(1)
        result = await self.db.execute(stmt)
        match = result.scalar_one_or_none()
        return match_to_record(match) if match else None

    async def update_match(self, match_id: uuid.UUID, patch: dict[str, Any]) -> MatchRecord:
        patch = validate_patch(patch, MATCH_PATCH_FIELDS, "match")
        match = await self.db.get(FounderInvestorMatch, match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")
        for key, value in patch.items():
            setattr(match, key, value)
        await self.db.flush()
        await self.db.refresh(match)
        return match_to_record(match)

    async def count_by_status(self, filter: MatchFilter) -> dict[MatchStatus, int]:
        stmt = _apply_match_filter(
            select(FounderInvestorMatch.status, func.count()).select_from(FounderInvestorMatch),
            filter,
        ).group_by(FounderInvestorMatch.status)
        result = await self.db.execute(stmt)
        return {status: count for status, count in result.all()}

    async def score_summary(self, filter: MatchFilter) -> ScoreSummary:
        m = FounderInvestorMatch
        stmt = _apply_match_filter(
            select(
                func.count(),
                func.avg(m.match_score),
                func.max(m.match_score),
                func.min(m.match_score),
            ).select_from(m),
            filter,
        )
        result = await self.db.execute(stmt)
        count, avg, mx, mn = result.one()
        if not count:
            return ScoreSummary()
        return ScoreSummary(
            count=count,
            average=float(avg) if avg is not None else None,
            maximum=mx,
            minimum=mn,
        )

    async def scores(self, filter: MatchFilter) -> list[int]:
        stmt = _apply_match_filter(select(FounderInvestorMatch.match_score), filter)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


# ── Funding requests ─────────────────────────────────────────────────────────


class SqlFundingRequestStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_or_raise(self, funding_request_id: uuid.UUID) -> FundingRequest:
        fr = await self.db.get(FundingRequest, funding_request_id)
        if fr is None:
            raise NotFoundError(f"Funding request {funding_request_id} not found")
        return fr

    async def find_funding_request_by_id(
        self, funding_request_id: uuid.UUID
    ) -> FundingRequestRecord | None:
        fr = await self.db.get(FundingRequest, funding_request_id)
        return funding_request_to_record(fr) if fr else None

    async def find_active_for_founder(
        self, founder_id: uuid.UUID
    ) -> FundingRequestRecord | None:
        stmt = (
            select(FundingRequest)
            .where(
                FundingRequest.founder_id == founder_id,
                FundingRequest.status.in_(ACTIVE_REQUEST_STATUSES),
            )
            .order_by(FundingRequest.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        fr = result.scalar_one_or_none()
        return funding_request_to_record(fr) if fr else None

    async def count_for_founder(
        self, founder_id: uuid.UUID, statuses: Iterable[FundingRequestStatus]
    ) -> int:
        stmt = select(func.count()).select_from(FundingRequest).where(
            FundingRequest.founder_id == founder_id,
            FundingRequest.status.in_(list(statuses)),
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def find_funding_requests(
        self,
        filter: FundingRequestFilter,
        sort: FundingRequestSort | None = None,
        pagination: Pagination | None = None,
    ) -> list[FundingRequestRecord]:
        stmt = _apply_funding_request_filter(select(FundingRequest), filter)
        sort = sort or FundingRequestSort()
        column = {
            "funding_amount": FundingRequest.funding_amount,
            "updated_at": FundingRequest.updated_at,
            "refresh_count": FundingRequest.refresh_count,
        }.get(sort.field, FundingRequest.created_at)
        priority = case(
            *[(FundingRequest.status == s, p) for s, p in FUNDING_REQUEST_STATUS_PRIORITY.items()],
            else_=len(FUNDING_REQUEST_STATUS_PRIORITY) + 1,
        )
        stmt = stmt.order_by(
            priority,
            column.desc() if sort.descending else column.asc(),
            FundingRequest.id,
        )
        if pagination is not None:
            stmt = stmt.offset(pagination.offset).limit(pagination.limit)
        result = await self.db.execute(stmt)
        return [funding_request_to_record(fr) for fr in result.scalars().all()]

    async def count_funding_requests(self, filter: FundingRequestFilter) -> int:
        stmt = _apply_funding_request_filter(
            select(func.count()).select_from(FundingRequest), filter
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def count_funding_requests_by_status(
        self, filter: FundingRequestFilter
    ) -> dict[FundingRequestStatus, int]:
        stmt = _apply_funding_request_filter(
            select(FundingRequest.status, func.count()).select_from(FundingRequest), filter
        ).group_by(FundingRequest.status)
        result = await self.db.execute(stmt)
        return {status: count for status, count in result.all()}

    async def create_funding_request(self, data: NewFundingRequest) -> FundingRequestRecord:
        fr = FundingRequest(
            founder_id=data.founder_id,
            funding_amount=data.funding_amount,
            currency=data.currency,
            funding_stage=FundingStage(data.funding_stage),
            equity_offered=data.equity_offered,
            use_of_funds=data.use_of_funds,
            business_plan=data.business_plan,
            financial_projections=data.financial_projections,
            additional_notes=data.additional_notes,
            status=FundingRequestStatus.OPEN,
            refresh_count=0,
        )
        self.db.add(fr)
        await self.db.flush()
        await self.db.refresh(fr)
        return funding_request_to_record(fr)

    async def update_funding_request(
        self, funding_request_id: uuid.UUID, patch: dict[str, Any]
    ) -> FundingRequestRecord:
        patch = validate_patch(patch, FUNDING_REQUEST_PATCH_FIELDS, "funding request")
        fr = await self._get_or_raise(funding_request_id)
        for key, value in patch.items():
            setattr(fr, key, value)
        await self.db.flush()
        await self.db.refresh(fr)
        return funding_request_to_record(fr)

    async def delete_funding_request(self, funding_request_id: uuid.UUID) -> None:
        fr = await self._get_or_raise(funding_request_id)
        await self.db.delete(fr)
        await self.db.flush()

"""Repository ports consumed by the matching core.

The engines depend only on these protocols. Production wiring uses the
SQLAlchemy adapters in ``repository.py``; tests plug in in-memory fakes.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from fundlink.core.errors import ValidationError
from fundlink.models.enums import AllotmentMethod, FundingRequestStatus, MatchStatus
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    InvestorProfile,
    MatchRecord,
    NewFundingRequest,
    NewMatch,
    NotificationEvent,
    ScoreSummary,
)


# ── Filters ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MatchFilter:
    funding_request_id: uuid.UUID | None = None
    founder_id: uuid.UUID | None = None
    investor_id: uuid.UUID | None = None
    match_id: uuid.UUID | None = None
    investor_ids: frozenset[uuid.UUID] | None = None
    exclude_ids: frozenset[uuid.UUID] | None = None
    status: MatchStatus | None = None
    assignment_method: AllotmentMethod | None = None
    min_score: int | None = None

    def matches(self, record: MatchRecord) -> bool:
        """In-process predicate equivalent of the SQL WHERE clause."""
        if self.funding_request_id is not None and record.funding_request_id != self.funding_request_id:
            return False
        if self.founder_id is not None and record.founder_id != self.founder_id:
            return False
        if self.investor_id is not None and record.investor_id != self.investor_id:
            return False
        if self.match_id is not None and record.id != self.match_id:
            return False
        if self.investor_ids is not None and record.investor_id not in self.investor_ids:
            return False
        if self.exclude_ids is not None and record.id in self.exclude_ids:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.assignment_method is not None and record.assignment_method != self.assignment_method:
            return False
        if self.min_score is not None and record.match_score < self.min_score:
            return False
        return True


@dataclass(frozen=True)
class InvestorFilter:
    verified_only: bool = True
    ids: frozenset[uuid.UUID] | None = None
    exclude_ids: frozenset[uuid.UUID] = frozenset()


@dataclass(frozen=True)
class FundingRequestFilter:
    founder_id: uuid.UUID | None = None
    status: FundingRequestStatus | None = None
    funding_stage: str | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None

    def matches(self, record: FundingRequestRecord) -> bool:
        """In-process predicate equivalent of the SQL WHERE clause."""
        if self.founder_id is not None and record.founder_id != self.founder_id:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.funding_stage is not None and record.funding_stage != self.funding_stage:
            return False
        if self.min_amount is not None and record.funding_amount < self.min_amount:
            return False
        if self.max_amount is not None and record.funding_amount > self.max_amount:
            return False
        return True


# Open requests list first, closed last
FUNDING_REQUEST_STATUS_PRIORITY: dict[FundingRequestStatus, int] = {
    FundingRequestStatus.OPEN: 1,
    FundingRequestStatus.ALLOTTED: 2,
    FundingRequestStatus.CLOSED: 3,
}


@dataclass(frozen=True)
class FundingRequestSort:
    """Secondary order applied within each status group."""

    field: str = "created_at"
    descending: bool = True


@dataclass(frozen=True)
class MatchSort:
    field: str = "match_score"
    descending: bool = True


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ── Patch whitelists ─────────────────────────────────────────────────────────

FUNDING_REQUEST_PATCH_FIELDS: frozenset[str] = frozenset({
    "status",
    "allotted_at",
    "allotted_by",
    "allotment_method",
    "ai_match_score",
    "refresh_count",
    "last_refreshed_at",
})

MATCH_PATCH_FIELDS: frozenset[str] = frozenset({
    "status",
    "contacted_at",
    "response_at",
    "notes",
    "email_sent",
    "email_sent_at",
})


def validate_patch(patch: dict[str, Any], allowed: Iterable[str], entity: str) -> dict[str, Any]:
    """Reject any field outside the entity's whitelist before it reaches storage."""
    unknown = sorted(set(patch) - set(allowed))
    if unknown:
        raise ValidationError(
            f"Fields not updatable on {entity}: {', '.join(unknown)}",
            detail={"fields": unknown},
        )
    return dict(patch)


# ── Ports ────────────────────────────────────────────────────────────────────


class Directory(Protocol):
    async def find_founder_by_id(self, founder_id: uuid.UUID) -> FounderProfile | None: ...

    async def find_investor_by_id(self, investor_id: uuid.UUID) -> InvestorProfile | None: ...

    async def find_investors(self, filter: InvestorFilter) -> list[InvestorProfile]: ...


class MatchStore(Protocol):
    async def create_matches(self, records: list[NewMatch]) -> list[MatchRecord]: ...

    async def delete_matches(self, filter: MatchFilter) -> int: ...

    async def count_matches(self, filter: MatchFilter) -> int: ...

    async def find_matches(
        self,
        filter: MatchFilter,
        sort: MatchSort | None = None,
        pagination: Pagination | None = None,
    ) -> list[MatchRecord]: ...

    async def find_one_match(self, filter: MatchFilter) -> MatchRecord | None: ...

    async def update_match(self, match_id: uuid.UUID, patch: dict[str, Any]) -> MatchRecord: ...

    async def count_by_status(self, filter: MatchFilter) -> dict[MatchStatus, int]: ...

    async def score_summary(self, filter: MatchFilter) -> ScoreSummary: ...

    async def scores(self, filter: MatchFilter) -> list[int]: ...


class FundingRequestStore(Protocol):
    async def find_funding_request_by_id(
        self, funding_request_id: uuid.UUID
    ) -> FundingRequestRecord | None: ...

    async def find_active_for_founder(
        self, founder_id: uuid.UUID
    ) -> FundingRequestRecord | None: ...

    async def count_for_founder(
        self, founder_id: uuid.UUID, statuses: Iterable[FundingRequestStatus]
    ) -> int: ...

    async def find_funding_requests(
        self,
        filter: FundingRequestFilter,
        sort: FundingRequestSort | None = None,
        pagination: Pagination | None = None,
    ) -> list[FundingRequestRecord]:
        """Rows ordered by status priority first, then by ``sort``."""
        ...

    async def count_funding_requests(self, filter: FundingRequestFilter) -> int: ...

    async def count_funding_requests_by_status(
        self, filter: FundingRequestFilter
    ) -> dict[FundingRequestStatus, int]: ...

    async def create_funding_request(self, data: NewFundingRequest) -> FundingRequestRecord: ...

    async def update_funding_request(
        self, funding_request_id: uuid.UUID, patch: dict[str, Any]
    ) -> FundingRequestRecord: ...

    async def delete_funding_request(self, funding_request_id: uuid.UUID) -> None: ...


class NotificationSink(Protocol):
    async def emit(self, event: NotificationEvent) -> None: ...

"""In-memory port adapters and sample-data builders shared by the tests."""

import dataclasses
import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from fundlink.core.errors import DuplicateMatchError, NotFoundError
from fundlink.models.enums import AllotmentMethod, FundingRequestStatus, MatchStatus
from fundlink.models.notifications import Notification
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    InvestorProfile,
    MatchRecord,
    NewFundingRequest,
    NewMatch,
    NotificationEvent,
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
from fundlink.modules.notifications.service import Recipient

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

FOUNDER_ID = uuid.UUID("00000000-0000-0001-0000-000000000001")
OTHER_FOUNDER_ID = uuid.UUID("00000000-0000-0001-0000-000000000002")
ADMIN_ID = uuid.UUID("00000000-0000-0003-0000-000000000001")


def investor_id(n: int) -> uuid.UUID:
    return uuid.UUID(f"00000000-0000-0002-0000-{n:012d}")


# ── Clock ────────────────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


# ── In-memory port adapters ──────────────────────────────────────────────────


class InMemoryDirectory:
    def __init__(self) -> None:
        self.founders: dict[uuid.UUID, FounderProfile] = {}
        self.investors: dict[uuid.UUID, InvestorProfile] = {}

    def add_founder(self, founder: FounderProfile) -> FounderProfile:
        self.founders[founder.id] = founder
        return founder

    def add_investor(self, investor: InvestorProfile) -> InvestorProfile:
        self.investors[investor.id] = investor
        return investor

    async def find_founder_by_id(self, founder_id: uuid.UUID) -> FounderProfile | None:
        return self.founders.get(founder_id)

    async def find_investor_by_id(self, investor_id: uuid.UUID) -> InvestorProfile | None:
        return self.investors.get(investor_id)

    async def find_investors(self, filter: InvestorFilter) -> list[InvestorProfile]:
        out = []
        for inv in self.investors.values():
            if filter.verified_only and not inv.is_verified:
                continue
            if filter.ids is not None and inv.id not in filter.ids:
                continue
            if inv.id in filter.exclude_ids:
                continue
            out.append(inv)
        return out


class InMemoryMatchStore:
    """Enforces the (funding request, founder, investor) uniqueness invariant."""

    def __init__(self, directory: InMemoryDirectory, clock: FakeClock) -> None:
        self.directory = directory
        self.clock = clock
        self.records: dict[uuid.UUID, MatchRecord] = {}
        self.fail_deletes = False
        self._seq = 0

    def _key(self, r: MatchRecord | NewMatch) -> tuple[uuid.UUID, uuid.UUID, uuid.UUID]:
        return (r.funding_request_id, r.founder_id, r.investor_id)

    def _select(self, filter: MatchFilter) -> list[MatchRecord]:
        return [r for r in self.records.values() if filter.matches(r)]

    async def create_matches(self, records: list[NewMatch]) -> list[MatchRecord]:
        taken = {self._key(r) for r in self.records.values()}
        for new in records:
            key = self._key(new)
            if key in taken:
                raise DuplicateMatchError(
                    "Investor is already assigned to this funding request",
                    detail={"investor_id": str(new.investor_id)},
                )
            taken.add(key)

        created = []
        for new in records:
            self._seq += 1
            stamp = self.clock() + timedelta(microseconds=self._seq)
            record = MatchRecord(
                id=uuid.uuid4(),
                funding_request_id=new.funding_request_id,
                founder_id=new.founder_id,
                investor_id=new.investor_id,
                assignment_method=new.assignment_method,
                match_score=new.match_score,
                match_criteria=new.match_criteria,
                assigned_by=new.assigned_by,
                created_at=stamp,
                updated_at=stamp,
            )
            self.records[record.id] = record
            created.append(record)
        return created

    async def delete_matches(self, filter: MatchFilter) -> int:
        if self.fail_deletes:
            raise ConnectionError("match store unavailable")
        doomed = self._select(filter)
        for r in doomed:
            del self.records[r.id]
        return len(doomed)

    async def count_matches(self, filter: MatchFilter) -> int:
        return len(self._select(filter))

    async def find_matches(
        self,
        filter: MatchFilter,
        sort: MatchSort | None = None,
        pagination: Pagination | None = None,
    ) -> list[MatchRecord]:
        rows = self._select(filter)
        sort = sort or MatchSort(field="created_at", descending=True)
        if sort.field == "investor_name":
            def key(r: MatchRecord) -> Any:
                inv = self.directory.investors.get(r.investor_id)
                return inv.full_name if inv else ""
        else:
            def key(r: MatchRecord) -> Any:
                return getattr(r, sort.field)
        rows.sort(key=key, reverse=sort.descending)
        if pagination is not None:
            rows = rows[pagination.offset : pagination.offset + pagination.limit]
        return rows

    async def find_one_match(self, filter: MatchFilter) -> MatchRecord | None:
        rows = self._select(filter)
        return rows[0] if rows else None

    async def update_match(self, match_id: uuid.UUID, patch: dict[str, Any]) -> MatchRecord:
        patch = validate_patch(patch, MATCH_PATCH_FIELDS, "match")
        if match_id not in self.records:
            raise NotFoundError("Match not found")
        updated = dataclasses.replace(self.records[match_id], **patch)
        self.records[match_id] = updated
        return updated

    async def count_by_status(self, filter: MatchFilter) -> dict[MatchStatus, int]:
        counts: dict[MatchStatus, int] = {}
        for r in self._select(filter):
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    async def score_summary(self, filter: MatchFilter) -> ScoreSummary:
        scores = [r.match_score for r in self._select(filter)]
        if not scores:
            return ScoreSummary()
        return ScoreSummary(
            count=len(scores),
            average=sum(scores) / len(scores),
            maximum=max(scores),
            minimum=min(scores),
        )

    async def scores(self, filter: MatchFilter) -> list[int]:
        return [r.match_score for r in self._select(filter)]


class InMemoryFundingRequestStore:
    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.records: dict[uuid.UUID, FundingRequestRecord] = {}
        # Number of upcoming update calls that should fail
        self.fail_updates = 0

    def add(self, record: FundingRequestRecord) -> FundingRequestRecord:
        self.records[record.id] = record
        return record

    async def find_funding_request_by_id(
        self, funding_request_id: uuid.UUID
    ) -> FundingRequestRecord | None:
        record = self.records.get(funding_request_id)
        return dataclasses.replace(record) if record else None

    async def find_active_for_founder(self, founder_id: uuid.UUID) -> FundingRequestRecord | None:
        for r in self.records.values():
            if r.founder_id == founder_id and r.status != FundingRequestStatus.CLOSED:
                return r
        return None

    async def count_for_founder(
        self, founder_id: uuid.UUID, statuses: Iterable[FundingRequestStatus]
    ) -> int:
        wanted = set(statuses)
        return sum(
            1 for r in self.records.values() if r.founder_id == founder_id and r.status in wanted
        )

    async def find_funding_requests(
        self,
        filter: FundingRequestFilter,
        sort: FundingRequestSort | None = None,
        pagination: Pagination | None = None,
    ) -> list[FundingRequestRecord]:
        sort = sort or FundingRequestSort()
        rows = [dataclasses.replace(r) for r in self.records.values() if filter.matches(r)]
        rows.sort(key=lambda r: getattr(r, sort.field), reverse=sort.descending)
        rows.sort(key=lambda r: FUNDING_REQUEST_STATUS_PRIORITY[r.status])
        if pagination is not None:
            rows = rows[pagination.offset : pagination.offset + pagination.limit]
        return rows

    async def count_funding_requests(self, filter: FundingRequestFilter) -> int:
        return sum(1 for r in self.records.values() if filter.matches(r))

    async def count_funding_requests_by_status(
        self, filter: FundingRequestFilter
    ) -> dict[FundingRequestStatus, int]:
        counts: dict[FundingRequestStatus, int] = {}
        for r in self.records.values():
            if filter.matches(r):
                counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    async def create_funding_request(self, data: NewFundingRequest) -> FundingRequestRecord:
        record = FundingRequestRecord(
            id=uuid.uuid4(),
            created_at=self.clock(),
            updated_at=self.clock(),
            **dataclasses.asdict(data),
        )
        self.records[record.id] = record
        return dataclasses.replace(record)

    async def update_funding_request(
        self, funding_request_id: uuid.UUID, patch: dict[str, Any]
    ) -> FundingRequestRecord:
        patch = validate_patch(patch, FUNDING_REQUEST_PATCH_FIELDS, "funding request")
        if self.fail_updates:
            self.fail_updates -= 1
            raise ConnectionError("funding request store unavailable")
        if funding_request_id not in self.records:
            raise NotFoundError("Funding request not found")
        updated = dataclasses.replace(
            self.records[funding_request_id], updated_at=self.clock(), **patch
        )
        self.records[funding_request_id] = updated
        return dataclasses.replace(updated)

    async def delete_funding_request(self, funding_request_id: uuid.UUID) -> None:
        if self.records.pop(funding_request_id, None) is None:
            raise NotFoundError("Funding request not found")


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []
        self.fail = False

    async def emit(self, event: NotificationEvent) -> None:
        if self.fail:
            raise ConnectionError("notification store unavailable")
        self.events.append(event)

    def of_type(self, type_) -> list[NotificationEvent]:
        return [e for e in self.events if e.type == type_]


# ── Sample data ──────────────────────────────────────────────────────────────


def make_founder(
    founder_id: uuid.UUID = FOUNDER_ID,
    *,
    industry: str | None = "Fintech",
    address: str | None = "12 Market St, San Francisco, CA",
) -> FounderProfile:
    return FounderProfile(
        id=founder_id,
        company_name="Acme Payments",
        email="founder@acme.test",
        industry=industry,
        address=address,
    )


def make_investor(
    n: int,
    *,
    full_name: str | None = None,
    interests: tuple[str, ...] = ("Fintech",),
    amount_range: str | None = "1M-5M",
    location: str | None = "San Francisco",
    stages: tuple[str, ...] = ("Seed",),
    verified: bool = True,
) -> InvestorProfile:
    return InvestorProfile(
        id=investor_id(n),
        full_name=full_name or f"Investor {n:02d}",
        email=f"investor{n}@fund.test",
        phone="+1 555 0100",
        linkedin=f"https://linkedin.test/investor{n}",
        company=f"Fund {n}",
        location=location,
        investment_interests=interests,
        amount_range=amount_range,
        previous_investments=tuple(
            PreviousInvestment(company_name=f"Co {i}", industry="Fintech", stage=s)
            for i, s in enumerate(stages)
        ),
        is_verified=verified,
    )


def make_funding_request(
    *,
    founder_id: uuid.UUID = FOUNDER_ID,
    status: FundingRequestStatus = FundingRequestStatus.OPEN,
    amount: Decimal = Decimal("2000000"),
    stage: str = "Seed",
    **kwargs: Any,
) -> FundingRequestRecord:
    return FundingRequestRecord(
        id=uuid.uuid4(),
        founder_id=founder_id,
        funding_amount=amount,
        funding_stage=stage,
        use_of_funds="Hiring engineers and expanding go-to-market",
        status=status,
        created_at=T0,
        updated_at=T0,
        **kwargs,
    )




async def seed_matches(
    store: InMemoryMatchStore,
    funding_request: FundingRequestRecord,
    investor_numbers: Iterable[int],
    *,
    method: AllotmentMethod = AllotmentMethod.MANUAL,
    scores: Iterable[int] | None = None,
) -> list[MatchRecord]:
    numbers = list(investor_numbers)
    score_list = list(scores) if scores is not None else [0] * len(numbers)
    return await store.create_matches(
        [
            NewMatch(
                funding_request_id=funding_request.id,
                founder_id=funding_request.founder_id,
                investor_id=investor_id(n),
                assignment_method=method,
                match_score=score,
            )
            for n, score in zip(numbers, score_list, strict=True)
        ]
    )


class InMemoryInbox:
    """Notification inbox over transient ``Notification`` rows."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.rows: list[Notification] = []

    def add(self, event: NotificationEvent, *, minutes_ago: int = 0) -> Notification:
        row = Notification(
            id=uuid.uuid4(),
            recipient_id=event.recipient_id,
            recipient_type=event.recipient_type,
            sender_id=event.sender_id,
            sender_type=event.sender_type,
            type=event.type,
            title=event.title,
            message=event.message,
            related_entity_id=event.related_entity_id,
            related_entity_type=event.related_entity_type,
            priority=event.priority,
            action_url=event.action_url,
            action_text=event.action_text,
            is_read=False,
            read_at=None,
            created_at=self.clock() - timedelta(minutes=minutes_ago),
        )
        self.rows.append(row)
        return row

    def _visible(self, recipient: Recipient) -> list[Notification]:
        out = []
        for n in self.rows:
            if n.recipient_type != recipient.recipient_type:
                continue
            if n.recipient_id == recipient.recipient_id or (
                recipient.sees_broadcasts and n.recipient_id is None
            ):
                out.append(n)
        return out

    async def list_notifications(
        self,
        recipient: Recipient,
        is_read: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Notification], int]:
        rows = [n for n in self._visible(recipient) if is_read is None or n.is_read == is_read]
        rows.sort(key=lambda n: n.created_at, reverse=True)
        start = (page - 1) * page_size
        return rows[start : start + page_size], len(rows)

    async def get_unread_count(self, recipient: Recipient) -> int:
        return sum(1 for n in self._visible(recipient) if not n.is_read)

    async def mark_read(self, notification_id: uuid.UUID, recipient: Recipient) -> bool:
        for n in self._visible(recipient):
            if n.id == notification_id:
                if not n.is_read:
                    n.is_read = True
                    n.read_at = self.clock()
                return True
        return False

    async def mark_all_read(self, recipient: Recipient) -> int:
        unread = [n for n in self._visible(recipient) if not n.is_read]
        for n in unread:
            n.is_read = True
            n.read_at = self.clock()
        return len(unread)

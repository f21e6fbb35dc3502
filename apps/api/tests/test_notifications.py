"""Tests for /v1/notifications and the notification emitter."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import (
    ADMIN_ID,
    FOUNDER_ID,
    OTHER_FOUNDER_ID,
    FakeClock,
    InMemoryInbox,
    RecordingSink,
    make_founder,
    make_funding_request,
)
from fundlink.main import app
from fundlink.models.enums import NotificationType, PartyType
from fundlink.models.notifications import Notification
from fundlink.modules.matching.domain import NotificationEvent
from fundlink.modules.matching.notifier import NotificationEmitter
from fundlink.modules.notifications.router import get_inbox
from fundlink.modules.notifications.service import (
    Recipient,
    SqlNotificationInbox,
    SqlNotificationSink,
)

pytestmark = pytest.mark.anyio

BASE = "/v1/notifications"


@pytest.fixture
def inbox(clock: FakeClock) -> InMemoryInbox:
    return InMemoryInbox(clock)


@pytest.fixture
async def inbox_client(client: AsyncClient, inbox: InMemoryInbox) -> AsyncGenerator[AsyncClient]:
    app.dependency_overrides[get_inbox] = lambda: inbox
    yield client
    app.dependency_overrides.pop(get_inbox, None)


async def _populate(inbox: InMemoryInbox) -> None:
    """Record real emitter output: one founder message, one admin broadcast."""
    sink = RecordingSink()
    emitter = NotificationEmitter(sink)
    fr = make_funding_request()
    await emitter.request_created(fr, make_founder())
    await emitter.investors_assigned(
        fr,
        newly_assigned=2,
        total_assigned=2,
        minimum=5,
        fully_allotted=False,
        actor_id=ADMIN_ID,
        actor_type=PartyType.ADMIN,
    )
    for minutes_ago, event in enumerate(reversed(sink.events)):
        inbox.add(event, minutes_ago=minutes_ago)
    other = make_funding_request(founder_id=OTHER_FOUNDER_ID)
    sink.events.clear()
    await emitter.request_closed(other, actor_id=ADMIN_ID)
    inbox.add(sink.events[0])


class TestEmitter:
    async def test_emit_swallows_sink_failure(self) -> None:
        sink = RecordingSink()
        sink.fail = True
        emitter = NotificationEmitter(sink)

        await emitter.request_created(make_funding_request(), make_founder())

        assert sink.events == []

    async def test_emit_reports_success(self) -> None:
        sink = RecordingSink()
        emitter = NotificationEmitter(sink)
        fr = make_funding_request()

        await emitter.request_deleted(fr, actor_id=ADMIN_ID)

        [event] = sink.events
        assert event.type == NotificationType.FUNDING_REQUEST_DELETED
        assert "USD 2,000,000" in event.message


class TestInbox:
    async def test_founder_sees_only_own_notifications(
        self, inbox_client: AsyncClient, inbox: InMemoryInbox
    ) -> None:
        await _populate(inbox)

        resp = await inbox_client.get(BASE)

        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["total"] == 1
        [item] = data["items"]
        assert item["type"] == "investors_assigned"
        assert item["title"] == "New Investors Assigned"
        assert item["related_entity_type"] == "funding_request"
        assert item["is_read"] is False

    async def test_admin_sees_broadcasts(
        self, inbox_client: AsyncClient, inbox: InMemoryInbox, acting
    ) -> None:
        await _populate(inbox)
        acting.admin()

        resp = await inbox_client.get(BASE)

        assert resp.status_code == 200
        assert [i["type"] for i in resp.json()["items"]] == ["funding_request_created"]

    async def test_unread_count_and_mark_read(
        self, inbox_client: AsyncClient, inbox: InMemoryInbox, clock: FakeClock
    ) -> None:
        await _populate(inbox)
        own = next(n for n in inbox.rows if n.recipient_id == FOUNDER_ID)

        assert (await inbox_client.get(f"{BASE}/unread-count")).json() == {"count": 1}

        resp = await inbox_client.put(f"{BASE}/{own.id}/read")
        assert resp.status_code == 200
        assert own.is_read is True
        assert own.read_at == clock()

        assert (await inbox_client.get(f"{BASE}/unread-count")).json() == {"count": 0}
        unread = await inbox_client.get(BASE, params={"is_read": False})
        assert unread.json()["total"] == 0

    async def test_cannot_mark_someone_elses_notification(
        self, inbox_client: AsyncClient, inbox: InMemoryInbox
    ) -> None:
        await _populate(inbox)
        foreign = next(n for n in inbox.rows if n.recipient_id == OTHER_FOUNDER_ID)

        resp = await inbox_client.put(f"{BASE}/{foreign.id}/read")

        assert resp.status_code == 404
        assert resp.json()["message"] == "Notification not found"
        assert foreign.is_read is False

    async def test_mark_all_read(
        self, inbox_client: AsyncClient, inbox: InMemoryInbox, acting
    ) -> None:
        await _populate(inbox)
        acting.admin()

        resp = await inbox_client.put(f"{BASE}/read-all")

        assert resp.json() == {"marked_read": 1}
        assert (await inbox_client.get(f"{BASE}/unread-count")).json() == {"count": 0}

    async def test_pagination(self, inbox_client: AsyncClient, inbox: InMemoryInbox) -> None:
        sink = RecordingSink()
        emitter = NotificationEmitter(sink)
        fr = make_funding_request()
        for _ in range(3):
            await emitter.request_closed(fr, actor_id=ADMIN_ID)
        for i, event in enumerate(sink.events):
            inbox.add(event, minutes_ago=i)

        resp = await inbox_client.get(BASE, params={"page": 2, "page_size": 2})

        data = resp.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["items"]) == 1


# ── PostgreSQL-backed sink and inbox ─────────────────────────────────────────

OTHER_ADMIN_ID = uuid.UUID("00000000-0000-0003-0000-000000000002")


def _admin_direct(admin_id: uuid.UUID) -> NotificationEvent:
    return NotificationEvent(
        recipient_id=admin_id,
        recipient_type=PartyType.ADMIN,
        type=NotificationType.FUNDING_REQUEST_CLOSED,
        title="Funding Request Closed",
        message="A funding request you follow has been closed.",
        related_entity_id=uuid.uuid4(),
    )


async def _populate_db(db: AsyncSession) -> None:
    """Admin broadcast, one row per founder, one direct row per admin."""
    sink = SqlNotificationSink(db)
    emitter = NotificationEmitter(sink)
    fr = make_funding_request()
    await emitter.request_created(fr, make_founder())
    await emitter.investors_assigned(
        fr,
        newly_assigned=2,
        total_assigned=2,
        minimum=5,
        fully_allotted=False,
        actor_id=ADMIN_ID,
        actor_type=PartyType.ADMIN,
    )
    await emitter.request_closed(make_funding_request(founder_id=OTHER_FOUNDER_ID), actor_id=ADMIN_ID)
    await sink.emit(_admin_direct(ADMIN_ID))
    await sink.emit(_admin_direct(OTHER_ADMIN_ID))


def _recipient(recipient_id: uuid.UUID, recipient_type: PartyType) -> Recipient:
    return Recipient(recipient_type=recipient_type, recipient_id=recipient_id)


class TestSqlInbox:
    async def test_sink_persists_rows(self, db: AsyncSession) -> None:
        await _populate_db(db)

        rows = (await db.execute(select(Notification))).scalars().all()

        assert len(rows) == 5
        assert all(n.is_read is False for n in rows)
        broadcast = [n for n in rows if n.recipient_id is None]
        assert [n.type for n in broadcast] == [NotificationType.FUNDING_REQUEST_CREATED]

    async def test_founder_scope(self, db: AsyncSession) -> None:
        await _populate_db(db)
        inbox = SqlNotificationInbox(db)
        founder = _recipient(FOUNDER_ID, PartyType.FOUNDER)

        rows, total = await inbox.list_notifications(founder)

        assert total == 1
        assert [n.type for n in rows] == [NotificationType.INVESTORS_ASSIGNED]
        assert await inbox.get_unread_count(founder) == 1

    async def test_admin_sees_broadcast_and_own_only(self, db: AsyncSession) -> None:
        await _populate_db(db)
        inbox = SqlNotificationInbox(db)

        rows, total = await inbox.list_notifications(_recipient(ADMIN_ID, PartyType.ADMIN))

        assert total == 2
        assert {n.recipient_id for n in rows} == {None, ADMIN_ID}

    async def test_mark_read_is_scoped(self, db: AsyncSession) -> None:
        await _populate_db(db)
        inbox = SqlNotificationInbox(db)
        founder = _recipient(FOUNDER_ID, PartyType.FOUNDER)
        foreign = (
            await db.execute(select(Notification).where(Notification.recipient_id == OTHER_FOUNDER_ID))
        ).scalar_one()
        [own], _ = await inbox.list_notifications(founder)

        assert await inbox.mark_read(foreign.id, founder) is False
        assert await inbox.mark_read(own.id, founder) is True
        assert own.read_at is not None
        assert await inbox.get_unread_count(founder) == 0
        assert await inbox.get_unread_count(_recipient(OTHER_FOUNDER_ID, PartyType.FOUNDER)) == 1

    async def test_mark_all_read_shares_broadcast_state(self, db: AsyncSession) -> None:
        await _populate_db(db)
        inbox = SqlNotificationInbox(db)

        marked = await inbox.mark_all_read(_recipient(ADMIN_ID, PartyType.ADMIN))

        assert marked == 2
        assert await inbox.get_unread_count(_recipient(ADMIN_ID, PartyType.ADMIN)) == 0
        # The broadcast is read for every admin; the other admin's own row is not
        assert await inbox.get_unread_count(_recipient(OTHER_ADMIN_ID, PartyType.ADMIN)) == 1
        assert await inbox.get_unread_count(_recipient(FOUNDER_ID, PartyType.FOUNDER)) == 1

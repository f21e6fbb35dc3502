"""Notification service: persist matching events and serve each party's inbox."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

import structlog
from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fundlink.models.enums import PartyType
from fundlink.models.notifications import Notification
from fundlink.modules.matching.domain import NotificationEvent
from fundlink.schemas.auth import CurrentUser

logger = structlog.get_logger()


@dataclass(frozen=True)
class Recipient:
    """Inbox owner. Admins also see broadcasts (rows with no recipient_id)."""

    recipient_type: PartyType
    recipient_id: uuid.UUID

    @classmethod
    def from_user(cls, user: CurrentUser) -> Recipient:
        return cls(recipient_type=PartyType(user.role.value), recipient_id=user.user_id)

    @property
    def sees_broadcasts(self) -> bool:
        return self.recipient_type == PartyType.ADMIN


class NotificationInbox(Protocol):
    async def list_notifications(
        self,
        recipient: Recipient,
        is_read: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Notification], int]: ...

    async def get_unread_count(self, recipient: Recipient) -> int: ...

    async def mark_read(self, notification_id: uuid.UUID, recipient: Recipient) -> bool: ...

    async def mark_all_read(self, recipient: Recipient) -> int: ...


# ── Sink ─────────────────────────────────────────────────────────────────────


class SqlNotificationSink:
    """Persists notification events as rows in ``notifications``."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def emit(self, event: NotificationEvent) -> None:
        # Savepoint so a failed insert doesn't poison the caller's transaction
        async with self.db.begin_nested():
            self.db.add(
                Notification(
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
                )
            )
            await self.db.flush()
        logger.debug(
            "notification_created",
            type=event.type.value,
            recipient_type=event.recipient_type.value,
        )


# ── Inbox ────────────────────────────────────────────────────────────────────


def _for_recipient(stmt: Select, recipient: Recipient) -> Select:
    stmt = stmt.where(Notification.recipient_type == recipient.recipient_type)
    if recipient.sees_broadcasts:
        return stmt.where(
            or_(
                Notification.recipient_id == recipient.recipient_id,
                Notification.recipient_id.is_(None),
            )
        )
    return stmt.where(Notification.recipient_id == recipient.recipient_id)


class SqlNotificationInbox:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_notifications(
        self,
        recipient: Recipient,
        is_read: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Notification], int]:
        """List notifications for a recipient with optional read filter."""
        base = _for_recipient(select(Notification), recipient)
        if is_read is not None:
            base = base.where(Notification.is_read == is_read)

        count_stmt = select(func.count()).select_from(base.subquery())
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = base.order_by(Notification.created_at.desc())
        stmt = stmt.offset((page - 1) * page_size).limit(page_size)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def get_unread_count(self, recipient: Recipient) -> int:
        stmt = _for_recipient(
            select(func.count()).select_from(Notification), recipient
        ).where(Notification.is_read.is_(False))
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def mark_read(self, notification_id: uuid.UUID, recipient: Recipient) -> bool:
        stmt = _for_recipient(
            select(Notification).where(Notification.id == notification_id), recipient
        )
        notification = (await self.db.execute(stmt)).scalar_one_or_none()
        if notification is None:
            return False
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.now(timezone.utc)
            await self.db.flush()
        return True

    async def mark_all_read(self, recipient: Recipient) -> int:
        """Mark all unread notifications as read. Returns count updated."""
        stmt = _for_recipient(update(Notification), recipient).where(
            Notification.is_read.is_(False)
        ).values(is_read=True, read_at=datetime.now(timezone.utc))
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount or 0

"""Notification model."""

import uuid
from datetime import datetime

from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fundlink.models.base import TimestampedModel, pg_enum
from fundlink.models.enums import (
    NotificationPriority,
    NotificationType,
    PartyType,
    RelatedEntityType,
)


class Notification(TimestampedModel):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient", "recipient_type", "recipient_id", "is_read"),
        Index("ix_notifications_created_at", "created_at"),
    )

    # NULL recipient_id with recipient_type=admin is a broadcast to all admins
    recipient_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    recipient_type: Mapped[PartyType] = mapped_column(
        pg_enum(PartyType, "party_type"), nullable=False
    )
    sender_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    sender_type: Mapped[PartyType] = mapped_column(
        pg_enum(PartyType, "party_type"), nullable=False, default=PartyType.SYSTEM
    )
    type: Mapped[NotificationType] = mapped_column(
        pg_enum(NotificationType, "notification_type"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    related_entity_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True))
    related_entity_type: Mapped[RelatedEntityType | None] = mapped_column(
        pg_enum(RelatedEntityType, "related_entity_type")
    )
    priority: Mapped[NotificationPriority] = mapped_column(
        pg_enum(NotificationPriority, "notification_priority"),
        nullable=False,
        default=NotificationPriority.MEDIUM,
    )
    action_url: Mapped[str | None] = mapped_column(String(500))
    action_text: Mapped[str | None] = mapped_column(String(100))
    is_read: Mapped[bool] = mapped_column(
        default=False, server_default="false", nullable=False
    )
    read_at: Mapped[datetime | None] = mapped_column()

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, type={self.type.value}, read={self.is_read})>"

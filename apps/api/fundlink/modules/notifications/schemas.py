"""Notification Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel

from fundlink.models.enums import NotificationPriority, NotificationType, PartyType


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    sender_type: PartyType
    related_entity_id: uuid.UUID | None
    related_entity_type: str | None
    action_url: str | None
    action_text: str | None
    is_read: bool
    read_at: datetime | None
    created_at: datetime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class UnreadCountResponse(BaseModel):
    count: int

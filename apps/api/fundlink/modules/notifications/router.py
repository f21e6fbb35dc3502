"""Notifications API router: list, unread count, mark read."""

import math
import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fundlink.auth.dependencies import get_current_user
from fundlink.core.database import get_db
from fundlink.modules.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from fundlink.modules.notifications.service import (
    NotificationInbox,
    Recipient,
    SqlNotificationInbox,
)
from fundlink.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/notifications", tags=["notifications"])


async def get_inbox(db: AsyncSession = Depends(get_db)) -> NotificationInbox:
    return SqlNotificationInbox(db)


# ── Helper ───────────────────────────────────────────────────────────────────


def _notification_to_response(n) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        type=n.type,
        title=n.title,
        message=n.message,
        priority=n.priority,
        sender_type=n.sender_type,
        related_entity_id=n.related_entity_id,
        related_entity_type=n.related_entity_type.value if n.related_entity_type else None,
        action_url=n.action_url,
        action_text=n.action_text,
        is_read=n.is_read,
        read_at=n.read_at,
        created_at=n.created_at,
    )


# ── Fixed-path routes (before /{id}) ─────────────────────────────────────────


@router.get(
    "",
    response_model=NotificationListResponse,
)
async def list_notifications(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    is_read: bool | None = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    """List notifications for the current user (admins also see broadcasts)."""
    notifications, total = await inbox.list_notifications(
        Recipient.from_user(current_user), is_read=is_read, page=page, page_size=page_size,
    )
    return NotificationListResponse(
        items=[_notification_to_response(n) for n in notifications],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=max(1, math.ceil(total / page_size)),
    )


@router.put(
    "/read-all",
    response_model=dict,
)
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    """Mark all notifications as read."""
    count = await inbox.mark_all_read(Recipient.from_user(current_user))
    return {"marked_read": count}


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
)
async def get_unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    """Get unread notification count."""
    count = await inbox.get_unread_count(Recipient.from_user(current_user))
    return UnreadCountResponse(count=count)


# ── Parameterized routes (after fixed paths) ─────────────────────────────────


@router.put(
    "/{notification_id}/read",
    response_model=dict,
)
async def mark_read(
    notification_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    """Mark a single notification as read."""
    success = await inbox.mark_read(notification_id, Recipient.from_user(current_user))
    if not success:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"success": True}

"""Notification emitter: founder/admin messages for matching events.

Builds the human-readable event and hands it to a NotificationSink. A sink
failure is logged and swallowed so the primary operation still succeeds.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog

from fundlink.models.enums import (
    MatchStatus,
    NotificationPriority,
    NotificationType,
    PartyType,
    RelatedEntityType,
)
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    InvestorProfile,
    MatchRecord,
    NotificationEvent,
)
from fundlink.modules.matching.ports import NotificationSink

logger = structlog.get_logger()


def _plural(n: int, word: str, suffix: str = "s") -> str:
    return f"{n} {word}{'' if n == 1 else suffix}"


def _money(currency: str, amount: Decimal) -> str:
    return f"{currency} {amount:,.0f}"


class NotificationEmitter:
    def __init__(self, sink: NotificationSink) -> None:
        self.sink = sink

    async def emit(self, event: NotificationEvent) -> bool:
        """Send one event; returns False (after logging) if the sink failed."""
        try:
            await self.sink.emit(event)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "notification_emit_failed",
                type=event.type.value,
                recipient_type=event.recipient_type.value,
                related_entity_id=str(event.related_entity_id),
                error=str(e),
            )
            return False
        return True

    # ── Allotment ──────────────────────────────────────────────────────────

    async def investors_assigned(
        self,
        funding_request: FundingRequestRecord,
        *,
        newly_assigned: int,
        total_assigned: int,
        minimum: int,
        fully_allotted: bool,
        actor_id: uuid.UUID,
        actor_type: PartyType,
    ) -> None:
        if fully_allotted:
            event = NotificationEvent(
                recipient_id=funding_request.founder_id,
                recipient_type=PartyType.FOUNDER,
                type=NotificationType.FUNDING_ALLOTTED,
                title="Funding Request Fully Allotted!",
                message=(
                    "Congratulations! Your funding request for "
                    f"{_money(funding_request.currency, funding_request.funding_amount)} "
                    f"is now fully allotted with {total_assigned} qualified investors. "
                    "You can start reaching out to them immediately."
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.HIGH,
                sender_id=actor_id,
                sender_type=actor_type,
                action_url=f"/founder/funding-requests/{funding_request.id}/investors",
                action_text="View Assigned Investors",
            )
        else:
            event = NotificationEvent(
                recipient_id=funding_request.founder_id,
                recipient_type=PartyType.FOUNDER,
                type=NotificationType.INVESTORS_ASSIGNED,
                title="New Investors Assigned",
                message=(
                    f"We've assigned {_plural(newly_assigned, 'more investor')} to your "
                    f"funding request. You now have {total_assigned} out of {minimum} "
                    "minimum investors needed for full allotment."
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.MEDIUM,
                sender_id=actor_id,
                sender_type=actor_type,
                action_url=f"/founder/funding-requests/{funding_request.id}/investors",
                action_text="View Assigned Investors",
            )
        await self.emit(event)

    async def allotted_for_admin(
        self,
        funding_request: FundingRequestRecord,
        *,
        total_assigned: int,
        actor_id: uuid.UUID,
        actor_type: PartyType,
    ) -> None:
        await self.emit(
            NotificationEvent(
                recipient_id=None,
                recipient_type=PartyType.ADMIN,
                type=NotificationType.FUNDING_ALLOTTED,
                title="Funding Request Allotted",
                message=(
                    f"Funding request {funding_request.id} reached full allotment "
                    f"with {total_assigned} investors."
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.MEDIUM,
                sender_id=actor_id,
                sender_type=actor_type,
                action_url=f"/admin/funding-requests/{funding_request.id}",
                action_text="Review Request",
            )
        )

    # ── Refresh ────────────────────────────────────────────────────────────

    async def refreshed(
        self,
        funding_request: FundingRequestRecord,
        founder: FounderProfile,
        *,
        cleared: int,
        max_refresh_count: int,
        reason: str | None,
    ) -> None:
        remaining = max(max_refresh_count - funding_request.refresh_count, 0)
        reason_text = f" Reason: {reason}" if reason else ""

        await self.emit(
            NotificationEvent(
                recipient_id=None,
                recipient_type=PartyType.ADMIN,
                type=NotificationType.FUNDING_REFRESHED,
                title="Funding Request Refreshed",
                message=(
                    f"{founder.company_name} has refreshed their funding request "
                    f"({funding_request.refresh_count}/{max_refresh_count} refreshes used). "
                    f"{cleared} previous investor assignments were cleared.{reason_text}"
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.MEDIUM,
                sender_id=founder.id,
                sender_type=PartyType.FOUNDER,
                action_url=f"/admin/funding-requests/{funding_request.id}",
                action_text="Reassign Investors",
            )
        )
        await self.emit(
            NotificationEvent(
                recipient_id=founder.id,
                recipient_type=PartyType.FOUNDER,
                type=NotificationType.FUNDING_REFRESHED,
                title="Funding Request Refreshed Successfully",
                message=(
                    "Your funding request has been refreshed and is now open for new "
                    f"investor assignments. You have {_plural(remaining, 'refresh', 'es')} "
                    "remaining."
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.MEDIUM,
                action_url=f"/founder/funding-requests/{funding_request.id}",
                action_text="View Request Status",
            )
        )

    # ── Lifecycle ──────────────────────────────────────────────────────────

    async def request_created(
        self, funding_request: FundingRequestRecord, founder: FounderProfile
    ) -> None:
        await self.emit(
            NotificationEvent(
                recipient_id=None,
                recipient_type=PartyType.ADMIN,
                type=NotificationType.FUNDING_REQUEST_CREATED,
                title="New Funding Request Created",
                message=(
                    f"{founder.company_name} has created a new funding request for "
                    f"{_money(funding_request.currency, funding_request.funding_amount)} "
                    f"at {funding_request.funding_stage} stage."
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.MEDIUM,
                sender_id=founder.id,
                sender_type=PartyType.FOUNDER,
                action_url=f"/admin/funding-requests/{funding_request.id}",
                action_text="Review Request",
            )
        )

    async def request_closed(
        self, funding_request: FundingRequestRecord, *, actor_id: uuid.UUID
    ) -> None:
        await self.emit(
            NotificationEvent(
                recipient_id=funding_request.founder_id,
                recipient_type=PartyType.FOUNDER,
                type=NotificationType.FUNDING_REQUEST_CLOSED,
                title="Funding Request Closed",
                message="Your funding request has been closed by an administrator.",
                related_entity_id=funding_request.id,
                priority=NotificationPriority.MEDIUM,
                sender_id=actor_id,
                sender_type=PartyType.ADMIN,
            )
        )

    async def request_deleted(
        self, funding_request: FundingRequestRecord, *, actor_id: uuid.UUID
    ) -> None:
        await self.emit(
            NotificationEvent(
                recipient_id=funding_request.founder_id,
                recipient_type=PartyType.FOUNDER,
                type=NotificationType.FUNDING_REQUEST_DELETED,
                title="Funding Request Deleted",
                message=(
                    "Your funding request for "
                    f"{_money(funding_request.currency, funding_request.funding_amount)} "
                    "has been deleted by an administrator."
                ),
                related_entity_id=funding_request.id,
                priority=NotificationPriority.HIGH,
                sender_id=actor_id,
                sender_type=PartyType.ADMIN,
            )
        )

    # ── Match status ───────────────────────────────────────────────────────

    async def match_status_changed(
        self, match: MatchRecord, investor: InvestorProfile | None
    ) -> None:
        name = investor.full_name if investor else "The investor"
        company = (investor.company if investor else None) or "their firm"

        if match.status == MatchStatus.INTERESTED:
            title = "Investor Showed Interest"
            message = f"You've marked {name} from {company} as interested in your funding request."
            priority = NotificationPriority.HIGH
        elif match.status == MatchStatus.FUNDED:
            title = "Funding Success!"
            message = f"Congratulations! You've successfully secured funding from {name} ({company})."
            priority = NotificationPriority.URGENT
        elif match.status == MatchStatus.DECLINED:
            title = "Investor Status Updated"
            message = f"You've marked {name} from {company} as declined."
            priority = NotificationPriority.MEDIUM
        else:
            return

        await self.emit(
            NotificationEvent(
                recipient_id=match.founder_id,
                recipient_type=PartyType.FOUNDER,
                type=NotificationType.MATCH_STATUS_CHANGED,
                title=title,
                message=message,
                related_entity_id=match.id,
                related_entity_type=RelatedEntityType.MATCH,
                priority=priority,
            )
        )

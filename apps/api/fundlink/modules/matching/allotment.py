"""Allotment engine: minimum-investor threshold, refresh/cooldown, removal.

Decides a funding request's status from its match count and persists the
result through the FundingRequestStore. Every write goes through the
FUNDING_REQUEST_PATCH_FIELDS whitelist.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from fundlink.core.errors import (
    DependencyError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from fundlink.models.enums import AllotmentMethod, FundingRequestStatus
from fundlink.modules.matching.domain import (
    AllotmentOutcome,
    FundingRequestRecord,
    RefreshOutcome,
    RemovalOutcome,
)
from fundlink.modules.matching.notifier import NotificationEmitter
from fundlink.modules.matching.party import AdminParty, FounderParty, Party
from fundlink.modules.matching.policy import AllotmentPolicy
from fundlink.modules.matching.ports import (
    FUNDING_REQUEST_PATCH_FIELDS,
    FundingRequestStore,
    MatchFilter,
    MatchStore,
    validate_patch,
)

logger = structlog.get_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class AllotmentEngine:
    def __init__(
        self,
        matches: MatchStore,
        funding_requests: FundingRequestStore,
        emitter: NotificationEmitter,
        policy: AllotmentPolicy | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.matches = matches
        self.funding_requests = funding_requests
        self.emitter = emitter
        self.policy = policy or AllotmentPolicy()
        self.now = now

    async def _patch(
        self, funding_request_id: uuid.UUID, patch: dict
    ) -> FundingRequestRecord:
        patch = validate_patch(patch, FUNDING_REQUEST_PATCH_FIELDS, "funding request")
        return await self.funding_requests.update_funding_request(funding_request_id, patch)

    # ── Assignment ─────────────────────────────────────────────────────────

    async def apply_assignment(
        self,
        funding_request: FundingRequestRecord,
        *,
        newly_assigned: int,
        current_count_before: int,
        method: AllotmentMethod,
        actor: Party,
        replace_existing: bool = False,
        new_match_ids: list[uuid.UUID] | None = None,
        new_scores: list[int] | None = None,
    ) -> AllotmentOutcome:
        """Recompute status after ``newly_assigned`` matches were persisted."""
        minimum = self.policy.min_investors_for_allotment
        total = newly_assigned if replace_existing else current_count_before + newly_assigned
        fully_allotted = total >= minimum
        became_allotted = False

        patch: dict = {}
        if fully_allotted and funding_request.status != FundingRequestStatus.ALLOTTED:
            patch.update(
                status=FundingRequestStatus.ALLOTTED,
                allotted_at=self.now(),
                allotted_by=actor.id,
                allotment_method=method,
            )
            became_allotted = True
        elif not fully_allotted:
            patch["status"] = FundingRequestStatus.OPEN

        if method == AllotmentMethod.AI and newly_assigned > 0:
            existing = await self.matches.scores(
                MatchFilter(
                    funding_request_id=funding_request.id,
                    assignment_method=AllotmentMethod.AI,
                    exclude_ids=frozenset(new_match_ids or ()),
                )
            )
            all_scores = [*existing, *(new_scores or [])]
            if all_scores:
                patch["ai_match_score"] = sum(all_scores) / len(all_scores)

        updated = await self._patch(funding_request.id, patch) if patch else funding_request

        logger.info(
            "allotment_applied",
            funding_request_id=str(funding_request.id),
            method=method.value,
            newly_assigned=newly_assigned,
            total_assigned=total,
            status=updated.status.value,
            became_allotted=became_allotted,
        )

        await self.emitter.investors_assigned(
            updated,
            newly_assigned=newly_assigned,
            total_assigned=total,
            minimum=minimum,
            fully_allotted=fully_allotted and updated.status == FundingRequestStatus.ALLOTTED,
            actor_id=actor.id,
            actor_type=actor.party_type,
        )
        if became_allotted and not isinstance(actor, AdminParty):
            await self.emitter.allotted_for_admin(
                updated,
                total_assigned=total,
                actor_id=actor.id,
                actor_type=actor.party_type,
            )

        return AllotmentOutcome(
            funding_request=updated,
            total_assigned=total,
            newly_assigned=newly_assigned,
            is_fully_allotted=fully_allotted,
            became_allotted=became_allotted,
            remaining_needed=max(0, minimum - total),
        )

    # ── Refresh ────────────────────────────────────────────────────────────

    def check_refresh_allowed(self, funding_request: FundingRequestRecord) -> None:
        """Raise ValidationError unless the request may be refreshed right now."""
        if funding_request.status != FundingRequestStatus.ALLOTTED:
            raise ValidationError("Can only refresh allotted funding requests")

        limit = self.policy.max_refresh_count
        if funding_request.refresh_count >= limit:
            raise ValidationError(
                f"Maximum refresh limit ({limit}) reached for this funding request"
            )

        if funding_request.last_refreshed_at is not None:
            cooldown = self.policy.refresh_cooldown_hours
            elapsed = self.now() - _aware(funding_request.last_refreshed_at)
            hours_since = elapsed.total_seconds() / 3600
            if hours_since < cooldown:
                remaining = math.ceil(cooldown - hours_since)
                raise ValidationError(
                    f"Please wait {remaining} hour{'s' if remaining > 1 else ''} "
                    "before refreshing again",
                    detail={"remaining_hours": remaining},
                )

    def can_refresh(self, funding_request: FundingRequestRecord) -> bool:
        try:
            self.check_refresh_allowed(funding_request)
        except ValidationError:
            return False
        return True

    async def refresh(
        self,
        funding_request: FundingRequestRecord,
        actor: Party,
        reason: str | None = None,
    ) -> RefreshOutcome:
        """Clear all matches and reopen the request.

        Phase one deletes the matches; phase two resets the request. If phase
        two fails, status/refresh_count/last_refreshed_at are restored
        best-effort and the original failure surfaces as DependencyError.
        """
        if not isinstance(actor, FounderParty):
            raise PermissionDeniedError("Only founders can refresh funding allotments")
        if actor.id != funding_request.founder_id:
            raise PermissionDeniedError("Funding request not found or access denied")

        self.check_refresh_allowed(funding_request)

        request_filter = MatchFilter(funding_request_id=funding_request.id)
        prior = {
            "status": funding_request.status,
            "refresh_count": funding_request.refresh_count,
            "last_refreshed_at": funding_request.last_refreshed_at,
        }

        try:
            cleared = await self.matches.count_matches(request_filter)
            await self.matches.delete_matches(request_filter)
        except DomainError:
            raise
        except Exception as e:
            logger.error(
                "refresh_clear_matches_failed",
                funding_request_id=str(funding_request.id),
                error=str(e),
            )
            raise DependencyError(
                "Failed to refresh funding allotment. Please try again later."
            ) from e

        try:
            updated = await self._patch(
                funding_request.id,
                {
                    "status": FundingRequestStatus.OPEN,
                    "refresh_count": funding_request.refresh_count + 1,
                    "last_refreshed_at": self.now(),
                    "allotted_at": None,
                    "allotted_by": None,
                    "allotment_method": None,
                    "ai_match_score": None,
                },
            )
        except Exception as e:
            logger.error(
                "refresh_update_failed",
                funding_request_id=str(funding_request.id),
                cleared_matches=cleared,
                error=str(e),
            )
            await self._compensate_refresh(funding_request.id, prior)
            raise DependencyError(
                "Failed to refresh funding allotment. Please try again later."
            ) from e

        logger.info(
            "funding_request_refreshed",
            funding_request_id=str(funding_request.id),
            cleared_matches=cleared,
            refresh_count=updated.refresh_count,
        )

        await self.emitter.refreshed(
            updated,
            actor.founder,
            cleared=cleared,
            max_refresh_count=self.policy.max_refresh_count,
            reason=reason,
        )

        return RefreshOutcome(
            funding_request=updated,
            cleared_matches=cleared,
            remaining_refreshes=max(self.policy.max_refresh_count - updated.refresh_count, 0),
        )

    async def _compensate_refresh(self, funding_request_id: uuid.UUID, prior: dict) -> None:
        try:
            await self._patch(funding_request_id, prior)
        except Exception as rollback_error:  # noqa: BLE001
            logger.error(
                "refresh_rollback_failed",
                funding_request_id=str(funding_request_id),
                error=str(rollback_error),
            )
        else:
            logger.warning(
                "refresh_rolled_back",
                funding_request_id=str(funding_request_id),
                status=prior["status"].value,
                refresh_count=prior["refresh_count"],
            )

    # ── Removal ────────────────────────────────────────────────────────────

    async def remove_investor(
        self, funding_request: FundingRequestRecord, investor_id: uuid.UUID
    ) -> RemovalOutcome:
        deleted = await self.matches.delete_matches(
            MatchFilter(funding_request_id=funding_request.id, investor_id=investor_id)
        )
        if not deleted:
            raise NotFoundError("Investor assignment not found")

        logger.info(
            "investor_removed_from_funding_request",
            funding_request_id=str(funding_request.id),
            investor_id=str(investor_id),
        )
        return await self.handle_removal(funding_request)

    async def handle_removal(self, funding_request: FundingRequestRecord) -> RemovalOutcome:
        """Reset to open only once no matches remain; partial removals keep status."""
        remaining = await self.matches.count_matches(
            MatchFilter(funding_request_id=funding_request.id)
        )
        if remaining == 0 and funding_request.status != FundingRequestStatus.CLOSED:
            updated = await self._patch(
                funding_request.id,
                {"status": FundingRequestStatus.OPEN, "allotted_at": None},
            )
            return RemovalOutcome(funding_request=updated, remaining_matches=0, reset_to_open=True)

        return RemovalOutcome(
            funding_request=funding_request,
            remaining_matches=remaining,
            reset_to_open=False,
        )

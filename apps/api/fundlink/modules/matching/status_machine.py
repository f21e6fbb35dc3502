"""Match status workflow: guarded transitions, timestamps, per-request stats."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from fundlink.core.errors import ValidationError
from fundlink.models.enums import MatchStatus
from fundlink.modules.matching.allotment import utcnow
from fundlink.modules.matching.domain import InvestorProfile, MatchRecord, StatusChangeOutcome
from fundlink.modules.matching.notifier import NotificationEmitter
from fundlink.modules.matching.ports import (
    MATCH_PATCH_FIELDS,
    MatchFilter,
    MatchStore,
    validate_patch,
)

logger = structlog.get_logger()

MAX_NOTES_LENGTH = 500

FORWARD_TRANSITIONS: dict[MatchStatus, tuple[MatchStatus, ...]] = {
    MatchStatus.ACTIVE: (MatchStatus.CONTACTED, MatchStatus.DECLINED),
    MatchStatus.CONTACTED: (MatchStatus.INTERESTED, MatchStatus.DECLINED),
    MatchStatus.INTERESTED: (MatchStatus.FUNDED, MatchStatus.DECLINED),
    MatchStatus.DECLINED: (),
    MatchStatus.FUNDED: (),
}

REVERT_TRANSITIONS: dict[MatchStatus, tuple[MatchStatus, ...]] = {
    MatchStatus.CONTACTED: (MatchStatus.ACTIVE,),
    MatchStatus.INTERESTED: (MatchStatus.CONTACTED,),
    MatchStatus.DECLINED: (MatchStatus.ACTIVE, MatchStatus.CONTACTED),
}

NOTIFY_ON: frozenset[MatchStatus] = frozenset(
    {MatchStatus.INTERESTED, MatchStatus.FUNDED, MatchStatus.DECLINED}
)

NEXT_ACTIONS: dict[MatchStatus, list[str]] = {
    MatchStatus.ACTIVE: [
        "Review investor profile and previous investments",
        "Prepare pitch materials for outreach",
        "Research investor's investment thesis",
    ],
    MatchStatus.CONTACTED: [
        "Follow up if no response within 1-2 weeks",
        "Prepare for potential investor meeting",
        "Gather additional information they might request",
    ],
    MatchStatus.INTERESTED: [
        "Schedule detailed discussion or pitch meeting",
        "Prepare due diligence materials",
        "Discuss investment terms and timeline",
    ],
    MatchStatus.DECLINED: [
        "Request feedback for future improvements",
        "Focus on other interested investors",
        "Consider refining pitch for remaining prospects",
    ],
    MatchStatus.FUNDED: [
        "Celebrate your success!",
        "Begin legal documentation process",
        "Update other investors about funding status",
    ],
}


def allowed_transitions(current: MatchStatus) -> list[MatchStatus]:
    return [*FORWARD_TRANSITIONS.get(current, ()), *REVERT_TRANSITIONS.get(current, ())]


class MatchStatusMachine:
    def __init__(
        self,
        matches: MatchStore,
        emitter: NotificationEmitter,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.matches = matches
        self.emitter = emitter
        self.now = now

    async def transition(
        self,
        match: MatchRecord,
        new_status: MatchStatus,
        *,
        notes: str | None = None,
        investor: InvestorProfile | None = None,
    ) -> StatusChangeOutcome:
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")

        previous = match.status
        patch: dict = {}

        if new_status == previous:
            if notes is not None:
                patch["notes"] = notes
        else:
            allowed = allowed_transitions(previous)
            if new_status not in allowed:
                raise ValidationError(
                    f"Cannot change status from '{previous.value}' to '{new_status.value}'. "
                    f"Allowed transitions: {', '.join(s.value for s in allowed) or 'none'}",
                    detail={"allowed_transitions": [s.value for s in allowed]},
                )
            patch["status"] = new_status
            if notes is not None:
                patch["notes"] = notes

            now = self.now()
            if previous == MatchStatus.ACTIVE and new_status == MatchStatus.CONTACTED:
                patch["contacted_at"] = now
            elif new_status in (MatchStatus.INTERESTED, MatchStatus.FUNDED):
                patch["response_at"] = now

        updated = match
        if patch:
            patch = validate_patch(patch, MATCH_PATCH_FIELDS, "match")
            updated = await self.matches.update_match(match.id, patch)

        changed = new_status != previous
        if changed:
            logger.info(
                "match_status_changed",
                match_id=str(match.id),
                funding_request_id=str(match.funding_request_id),
                previous_status=previous.value,
                status=new_status.value,
            )
            if new_status in NOTIFY_ON:
                await self.emitter.match_status_changed(updated, investor)

        breakdown = await self.status_breakdown(match)
        return StatusChangeOutcome(
            match=updated,
            previous_status=previous,
            changed=changed,
            status_breakdown=breakdown,
            total_matches=sum(breakdown.values()),
            next_actions=list(NEXT_ACTIONS.get(updated.status, [])),
        )

    async def status_breakdown(self, match: MatchRecord) -> dict[MatchStatus, int]:
        counts = await self.matches.count_by_status(
            MatchFilter(funding_request_id=match.funding_request_id)
        )
        return {s: counts.get(s, 0) for s in MatchStatus}

"""Investor selection: AI ranking over the verified pool, or manual id validation."""

from __future__ import annotations

import uuid

import structlog

from fundlink.core.errors import ValidationError
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    ManualSelection,
    RankedCandidate,
)
from fundlink.modules.matching.ports import Directory, InvestorFilter
from fundlink.modules.matching.scoring import MatchScorer

logger = structlog.get_logger()


def _dedupe(ids: list[uuid.UUID]) -> list[uuid.UUID]:
    seen: set[uuid.UUID] = set()
    out: list[uuid.UUID] = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


def _join(ids: list[uuid.UUID]) -> str:
    return ", ".join(str(i) for i in ids)


class InvestorSelector:
    def __init__(self, directory: Directory, scorer: MatchScorer | None = None) -> None:
        self.directory = directory
        self.scorer = scorer or MatchScorer()

    async def select_ai_matches(
        self,
        funding_request: FundingRequestRecord,
        founder: FounderProfile,
        count: int,
        exclude_investor_ids: set[uuid.UUID] | frozenset[uuid.UUID] = frozenset(),
    ) -> list[RankedCandidate]:
        """Top ``count`` verified, not-yet-matched investors by score.

        ``count`` is expected to be clamped by the caller. An empty list means
        the pool is exhausted.
        """
        pool = await self.directory.find_investors(
            InvestorFilter(verified_only=True, exclude_ids=frozenset(exclude_investor_ids))
        )
        # Adapters filter already; guard against ones that ignore exclude_ids
        pool = [inv for inv in pool if inv.id not in exclude_investor_ids and inv.is_verified]

        ranked = self.scorer.rank(founder, pool, funding_request)[: max(count, 0)]

        logger.info(
            "ai_candidates_ranked",
            funding_request_id=str(funding_request.id),
            pool_size=len(pool),
            selected=len(ranked),
            top_score=ranked[0].match_score if ranked else None,
        )
        return ranked

    async def select_manual(
        self,
        funding_request: FundingRequestRecord,
        investor_ids: list[uuid.UUID],
        already_assigned_ids: set[uuid.UUID],
        replace_existing: bool = False,
    ) -> ManualSelection:
        """Split ``investor_ids`` into ids to assign and known duplicates to skip.

        Raises ValidationError when nothing was supplied, when every id is
        already assigned, or when any surviving id has no investor record.
        """
        if not investor_ids:
            raise ValidationError("Investor IDs are required for manual assignment")

        requested = _dedupe(investor_ids)
        skipped: list[uuid.UUID] = []
        to_assign = requested

        if not replace_existing:
            skipped = [i for i in requested if i in already_assigned_ids]
            if skipped and len(skipped) == len(requested):
                raise ValidationError(
                    "All provided investors are already assigned to this funding "
                    f"request: {_join(skipped)}",
                    detail={"duplicate_investor_ids": [str(i) for i in skipped]},
                )
            to_assign = [i for i in requested if i not in already_assigned_ids]

        found = await self.directory.find_investors(
            InvestorFilter(verified_only=False, ids=frozenset(to_assign))
        )
        by_id = {inv.id: inv for inv in found}
        invalid = [i for i in to_assign if i not in by_id]
        if invalid:
            raise ValidationError(
                f"Some investor IDs are invalid: {_join(invalid)}",
                detail={"invalid_investor_ids": [str(i) for i in invalid]},
            )

        if skipped:
            logger.info(
                "manual_assignment_skipped_duplicates",
                funding_request_id=str(funding_request.id),
                skipped=[str(i) for i in skipped],
            )

        return ManualSelection(to_assign=to_assign, skipped=skipped, investors=by_id)

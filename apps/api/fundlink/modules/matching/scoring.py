"""Match scoring: pure deterministic founder/investor compatibility, no I/O.

Total: 100 points across 5 criteria (industry 30, stage 25, amount 20,
location 15, experience 10). Absent profile fields never raise; they simply
award nothing.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from fundlink.models.enums import FundingStage
from fundlink.modules.matching.domain import (
    FounderProfile,
    FundingRequestRecord,
    InvestorProfile,
    MatchCriteria,
    MatchScore,
    RankedCandidate,
)

INDUSTRY_WEIGHT = 30
STAGE_WEIGHT = 25
AMOUNT_WEIGHT = 20
LOCATION_WEIGHT = 15
EXPERIENCE_WEIGHT = 10


# ── Stage progression ────────────────────────────────────────────────────────

# Bridge/Convertible sits outside the progression and only matches exactly.
_STAGE_ORDER: list[str] = [
    FundingStage.PRE_SEED.value,
    FundingStage.SEED.value,
    FundingStage.SERIES_A.value,
    FundingStage.SERIES_B.value,
    FundingStage.SERIES_C.value,
    FundingStage.SERIES_D_PLUS.value,
    FundingStage.GROWTH.value,
]
_STAGE_INDEX: dict[str, int] = {s.casefold(): i for i, s in enumerate(_STAGE_ORDER)}


# ── Amount bucket labels ─────────────────────────────────────────────────────

_MULTIPLIERS: dict[str, Decimal] = {
    "": Decimal(1),
    "K": Decimal(1_000),
    "M": Decimal(1_000_000),
    "B": Decimal(1_000_000_000),
}
_AMOUNT = r"\$?\s*(\d+(?:\.\d+)?)\s*([KMB]?)"
_BOUNDED_RANGE = re.compile(rf"^{_AMOUNT}\s*-\s*{_AMOUNT}$", re.IGNORECASE)
_OPEN_RANGE = re.compile(rf"^{_AMOUNT}\s*\+$", re.IGNORECASE)

_TOLERANCE = Decimal("0.5")


def _to_amount(number: str, suffix: str) -> Decimal:
    return Decimal(number) * _MULTIPLIERS[suffix.upper()]


def parse_amount_range(label: str | None) -> tuple[Decimal, Decimal | None] | None:
    """Parse a bucket label into ``(min, max)``; ``max`` is None when open-ended.

    "100K-500K" -> (100000, 500000), "5M+" -> (5000000, None).
    Returns None for anything unparseable.
    """
    if not label:
        return None
    text = label.strip().replace(",", "")

    m = _BOUNDED_RANGE.match(text)
    if m:
        try:
            low = _to_amount(m.group(1), m.group(2))
            high = _to_amount(m.group(3), m.group(4))
        except InvalidOperation:
            return None
        return (low, high) if low <= high else None

    m = _OPEN_RANGE.match(text)
    if m:
        try:
            return _to_amount(m.group(1), m.group(2)), None
        except InvalidOperation:
            return None

    return None


def _stage_value(stage: object) -> str:
    return str(getattr(stage, "value", stage) or "").strip()


def _in_range(amount: Decimal, low: Decimal, high: Decimal | None) -> bool:
    return amount >= low and (high is None or amount <= high)


class MatchScorer:
    """
    Deterministic compatibility scoring between a founder's funding request
    and one investor.
    """

    def score(
        self,
        founder: FounderProfile,
        investor: InvestorProfile,
        funding_request: FundingRequestRecord,
    ) -> MatchScore:
        industry_pts = self._score_industry(founder, investor)
        stage_pts = self._score_stage(investor, funding_request)
        amount_pts = self._score_amount(investor, funding_request)
        location_pts = self._score_location(founder, investor)
        experience_pts = self._score_experience(founder, investor)

        total = industry_pts + stage_pts + amount_pts + location_pts + experience_pts

        return MatchScore(
            score=min(round(total), 100),
            criteria=MatchCriteria(
                industry_match=industry_pts > 0,
                stage_match=stage_pts > 0,
                amount_match=amount_pts > 0,
                location_match=location_pts > 0,
                experience_match=experience_pts > 0,
            ),
            points={
                "industry": industry_pts,
                "stage": stage_pts,
                "amount": amount_pts,
                "location": location_pts,
                "experience": experience_pts,
            },
        )

    def rank(
        self,
        founder: FounderProfile,
        investors: list[InvestorProfile],
        funding_request: FundingRequestRecord,
    ) -> list[RankedCandidate]:
        """Score every investor; order by score desc, then prior investments desc."""
        candidates = []
        for investor in investors:
            result = self.score(founder, investor, funding_request)
            candidates.append(
                RankedCandidate(
                    investor=investor,
                    match_score=result.score,
                    match_criteria=result.criteria,
                )
            )
        candidates.sort(
            key=lambda c: (-c.match_score, -len(c.investor.previous_investments))
        )
        return candidates

    # ── Criterion scorers ──────────────────────────────────────────────────

    def _score_industry(self, founder: FounderProfile, investor: InvestorProfile) -> int:
        industry = (founder.industry or "").strip().lower()
        if not industry:
            return 0
        interests = [i.strip().lower() for i in investor.investment_interests if i and i.strip()]

        if industry in interests:
            return INDUSTRY_WEIGHT
        if any(industry in i or i in industry for i in interests):
            return INDUSTRY_WEIGHT // 2
        return 0

    def _score_stage(
        self, investor: InvestorProfile, funding_request: FundingRequestRecord
    ) -> int:
        current = _stage_value(funding_request.funding_stage)
        if not current:
            return 0
        prior = {
            _stage_value(inv.stage).casefold()
            for inv in investor.previous_investments
            if inv.stage
        }
        if not prior:
            return 0

        if current.casefold() in prior:
            return STAGE_WEIGHT

        current_idx = _STAGE_INDEX.get(current.casefold())
        if current_idx is None:
            return 0
        for stage in prior:
            idx = _STAGE_INDEX.get(stage)
            if idx is not None and abs(idx - current_idx) <= 1:
                return STAGE_WEIGHT // 2
        return 0

    def _score_amount(
        self, investor: InvestorProfile, funding_request: FundingRequestRecord
    ) -> int:
        bounds = parse_amount_range(investor.amount_range)
        amount = funding_request.funding_amount
        if bounds is None or not amount:
            return 0
        amount = Decimal(str(amount))
        low, high = bounds

        if _in_range(amount, low, high):
            return AMOUNT_WEIGHT

        wide_low = low * (1 - _TOLERANCE)
        wide_high = high * (1 + _TOLERANCE) if high is not None else None
        if _in_range(amount, wide_low, wide_high):
            return AMOUNT_WEIGHT // 2
        return 0

    def _score_location(self, founder: FounderProfile, investor: InvestorProfile) -> int:
        if not investor.location or not founder.address:
            return 0
        investor_parts = [p.strip() for p in investor.location.lower().split(",") if p.strip()]
        founder_parts = [p.strip() for p in founder.address.lower().split(",") if p.strip()]

        for ip in investor_parts:
            for fp in founder_parts:
                if ip in fp or fp in ip:
                    return LOCATION_WEIGHT
        return 0

    def _score_experience(self, founder: FounderProfile, investor: InvestorProfile) -> int:
        history = investor.previous_investments
        count = len(history)
        industry = (founder.industry or "").strip().lower()
        relevant = bool(industry) and any(
            inv.industry and industry in inv.industry.lower() for inv in history
        )

        if count >= 10 or relevant:
            return EXPERIENCE_WEIGHT
        if count >= 5:
            return 7
        if count >= 1:
            return 3
        return 0

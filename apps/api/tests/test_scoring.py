"""Tests for match scoring and amount-range parsing."""

import uuid
from decimal import Decimal

import pytest

from tests.factories import make_founder, make_funding_request, make_investor
from fundlink.modules.matching.domain import InvestorProfile, PreviousInvestment
from fundlink.modules.matching.scoring import (
    AMOUNT_WEIGHT,
    EXPERIENCE_WEIGHT,
    INDUSTRY_WEIGHT,
    LOCATION_WEIGHT,
    STAGE_WEIGHT,
    MatchScorer,
    parse_amount_range,
)


@pytest.fixture
def scorer() -> MatchScorer:
    return MatchScorer()


class TestParseAmountRange:
    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("100K-500K", (Decimal(100_000), Decimal(500_000))),
            ("$1M - $5M", (Decimal(1_000_000), Decimal(5_000_000))),
            ("1.5M-2B", (Decimal(1_500_000), Decimal(2_000_000_000))),
            ("5M+", (Decimal(5_000_000), None)),
            ("250,000-750,000", (Decimal(250_000), Decimal(750_000))),
        ],
    )
    def test_parses_bucket_labels(self, label, expected) -> None:
        assert parse_amount_range(label) == expected

    @pytest.mark.parametrize("label", [None, "", "flexible", "5M-1M", "M-5M"])
    def test_unparseable_returns_none(self, label) -> None:
        assert parse_amount_range(label) is None


class TestMatchScorer:
    def test_perfect_match_scores_100(self, scorer: MatchScorer) -> None:
        investor = InvestorProfile(
            id=uuid.uuid4(),
            full_name="Perfect Fit",
            location="San Francisco",
            investment_interests=("Fintech",),
            amount_range="1M-5M",
            previous_investments=(PreviousInvestment(industry="Fintech", stage="Seed"),),
        )
        result = scorer.score(make_founder(), investor, make_funding_request())

        assert result.score == 100
        assert result.points == {
            "industry": INDUSTRY_WEIGHT,
            "stage": STAGE_WEIGHT,
            "amount": AMOUNT_WEIGHT,
            "location": LOCATION_WEIGHT,
            "experience": EXPERIENCE_WEIGHT,
        }
        assert all(result.criteria.to_dict().values())

    def test_empty_profiles_score_zero_without_raising(self, scorer: MatchScorer) -> None:
        founder = make_founder(industry=None, address=None)
        investor = InvestorProfile(id=uuid.uuid4(), full_name="Blank")

        result = scorer.score(founder, investor, make_funding_request())

        assert result.score == 0
        assert not any(result.criteria.to_dict().values())

    def test_partial_industry_match_gets_half_weight(self, scorer: MatchScorer) -> None:
        investor = make_investor(1, interests=("Fintech Infrastructure", ""), stages=())
        result = scorer.score(make_founder(), investor, make_funding_request())
        assert result.points["industry"] == INDUSTRY_WEIGHT // 2

    def test_adjacent_stage_gets_half_weight(self, scorer: MatchScorer) -> None:
        investor = make_investor(1, stages=("Series A",))
        result = scorer.score(make_founder(), investor, make_funding_request(stage="Seed"))
        assert result.points["stage"] == STAGE_WEIGHT // 2

    def test_bridge_only_matches_exactly(self, scorer: MatchScorer) -> None:
        investor = make_investor(1, stages=("Seed", "Series A"))
        fr = make_funding_request(stage="Bridge/Convertible")
        assert scorer.score(make_founder(), investor, fr).points["stage"] == 0

        bridge_investor = make_investor(2, stages=("Bridge/Convertible",))
        assert scorer.score(make_founder(), bridge_investor, fr).points["stage"] == STAGE_WEIGHT

    def test_amount_within_tolerance_gets_half_weight(self, scorer: MatchScorer) -> None:
        investor = make_investor(1, amount_range="1M-5M")
        fr = make_funding_request(amount=Decimal("7000000"))
        assert scorer.score(make_founder(), investor, fr).points["amount"] == AMOUNT_WEIGHT // 2

        far = make_funding_request(amount=Decimal("9000000"))
        assert scorer.score(make_founder(), investor, far).points["amount"] == 0

    def test_open_ended_range_accepts_large_amounts(self, scorer: MatchScorer) -> None:
        investor = make_investor(1, amount_range="5M+")
        fr = make_funding_request(amount=Decimal("80000000"))
        assert scorer.score(make_founder(), investor, fr).points["amount"] == AMOUNT_WEIGHT

    def test_location_matches_on_any_address_component(self, scorer: MatchScorer) -> None:
        founder = make_founder(address="Unit 4, Shoreditch, London")
        investor = make_investor(1, location="London, UK")
        assert scorer.score(founder, investor, make_funding_request()).points["location"] == LOCATION_WEIGHT

    def test_experience_tiers(self, scorer: MatchScorer) -> None:
        founder = make_founder(industry="Climate")

        def history(n: int) -> tuple[PreviousInvestment, ...]:
            return tuple(PreviousInvestment(industry="Retail") for _ in range(n))

        def points(n: int) -> int:
            investor = InvestorProfile(id=uuid.uuid4(), full_name="X", previous_investments=history(n))
            return scorer.score(founder, investor, make_funding_request()).points["experience"]

        assert points(0) == 0
        assert points(1) == 3
        assert points(5) == 7
        assert points(10) == EXPERIENCE_WEIGHT

    def test_score_is_deterministic_and_bounded(self, scorer: MatchScorer) -> None:
        founder = make_founder()
        fr = make_funding_request()
        investors = [make_investor(n, amount_range=r) for n, r in enumerate(["1M-5M", "5M+", None, "x"])]

        for inv in investors:
            first = scorer.score(founder, inv, fr)
            second = scorer.score(founder, inv, fr)
            assert first == second
            assert 0 <= first.score <= 100

    def test_rank_breaks_ties_by_investment_history(self, scorer: MatchScorer) -> None:
        founder = make_founder(industry=None, address=None)
        deal = PreviousInvestment(stage="Growth/Late Stage")
        light = InvestorProfile(id=uuid.uuid4(), full_name="Light", previous_investments=(deal,))
        heavy = InvestorProfile(id=uuid.uuid4(), full_name="Heavy", previous_investments=(deal,) * 4)

        ranked = scorer.rank(founder, [light, heavy], make_funding_request(stage="Pre-Seed"))

        assert ranked[0].match_score == ranked[1].match_score
        assert [c.investor.full_name for c in ranked] == ["Heavy", "Light"]

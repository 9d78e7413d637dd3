"""
Contract tests for the vibe breakdown and distributor.

- Every breakdown sums to 21 with each energy in [0, 10]
- Empty or zero-weight pools yield the default breakdown
- Overflow above 10 is capped and redistributed
"""

import pytest

from oracle.tokens.provenance import OriginKind, Planet, Sign
from oracle.tokens.semantic_token import SemanticToken
from oracle.vibe.breakdown import DEFAULT_BREAKDOWN, ENERGIES, TOTAL_POINTS, VibeBreakdown
from oracle.vibe.distributor import VibeDistributor, apportion, distribute, raw_scores


MIXED_POOLS = [
    [SemanticToken("bold", weight=3.0, planet=Planet.PLUTO, sign=Sign.SCORPIO)],
    [SemanticToken("soft", category="texture", planet=Planet.VENUS), SemanticToken("structured", category="structure")],
    [SemanticToken("electric", weight=2.8, planet=Planet.URANUS, origin=OriginKind.TRANSIT)],
    [SemanticToken(name, weight=w) for name, w in [
        ("classic", 1.0), ("fun", 2.0), ("dreamy", 0.5), ("durable", 1.2), ("intense", 3.5), ("edgy", 0.1),
    ]],
    [SemanticToken("versatile", weight=0.3), SemanticToken("harmonious", weight=4.0, sign=Sign.LIBRA)],
]


class TestBreakdownInvariant:
    """VibeBreakdown refuses invalid distributions."""

    def test_total_must_be_21(self):
        with pytest.raises(ValueError):
            VibeBreakdown(classic=10, playful=10, romantic=1, utility=0, drama=0, edge=1)

    def test_field_above_cap_rejected(self):
        with pytest.raises(ValueError):
            VibeBreakdown(classic=11, playful=10, romantic=0, utility=0, drama=0, edge=0)

    def test_negative_field_rejected(self):
        with pytest.raises(ValueError):
            VibeBreakdown(classic=-1, playful=10, romantic=10, utility=2, drama=0, edge=0)

    def test_dominant_and_secondary_break_ties_in_canonical_order(self):
        assert DEFAULT_BREAKDOWN.dominant_energy == "classic"
        assert DEFAULT_BREAKDOWN.secondary_energy == "romantic"

    def test_points_lookup(self):
        assert DEFAULT_BREAKDOWN.points("Utility") == 4
        assert DEFAULT_BREAKDOWN.points("unknown") == 0

    def test_str(self):
        assert str(DEFAULT_BREAKDOWN).endswith("[Total: 21]")


class TestDistribution:
    """distribute() always produces a valid 21-point breakdown."""

    def test_empty_pool_yields_default(self):
        assert distribute([]) == DEFAULT_BREAKDOWN

    def test_zero_weight_pool_yields_default(self):
        tokens = [SemanticToken("practical", weight=0.0, origin=OriginKind.WEATHER, planet=Planet.SATURN)]
        assert distribute(tokens) == DEFAULT_BREAKDOWN

    def test_unmatched_names_yield_default(self):
        assert distribute([SemanticToken("zzz-unknown", weight=5.0)]) == DEFAULT_BREAKDOWN

    @pytest.mark.parametrize("tokens", MIXED_POOLS)
    def test_sum_and_range(self, tokens):
        breakdown = distribute(tokens)
        assert breakdown.total == TOTAL_POINTS, f"Sum must be 21: {breakdown}"
        for energy in ENERGIES:
            assert 0 <= breakdown.points(energy) <= 10, f"{energy} out of range: {breakdown}"

    def test_single_weather_practical_token(self):
        """weight 4.0 * 2 + weather bonus 2.0 = 10.0 raw, all of it utility."""
        tokens = [SemanticToken("practical", weight=4.0, origin=OriginKind.WEATHER)]

        scores = raw_scores(tokens)
        assert scores["utility"] == pytest.approx(10.0)
        assert sum(scores.values()) == pytest.approx(10.0)

        breakdown = distribute(tokens)
        assert breakdown == VibeBreakdown(classic=3, playful=2, romantic=2, utility=10, drama=2, edge=2)

    def test_romantic_bonus_from_venus(self):
        scores = raw_scores([SemanticToken("soft", planet=Planet.VENUS)])
        assert scores["romantic"] == pytest.approx(1.0 * 2 + 2.0)

    def test_keyword_in_several_energies_scores_each(self):
        # "harmonious" is both classic and romantic
        scores = raw_scores([SemanticToken("harmonious", weight=1.0)])
        assert scores["classic"] == pytest.approx(2.0)
        assert scores["romantic"] == pytest.approx(2.0)

    def test_custom_scorer(self):
        distributor = VibeDistributor(scorer=lambda tokens: {e: 1.0 for e in ENERGIES})
        assert distributor.distribute([]) == VibeBreakdown(4, 4, 4, 3, 3, 3)


class TestApportionment:
    """Largest-remainder apportionment with per-energy cap."""

    def test_equal_scores_remainders_go_in_canonical_order(self):
        allocation = apportion({e: 1.0 for e in ENERGIES})
        assert allocation == {"classic": 4, "playful": 4, "romantic": 4, "utility": 3, "drama": 3, "edge": 3}

    def test_single_energy_capped_and_rest_split_evenly(self):
        allocation = apportion({"classic": 1.0, "playful": 0, "romantic": 0, "utility": 0, "drama": 0, "edge": 0})
        assert allocation == {"classic": 10, "playful": 3, "romantic": 2, "utility": 2, "drama": 2, "edge": 2}

    def test_repeated_capping(self):
        scores = {"classic": 2.0, "playful": 1.0, "romantic": 0, "utility": 0, "drama": 0, "edge": 0}
        allocation = apportion(scores)
        assert allocation == {"classic": 10, "playful": 10, "romantic": 1, "utility": 0, "drama": 0, "edge": 0}

    def test_proportional_without_cap(self):
        scores = {"classic": 3.0, "playful": 2.0, "romantic": 1.0, "utility": 1.0, "drama": 0.0, "edge": 0.0}
        allocation = apportion(scores)
        assert sum(allocation.values()) == 21
        assert allocation == {"classic": 9, "playful": 6, "romantic": 3, "utility": 3, "drama": 0, "edge": 0}

"""
Contract tests for axis balancing and volatility.

- Balancing: bounds, idempotence, redistribution arithmetic
- Volatility: determinism, bounds, factor edge cases
"""

import numpy as np
import pytest

from oracle.axes.axis_model import NEUTRAL_AXES, AxisVector
from oracle.axes.balancer import MAX_AXIS_VALUE, MIN_AXIS_VALUE, add_daily_volatility, balance
from oracle.axes.volatility import lunar_factor, modulate, token_diversity_factor, transit_factor
from oracle.tokens.semantic_token import SemanticToken


SAMPLE_VECTORS = [
    AxisVector(9.2, 9.0, 3.0, 5.0),
    AxisVector(10.0, 10.0, 10.0, 10.0),
    AxisVector(1.0, 1.0, 1.0, 1.0),
    AxisVector(10.0, 1.0, 1.0, 1.0),
    AxisVector(0.0, 12.0, 5.9, 6.0),
    AxisVector(8.5, 8.5, 2.0, 2.0),
    AxisVector(5.5, 5.5, 5.5, 5.5),
]


class TestAxisBalancing:
    """Balancing caps dominant axes and lifts weak ones."""

    def test_dual_overflow_redistributes_evenly(self):
        """Two axes 0.7 over the ceiling feed 0.98 into the two weak axes."""
        result = balance(AxisVector(9.2, 9.2, 3.0, 5.0))

        assert result.action == pytest.approx(8.5)
        assert result.tempo == pytest.approx(8.5)
        assert result.strategy == pytest.approx(3.49)
        assert result.visibility == pytest.approx(5.49)

    def test_unequal_overflow_uses_actual_excess(self):
        """Pool is (0.7 + 0.5) * 0.7 = 0.84, split across strategy and visibility."""
        result = balance(AxisVector(9.2, 9.0, 3.0, 5.0))

        assert result.action == pytest.approx(8.5)
        assert result.tempo == pytest.approx(8.5)
        assert result.strategy == pytest.approx(3.42)
        assert result.visibility == pytest.approx(5.42)

    @pytest.mark.parametrize("axes", SAMPLE_VECTORS)
    def test_every_axis_within_bounds(self, axes):
        result = balance(axes)
        values = result.as_array()
        assert np.all(values >= MIN_AXIS_VALUE), f"Axis below floor: {result}"
        assert np.all(values <= MAX_AXIS_VALUE), f"Axis above ceiling: {result}"

    @pytest.mark.parametrize("axes", SAMPLE_VECTORS)
    def test_balance_is_idempotent(self, axes):
        once = balance(axes)
        twice = balance(once)
        assert twice.isclose(once), f"balance not idempotent: {once} -> {twice}"

    def test_no_overflow_leaves_axes_untouched(self):
        axes = AxisVector(7.0, 4.0, 6.0, 2.5)
        assert balance(axes).isclose(axes)

    def test_pool_ignored_when_no_axis_is_weak(self):
        """All axes at or above 6.0: excess is dropped, not redistributed."""
        result = balance(AxisVector(9.5, 6.0, 7.0, 8.0))
        assert result.isclose(AxisVector(8.5, 6.0, 7.0, 8.0))

    def test_floor_applies_after_redistribution(self):
        result = balance(AxisVector(1.0, 1.0, 1.0, 1.0))
        assert result.isclose(AxisVector(2.0, 2.0, 2.0, 2.0))


class TestAxisVolatility:
    """Daily modulation is deterministic and bounded."""

    def test_same_inputs_same_output(self):
        tokens = [SemanticToken("quick"), SemanticToken("bold", weight=2.0)]
        first = modulate(NEUTRAL_AXES, tokens, transit_count=12, lunar_phase=0.3, daily_seed=123456)
        second = modulate(NEUTRAL_AXES, tokens, transit_count=12, lunar_phase=0.3, daily_seed=123456)
        assert first == second

    def test_different_seeds_vary(self):
        first = modulate(NEUTRAL_AXES, [], 5, 0.5, daily_seed=1)
        second = modulate(NEUTRAL_AXES, [], 5, 0.5, daily_seed=2)
        assert not first.isclose(second), "Seed must influence the axes"

    @pytest.mark.parametrize("seed", [0, 1, 17, 4242, 2**31 - 1])
    @pytest.mark.parametrize("transits", [0, 15, 60, 500])
    def test_output_within_balanced_bounds(self, seed, transits):
        result = modulate(AxisVector(9.0, 9.5, 2.0, 8.0), [SemanticToken("rapid")], transits, 0.0, seed)
        values = result.as_array()
        assert np.all(values >= MIN_AXIS_VALUE) and np.all(values <= MAX_AXIS_VALUE), str(result)

    def test_quiet_day_factors(self):
        """No tokens, no transits, full moon, seed 0: only diversity and lunar strategy apply."""
        result = modulate(NEUTRAL_AXES, [], transit_count=0, lunar_phase=0.5, daily_seed=0)
        assert result.action == pytest.approx(5.5 * 0.9)
        assert result.tempo == pytest.approx(5.5 * 0.875)
        assert result.strategy == pytest.approx(5.5 * 0.85 * 1.12)
        assert result.visibility == pytest.approx(5.5 * 0.9)

    def test_negative_transit_count_is_zero(self):
        assert np.allclose(transit_factor(-10), transit_factor(0))
        assert np.allclose(transit_factor(0), np.ones(4))

    def test_transit_intensity_saturates(self):
        assert np.allclose(transit_factor(60), transit_factor(1000))

    def test_lunar_phase_is_clamped(self):
        assert np.allclose(lunar_factor(-0.5), lunar_factor(0.0))
        assert np.allclose(lunar_factor(1.7), lunar_factor(1.0))

    def test_fast_tokens_raise_action(self):
        fast = token_diversity_factor([SemanticToken("quick"), SemanticToken("Dynamic")])
        slow = token_diversity_factor([SemanticToken("grounded"), SemanticToken("stable")])
        assert fast[0] > slow[0]
        assert fast[1] > slow[1]

    def test_daily_volatility_stays_bounded(self):
        for seed in range(0, 500, 37):
            result = add_daily_volatility(AxisVector(8.5, 8.5, 2.0, 2.0), seed)
            values = result.as_array()
            assert np.all(values >= MIN_AXIS_VALUE) and np.all(values <= MAX_AXIS_VALUE), str(result)


class TestAxisVector:

    def test_kinetic_is_mean_of_action_and_tempo(self):
        assert AxisVector(8.0, 6.0, 1.0, 1.0).kinetic == pytest.approx(7.0)

    def test_array_round_trip(self):
        axes = AxisVector(1.5, 2.5, 3.5, 4.5)
        assert AxisVector.from_array(axes.as_array()) == axes

    def test_clamped(self):
        assert AxisVector(-1.0, 11.0, 5.0, 0.5).clamped() == AxisVector(1.0, 10.0, 5.0, 1.0)

    def test_str_format(self):
        assert str(AxisVector(8.5, 7.3, 3.0, 5.0)) == "A:8.5 T:7.3 S:3.0 V:5.0"

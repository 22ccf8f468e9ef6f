"""Tests for stage/energy.py: series, active point, progress, curve."""

import numpy as np
import pytest

from reaction import ReactionStep
from stage.energy import (
    CAPTION_PREFIX, ENERGY_DOMAIN,
    active_point, caption, energy_curve, energy_series, progress_fraction,
)


def _steps(energies):
    return [
        ReactionStep(
            step_number=i + 1,
            name=f"Step {i + 1}",
            description=f"description {i}",
            energy_level=e,
        )
        for i, e in enumerate(energies)
    ]


class TestEnergySeries:
    """Series construction and active-point lookup."""

    def test_one_point_per_step_in_order(self):
        series = energy_series(_steps([10, 80, 20]))
        assert [p.energy for p in series] == [10.0, 80.0, 20.0]
        assert [p.step_index for p in series] == [0, 1, 2]
        assert series[2].label == "Step 3"

    def test_not_sorted_by_energy(self):
        series = energy_series(_steps([90, 5, 50, 5]))
        assert [p.energy for p in series] == [90.0, 5.0, 50.0, 5.0]

    def test_active_point(self):
        series = energy_series(_steps([10, 80, 20]))
        point = active_point(series, 1)
        assert point.energy == 80.0
        assert point.description == "description 1"

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_out_of_range_falls_back_to_first(self, index):
        series = energy_series(_steps([10, 80, 20]))
        assert active_point(series, index) == series[0]

    def test_empty_series(self):
        assert energy_series([]) == ()
        assert active_point((), 0) is None
        assert caption((), 0) == ""

    def test_caption(self):
        series = energy_series(_steps([10, 80, 20]))
        assert caption(series, 2) == CAPTION_PREFIX + "description 2"


class TestProgressFraction:
    """Progress through the reaction coordinate."""

    def test_middle_of_three(self):
        assert progress_fraction(1, 3) == pytest.approx(0.5)

    def test_endpoints(self):
        assert progress_fraction(0, 5) == 0.0
        assert progress_fraction(4, 5) == 1.0

    @pytest.mark.parametrize("n_steps", [0, 1])
    def test_degenerate_counts_are_zero(self, n_steps):
        assert progress_fraction(0, n_steps) == 0.0

    def test_clamped(self):
        assert progress_fraction(10, 3) == 1.0
        assert progress_fraction(-2, 3) == 0.0


class TestEnergyCurve:
    """Smoothed curve for the area chart."""

    def test_short_series_passthrough(self):
        x, y = energy_curve(energy_series(_steps([30, 60])))
        np.testing.assert_array_equal(x, [0.0, 1.0])
        np.testing.assert_array_equal(y, [30.0, 60.0])

    def test_single_point(self):
        x, y = energy_curve(energy_series(_steps([42])))
        assert len(x) == 1
        assert y[0] == 42.0

    def test_empty(self):
        x, y = energy_curve(())
        assert len(x) == 0
        assert len(y) == 0

    def test_curve_passes_through_steps(self):
        series = energy_series(_steps([20, 50, 90, 35, 5]))
        x, y = energy_curve(series, samples=5)
        np.testing.assert_allclose(x, [0, 1, 2, 3, 4])
        np.testing.assert_allclose(y, [20, 50, 90, 35, 5])

    def test_curve_stays_in_domain(self):
        series = energy_series(_steps([0, 100, 0, 100]))
        _, y = energy_curve(series, samples=200)
        assert y.min() >= ENERGY_DOMAIN[0]
        assert y.max() <= ENERGY_DOMAIN[1]

    def test_no_overshoot_between_steps(self):
        series = energy_series(_steps([10, 80, 20]))
        _, y = energy_curve(series, samples=101)
        assert y.max() <= 80.0 + 1e-9
        assert y.min() >= 10.0 - 1e-9

"""Energy coordinate projector: the reaction-coordinate series.

Steps are kept in reaction-progress order (never sorted by energy). The
area chart is drawn through a monotone cubic (PCHIP) so the curve never
overshoots between two steps.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from scipy.interpolate import PchipInterpolator


ENERGY_DOMAIN = (0.0, 100.0)
CAPTION_PREFIX = "Current State: "


class EnergyPoint(NamedTuple):
    """One entry of the energy series."""

    step_index: int
    energy: float
    label: str
    description: str


def energy_series(steps) -> tuple[EnergyPoint, ...]:
    """One EnergyPoint per step, in the order given."""
    return tuple(
        EnergyPoint(i, float(step.energy_level), step.name, step.description)
        for i, step in enumerate(steps)
    )


def active_point(series, index: int) -> EnergyPoint | None:
    """The entry at index, or the first entry when index is out of range."""
    if not series:
        return None
    if 0 <= index < len(series):
        return series[index]
    return series[0]


def progress_fraction(index: int, n_steps: int) -> float:
    """Fractional progress through the steps, safe for 0 or 1 steps."""
    if n_steps <= 1:
        return 0.0
    return min(1.0, max(0.0, index / (n_steps - 1)))


def caption(series, index: int) -> str:
    point = active_point(series, index)
    if point is None:
        return ""
    return CAPTION_PREFIX + point.description


def energy_curve(series, samples: int = 64) -> tuple[np.ndarray, np.ndarray]:
    """Sample a smooth curve through the series for the area chart.

    Returns:
        (x, energy) arrays where x runs over step indices. With fewer than
        three points the series is returned as-is (a line or a dot).
    """
    x = np.array([p.step_index for p in series], dtype=np.float64)
    y = np.array([p.energy for p in series], dtype=np.float64)
    if len(series) < 3:
        return x, y
    xs = np.linspace(x[0], x[-1], samples)
    ys = PchipInterpolator(x, y)(xs)
    return xs, np.clip(ys, *ENERGY_DOMAIN)

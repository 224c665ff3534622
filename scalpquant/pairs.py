"""Pairs trading: hedge ratio estimation, spread z-score and signals."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class HedgeRatio:
    beta: float
    intercept: float


class PairSignal(Enum):
    LONG_SPREAD = "long_spread"
    SHORT_SPREAD = "short_spread"
    HOLD_SPREAD = "hold_spread"
    FLAT = "flat"


def estimate_hedge_ratio(
    base: Sequence[float], hedge: Sequence[float]
) -> HedgeRatio | None:
    """Least-squares regression of ``base`` on ``hedge``."""
    if len(base) != len(hedge) or len(base) < 3:
        return None
    n = float(len(base))
    mean_x = sum(hedge) / n
    mean_y = sum(base) / n
    var_x = sum((x - mean_x) ** 2 for x in hedge)
    if var_x <= 0.0:
        return None
    cov = sum((x - mean_x) * (y - mean_y) for y, x in zip(base, hedge))
    beta = cov / var_x
    return HedgeRatio(beta=beta, intercept=mean_y - beta * mean_x)


def spread_zscore(
    base: Sequence[float], hedge: Sequence[float], ratio: HedgeRatio
) -> float | None:
    """Z-score of the latest residual spread, or None if undefined."""
    if len(base) != len(hedge) or len(base) < 3:
        return None
    spreads = [b - (ratio.intercept + ratio.beta * h) for b, h in zip(base, hedge)]
    mean = sum(spreads) / len(spreads)
    std = math.sqrt(sum((s - mean) ** 2 for s in spreads) / len(spreads))
    if std <= 0.0:
        return None
    return (spreads[-1] - mean) / std


def pair_signal(zscore: float, entry_z: float, exit_z: float) -> PairSignal:
    """Map a spread z-score to an entry, hold or exit action."""
    if zscore >= entry_z:
        return PairSignal.SHORT_SPREAD
    if zscore <= -entry_z:
        return PairSignal.LONG_SPREAD
    if abs(zscore) <= exit_z:
        return PairSignal.FLAT
    return PairSignal.HOLD_SPREAD
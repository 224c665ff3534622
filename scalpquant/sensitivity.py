"""Parameter sensitivity summaries for strategy optimisation sweeps."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class ParameterPoint:
    """One evaluated parameter set and its score."""

    score: float
    params: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class SensitivitySummary:
    best_score: float
    median_score: float
    robustness_ratio: float


def summarize_parameter_sensitivity(
    points: Iterable[ParameterPoint],
) -> SensitivitySummary | None:
    """Best and median finite scores and their ratio, or None if none are finite."""
    scores = sorted(p.score for p in points if math.isfinite(p.score))
    if not scores:
        return None
    best = scores[-1]
    median = scores[len(scores) // 2]
    ratio = median / best if abs(best) > 1e-9 else 0.0
    return SensitivitySummary(best_score=best, median_score=median, robustness_ratio=ratio)
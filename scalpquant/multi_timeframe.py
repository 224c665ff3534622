"""Multi-timeframe vote aggregation and signal freshness decay."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from scalpquant.signals import PreSignal, Side


class TimeframeVote(Enum):
    """Directional opinion of one timeframe."""

    BULLISH = 1.0
    BEARISH = -1.0
    NEUTRAL = 0.0


def vote_from_signal(signal: PreSignal) -> TimeframeVote:
    """The vote implied by a signal's side."""
    return TimeframeVote.BULLISH if signal.side is Side.LONG else TimeframeVote.BEARISH


@dataclass(frozen=True)
class WeightedVote:
    timeframe_secs: int
    vote: TimeframeVote
    weight: float


def aggregate_votes(votes: Iterable[WeightedVote]) -> float:
    """Weighted directional consensus in [-1, 1]; negative weights count as 0."""
    votes = list(votes)
    total_weight = sum(max(v.weight, 0.0) for v in votes)
    if total_weight <= 0.0:
        return 0.0
    directional = sum(v.vote.value * max(v.weight, 0.0) for v in votes)
    return max(-1.0, min(1.0, directional / total_weight))


def passes_timeframe_confirmation(
    signal: PreSignal, votes: Iterable[WeightedVote], min_abs: float
) -> bool:
    """Whether the vote consensus agrees with the signal by at least ``min_abs``."""
    aggregate = aggregate_votes(votes)
    if signal.side is Side.LONG:
        return aggregate >= min_abs
    return aggregate <= -min_abs


def freshness_weight(age_candles: int, half_life_candles: float) -> float:
    """Exponential decay weight with the given half-life in candles."""
    if half_life_candles <= 0.0:
        return 0.0
    return 0.5 ** (age_candles / half_life_candles)


def confidence_with_freshness(
    base_confidence: int, age_candles: int, half_life_candles: float
) -> int:
    """Base confidence decayed by signal age, rounded and kept in [0, 100]."""
    value = base_confidence * freshness_weight(age_candles, half_life_candles)
    if math.isnan(value):
        return 0
    rounded = math.floor(abs(value) + 0.5) * (1 if value >= 0 else -1)
    return int(max(0, min(100, rounded)))
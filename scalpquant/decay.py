"""Information-coefficient decay of a signal across forward horizons."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from scalpquant.ic import IcTracker
from scalpquant.signals import Candle

_DECAY_IC_WINDOW = 30


@dataclass(frozen=True)
class SignalObservation:
    """A signal value observed at a point in time."""

    ts: datetime
    value: float


def _candle_index(candles: Sequence[Candle], ts: datetime) -> int | None:
    return next(
        (i for i, c in enumerate(candles) if c.open_time <= ts <= c.close_time),
        None,
    )


def _ic_at_horizon(
    signals: Sequence[SignalObservation], candles: Sequence[Candle], horizon: int
) -> float | None:
    tracker = IcTracker(_DECAY_IC_WINDOW)
    for signal in signals:
        idx = _candle_index(candles, signal.ts)
        if idx is None or idx + horizon >= len(candles):
            # One unmatched signal invalidates the whole horizon.
            return None
        current = candles[idx]
        future = candles[idx + horizon]
        if current.close <= 0.0:
            continue
        tracker.record(signal.value, future.close / current.close - 1.0)
    return tracker.ic()


def compute_ic_decay(
    signals: Sequence[SignalObservation],
    candles: Sequence[Candle],
    max_horizon: int,
) -> list[tuple[int, float]]:
    """(horizon, IC) for each horizon from 1 to ``max_horizon`` where IC is defined."""
    if not signals or len(candles) < 2 or max_horizon <= 0:
        return []
    result: list[tuple[int, float]] = []
    for horizon in range(1, max_horizon + 1):
        ic = _ic_at_horizon(signals, candles, horizon)
        if ic is not None:
            result.append((horizon, ic))
    return result
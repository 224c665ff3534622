"""Information-coefficient tracking for signal/return pairs."""

from __future__ import annotations

import math
from collections.abc import Sequence


def pearson(observations: Sequence[tuple[float, float]]) -> float | None:
    """Pearson correlation of (signal, return) pairs, or None if undefined."""
    if len(observations) < 3:
        return None
    n = float(len(observations))
    mean_s = sum(s for s, _ in observations) / n
    mean_r = sum(r for _, r in observations) / n
    cov = sum((s - mean_s) * (r - mean_r) for s, r in observations) / n
    var_s = sum((s - mean_s) ** 2 for s, _ in observations) / n
    var_r = sum((r - mean_r) ** 2 for _, r in observations) / n
    denom = math.sqrt(var_s) * math.sqrt(var_r)
    if denom <= 0.0:
        return None
    return max(-1.0, min(1.0, cov / denom))


class IcTracker:
    """Accumulates observations and rolling-window ICs for a signal."""

    def __init__(self, window: int) -> None:
        self._observations: list[tuple[float, float]] = []
        self._window_ics: list[float] = []
        self.window = max(window, 2)

    def record(self, signal_value: float, forward_return: float) -> None:
        """Add an observation; non-finite values are ignored."""
        if not (math.isfinite(signal_value) and math.isfinite(forward_return)):
            return
        self._observations.append((signal_value, forward_return))
        if len(self._observations) >= self.window:
            ic = pearson(self._observations[-self.window:])
            if ic is not None:
                self._window_ics.append(ic)

    def __len__(self) -> int:
        return len(self._observations)

    def ic(self) -> float | None:
        """IC over every observation recorded so far."""
        return pearson(self._observations)

    def ir(self) -> float | None:
        """Information ratio: mean over standard deviation of window ICs."""
        count = len(self._window_ics)
        if count < 2:
            return None
        mean = sum(self._window_ics) / count
        var = sum((x - mean) ** 2 for x in self._window_ics) / count
        sd = math.sqrt(var)
        if sd <= 0.0:
            return None
        return mean / sd

    def observations(self) -> tuple[tuple[float, float], ...]:
        return tuple(self._observations)
"""One-dimensional Kalman filter that tracks price level and velocity."""

from __future__ import annotations

from collections.abc import Sequence

_MIN_NOISE = 1e-12


class KalmanTrend:
    """Constant-velocity Kalman filter over a price series."""

    def __init__(
        self, initial_price: float, process_noise: float, measurement_noise: float
    ) -> None:
        self.estimate = initial_price
        self.velocity = 0.0
        self._covariance = 1.0
        self._process_noise = max(process_noise, _MIN_NOISE)
        self._measurement_noise = max(measurement_noise, _MIN_NOISE)

    def update(self, price: float) -> float:
        """Fold in a new price and return the updated estimate."""
        prior = self.estimate + self.velocity
        prior_cov = self._covariance + self._process_noise
        gain = prior_cov / (prior_cov + self._measurement_noise)
        updated = prior + gain * (price - prior)
        self.velocity = updated - self.estimate
        self.estimate = updated
        self._covariance = (1.0 - gain) * prior_cov
        return self.estimate

    def trend_score(self, price: float) -> float:
        """Velocity in basis points of ``price``, clamped to [-100, 100]."""
        if price <= 0.0:
            return 0.0
        return max(-100.0, min(100.0, self.velocity / price * 10_000.0))


def kalman_trend_score(
    prices: Sequence[float], process_noise: float, measurement_noise: float
) -> float:
    """Run a fresh filter over ``prices`` and score the final trend."""
    if not prices:
        return 0.0
    trend = KalmanTrend(prices[0], process_noise, measurement_noise)
    for price in prices[1:]:
        trend.update(price)
    return trend.trend_score(prices[-1])
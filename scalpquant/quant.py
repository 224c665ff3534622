"""Quantitative position sizing layered on top of strategy signals.

Combines Kelly sizing, volatility targeting, a CVaR cap, IC-weighted
confidence, a Kalman trend gate and a correlation-cluster penalty into a
single size multiplier per proposed trade.
"""

from __future__ import annotations

import math
import threading
from collections import deque
from dataclasses import dataclass, field

from scalpquant.ic import IcTracker
from scalpquant.kalman import KalmanTrend
from scalpquant.portfolio import (
    historical_cvar,
    kelly_fraction,
    pearson_correlation,
    volatility_target_multiplier,
)
from scalpquant.signals import Side

_MAX_OUTCOMES = 200
# 5-minute candles: 288 per day, 365 days a year.
_PERIODS_PER_YEAR = 105_120.0
_MIN_VOL_SAMPLES = 10
_MIN_TAIL_SAMPLES = 20
_CORRELATION_LOOKBACK = 60
_CORRELATION_THRESHOLD = 0.7
_CORRELATION_PENALTY = 0.85
_KALMAN_CONTRADICT = 0.7
_KALMAN_CONFIRM = 1.15
_MIN_SIZE = 0.1
_MAX_SIZE = 3.0


@dataclass
class QuantConfig:
    """Settings for the quant layer; ``enabled=False`` bypasses every adjustment."""

    enabled: bool = True
    kelly_cap: float = 0.25
    kelly_min_trades: int = 20
    target_vol_annual: float = 0.15
    max_vol_multiplier: float = 2.0
    vol_window: int = 60
    var_confidence: float = 0.95
    max_var_pct: float = 0.03
    ic_window: int = 50
    ic_min_abs: float = 0.05
    ic_max_boost: int = 10
    kalman_process_noise: float = 0.01
    kalman_measurement_noise: float = 1.0
    kalman_min_velocity_bps: float = 3.0


@dataclass(frozen=True)
class QuantSizingResult:
    """Outcome of the quant sizing pipeline for one proposed trade."""

    size_multiplier: float
    kelly_fraction: float
    vol_multiplier: float
    var_rejected: bool
    ic_adjustment: int
    kalman_direction: int
    reason: str


@dataclass
class _TradeOutcomes:
    wins: deque[float] = field(default_factory=lambda: deque(maxlen=_MAX_OUTCOMES))
    losses: deque[float] = field(default_factory=lambda: deque(maxlen=_MAX_OUTCOMES))

    def record(self, pnl: float) -> None:
        if pnl > 0.0:
            self.wins.append(pnl)
        elif pnl < 0.0:
            self.losses.append(abs(pnl))

    @property
    def total(self) -> int:
        return len(self.wins) + len(self.losses)

    @property
    def win_rate(self) -> float:
        if self.total == 0:
            return 0.5
        return len(self.wins) / self.total

    @property
    def avg_win(self) -> float:
        return sum(self.wins) / len(self.wins) if self.wins else 1.0

    @property
    def avg_loss(self) -> float:
        return sum(self.losses) / len(self.losses) if self.losses else 1.0


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


class QuantEngine:
    """Thread-safe store of per-symbol and per-strategy quant state."""

    def __init__(self, config: QuantConfig | None = None) -> None:
        self.config = config if config is not None else QuantConfig()
        self._lock = threading.Lock()
        self._kalman: dict[str, KalmanTrend] = {}
        self._ic_trackers: dict[str, IcTracker] = {}
        self._returns: dict[str, deque[float]] = {}
        self._outcomes = _TradeOutcomes()

    def compute_sizing(
        self,
        symbol: str,
        strategy: str,
        side: Side,
        ta_confidence: int,
        entry: float,
        stop_loss: float,
        equity: float,
        base_risk_pct: float,
    ) -> QuantSizingResult:
        """Quant-adjusted size multiplier and diagnostics for a signal."""
        cfg = self.config
        if not cfg.enabled:
            return QuantSizingResult(
                size_multiplier=1.0,
                kelly_fraction=0.0,
                vol_multiplier=1.0,
                var_rejected=False,
                ic_adjustment=0,
                kalman_direction=0,
                reason="quant disabled",
            )

        reasons: list[str] = []
        size = 1.0

        with self._lock:
            outcomes = self._outcomes
            if outcomes.total >= cfg.kelly_min_trades:
                kelly = kelly_fraction(
                    outcomes.win_rate, outcomes.avg_win, outcomes.avg_loss, cfg.kelly_cap
                )
                reasons.append(
                    f"kelly={kelly:.3f} (WR={outcomes.win_rate * 100.0:.1f}% "
                    f"W/L={outcomes.avg_win:.2f}/{outcomes.avg_loss:.2f})"
                )
            else:
                kelly = 0.0
                reasons.append(
                    f"kelly=cold-start ({outcomes.total}trades < {cfg.kelly_min_trades})"
                )

            if kelly > 0.0:
                size *= min(kelly / max(base_risk_pct, 0.01), 2.0)

            vol_mult = self._vol_target_multiplier(symbol)
            size *= vol_mult
            if abs(vol_mult - 1.0) > 0.05:
                reasons.append(f"vol-mult={vol_mult:.2f}")

            var_rejected = self._var_exceeded(symbol, entry, stop_loss, equity)
            if var_rejected:
                reasons.append("VaR cap exceeded")

            ic_adj = self._ic_adjustment(strategy)
            if ic_adj != 0:
                reasons.append(f"IC-adj={ic_adj:+d}")

            direction = self._kalman_direction(symbol, entry)
            if direction != 0:
                reasons.append(f"kalman={'bullish' if direction > 0 else 'bearish'}")
                trade_direction = 1 if side is Side.LONG else -1
                if trade_direction != direction:
                    size *= _KALMAN_CONTRADICT
                    reasons.append("kalman-contradict: -30%")
                else:
                    size *= _KALMAN_CONFIRM
                    reasons.append("kalman-confirm: +15%")

            penalty = self._correlation_cluster_penalty(symbol)
            if penalty < 1.0:
                size *= penalty
                reasons.append(f"corr-penalty: {penalty * 100.0:.0f}%")

        return QuantSizingResult(
            size_multiplier=max(_MIN_SIZE, min(_MAX_SIZE, size)),
            kelly_fraction=kelly,
            vol_multiplier=vol_mult,
            var_rejected=var_rejected,
            ic_adjustment=ic_adj,
            kalman_direction=direction,
            reason=" | ".join(reasons),
        )

    def record_trade(self, pnl: float) -> None:
        """Record a closed trade's PnL for Kelly estimation."""
        with self._lock:
            self._outcomes.record(pnl)

    def record_return(self, symbol: str, ret: float) -> None:
        """Append a candle return for ``symbol``; non-finite values are ignored."""
        if not math.isfinite(ret):
            return
        with self._lock:
            history = self._returns.get(symbol)
            if history is None:
                history = deque(maxlen=max(self.config.vol_window * 2, 0))
                self._returns[symbol] = history
            history.append(ret)

    def record_ic_observation(
        self, strategy: str, signal_value: float, forward_return: float
    ) -> None:
        """Record a signal/forward-return pair for a strategy's IC."""
        with self._lock:
            tracker = self._ic_trackers.get(strategy)
            if tracker is None:
                tracker = IcTracker(self.config.ic_window)
                self._ic_trackers[strategy] = tracker
            tracker.record(signal_value, forward_return)

    def update_kalman(self, symbol: str, price: float) -> None:
        """Feed the latest price into the symbol's Kalman trend filter."""
        with self._lock:
            trend = self._kalman.get(symbol)
            if trend is None:
                trend = KalmanTrend(
                    price,
                    self.config.kalman_process_noise,
                    self.config.kalman_measurement_noise,
                )
                self._kalman[symbol] = trend
            trend.update(price)

    def kelly_info(self) -> tuple[float, float, float, int]:
        """(win rate, average win, average loss, trade count) used for Kelly."""
        with self._lock:
            o = self._outcomes
            return o.win_rate, o.avg_win, o.avg_loss, o.total

    # The helpers below expect the caller to hold the lock.

    def _vol_target_multiplier(self, symbol: str) -> float:
        history = self._returns.get(symbol)
        if history is None or len(history) < _MIN_VOL_SAMPLES:
            return 1.0
        window = min(len(history), self.config.vol_window)
        recent = list(history)[len(history) - window:]
        mean = sum(recent) / len(recent)
        var = sum((r - mean) ** 2 for r in recent) / len(recent)
        realized = math.sqrt(var) * math.sqrt(_PERIODS_PER_YEAR)
        return volatility_target_multiplier(
            self.config.target_vol_annual, realized, self.config.max_vol_multiplier
        )

    def _var_exceeded(
        self, symbol: str, entry: float, stop_loss: float, equity: float
    ) -> bool:
        if equity <= 0.0:
            return False
        history = self._returns.get(symbol)
        if history is None or len(history) < _MIN_TAIL_SAMPLES:
            return False
        cvar = historical_cvar(list(history), self.config.var_confidence)
        if cvar is None:
            return False
        trade_risk_pct = _divide(abs(entry - stop_loss), entry)
        estimated_loss = equity * trade_risk_pct
        var_cap = equity * self.config.max_var_pct
        return estimated_loss + cvar * equity > var_cap

    def _ic_adjustment(self, strategy: str) -> int:
        tracker = self._ic_trackers.get(strategy)
        if tracker is None:
            return 0
        ic = tracker.ic()
        if ic is None or abs(ic) < self.config.ic_min_abs:
            return 0
        limit = float(self.config.ic_max_boost)
        return int(max(-limit, min(limit, _round_half_away(ic * limit))))

    def _kalman_direction(self, symbol: str, price: float) -> int:
        trend = self._kalman.get(symbol)
        if trend is None:
            return 0
        score = trend.trend_score(price)
        min_bps = self.config.kalman_min_velocity_bps
        if score > min_bps:
            return 1
        if score < -min_bps:
            return -1
        return 0

    def _correlation_cluster_penalty(self, symbol: str) -> float:
        history = self._returns.get(symbol)
        if history is None or len(history) < _MIN_TAIL_SAMPLES:
            return 1.0
        own = list(history)
        penalty = 1.0
        for other, other_history in self._returns.items():
            if other == symbol or len(other_history) < _MIN_TAIL_SAMPLES:
                continue
            theirs = list(other_history)
            n = min(len(own), len(theirs), _CORRELATION_LOOKBACK)
            rho = pearson_correlation(own[len(own) - n:], theirs[len(theirs) - n:])
            if rho is not None and abs(rho) > _CORRELATION_THRESHOLD:
                penalty *= _CORRELATION_PENALTY
        return penalty
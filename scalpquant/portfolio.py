"""Portfolio math: correlation, exposure, Kelly sizing, VaR and vol targeting."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from scalpquant.signals import Side


def pearson_correlation(a: Sequence[float], b: Sequence[float]) -> float | None:
    """Pearson correlation of the common prefix of two series, or None."""
    n = min(len(a), len(b))
    if n < 3:
        return None
    xs, ys = list(a[:n]), list(b[:n])
    mean_a = sum(xs) / n
    mean_b = sum(ys) / n
    cov = sum((x - mean_a) * (y - mean_b) for x, y in zip(xs, ys)) / n
    var_a = sum((x - mean_a) ** 2 for x in xs) / n
    var_b = sum((y - mean_b) ** 2 for y in ys) / n
    denom = math.sqrt(var_a) * math.sqrt(var_b)
    if denom <= 0.0:
        return None
    return max(-1.0, min(1.0, cov / denom))


@dataclass(frozen=True)
class PositionExposure:
    """An open or proposed position's notional exposure."""

    symbol: str
    side: Side
    notional_usd: float


def gross_exposure(positions: Iterable[PositionExposure]) -> float:
    return sum(abs(p.notional_usd) for p in positions)


def net_exposure(positions: Iterable[PositionExposure]) -> float:
    return sum(
        p.notional_usd if p.side is Side.LONG else -p.notional_usd for p in positions
    )


def can_add_position(
    positions: Iterable[PositionExposure],
    proposed: PositionExposure,
    equity_usd: float,
    max_gross_exposure_pct: float,
) -> bool:
    """Whether adding ``proposed`` keeps gross exposure within the cap."""
    if equity_usd <= 0.0 or max_gross_exposure_pct <= 0.0:
        return False
    max_gross = equity_usd * max_gross_exposure_pct / 100.0
    return gross_exposure(positions) + abs(proposed.notional_usd) <= max_gross


def kelly_fraction(win_rate: float, avg_win: float, avg_loss: float, cap: float) -> float:
    """Kelly-optimal fraction, floored at zero and capped at ``cap``."""
    if not 0.0 <= win_rate <= 1.0 or avg_win <= 0.0 or avg_loss <= 0.0 or cap <= 0.0:
        return 0.0
    payoff = avg_win / avg_loss
    raw = win_rate - (1.0 - win_rate) / payoff
    return min(max(raw, 0.0), cap)


def portfolio_kelly_adjustment(kelly: float, correlation: float) -> float:
    """Shrink a Kelly fraction by up to half as correlation rises to 1."""
    if kelly <= 0.0:
        return 0.0
    corr = max(0.0, min(1.0, correlation))
    return kelly * (1.0 - corr * 0.5)


def _valid_tail_input(returns: Sequence[float], confidence: float) -> bool:
    return bool(returns) and 0.0 <= confidence < 1.0


def historical_var(returns: Sequence[float], confidence: float) -> float | None:
    """Historical value-at-risk as a positive loss fraction."""
    if not _valid_tail_input(returns, confidence):
        return None
    ordered = sorted(returns)
    tail = 1.0 - confidence
    idx = min(int(math.floor(len(ordered) * tail)), len(ordered) - 1)
    return -min(ordered[idx], 0.0)


def historical_cvar(returns: Sequence[float], confidence: float) -> float | None:
    """Historical conditional VaR (expected shortfall) as a positive loss."""
    if not _valid_tail_input(returns, confidence):
        return None
    ordered = sorted(returns)
    tail = 1.0 - confidence
    count = min(max(int(math.ceil(len(ordered) * tail)), 1), len(ordered))
    avg = sum(ordered[:count]) / count
    return -min(avg, 0.0)


def volatility_target_multiplier(
    target_vol: float, realized_vol: float, max_multiplier: float
) -> float:
    """Size multiplier that scales realized volatility to the target."""
    if target_vol <= 0.0 or realized_vol <= 0.0 or max_multiplier <= 0.0:
        return 0.0
    return min(target_vol / realized_vol, max_multiplier)
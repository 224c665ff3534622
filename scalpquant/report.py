"""Strategy health classification, retirement rules and A/B comparisons."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass
class PerformanceMetrics:
    """Summary statistics of a set of closed trades."""

    trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    net_pnl: float = 0.0
    sharpe: float = 0.0
    max_drawdown_pct: float = 0.0


class StrategyHealth(Enum):
    PROMOTE = "Promote"
    OBSERVE = "Observe"
    RETIRE = "Retire"

    def __str__(self) -> str:
        return self.value


_MIN_TRADES_FOR_VERDICT = 30


def classify_health(
    metrics: PerformanceMetrics, ic: float | None, p_value: float | None
) -> StrategyHealth:
    """Promote, observe or retire a strategy from its statistics."""
    enough = metrics.trades >= _MIN_TRADES_FOR_VERDICT
    if enough and (
        metrics.profit_factor < 1.0
        or metrics.sharpe < 0.0
        or (p_value is not None and p_value > 0.20)
    ):
        return StrategyHealth.RETIRE
    if (
        enough
        and metrics.profit_factor >= 1.2
        and metrics.sharpe > 0.5
        and ic is not None
        and ic > 0.03
        and p_value is not None
        and p_value < 0.05
    ):
        return StrategyHealth.PROMOTE
    return StrategyHealth.OBSERVE


@dataclass
class StrategyResearchSummary:
    """A strategy's metrics with its derived health verdict."""

    strategy: str
    metrics: PerformanceMetrics
    ic: float | None = None
    p_value: float | None = None

    @property
    def health(self) -> StrategyHealth:
        return classify_health(self.metrics, self.ic, self.p_value)


@dataclass(frozen=True)
class RetirementRule:
    """Thresholds below which a strategy with enough trades is retired."""

    min_trades: int = 30
    min_profit_factor: float = 1.05
    min_sharpe: float = 0.5
    max_drawdown_pct: float = 8.0

    def should_retire(self, metrics: PerformanceMetrics) -> bool:
        return metrics.trades >= self.min_trades and (
            metrics.profit_factor < self.min_profit_factor
            or metrics.sharpe < self.min_sharpe
            or metrics.max_drawdown_pct > self.max_drawdown_pct
        )


class VariantWinner(Enum):
    CONTROL = "control"
    TREATMENT = "treatment"
    INCONCLUSIVE = "inconclusive"


def _beats(a: PerformanceMetrics, b: PerformanceMetrics, min_pf_lift: float) -> bool:
    return (
        math.isfinite(a.profit_factor)
        and math.isfinite(b.profit_factor)
        and a.profit_factor >= b.profit_factor * (1.0 + min_pf_lift)
        and a.sharpe >= b.sharpe
    )


def compare_variants(
    control: PerformanceMetrics,
    treatment: PerformanceMetrics,
    min_pf_lift: float,
    min_trade_count: int,
) -> VariantWinner:
    """Pick the variant whose profit factor leads by ``min_pf_lift`` without worse Sharpe."""
    if control.trades < min_trade_count or treatment.trades < min_trade_count:
        return VariantWinner.INCONCLUSIVE
    if _beats(treatment, control, min_pf_lift):
        return VariantWinner.TREATMENT
    if _beats(control, treatment, min_pf_lift):
        return VariantWinner.CONTROL
    return VariantWinner.INCONCLUSIVE
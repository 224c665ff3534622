"""Markdown and JSON rendering of strategy research reports."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from dataclasses import dataclass

from scalpquant.report import PerformanceMetrics, StrategyHealth, StrategyResearchSummary

_MARKDOWN_HEADER = (
    "| Symbol | Trades | Win rate | PF | Net PnL | Sharpe | Max DD | MC DD p95 | Health |\n"
    "|---|---:|---:|---:|---:|---:|---:|---:|---|\n"
)


def _non_finite_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "inf" if value > 0 else "-inf"


def _fixed(value: float, places: int = 2) -> str:
    if not math.isfinite(value):
        return _non_finite_text(value)
    return f"{value:.{places}f}"


def _json_number(value: float | None) -> float | str | None:
    if value is None:
        return None
    return value if math.isfinite(value) else _non_finite_text(value)


@dataclass
class ResearchReport:
    """One row of a research report."""

    symbol: str
    trades: int
    win_rate: float
    profit_factor: float
    net_pnl: float
    sharpe: float
    max_drawdown_pct: float
    monte_carlo_drawdown_p95: float | None
    monte_carlo_drawdown_p99: float | None
    health: StrategyHealth

    @classmethod
    def from_metrics(
        cls,
        symbol: str,
        metrics: PerformanceMetrics,
        monte_carlo_drawdown_p95: float | None = None,
        monte_carlo_drawdown_p99: float | None = None,
    ) -> ResearchReport:
        """Build a report row, classifying health from the metrics alone."""
        summary = StrategyResearchSummary(symbol, metrics)
        return cls(
            symbol=symbol,
            trades=metrics.trades,
            win_rate=metrics.win_rate,
            profit_factor=metrics.profit_factor,
            net_pnl=metrics.net_pnl,
            sharpe=metrics.sharpe,
            max_drawdown_pct=metrics.max_drawdown_pct,
            monte_carlo_drawdown_p95=monte_carlo_drawdown_p95,
            monte_carlo_drawdown_p99=monte_carlo_drawdown_p99,
            health=summary.health,
        )


def reports_to_markdown(reports: Iterable[ResearchReport]) -> str:
    """Render reports as a Markdown table."""
    rows = []
    for r in reports:
        mc = (
            f"{_fixed(r.monte_carlo_drawdown_p95)}%"
            if r.monte_carlo_drawdown_p95 is not None
            else "n/a"
        )
        rows.append(
            f"| {r.symbol} | {r.trades} | {_fixed(r.win_rate * 100.0)}% "
            f"| {_fixed(r.profit_factor)} | {_fixed(r.net_pnl)} | {_fixed(r.sharpe)} "
            f"| {_fixed(r.max_drawdown_pct)}% | {mc} | {r.health.value} |\n"
        )
    return _MARKDOWN_HEADER + "".join(rows)


def reports_to_json(reports: Iterable[ResearchReport]) -> str:
    """Render reports as pretty JSON; non-finite numbers become strings."""
    rows = [
        {
            "symbol": r.symbol,
            "trades": r.trades,
            "win_rate": _json_number(r.win_rate),
            "profit_factor": _json_number(r.profit_factor),
            "net_pnl": _json_number(r.net_pnl),
            "sharpe": _json_number(r.sharpe),
            "max_drawdown_pct": _json_number(r.max_drawdown_pct),
            "monte_carlo_drawdown_p95": _json_number(r.monte_carlo_drawdown_p95),
            "monte_carlo_drawdown_p99": _json_number(r.monte_carlo_drawdown_p99),
            "health": r.health.value,
        }
        for r in reports
    ]
    return json.dumps(rows, indent=2, sort_keys=True, ensure_ascii=False)
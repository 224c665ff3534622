"""Market regime detection and regime-based strategy selection."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from scalpquant.signals import StrategyName, SymbolSnapshot


class Regime(Enum):
    """Broad market regime."""

    TRENDING_BULLISH = "TRENDING_BULLISH"
    TRENDING_BEARISH = "TRENDING_BEARISH"
    RANGING = "RANGING"
    VOLATILE = "VOLATILE"
    SQUEEZE = "SQUEEZE"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


def detect_regime(state: SymbolSnapshot) -> Regime:
    """Derive the regime from the latest indicator readings."""
    adx = state.last_adx
    if adx is None:
        return Regime.UNKNOWN
    chop = state.last_choppiness if state.last_choppiness is not None else 50.0

    upper, lower = state.last_keltner_upper, state.last_keltner_lower
    if state.has_bollinger and upper is not None and lower is not None:
        if state.bb_upper < upper and state.bb_lower > lower and chop > 55.0:
            return Regime.SQUEEZE

    if adx >= 40.0:
        return Regime.VOLATILE

    if adx >= 25.0 and chop < 38.2:
        plus = state.last_di_plus if state.last_di_plus is not None else 0.0
        minus = state.last_di_minus if state.last_di_minus is not None else 0.0
        return Regime.TRENDING_BULLISH if plus >= minus else Regime.TRENDING_BEARISH

    if adx < 20.0 or chop > 61.8:
        return Regime.RANGING

    return Regime.UNKNOWN


_PREFERRED: dict[Regime, tuple[StrategyName, ...]] = {
    Regime.TRENDING_BULLISH: (StrategyName.EMA_RIBBON, StrategyName.MOMENTUM),
    Regime.TRENDING_BEARISH: (StrategyName.EMA_RIBBON, StrategyName.MOMENTUM),
    Regime.RANGING: (
        StrategyName.MEAN_REVERSION,
        StrategyName.VWAP_SCALP,
        StrategyName.EMA_RIBBON,
    ),
    Regime.VOLATILE: (StrategyName.SQUEEZE, StrategyName.MOMENTUM),
    Regime.SQUEEZE: (StrategyName.SQUEEZE,),
    Regime.UNKNOWN: (
        StrategyName.VWAP_SCALP,
        StrategyName.MEAN_REVERSION,
        StrategyName.EMA_RIBBON,
    ),
}


def select_strategies(
    active: Iterable[StrategyName], regime: Regime
) -> list[StrategyName]:
    """Strategies preferred for ``regime``, in preference order, that are active."""
    enabled = set(active)
    return [name for name in _PREFERRED[regime] if name in enabled]
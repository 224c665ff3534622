"""Rule-based scalping strategies that turn indicator snapshots into pre-signals."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from scalpquant.signals import Candle, PreSignal, Side, StrategyName, SymbolSnapshot


def _confidence(score: float) -> int:
    """Clamp a raw score to [0, 100] and truncate it to an integer."""
    return int(max(0.0, min(100.0, score)))


def _ofi_aligned(state: SymbolSnapshot, side: Side) -> bool:
    ofi = state.last_ofi if state.last_ofi is not None else 0.0
    return (side is Side.LONG and ofi > 0.0) or (side is Side.SHORT and ofi < 0.0)


class Strategy(ABC):
    """A strategy evaluates the latest closed candle against a symbol's state."""

    name: StrategyName

    @abstractmethod
    def evaluate(self, state: SymbolSnapshot, candle: Candle) -> PreSignal | None:
        """Return a candidate trade, or None when the setup is absent."""


class MeanReversion(Strategy):
    """Fade Bollinger band touches at RSI extremes in non-trending markets."""

    name = StrategyName.MEAN_REVERSION

    def evaluate(self, state: SymbolSnapshot, candle: Candle) -> PreSignal | None:
        if not state.has_bollinger or state.last_rsi is None or state.last_atr is None:
            return None
        rsi = state.last_rsi
        atr = state.last_atr
        adx = state.last_adx if state.last_adx is not None else 0.0

        if adx > 35.0:
            return None
        if state.volume_sma <= 0.0:
            return None
        vol_ratio = candle.volume / state.volume_sma
        if vol_ratio < 0.8:
            return None

        lower, upper = state.bb_lower, state.bb_upper
        mid, width = state.bb_mid, state.bb_width
        close = candle.close

        if candle.low <= lower and rsi < 35.0:
            side = Side.LONG
            reason = f"BB lower touch, RSI {rsi:.1f}<35, vol×{vol_ratio:.2f}"
            stop = min(lower - width * 0.5, close - atr * 0.8)
            target = min(mid, close + atr * 1.5)
        elif candle.high >= upper and rsi > 65.0:
            side = Side.SHORT
            reason = f"BB upper touch, RSI {rsi:.1f}>65, vol×{vol_ratio:.2f}"
            stop = max(upper + width * 0.5, close + atr * 0.8)
            target = max(mid, close - atr * 1.5)
        else:
            return None

        return PreSignal(
            symbol=state.symbol,
            strategy=self.name,
            side=side,
            entry=close,
            stop_loss=stop,
            take_profit=target,
            ta_confidence=self._score(rsi, vol_ratio, adx),
            reason=reason,
        )

    @staticmethod
    def _score(rsi: float, vol_ratio: float, adx: float) -> int:
        score = 62.0
        if not 20.0 <= rsi <= 80.0:
            score += 15.0
        elif not 30.0 <= rsi <= 70.0:
            score += 10.0
        if vol_ratio >= 2.0:
            score += 12.0
        elif vol_ratio >= 1.2:
            score += 5.0
        if adx < 15.0:
            score += 10.0
        elif adx < 20.0:
            score += 5.0
        return _confidence(score)


class Momentum(Strategy):
    """Breakout of the prior 20-candle range on elevated volume and ROC."""

    name = StrategyName.MOMENTUM

    def evaluate(self, state: SymbolSnapshot, candle: Candle) -> PreSignal | None:
        if len(state.candles) < 21:
            return None
        # The 20 candles before the most recent one.
        recent = list(state.candles)[-21:-1]
        highest = max((c.high for c in recent), default=-math.inf)
        lowest = min((c.low for c in recent), default=math.inf)
        vol_ratio = candle.volume / state.volume_sma if state.volume_sma > 0.0 else 0.0
        roc = state.last_roc if state.last_roc is not None else 0.0
        if state.last_atr is None:
            return None
        atr = state.last_atr
        ema50, ema200 = state.ema_50, state.ema_200

        if vol_ratio < 1.2:
            return None

        emas_ready = ema50 is not None and ema200 is not None
        aligned_long = ema50 > ema200 if emas_ready else True
        aligned_short = ema50 < ema200 if emas_ready else True

        close = candle.close
        if close > highest and roc > 0.2 and aligned_long:
            side = Side.LONG
            reason = f"Long breakout > {highest:.4f} vol×{vol_ratio:.2f} ROC {roc:.2f}%"
            stop, target = close - 0.8 * atr, close + 1.5 * atr
        elif close < lowest and roc < -0.2 and aligned_short:
            side = Side.SHORT
            reason = f"Short breakout < {lowest:.4f} vol×{vol_ratio:.2f} ROC {roc:.2f}%"
            stop, target = close + 0.8 * atr, close - 1.5 * atr
        else:
            return None

        score = 65.0
        if vol_ratio >= 2.0:
            score += 10.0
        elif vol_ratio >= 1.5:
            score += 5.0
        if _ofi_aligned(state, side):
            score += 5.0
        if abs(roc) > 0.5:
            score += 5.0
        if abs(roc) > 1.0:
            score += 5.0

        return PreSignal(
            symbol=state.symbol,
            strategy=self.name,
            side=side,
            entry=close,
            stop_loss=stop,
            take_profit=target,
            ta_confidence=_confidence(score),
            reason=reason,
        )


class VwapScalp(Strategy):
    """Scalp entries close to VWAP in the direction of its slope."""

    name = StrategyName.VWAP_SCALP

    def evaluate(self, state: SymbolSnapshot, candle: Candle) -> PreSignal | None:
        if state.last_vwap is None or state.last_atr is None:
            return None
        vwap = state.last_vwap
        atr = state.last_atr
        slope = state.last_vwap_slope if state.last_vwap_slope is not None else 0.0
        close = candle.close

        dist_pct = (close - vwap) / max(vwap, 1e-9) * 100.0
        long_zone = -1.0 <= dist_pct <= 0.3
        short_zone = -0.3 <= dist_pct <= 1.0

        if long_zone and slope >= -0.001:
            side = Side.LONG
            stop = close - 0.4 * atr
            target = min(vwap, close + atr * 1.2)
        elif short_zone and slope <= 0.001:
            side = Side.SHORT
            stop = close + 0.4 * atr
            target = max(vwap, close - atr * 1.2)
        else:
            return None

        score = 62.0
        if abs(slope) > 0.0003:
            score += 8.0
        if abs(dist_pct) < 0.15:
            score += 10.0
        elif abs(dist_pct) < 0.3:
            score += 5.0
        if _ofi_aligned(state, side):
            score += 5.0

        return PreSignal(
            symbol=state.symbol,
            strategy=self.name,
            side=side,
            entry=close,
            stop_loss=stop,
            take_profit=target,
            ta_confidence=_confidence(score),
            reason=f"VWAP {vwap:.4f} slope {slope:.5f} dist {dist_pct:.2f}%",
        )


class EmaRibbon(Strategy):
    """Pullback entries to EMA21 inside an aligned EMA ribbon."""

    name = StrategyName.EMA_RIBBON

    def evaluate(self, state: SymbolSnapshot, candle: Candle) -> PreSignal | None:
        e8, e21 = state.ema_8, state.ema_21
        if e8 is None or e21 is None:
            return None
        rsi = state.last_rsi if state.last_rsi is not None else 50.0
        if state.last_atr is None:
            return None
        atr = state.last_atr
        e50, e200 = state.ema_50, state.ema_200
        close = candle.close
        full_ribbon = e50 is not None and e200 is not None

        bull_confirmed = (e50 is None or e21 > e50) and (e200 is None or close > e200)
        bear_confirmed = (e50 is None or e21 < e50) and (e200 is None or close < e200)

        if e8 > e21 and bull_confirmed:
            pullback = candle.low <= e21 * 1.003 and close > e21
            if pullback and 35.0 < rsi < 70.0:
                anchor = e50 if e50 is not None else e21
                score = 66.0
                if full_ribbon:
                    score += 5.0
                if 45.0 < rsi < 60.0:
                    score += 5.0
                return PreSignal(
                    symbol=state.symbol,
                    strategy=self.name,
                    side=Side.LONG,
                    entry=close,
                    stop_loss=min(anchor, candle.low) - 0.5 * atr,
                    take_profit=close + 1.5 * atr,
                    ta_confidence=_confidence(score),
                    reason=f"Ribbon bull + pullback EMA21 {e21:.4f} RSI {rsi:.1f}",
                )

        if e8 < e21 and bear_confirmed:
            pullback = candle.high >= e21 * 0.997 and close < e21
            if pullback and 30.0 < rsi < 65.0:
                anchor = e50 if e50 is not None else e21
                score = 66.0
                if full_ribbon:
                    score += 5.0
                if 40.0 < rsi < 55.0:
                    score += 5.0
                return PreSignal(
                    symbol=state.symbol,
                    strategy=self.name,
                    side=Side.SHORT,
                    entry=close,
                    stop_loss=max(anchor, candle.high) + 0.5 * atr,
                    take_profit=close - 1.5 * atr,
                    ta_confidence=_confidence(score),
                    reason=f"Ribbon bear + pullback EMA21 {e21:.4f} RSI {rsi:.1f}",
                )

        return None


class Squeeze(Strategy):
    """Trade the expansion after Bollinger bands leave the Keltner channel."""

    name = StrategyName.SQUEEZE

    def evaluate(self, state: SymbolSnapshot, candle: Candle) -> PreSignal | None:
        if (
            not state.has_bollinger
            or state.last_keltner_upper is None
            or state.last_keltner_lower is None
            or state.last_atr is None
        ):
            return None
        atr = state.last_atr
        roc = state.last_roc if state.last_roc is not None else 0.0
        upper, mid, lower = state.bb_upper, state.bb_mid, state.bb_lower

        if upper < state.last_keltner_upper and lower > state.last_keltner_lower:
            return None

        close = candle.close
        if roc > 0.1 and close > mid:
            side = Side.LONG
            reason = f"Squeeze expand up, ROC {roc:.2f}%"
            stop = min(mid, close - 0.5 * atr)
            target = close + 1.2 * atr
        elif roc < -0.1 and close < mid:
            side = Side.SHORT
            reason = f"Squeeze expand down, ROC {roc:.2f}%"
            stop = max(mid, close + 0.5 * atr)
            target = close - 1.2 * atr
        else:
            return None

        score = 64.0 + min(abs(roc), 3.0) * 4.0
        if _ofi_aligned(state, side):
            score += 5.0
        if (side is Side.LONG and close > upper) or (side is Side.SHORT and close < lower):
            score += 3.0

        return PreSignal(
            symbol=state.symbol,
            strategy=self.name,
            side=side,
            entry=close,
            stop_loss=stop,
            take_profit=target,
            ta_confidence=_confidence(score),
            reason=reason,
        )
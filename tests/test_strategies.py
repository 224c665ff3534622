from collections import deque
from datetime import datetime, timedelta, timezone

import pytest

from scalpquant.signals import Candle, Side, StrategyName, SymbolSnapshot
from scalpquant.strategies import (
    EmaRibbon,
    MeanReversion,
    Momentum,
    Squeeze,
    Strategy,
    VwapScalp,
)

START = datetime(2023, 11, 14, tzinfo=timezone.utc)


def make_candle(close, high=None, low=None, volume=100.0, index=0):
    high = close if high is None else high
    low = close if low is None else low
    return Candle(
        open_time=START + timedelta(minutes=index),
        close_time=START + timedelta(minutes=index + 1),
        open=close,
        high=high,
        low=low,
        close=close,
        volume=volume,
    )


def assert_long(signal, candle):
    assert signal.side is Side.LONG
    assert signal.entry == candle.close
    assert signal.stop_loss < signal.entry < signal.take_profit
    assert 0 <= signal.ta_confidence <= 100


def assert_short(signal, candle):
    assert signal.side is Side.SHORT
    assert signal.entry == candle.close
    assert signal.take_profit < signal.entry < signal.stop_loss
    assert 0 <= signal.ta_confidence <= 100


# ── Mean reversion ──────────────────────────────────────────────


def mr_state(**overrides):
    values = dict(
        symbol="BTCUSDT",
        bb_upper=110.0,
        bb_mid=100.0,
        bb_lower=90.0,
        bb_width=20.0,
        last_rsi=25.0,
        last_atr=2.0,
        last_adx=10.0,
        volume_sma=100.0,
    )
    values.update(overrides)
    return SymbolSnapshot(**values)


def test_mean_reversion_long_on_lower_band_touch():
    candle = make_candle(91.0, high=92.0, low=89.0, volume=250.0)
    signal = MeanReversion().evaluate(mr_state(), candle)
    assert_long(signal, candle)
    assert signal.strategy is StrategyName.MEAN_REVERSION
    assert signal.symbol == "BTCUSDT"
    assert signal.take_profit <= 100.0
    assert signal.ta_confidence == 94


def test_mean_reversion_short_on_upper_band_touch():
    candle = make_candle(109.0, high=111.0, low=108.0, volume=150.0)
    signal = MeanReversion().evaluate(mr_state(last_rsi=75.0), candle)
    assert_short(signal, candle)
    assert signal.take_profit >= 100.0


def test_mean_reversion_confidence_falls_with_adx():
    candle = make_candle(91.0, high=92.0, low=89.0, volume=250.0)
    calm = MeanReversion().evaluate(mr_state(last_adx=10.0), candle)
    trending = MeanReversion().evaluate(mr_state(last_adx=30.0), candle)
    assert calm.ta_confidence > trending.ta_confidence


@pytest.mark.parametrize(
    "overrides, volume",
    [
        ({"last_adx": 40.0}, 250.0),
        ({"volume_sma": 0.0}, 250.0),
        ({}, 50.0),
        ({"last_rsi": None}, 250.0),
        ({"bb_width": None}, 250.0),
        ({"last_rsi": 50.0}, 250.0),
    ],
)
def test_mean_reversion_rejects(overrides, volume):
    candle = make_candle(91.0, high=92.0, low=89.0, volume=volume)
    assert MeanReversion().evaluate(mr_state(**overrides), candle) is None


# ── Momentum ────────────────────────────────────────────────────


def momentum_state(last, count=20, **overrides):
    history = [make_candle(100.0, high=101.0, low=99.0, index=i) for i in range(count)]
    history.append(last)
    values = dict(
        symbol="ETHUSDT",
        candles=deque(history),
        volume_sma=100.0,
        last_roc=0.6,
        last_atr=1.0,
    )
    values.update(overrides)
    return SymbolSnapshot(**values)


def test_momentum_long_breakout():
    last = make_candle(103.0, high=103.5, low=100.5, volume=300.0, index=20)
    signal = Momentum().evaluate(momentum_state(last), last)
    assert_long(signal, last)
    assert signal.strategy is StrategyName.MOMENTUM


def test_momentum_short_breakdown():
    last = make_candle(97.0, high=99.5, low=96.5, volume=300.0, index=20)
    signal = Momentum().evaluate(momentum_state(last, last_roc=-0.6), last)
    assert_short(signal, last)


def test_momentum_ofi_raises_confidence():
    last = make_candle(103.0, high=103.5, low=100.5, volume=300.0, index=20)
    plain = Momentum().evaluate(momentum_state(last), last)
    with_flow = Momentum().evaluate(momentum_state(last, last_ofi=1.0), last)
    assert with_flow.ta_confidence > plain.ta_confidence


def test_momentum_needs_history():
    last = make_candle(103.0, high=103.5, low=100.5, volume=300.0, index=19)
    assert Momentum().evaluate(momentum_state(last, count=19), last) is None


def test_momentum_blocked_by_bearish_emas():
    last = make_candle(103.0, high=103.5, low=100.5, volume=300.0, index=20)
    state = momentum_state(last, ema_50=95.0, ema_200=100.0)
    assert Momentum().evaluate(state, last) is None


def test_momentum_partial_emas_do_not_block():
    last = make_candle(103.0, high=103.5, low=100.5, volume=300.0, index=20)
    state = momentum_state(last, ema_50=95.0)
    assert Momentum().evaluate(state, last).side is Side.LONG


def test_momentum_requires_volume():
    last = make_candle(103.0, high=103.5, low=100.5, volume=110.0, index=20)
    assert Momentum().evaluate(momentum_state(last), last) is None


# ── VWAP scalp ──────────────────────────────────────────────────


def vwap_state(**overrides):
    values = dict(symbol="SOLUSDT", last_vwap=100.0, last_vwap_slope=0.0005, last_atr=1.0)
    values.update(overrides)
    return SymbolSnapshot(**values)


def test_vwap_long_just_below_vwap():
    candle = make_candle(99.9)
    signal = VwapScalp().evaluate(vwap_state(), candle)
    assert_long(signal, candle)
    assert signal.take_profit == 100.0
    assert signal.strategy is StrategyName.VWAP_SCALP


def test_vwap_short_above_vwap_with_falling_slope():
    candle = make_candle(100.5)
    signal = VwapScalp().evaluate(vwap_state(last_vwap_slope=-0.002), candle)
    assert_short(signal, candle)
    assert signal.take_profit == 100.0


def test_vwap_far_from_vwap_is_ignored():
    assert VwapScalp().evaluate(vwap_state(), make_candle(105.0)) is None


def test_vwap_requires_atr():
    assert VwapScalp().evaluate(vwap_state(last_atr=None), make_candle(99.9)) is None


def test_vwap_closer_entry_scores_higher():
    near = VwapScalp().evaluate(vwap_state(), make_candle(99.95))
    far = VwapScalp().evaluate(vwap_state(), make_candle(99.5))
    assert near.ta_confidence > far.ta_confidence


# ── EMA ribbon ──────────────────────────────────────────────────


def ribbon_state(**overrides):
    values = dict(symbol="BTCUSDT", ema_8=101.0, ema_21=100.0, last_rsi=50.0, last_atr=1.0)
    values.update(overrides)
    return SymbolSnapshot(**values)


def test_ribbon_long_pullback():
    candle = make_candle(100.8, high=101.0, low=100.2)
    signal = EmaRibbon().evaluate(ribbon_state(), candle)
    assert_long(signal, candle)
    assert signal.strategy is StrategyName.EMA_RIBBON
    assert signal.stop_loss < 100.0


def test_ribbon_full_alignment_scores_higher():
    candle = make_candle(100.8, high=101.0, low=100.2)
    partial = EmaRibbon().evaluate(ribbon_state(), candle)
    full = EmaRibbon().evaluate(ribbon_state(ema_50=99.0, ema_200=95.0), candle)
    assert full.ta_confidence > partial.ta_confidence


def test_ribbon_short_pullback():
    candle = make_candle(99.2, high=99.8, low=99.0)
    signal = EmaRibbon().evaluate(ribbon_state(ema_8=99.0), candle)
    assert_short(signal, candle)


@pytest.mark.parametrize(
    "overrides",
    [{"last_rsi": 80.0}, {"last_atr": None}, {"ema_21": None}, {"ema_200": 110.0}],
)
def test_ribbon_rejects(overrides):
    candle = make_candle(100.8, high=101.0, low=100.2)
    assert EmaRibbon().evaluate(ribbon_state(**overrides), candle) is None


# ── Squeeze ─────────────────────────────────────────────────────


def squeeze_state(**overrides):
    values = dict(
        symbol="BTCUSDT",
        bb_upper=105.0,
        bb_mid=100.0,
        bb_lower=95.0,
        bb_width=10.0,
        last_keltner_upper=104.0,
        last_keltner_lower=96.0,
        last_atr=1.0,
        last_roc=0.5,
    )
    values.update(overrides)
    return SymbolSnapshot(**values)


def test_squeeze_expansion_up():
    candle = make_candle(102.0)
    signal = Squeeze().evaluate(squeeze_state(), candle)
    assert_long(signal, candle)
    assert signal.strategy is StrategyName.SQUEEZE


def test_squeeze_expansion_down():
    candle = make_candle(98.0)
    signal = Squeeze().evaluate(squeeze_state(last_roc=-0.5), candle)
    assert_short(signal, candle)


def test_squeeze_waits_inside_keltner():
    state = squeeze_state(last_keltner_upper=106.0, last_keltner_lower=94.0)
    assert Squeeze().evaluate(state, make_candle(102.0)) is None


def test_squeeze_needs_roc():
    assert Squeeze().evaluate(squeeze_state(last_roc=0.05), make_candle(102.0)) is None


def test_squeeze_stronger_roc_scores_higher():
    candle = make_candle(102.0)
    weak = Squeeze().evaluate(squeeze_state(last_roc=0.5), candle)
    strong = Squeeze().evaluate(squeeze_state(last_roc=2.0), candle)
    assert strong.ta_confidence > weak.ta_confidence


# ── Base class ──────────────────────────────────────────────────


def test_strategy_base_is_abstract():
    with pytest.raises(TypeError):
        Strategy()


def test_strategies_report_their_names():
    names = [s.name for s in (MeanReversion(), Momentum(), VwapScalp(), EmaRibbon(), Squeeze())]
    assert names == [
        StrategyName.MEAN_REVERSION,
        StrategyName.MOMENTUM,
        StrategyName.VWAP_SCALP,
        StrategyName.EMA_RIBBON,
        StrategyName.SQUEEZE,
    ]
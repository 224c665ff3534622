import math
from datetime import datetime, timedelta, timezone

from scalpquant.decay import SignalObservation, compute_ic_decay
from scalpquant.signals import Candle

START = datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)


def make_candles(count, close_of=lambda i: 100.0 + i):
    return [
        Candle(
            open_time=START + timedelta(minutes=i),
            close_time=START + timedelta(minutes=i + 1),
            open=close_of(i),
            high=close_of(i) + 1.0,
            low=close_of(i) - 1.0,
            close=close_of(i),
            volume=10.0,
        )
        for i in range(count)
    ]


def log_signals(candles, count):
    return [SignalObservation(ts=c.close_time, value=math.log(c.close)) for c in candles[:count]]


def test_computes_decay_by_horizon():
    candles = make_candles(40)
    decay = compute_ic_decay(log_signals(candles, 35), candles, 3)
    assert [h for h, _ in decay] == [1, 2, 3]
    assert math.isfinite(decay[0][1])


def test_rising_price_gives_negative_ic_for_log_signal():
    candles = make_candles(40)
    decay = compute_ic_decay(log_signals(candles, 35), candles, 3)
    assert all(ic < 0.0 for _, ic in decay)


def test_empty_inputs_give_no_decay():
    candles = make_candles(40)
    assert compute_ic_decay([], candles, 3) == []
    assert compute_ic_decay(log_signals(candles, 5), candles[:1], 3) == []
    assert compute_ic_decay(log_signals(candles, 5), candles, 0) == []


def test_signal_outside_candles_drops_every_horizon():
    candles = make_candles(40)
    signals = log_signals(candles, 10) + [
        SignalObservation(ts=START + timedelta(days=1), value=1.0)
    ]
    assert compute_ic_decay(signals, candles, 3) == []
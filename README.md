# scalpquant

A pure-Python library for short-horizon crypto trading research and risk
management. It has no runtime dependencies.

## What it contains

- `scalpquant.signals`: the shared data types. `Side`, `Candle`,
  `StrategyName` (with `parse_strategy_name`, which ignores case and gives
  `None` for unknown names), `PreSignal` (with `rr()` for reward-to-risk) and
  `SymbolSnapshot`, which holds recent candles and the latest indicator
  readings for one symbol. `SymbolSnapshot.push_candle` appends a candle,
  trims the history to `max_candles` and refreshes the 20-candle volume SMA.
- `scalpquant.portfolio`: `pearson_correlation`, `PositionExposure`,
  `gross_exposure`, `net_exposure`, `can_add_position`, `kelly_fraction`,
  `portfolio_kelly_adjustment`, `historical_var`, `historical_cvar` and
  `volatility_target_multiplier`.
- `scalpquant.ic`: `IcTracker`, which records (signal, forward return) pairs,
  ignores non-finite values and reports the overall IC (`ic()`) and the
  information ratio of rolling-window ICs (`ir()`); also `pearson`.
- `scalpquant.significance`: `win_rate_significance` (two-sided binomial test
  against 50%), `permutation_p_value` (cyclic shifts of the returns) and
  `binomial_probability`.
- `scalpquant.decay`: `SignalObservation` and `compute_ic_decay`, the IC of a
  signal against forward candle returns at each horizon.
- `scalpquant.sensitivity`: `ParameterPoint`, `SensitivitySummary` and
  `summarize_parameter_sensitivity` (best score, median score and their ratio).
- `scalpquant.walk_forward`: `WalkForwardSplit` and `walk_forward_splits`.
- `scalpquant.report`: `PerformanceMetrics`, `StrategyHealth`,
  `classify_health`, `StrategyResearchSummary`, `RetirementRule` and
  `compare_variants` / `VariantWinner` for A/B comparisons.
- `scalpquant.export`: `ResearchReport` (built with
  `ResearchReport.from_metrics`), `reports_to_markdown` and `reports_to_json`.
  The JSON output writes non-finite numbers as the strings `"inf"`, `"-inf"`
  and `"NaN"`.
- `scalpquant.kalman`: `KalmanTrend`, a constant-velocity Kalman filter whose
  `trend_score` is the velocity in basis points clamped to [-100, 100], and
  `kalman_trend_score` for a whole price series.
- `scalpquant.hmm`: `HmmRegimeModel`, a Gaussian HMM over `Regime` states with
  `infer` and `most_likely`. It raises `ValueError` when the parameter sizes
  do not match the number of states.
- `scalpquant.regime`: `Regime`, `detect_regime` (from ADX, choppiness,
  Bollinger and Keltner readings in a `SymbolSnapshot`) and
  `select_strategies`.
- `scalpquant.multi_timeframe`: `TimeframeVote`, `WeightedVote`,
  `vote_from_signal`, `aggregate_votes`, `passes_timeframe_confirmation`,
  `freshness_weight` and `confidence_with_freshness`.
- `scalpquant.pairs`: `HedgeRatio`, `PairSignal`, `estimate_hedge_ratio`,
  `spread_zscore` and `pair_signal`.
- `scalpquant.strategies`: the `Strategy` base class and the rule-based
  strategies `MeanReversion`, `Momentum`, `VwapScalp`, `EmaRibbon` and
  `Squeeze`. Each `evaluate(state, candle)` returns a `PreSignal` or `None`.
- `scalpquant.quant`: `QuantConfig`, `QuantSizingResult` and `QuantEngine`,
  which combines Kelly sizing, volatility targeting, a CVaR cap, an IC-based
  confidence adjustment, a Kalman trend gate and a correlation penalty into
  one size multiplier. The engine guards its state with a lock, so one engine
  can be shared between threads.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Portfolio math:

```python
from scalpquant.portfolio import kelly_fraction, historical_cvar, volatility_target_multiplier

kelly_fraction(0.55, 2.0, 1.0, 0.2)              # 0.2 (capped)
volatility_target_multiplier(0.10, 0.20, 2.0)    # 0.5
historical_cvar([-0.05, -0.02, 0.01, 0.03, 0.04], 0.8)
```

Tracking a signal's information coefficient:

```python
from scalpquant.ic import IcTracker

tracker = IcTracker(4)
for i in range(1, 13):
    tracker.record(float(i), i * 0.01)
len(tracker)   # 12
tracker.ic()   # close to 1.0
tracker.ir()
```

Evaluating a strategy on a snapshot:

```python
from datetime import datetime, timedelta, timezone

from scalpquant.signals import Candle, SymbolSnapshot
from scalpquant.strategies import VwapScalp

start = datetime(2024, 1, 1, tzinfo=timezone.utc)
candle = Candle(start, start + timedelta(minutes=5), 100.0, 100.5, 99.5, 100.0, 10.0)
state = SymbolSnapshot("BTCUSDT", last_vwap=100.0, last_atr=1.0)
state.push_candle(candle)

signal = VwapScalp().evaluate(state, candle)
signal.side, signal.stop_loss, signal.take_profit, signal.rr()
```

Quant-adjusted position sizing:

```python
from scalpquant.quant import QuantConfig, QuantEngine
from scalpquant.signals import Side

engine = QuantEngine(QuantConfig())
engine.update_kalman("BTCUSDT", 100.0)
engine.record_return("BTCUSDT", 0.001)
engine.record_trade(12.5)

result = engine.compute_sizing(
    "BTCUSDT", "momentum", Side.LONG, 70,
    entry=100.0, stop_loss=99.0, equity=10_000.0, base_risk_pct=0.01,
)
result.size_multiplier, result.var_rejected, result.reason
```

Walk-forward splits:

```python
from scalpquant.walk_forward import walk_forward_splits

splits = walk_forward_splits(100, 50, 10, 10)
len(splits)   # 5
```

## What it does not do

- It does not compute indicators. The EMA, RSI, Bollinger, ATR, ADX, VWAP,
  choppiness, Keltner, ROC and order-flow readings in a `SymbolSnapshot` are
  supplied by the caller.
- It does not run backtests. `PerformanceMetrics` is a plain record filled in
  by the caller, and walk-forward support stops at producing the splits.
- It does not connect to exchanges or data feeds, place orders or store
  anything on disk.
- It is a library only; there is no command-line program.
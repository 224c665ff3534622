"""Core trading data types: sides, candles, strategy names and pre-signals."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

VOLUME_SMA_WINDOW = 20
DEFAULT_MAX_CANDLES = 512


class Side(Enum):
    """Direction of a trade."""

    LONG = "long"
    SHORT = "short"


@dataclass(frozen=True)
class Candle:
    """A closed OHLCV bar."""

    open_time: datetime
    close_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


class StrategyName(Enum):
    """Identifiers of the built-in strategies."""

    MEAN_REVERSION = "mean_reversion"
    MOMENTUM = "momentum"
    VWAP_SCALP = "vwap_scalp"
    EMA_RIBBON = "ema_ribbon"
    SQUEEZE = "squeeze"

    def __str__(self) -> str:
        return self.value


def parse_strategy_name(text: str) -> StrategyName | None:
    """Parse a strategy name case-insensitively; unknown names give None."""
    try:
        return StrategyName(text.lower())
    except ValueError:
        return None


@dataclass
class PreSignal:
    """A candidate trade produced by a strategy before any gating."""

    symbol: str
    strategy: StrategyName
    side: Side
    entry: float
    stop_loss: float
    take_profit: float
    ta_confidence: int
    reason: str

    def rr(self) -> float:
        """Reward-to-risk ratio; 0.0 when the stop sits on the entry."""
        risk = abs(self.entry - self.stop_loss)
        if risk <= 0.0:
            return 0.0
        return abs(self.take_profit - self.entry) / risk


@dataclass
class SymbolSnapshot:
    """Latest indicator readings and recent candles for one symbol.

    Indicator values are ``None`` until they have warmed up.
    """

    symbol: str
    candles: deque[Candle] = field(default_factory=deque)
    max_candles: int = DEFAULT_MAX_CANDLES

    ema_8: float | None = None
    ema_21: float | None = None
    ema_50: float | None = None
    ema_200: float | None = None

    bb_upper: float | None = None
    bb_mid: float | None = None
    bb_lower: float | None = None
    bb_width: float | None = None

    last_adx: float | None = None
    last_di_plus: float | None = None
    last_di_minus: float | None = None
    last_rsi: float | None = None
    last_atr: float | None = None
    last_vwap: float | None = None
    last_vwap_slope: float | None = None
    last_choppiness: float | None = None
    last_keltner_upper: float | None = None
    last_keltner_lower: float | None = None
    last_roc: float | None = None
    last_ofi: float | None = None

    volume_sma: float = 0.0
    volume_sma_count: int = 0

    @property
    def has_bollinger(self) -> bool:
        """True when every Bollinger band reading is available."""
        return None not in (self.bb_upper, self.bb_mid, self.bb_lower, self.bb_width)

    @property
    def last_candle(self) -> Candle | None:
        return self.candles[-1] if self.candles else None

    def push_candle(self, candle: Candle) -> None:
        """Append a closed candle, trim history and refresh the volume SMA."""
        self.candles.append(candle)
        while len(self.candles) > self.max_candles:
            self.candles.popleft()
        recent = list(self.candles)[-VOLUME_SMA_WINDOW:]
        self.volume_sma = sum(c.volume for c in recent) / len(recent)
        self.volume_sma_count = len(recent)
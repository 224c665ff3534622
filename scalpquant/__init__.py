"""Portfolio risk math, signal research, regime tools, scalping strategies and quant sizing for crypto trading."""

__version__ = "0.1.0"
"""Technical indicators (pure math, no I/O)."""

from techsignal.core.indicators.indicators import (
    ema,
    ema_series,
    sma,
    rsi,
    macd,
    MacdSignalMode,
    MACD_SIGNAL_FACTOR,
)

__all__ = [
    "ema",
    "ema_series",
    "sma",
    "rsi",
    "macd",
    "MacdSignalMode",
    "MACD_SIGNAL_FACTOR",
]

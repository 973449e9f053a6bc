"""Data models."""

from techsignal.core.models.price import PricePoint, Timeframe
from techsignal.core.models.signal import (
    MacdResult,
    Signal,
    Strength,
    TechnicalSignal,
    Vote,
)
from techsignal.core.models.log import LogFilter, LogRecord

__all__ = [
    "PricePoint",
    "Timeframe",
    "MacdResult",
    "Signal",
    "Strength",
    "TechnicalSignal",
    "Vote",
    "LogFilter",
    "LogRecord",
]

"""Technical indicators for signal generation.

All functions take a chronologically ascending price sequence and return the
indicator value for the latest bar, or None when the series is too short
for the requested period. Nothing here raises on short input.
"""

from typing import Literal, Sequence

import numpy as np

from techsignal.core.models import MacdResult

MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9

# Approximate signal line: signal = macd * factor
MACD_SIGNAL_FACTOR = 0.8

MacdSignalMode = Literal["approximate", "ema"]


def _to_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray([float(v) for v in values], dtype=np.float64)


def ema_series(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate the full EMA series.

    The first ``period - 1`` entries are NaN, entry ``period - 1`` is the SMA
    seed and every later entry applies ``k = 2 / (period + 1)``.

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        Array of EMA values (same length as input)
    """
    arr = _to_array(values)
    result = np.full_like(arr, np.nan)
    if len(arr) < period:
        return result

    k = 2.0 / (period + 1)
    result[period - 1] = np.mean(arr[:period])

    for i in range(period, len(arr)):
        # Same as price * k + prev * (1 - k), exact on flat input
        result[i] = result[i - 1] + k * (arr[i] - result[i - 1])

    return result


def ema(values: Sequence[float], period: int) -> float | None:
    """
    Calculate the Exponential Moving Average of the latest bar.

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        EMA value, or None if fewer than ``period`` samples
    """
    if len(values) < period:
        return None
    return float(ema_series(values, period)[-1])


def sma(values: Sequence[float], period: int) -> float | None:
    """
    Calculate the Simple Moving Average over the last ``period`` samples.

    Args:
        values: Sequence of price values
        period: SMA period

    Returns:
        SMA value, or None if fewer than ``period`` samples
    """
    if len(values) < period:
        return None
    arr = _to_array(values[-period:])
    return float(np.mean(arr))


def rsi(values: Sequence[float], period: int = 14) -> float | None:
    """
    Calculate the Relative Strength Index with Wilder smoothing.

    Average gain and loss are seeded with the plain mean of the first
    ``period`` deltas, then smoothed with
    ``avg = (avg * (period - 1) + current) / period``.

    Args:
        values: Sequence of price values
        period: RSI period

    Returns:
        RSI in [0, 100], 100 when the average loss is zero, or None if fewer
        than ``period + 1`` samples
    """
    if len(values) < period + 1:
        return None

    deltas = np.diff(_to_array(values))
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100.0 - 100.0 / (1.0 + rs))


def macd(
    values: Sequence[float],
    mode: MacdSignalMode = "approximate",
) -> MacdResult | None:
    """
    Calculate MACD (12/26) for the latest bar.

    In ``"approximate"`` mode the signal line is ``macd * 0.8`` rather than a
    9-period EMA of the MACD line. Composite signals depend on this exact
    output, so it stays the default. ``"ema"`` mode computes the canonical
    signal line and needs ``26 + 9 - 1`` samples.

    Args:
        values: Sequence of price values
        mode: Signal line calculation

    Returns:
        MacdResult, or None if there is not enough data
    """
    if len(values) < MACD_SLOW_PERIOD:
        return None

    if mode == "approximate":
        fast = ema(values, MACD_FAST_PERIOD)
        slow = ema(values, MACD_SLOW_PERIOD)
        if fast is None or slow is None:
            return None
        value = fast - slow
        signal = value * MACD_SIGNAL_FACTOR
    elif mode == "ema":
        if len(values) < MACD_SLOW_PERIOD + MACD_SIGNAL_PERIOD - 1:
            return None
        line = ema_series(values, MACD_FAST_PERIOD) - ema_series(values, MACD_SLOW_PERIOD)
        line = line[MACD_SLOW_PERIOD - 1:]
        value = float(line[-1])
        signal = float(ema_series(line, MACD_SIGNAL_PERIOD)[-1])
    else:
        raise ValueError(f"Unknown MACD signal mode: {mode}")

    return MacdResult(value=value, signal=signal, histogram=value - signal)

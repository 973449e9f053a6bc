"""Composite signal generation from MA, RSI and MACD.

This module is pure business logic with no I/O dependencies. Each indicator
casts a Vote; the votes are reduced by majority with the moving-average vote
as the fallback when neither side reaches two.
"""

from typing import Iterable, Sequence

from techsignal.core.indicators import MacdSignalMode, macd, rsi, sma
from techsignal.core.models import (
    MacdResult,
    Signal,
    Strength,
    TechnicalSignal,
    Timeframe,
    Vote,
)

MA_FAST_PERIOD = 50
MA_SLOW_PERIOD = 200
RSI_PERIOD = 14
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0


def ma_vote(ma50: float, ma200: float) -> Vote:
    """Trend vote. Never abstains."""
    return Vote.BUY if ma50 > ma200 else Vote.SELL


def rsi_vote(value: float | None) -> Vote:
    """Oversold buys, overbought sells, anything between abstains."""
    if value is None:
        return Vote.ABSTAIN
    if value < RSI_OVERSOLD:
        return Vote.BUY
    if value > RSI_OVERBOUGHT:
        return Vote.SELL
    return Vote.ABSTAIN


def macd_vote(result: MacdResult | None) -> Vote:
    """Histogram sign vote; a flat histogram abstains."""
    if result is None:
        return Vote.ABSTAIN
    if result.histogram > 0:
        return Vote.BUY
    if result.histogram < 0:
        return Vote.SELL
    return Vote.ABSTAIN


def tally_votes(baseline: Vote, others: Iterable[Vote]) -> tuple[Signal, Strength | None]:
    """
    Reduce votes to a signal and strength.

    Args:
        baseline: Vote that decides the signal when no side has a majority
            (must not abstain)
        others: Remaining votes

    Returns:
        Tuple of (signal, strength). Strength is STRONG when every vote agrees,
        WEAK when exactly two agree and None when the baseline decided alone.
    """
    if baseline is Vote.ABSTAIN:
        raise ValueError("Baseline vote cannot abstain")

    votes = [baseline, *others]
    buys = sum(1 for v in votes if v is Vote.BUY)
    sells = sum(1 for v in votes if v is Vote.SELL)

    if buys >= 2:
        return Signal.BUY, Strength.STRONG if buys == len(votes) else Strength.WEAK
    if sells >= 2:
        return Signal.SELL, Strength.STRONG if sells == len(votes) else Strength.WEAK

    return baseline.to_signal(), None


def compose_signal(
    prices: Sequence[float],
    timeframe: Timeframe,
    macd_signal_mode: MacdSignalMode = "approximate",
) -> TechnicalSignal:
    """
    Compute indicators on an already resampled series and combine them.

    Returns the all-None result when either moving average is unavailable.
    """
    ma50 = sma(prices, MA_FAST_PERIOD)
    ma200 = sma(prices, MA_SLOW_PERIOD)
    if ma50 is None or ma200 is None:
        return TechnicalSignal.empty(timeframe)

    rsi_value = rsi(prices, RSI_PERIOD)
    macd_value = macd(prices, macd_signal_mode)

    signal, strength = tally_votes(
        ma_vote(ma50, ma200),
        [rsi_vote(rsi_value), macd_vote(macd_value)],
    )

    return TechnicalSignal(
        signal=signal,
        ma50=ma50,
        ma200=ma200,
        rsi=rsi_value,
        macd=macd_value,
        timeframe=timeframe,
        strength=strength,
    )


def evaluate_series(
    prices: Sequence[float],
    timeframe: Timeframe = Timeframe.H4,
    macd_signal_mode: MacdSignalMode = "approximate",
) -> TechnicalSignal:
    """Resample an hourly series to ``timeframe`` and compose the signal."""
    return compose_signal(timeframe.resample(prices), timeframe, macd_signal_mode)

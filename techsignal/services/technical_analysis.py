"""Technical analysis service.

Fetches hourly price history for an asset and turns it into a
TechnicalSignal. Every failure degrades to the all-None result.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Iterable

from techsignal.config import Settings, get_settings
from techsignal.core.models import TechnicalSignal, Timeframe
from techsignal.core.protocol import PriceProvider
from techsignal.core.signal_generator import compose_signal

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


class TechnicalAnalyzer:
    """Computes MA50/MA200 + RSI + MACD signals for an asset."""

    def __init__(self, provider: PriceProvider, settings: Settings | None = None):
        self.provider = provider
        self.settings = settings or get_settings()

    def lookback_days(self, timeframe: Timeframe) -> int:
        """Days of hourly history needed for ``min_samples`` bars at ``timeframe``."""
        hours = self.settings.min_samples * timeframe.step * self.settings.lookback_safety_factor
        return math.ceil(round(hours / HOURS_PER_DAY, 6))

    async def compute_signal(
        self,
        asset_id: str,
        timeframe: Timeframe | None = None,
    ) -> TechnicalSignal:
        """
        Compute the composite signal for one asset and timeframe.

        Never raises (cancellation excepted).

        Args:
            asset_id: Price provider asset id (e.g., "bitcoin")
            timeframe: Bar size (defaults to settings.default_timeframe)

        Returns:
            TechnicalSignal, all-None when data is missing or insufficient
        """
        timeframe = Timeframe(timeframe or self.settings.default_timeframe)
        result = TechnicalSignal.empty(timeframe)

        if not asset_id:
            logger.info("No asset id for technical analysis")
            return result

        try:
            min_samples = self.settings.min_samples
            history = await self.provider.get_historical_prices(
                asset_id, self.lookback_days(timeframe)
            )
            prices = [point.price for point in history]

            if len(prices) < min_samples:
                logger.warning(
                    f"Insufficient data for {asset_id}: {len(prices)} points, need {min_samples}+"
                )
                return result

            filtered = timeframe.resample(prices)
            if len(filtered) < min_samples:
                logger.warning(
                    f"Insufficient filtered data for {asset_id}: {len(filtered)} points "
                    f"after {timeframe.value} filtering"
                )
                return result

            return compose_signal(filtered, timeframe, self.settings.macd_signal_mode)

        except Exception as e:
            logger.error(f"Error calculating technical signals for {asset_id}: {e}")
            return result

    async def compute_signals(
        self,
        asset_id: str,
        timeframes: Iterable[Timeframe] = (Timeframe.H1, Timeframe.H4),
    ) -> dict[Timeframe, TechnicalSignal]:
        """Compute signals for several timeframes concurrently."""
        timeframes = list(timeframes)
        results = await asyncio.gather(
            *(self.compute_signal(asset_id, tf) for tf in timeframes)
        )
        return dict(zip(timeframes, results))

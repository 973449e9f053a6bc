"""CoinGecko REST API client for fetching hourly price history."""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx
import orjson

from techsignal.clients.price_cache import PriceHistoryCache
from techsignal.config import Settings
from techsignal.core.models import PricePoint

logger = logging.getLogger(__name__)


class CoinGeckoRestClient:
    """CoinGecko market chart client.

    Rate-limit responses (HTTP 429) are retried with a linear backoff. Every
    other failure returns an empty list straight away.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        base_url: str = BASE_URL,
        api_key: str = "",
        vs_currency: str = "usd",
        timeout: float = 30.0,
        max_retries: int = 2,
        base_delay: float = 2.0,
        cache: PriceHistoryCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.vs_currency = vs_currency
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.base_delay = base_delay
        self.cache = cache if cache is not None else PriceHistoryCache()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CoinGeckoRestClient":
        """Build a client from application settings."""
        return cls(
            base_url=settings.coingecko_base_url,
            api_key=settings.coingecko_api_key,
            vs_currency=settings.vs_currency,
            timeout=settings.request_timeout,
            max_retries=settings.rate_limit_retries,
            base_delay=settings.rate_limit_base_delay,
            cache=PriceHistoryCache(
                ttl=settings.price_cache_ttl,
                max_entries=settings.price_cache_max_entries,
            ),
            **kwargs,
        )

    async def __aenter__(self) -> "CoinGeckoRestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["x-cg-demo-api-key"] = self.api_key
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_historical_prices(self, asset_id: str, days: int) -> list[PricePoint]:
        """
        Fetch hourly prices for the last ``days`` days.

        Args:
            asset_id: CoinGecko coin id (e.g., "bitcoin")
            days: Lookback window in days

        Returns:
            List of PricePoint, oldest first. Empty if the history is
            unavailable (rate limit exhausted, HTTP error, bad payload).
        """
        cached = self.cache.get(asset_id, days)
        if cached is not None:
            return cached

        prices = await self._fetch_market_chart(asset_id, days)
        self.cache.set(asset_id, days, prices)
        return prices

    async def _fetch_market_chart(self, asset_id: str, days: int) -> list[PricePoint]:
        client = await self._get_client()
        params = {
            "vs_currency": self.vs_currency,
            "days": days,
            "interval": "hourly",
        }

        for attempt in range(self.max_retries + 1):
            try:
                response = await client.get(f"/coins/{asset_id}/market_chart", params=params)
            except httpx.HTTPError as e:
                logger.warning(f"Error fetching historical prices for {asset_id}: {e}")
                return []

            if response.status_code == 429:
                if attempt < self.max_retries:
                    delay = self.base_delay * (attempt + 1)
                    logger.debug(
                        f"CoinGecko rate limit for {asset_id}, retrying in {delay:.1f}s "
                        f"({attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.warning(
                    f"CoinGecko rate limit exceeded for {asset_id} after {attempt + 1} attempts"
                )
                return []

            if response.is_error:
                logger.warning(
                    f"Error fetching historical prices for {asset_id}: HTTP {response.status_code}"
                )
                return []

            return self._parse_prices(asset_id, response.content)

        return []

    @staticmethod
    def _parse_point(point: Any) -> PricePoint:
        """Validate one [ms_timestamp, price] pair."""
        if not isinstance(point, list) or len(point) != 2:
            raise ValueError(f"Invalid price point: {point!r}")

        ts_ms, price = point
        for value in (ts_ms, price):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"Non-numeric price point: {point!r}")
            if not math.isfinite(value):
                raise ValueError(f"Non-finite price point: {point!r}")

        return PricePoint(
            timestamp=datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc),
            price=price,
        )

    @classmethod
    def _parse_prices(cls, asset_id: str, content: bytes) -> list[PricePoint]:
        """Parse a market_chart payload: {"prices": [[ms_timestamp, price], ...]}.

        Any invalid point rejects the whole payload.
        """
        try:
            data = orjson.loads(content)
            raw = data.get("prices") if isinstance(data, dict) else None
            if not isinstance(raw, list):
                logger.warning(f"Malformed market chart payload for {asset_id}")
                return []

            return [cls._parse_point(point) for point in raw]
        except (ValueError, TypeError, OverflowError, OSError) as e:
            logger.warning(f"Malformed market chart payload for {asset_id}: {e}")
            return []

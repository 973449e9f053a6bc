"""Protocols for the data sources the engine consumes.

This module provides:
- PriceProvider: hourly price history for an asset
- LogSource: block-range limited event log store
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from techsignal.core.models import LogFilter, LogRecord, PricePoint


@runtime_checkable
class PriceProvider(Protocol):
    """Source of hourly price history."""

    async def get_historical_prices(self, asset_id: str, days: int) -> list[PricePoint]:
        """Return hourly samples for the last ``days`` days, oldest first.

        An empty list means the history is unavailable.
        """
        ...


@runtime_checkable
class LogSource(Protocol):
    """Event log store that limits the block range of a single query."""

    async def get_block_number(self) -> int:
        """Return the latest block number."""
        ...

    async def get_logs(
        self, log_filter: LogFilter, from_block: int, to_block: int
    ) -> list[LogRecord]:
        """Return logs matching ``log_filter`` in ``[from_block, to_block]``.

        May raise on upstream failure.
        """
        ...

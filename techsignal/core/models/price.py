"""Price history models."""

from datetime import datetime
from enum import Enum
from typing import Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Timeframe(str, Enum):
    """Resampling cadence applied to the native hourly series."""

    H1 = "1h"
    H4 = "4h"

    @property
    def step(self) -> int:
        """Number of hourly samples per bar."""
        return 4 if self is Timeframe.H4 else 1

    def resample(self, values: Sequence[T]) -> list[T]:
        """Keep every ``step``-th sample, starting with the oldest.

        The result has ``ceil(len(values) / step)`` entries in the original
        chronological order.
        """
        return list(values[:: self.step])


class PricePoint(BaseModel):
    """One hourly price sample."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    timestamp: datetime
    price: float

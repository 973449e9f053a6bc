"""Signal result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from techsignal.core.models.price import Timeframe


class Signal(str, Enum):
    """Directional trading signal."""

    BUY = "BUY"
    SELL = "SELL"


class Strength(str, Enum):
    """Confidence grade of a composite signal."""

    STRONG = "STRONG"  # All three indicators agree
    WEAK = "WEAK"  # Exactly two agree


class Vote(str, Enum):
    """Per-indicator directional opinion."""

    BUY = "BUY"
    SELL = "SELL"
    ABSTAIN = "ABSTAIN"

    def to_signal(self) -> Signal | None:
        """Map the vote onto a signal (abstentions map to None)."""
        if self is Vote.ABSTAIN:
            return None
        return Signal(self.value)


class MacdResult(BaseModel):
    """MACD line, signal line and histogram for the latest bar."""

    model_config = ConfigDict(frozen=True)

    value: float
    signal: float
    histogram: float


class TechnicalSignal(BaseModel):
    """Composite indicator snapshot for one asset and timeframe.

    Numeric fields are either all populated (``ma50``/``ma200`` always, RSI and
    MACD when their own minimum length is met) or all None when the moving
    average gate is not passed.
    """

    model_config = ConfigDict(frozen=True)

    signal: Signal | None = None
    ma50: float | None = None
    ma200: float | None = None
    rsi: float | None = None
    macd: MacdResult | None = None
    timeframe: Timeframe
    strength: Strength | None = None

    @classmethod
    def empty(cls, timeframe: Timeframe) -> "TechnicalSignal":
        """Build the all-None result used for every degraded path."""
        return cls(timeframe=timeframe)

    @property
    def is_empty(self) -> bool:
        """True when no indicator could be computed."""
        return self.ma50 is None and self.ma200 is None

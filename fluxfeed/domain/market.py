"""Price feature models."""

from .enums import PriceSource
from .types import WireModel


class PriceFeatures(WireModel):
    """Features derived from one closing-price series. Recomputed per request."""

    pair: str
    interval: str
    last: float = 0.0
    pct_change: float = 0.0
    momentum: float = 0.0
    volatility: float = 0.0
    source: PriceSource

    @property
    def is_available(self) -> bool:
        return self.source != PriceSource.UNAVAILABLE

    @classmethod
    def unavailable(cls, pair: str, interval: str) -> "PriceFeatures":
        """Degraded value: every numeric field zero."""
        return cls(pair=pair, interval=interval, source=PriceSource.UNAVAILABLE)

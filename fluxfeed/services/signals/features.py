"""Price features from a closing-price series.

Pure Python, no pandas. Closes are ordered oldest -> newest.
"""

import math
from dataclasses import dataclass

SMA_WINDOW = 20


@dataclass(frozen=True)
class ClosingFeatures:
    last: float
    pct_change: float
    momentum: float
    volatility: float


def simple_returns(closes: list[float]) -> list[float]:
    """Period-over-period returns. A zero previous close yields a zero return."""
    return [(cur - prev) / prev if prev else 0.0 for prev, cur in zip(closes, closes[1:])]


def compute_features(closes: list[float], sma_window: int = SMA_WINDOW) -> ClosingFeatures:
    """last / pct_change / momentum / volatility.

    - pct_change: change from first to last close, in percent.
    - momentum: percent deviation of the last close from the SMA of at most
      the last sma_window closes.
    - volatility: population standard deviation of simple returns, in percent.

    Empty and single-element series return zeros where a value is undefined.
    """
    last = closes[-1] if closes else 0.0
    first = closes[0] if closes else 0.0
    pct_change = (last - first) / first * 100 if first else 0.0

    window = closes[-sma_window:]
    sma = sum(window) / max(1, len(window))
    momentum = (last - sma) / sma * 100 if sma else 0.0

    rets = simple_returns(closes)
    denom = max(1, len(rets))
    mean = sum(rets) / denom
    variance = sum((r - mean) ** 2 for r in rets) / denom
    volatility = math.sqrt(variance) * 100

    return ClosingFeatures(last=last, pct_change=pct_change, momentum=momentum, volatility=volatility)

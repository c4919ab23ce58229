"""fluxfeed domain models — the data contract between fetchers, classifier and aggregator.

Usage:
    from fluxfeed.domain import NewsItem, PriceFeatures, SignalStatus
    from fluxfeed.domain.config import AppConfig
"""

# --- Types ---
from .types import Confidence, SentimentScore, WireModel

# --- Enums ---
from .enums import (
    FallbackKind,
    PriceSource,
    ProviderSentiment,
    SentimentLabel,
    SignalStatus,
    Timeframe,
    TradeAction,
)

# --- Result ---
from .result import Err, Ok, Result

# --- Errors ---
from .errors import FluxfeedError, ProviderError

# --- News ---
from .news import (
    AggregateSentiment,
    NewsItem,
    NewsResponse,
    PartialNewsItem,
    SentimentResult,
    aggregate_sentiment,
)

# --- Market ---
from .market import PriceFeatures

# --- Signal ---
from .signal import AnalyzeRequest, AnalyzeResponse, SignalFeatures, SignalResponse

# --- Health ---
from .health import DependencyHealth, HealthStatus

__all__ = [
    # Types
    "SentimentScore",
    "Confidence",
    "WireModel",
    # Enums
    "SentimentLabel",
    "ProviderSentiment",
    "Timeframe",
    "SignalStatus",
    "TradeAction",
    "PriceSource",
    "FallbackKind",
    # Result
    "Ok",
    "Err",
    "Result",
    # Errors
    "FluxfeedError",
    "ProviderError",
    # News
    "NewsItem",
    "PartialNewsItem",
    "SentimentResult",
    "AggregateSentiment",
    "NewsResponse",
    "aggregate_sentiment",
    # Market
    "PriceFeatures",
    # Signal
    "SignalFeatures",
    "SignalResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    # Health
    "DependencyHealth",
    "HealthStatus",
]

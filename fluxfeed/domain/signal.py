"""Signal request/response models."""

from pydantic import Field, field_validator

from .enums import SignalStatus, Timeframe
from .market import PriceFeatures
from .news import AggregateSentiment, PartialNewsItem
from .types import Confidence, WireModel


class SignalFeatures(WireModel):
    """Inputs of a decision, echoed back to the caller."""

    news: AggregateSentiment
    price: PriceFeatures


class SignalResponse(WireModel):
    """GET /signal result."""

    status: SignalStatus
    confidence: Confidence
    reasons: list[str] = []
    features: SignalFeatures


class AnalyzeRequest(WireModel):
    """POST /analyze body."""

    ticker: str = "BTC"
    tf: Timeframe = Timeframe.H1
    since_minutes: int = Field(default=60, gt=0)
    news: list[PartialNewsItem] | None = None

    @field_validator("since_minutes", mode="before")
    @classmethod
    def _default_since(cls, v):
        """0, null and empty string fall back to the 60-minute default."""
        return v or 60

    @field_validator("ticker")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.strip().upper() or "BTC"


class AnalyzeResponse(WireModel):
    """POST /analyze result: trade plan plus rationale."""

    status: SignalStatus
    confidence: Confidence
    entry_price: float
    stop_loss: float
    take_profit: float
    chart_reasons: list[str] = []
    news_reasons: list[str] = []
    sentiment_summary: str = ""
    features: SignalFeatures

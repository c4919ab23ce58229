"""News and sentiment models."""

from datetime import datetime

from pydantic import Field

from .enums import SentimentLabel
from .types import SentimentScore, WireModel


class NewsItem(WireModel):
    """Normalised news article.

    sentiment/score are filled in by the classifier when the provider did
    not supply them. Items are never mutated; labelled copies are made with
    model_copy().
    """

    id: str
    title: str
    source: str
    url: str = ""
    published_at: datetime
    tickers: list[str] = []
    sentiment: SentimentLabel | None = None
    score: SentimentScore | None = None

    @property
    def is_labelled(self) -> bool:
        return self.sentiment is not None


class PartialNewsItem(WireModel):
    """Caller-supplied headline for POST /analyze."""

    title: str
    source: str = ""
    sentiment: SentimentLabel | None = None
    score: SentimentScore | None = None
    published_at: datetime | None = None


class SentimentResult(WireModel):
    """One classifier output."""

    sentiment: SentimentLabel
    score: SentimentScore


class AggregateSentiment(WireModel):
    """Mean score plus bullish/bearish head counts over a set of items."""

    avg: float = 0.0
    bullish: int = 0
    bearish: int = 0

    @property
    def skew(self) -> int:
        return self.bullish - self.bearish

    def summary(self) -> str:
        return f"News skew: bullish {self.bullish} vs bearish {self.bearish}, avg {self.avg:.2f}"


class NewsResponse(WireModel):
    items: list[NewsItem] = Field(default_factory=list)


def aggregate_sentiment(items: list[NewsItem]) -> AggregateSentiment:
    """Aggregate news sentiment.

    Unlabelled items count as bullish with score 0.
    """
    if not items:
        return AggregateSentiment()

    total = 0.0
    bullish = bearish = 0
    for item in items:
        total += item.score or 0.0
        if (item.sentiment or SentimentLabel.BULLISH) == SentimentLabel.BULLISH:
            bullish += 1
        else:
            bearish += 1
    return AggregateSentiment(avg=total / len(items), bullish=bullish, bearish=bearish)

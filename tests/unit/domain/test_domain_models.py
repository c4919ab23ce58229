"""Domain model unit tests."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from fluxfeed.domain import (
    AggregateSentiment,
    AnalyzeRequest,
    NewsItem,
    PriceFeatures,
    PriceSource,
    SentimentLabel,
    SignalStatus,
    TradeAction,
    aggregate_sentiment,
)


def _item(sentiment=None, score=None, **overrides) -> NewsItem:
    defaults = {
        "id": "1",
        "title": "headline",
        "source": "CoinDesk",
        "published_at": datetime(2026, 10, 19, tzinfo=UTC),
        "sentiment": sentiment,
        "score": score,
    }
    defaults.update(overrides)
    return NewsItem(**defaults)


class TestAggregateSentiment:
    def test_empty(self):
        agg = aggregate_sentiment([])
        assert (agg.avg, agg.bullish, agg.bearish) == (0.0, 0, 0)

    def test_counts_and_mean(self):
        agg = aggregate_sentiment(
            [
                _item(SentimentLabel.BULLISH, 0.6),
                _item(SentimentLabel.BULLISH, 0.2),
                _item(SentimentLabel.BEARISH, -0.5),
            ]
        )
        assert agg.bullish == 2
        assert agg.bearish == 1
        assert agg.avg == pytest.approx(0.1)

    def test_unlabelled_counts_bullish_with_zero_score(self):
        agg = aggregate_sentiment([_item(), _item(SentimentLabel.BEARISH, -0.4)])
        assert agg.bullish == 1
        assert agg.bearish == 1
        assert agg.avg == pytest.approx(-0.2)

    def test_counts_sum_to_length(self):
        items = [_item(SentimentLabel.BEARISH, -0.1)] * 4 + [_item()] * 3
        agg = aggregate_sentiment(items)
        assert agg.bullish + agg.bearish == len(items)

    def test_summary(self):
        agg = AggregateSentiment(avg=0.123, bullish=3, bearish=1)
        assert agg.summary() == "News skew: bullish 3 vs bearish 1, avg 0.12"
        assert agg.skew == 2


class TestWireFormat:
    def test_camel_case_dump(self):
        features = PriceFeatures(pair="BTCUSDT", interval="1h", pct_change=1.5, source=PriceSource.BINANCE)
        dumped = features.model_dump(by_alias=True)
        assert dumped["pctChange"] == 1.5
        assert "pct_change" not in dumped

    def test_accepts_camel_and_snake(self):
        a = AnalyzeRequest.model_validate({"sinceMinutes": 30})
        b = AnalyzeRequest(since_minutes=30)
        assert a.since_minutes == b.since_minutes == 30

    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            _item(SentimentLabel.BULLISH, 1.5)


class TestAnalyzeRequest:
    def test_defaults(self):
        req = AnalyzeRequest()
        assert req.ticker == "BTC"
        assert req.tf == "1h"
        assert req.since_minutes == 60
        assert req.news is None

    def test_ticker_upper(self):
        assert AnalyzeRequest(ticker=" eth ").ticker == "ETH"

    def test_negative_since_rejected(self):
        with pytest.raises(ValidationError):
            AnalyzeRequest(since_minutes=-5)

    @pytest.mark.parametrize("raw", [0, None, ""])
    def test_falsy_since_uses_default(self, raw):
        assert AnalyzeRequest.model_validate({"sinceMinutes": raw}).since_minutes == 60

    def test_invalid_timeframe(self):
        with pytest.raises(ValidationError):
            AnalyzeRequest(tf="2h")


class TestPriceFeatures:
    def test_unavailable_is_all_zero(self):
        features = PriceFeatures.unavailable("BTCUSDT", "1h")
        assert features.source == PriceSource.UNAVAILABLE
        assert features.is_available is False
        assert (features.last, features.pct_change, features.momentum, features.volatility) == (0, 0, 0, 0)


class TestTradeAction:
    @pytest.mark.parametrize(
        "action,status",
        [
            (TradeAction.LONG, SignalStatus.BUY),
            (TradeAction.SHORT, SignalStatus.SELL),
            (TradeAction.NEUTRAL, SignalStatus.NEUTRAL),
        ],
    )
    def test_to_status(self, action, status):
        assert action.to_status() == status

"""CryptoNews client unit tests — httpx MockTransport (no real API calls)."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest

from fluxfeed.domain.config import NewsConfig
from fluxfeed.domain.enums import ProviderSentiment, SentimentLabel
from fluxfeed.domain.errors import ProviderError
from fluxfeed.infra.cryptonews import CryptoNewsClient, filter_since, normalize_article, parse_published_at

BASE_URL = "https://cryptonews.test/api/v1"


def _iso(minutes_ago: int) -> str:
    return (datetime.now(UTC) - timedelta(minutes=minutes_ago)).isoformat()


def _article(title: str, minutes_ago: int = 5, **overrides) -> dict:
    article = {
        "news_url": f"https://news.test/{title.replace(' ', '-')}",
        "title": title,
        "source_name": "CoinDesk",
        "date": _iso(minutes_ago),
        "tickers": ["BTC"],
    }
    article.update(overrides)
    return article


def _client(handler, api_key: str = "token") -> tuple[CryptoNewsClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(recording), base_url=BASE_URL)
    return CryptoNewsClient(NewsConfig(base_url=BASE_URL), api_key=api_key, client=http), requests


# ─── Normalisation ──────────────────────────────────────────


class TestParsePublishedAt:
    def test_iso(self):
        parsed = parse_published_at("2026-10-19T10:00:00Z")
        assert parsed == datetime(2026, 10, 19, 10, tzinfo=UTC)

    def test_rfc2822(self):
        parsed = parse_published_at("Mon, 19 Oct 2026 10:00:00 -0400")
        assert parsed == datetime(2026, 10, 19, 14, tzinfo=UTC)

    def test_naive_is_utc(self):
        assert parse_published_at("2026-10-19T10:00:00").tzinfo is not None

    def test_garbage_uses_default(self):
        default = datetime(2020, 1, 1, tzinfo=UTC)
        assert parse_published_at("yesterday-ish", default=default) == default
        assert parse_published_at(None, default=default) == default


class TestNormalizeArticle:
    def test_fields(self):
        item = normalize_article(_article("Bitcoin rally"))
        assert item.id == "https://news.test/Bitcoin-rally"
        assert item.url == item.id
        assert item.source == "CoinDesk"
        assert item.tickers == ["BTC"]
        assert item.sentiment is None

    @pytest.mark.parametrize(
        "label,sentiment,score",
        [
            ("Positive", SentimentLabel.BULLISH, 0.3),
            ("Negative", SentimentLabel.BEARISH, -0.3),
            ("Neutral", None, 0.0),
        ],
    )
    def test_provider_sentiment(self, label, sentiment, score):
        item = normalize_article(_article("x", sentiment=label))
        assert item.sentiment == sentiment
        assert item.score == score

    def test_provider_sentiment_ignored(self):
        item = normalize_article(_article("x", sentiment="Positive"), apply_provider_sentiment=False)
        assert item.sentiment is None
        assert item.score is None

    def test_missing_source_and_tickers(self):
        article = _article("x")
        del article["source_name"]
        del article["tickers"]
        item = normalize_article(article, ["ETH"])
        assert item.source == "Unknown"
        assert item.tickers == ["ETH"]


class TestFilterSince:
    def test_window(self):
        now = datetime(2026, 10, 19, 12, tzinfo=UTC)
        items = [
            normalize_article(_article("new", date="2026-10-19T11:30:00Z")),
            normalize_article(_article("old", date="2026-10-19T09:00:00Z")),
        ]
        kept = filter_since(items, 60, now=now)
        assert [i.title for i in kept] == ["new"]

    def test_huge_window_keeps_everything(self):
        items = [normalize_article(_article("ancient", date="2001-01-01T00:00:00Z"))]
        assert filter_since(items, 2_000_000_000) == items


# ─── Client ─────────────────────────────────────────────────


class TestFetchNews:
    @pytest.mark.asyncio
    async def test_huge_lookback_keeps_fresh_items(self):
        client, _ = _client(lambda r: httpx.Response(200, json={"data": [_article("Bitcoin rally")]}))

        items = await client.fetch_news(["BTC"], since_minutes=2_000_000_000)

        assert [i.title for i in items] == ["Bitcoin rally"]

    @pytest.mark.asyncio
    async def test_no_token_returns_empty_without_request(self):
        client, requests = _client(lambda r: httpx.Response(500), api_key="")
        assert client.enabled is False
        assert await client.fetch_news(["BTC"], 60) == []
        assert requests == []

    @pytest.mark.asyncio
    async def test_single_ticker_uses_tickers_only(self):
        client, requests = _client(lambda r: httpx.Response(200, json={"data": [_article("Bitcoin rally")]}))

        items = await client.fetch_news(["BTC"], 60, items=10)

        params = requests[0].url.params
        assert params["tickers-only"] == "BTC"
        assert "tickers-include" not in params
        assert params["items"] == "10"
        assert params["page"] == "1"
        assert params["token"] == "token"
        assert [i.title for i in items] == ["Bitcoin rally"]

    @pytest.mark.asyncio
    async def test_multiple_tickers_use_tickers_include(self):
        client, requests = _client(lambda r: httpx.Response(200, json={"data": []}))

        await client.fetch_news(["BTC", "ETH"], 60, sentiment=ProviderSentiment.NEGATIVE)

        params = requests[0].url.params
        assert params["tickers-include"] == "BTC,ETH"
        assert params["sentiment"] == "negative"
        assert params["items"] == "50"

    @pytest.mark.asyncio
    async def test_since_filter(self):
        payload = {"data": [_article("fresh", 10), _article("stale", 600)]}
        client, _ = _client(lambda r: httpx.Response(200, json=payload))

        items = await client.fetch_news(["BTC"], 60)

        assert [i.title for i in items] == ["fresh"]

    @pytest.mark.asyncio
    async def test_news_key_payload(self):
        client, _ = _client(lambda r: httpx.Response(200, json={"news": [_article("alt shape")]}))
        items = await client.fetch_news(["BTC"], 60)
        assert len(items) == 1

    @pytest.mark.asyncio
    async def test_non_2xx_raises(self):
        client, _ = _client(lambda r: httpx.Response(403, json={"message": "bad token"}))
        with pytest.raises(ProviderError) as exc:
            await client.fetch_news(["BTC"], 60)
        assert exc.value.status_code == 403
        assert str(exc.value).startswith("cryptonews:")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        client, _ = _client(handler)
        with pytest.raises(ProviderError):
            await client.fetch_news(["BTC"], 60)

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        client, _ = _client(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(ProviderError):
            await client.fetch_news(["BTC"], 60)


class TestFetchGeneral:
    @pytest.mark.asyncio
    async def test_general_section(self):
        payload = {"data": [_article("Market wrap", sentiment="Positive")]}
        client, requests = _client(lambda r: httpx.Response(200, json=payload))

        items = await client.fetch_general(items=12)

        assert requests[0].url.path.endswith("/category")
        assert requests[0].url.params["section"] == "general"
        assert items[0].sentiment is None


class TestFetchTickersDb:
    @pytest.mark.asyncio
    async def test_no_token(self):
        client, requests = _client(lambda r: httpx.Response(200, json={}), api_key="")
        assert await client.fetch_tickers_db() == {"items": []}
        assert requests == []

    @pytest.mark.asyncio
    async def test_passthrough(self):
        client, requests = _client(lambda r: httpx.Response(200, json={"data": [{"ticker": "BTC"}]}))
        assert await client.fetch_tickers_db() == {"data": [{"ticker": "BTC"}]}
        assert requests[0].url.path.endswith("/account/tickersdbv2")

"""CryptoNews API client — ticker news, general news, ticker database.

Articles are normalised into NewsItem. Provider sentiment labels are
mapped to bullish/bearish with fixed scores so the classifier can skip
those items.

Usage:
    client = CryptoNewsClient(config.news, api_key=config.secrets.cryptonews_api_key)
    items = await client.fetch_news(["BTC"], since_minutes=60)
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from fluxfeed.domain.config import NewsConfig
from fluxfeed.domain.enums import ProviderSentiment, SentimentLabel
from fluxfeed.domain.errors import ProviderError
from fluxfeed.domain.news import NewsItem

logger = logging.getLogger(__name__)

PROVIDER = "cryptonews"
UNKNOWN_SOURCE = "Unknown"

# provider label -> (sentiment, score); neutral keeps sentiment empty so the classifier decides
PROVIDER_SENTIMENT_MAP: dict[str, tuple[SentimentLabel | None, float]] = {
    ProviderSentiment.POSITIVE: (SentimentLabel.BULLISH, 0.3),
    ProviderSentiment.NEGATIVE: (SentimentLabel.BEARISH, -0.3),
    ProviderSentiment.NEUTRAL: (None, 0.0),
}


def parse_published_at(raw: Any, *, default: datetime | None = None) -> datetime:
    """ISO-8601 or RFC-2822 ("Mon, 19 Oct 2026 10:00:00 -0400") -> aware UTC datetime."""
    fallback = default or datetime.now(UTC)
    if not raw or not isinstance(raw, str):
        return fallback

    text = raw.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            logger.debug("Unparsable publish date %r", raw)
            return fallback

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def normalize_article(
    article: dict[str, Any],
    requested_tickers: Sequence[str] = (),
    *,
    apply_provider_sentiment: bool = True,
) -> NewsItem:
    """Provider article dict -> NewsItem."""
    url = article.get("news_url") or article.get("url") or ""
    item_id = str(article.get("news_url") or article.get("id") or article.get("url") or uuid.uuid4())

    tickers = article.get("tickers")
    if not isinstance(tickers, list):
        ticker = article.get("ticker")
        tickers = [ticker] if isinstance(ticker, str) else list(requested_tickers)

    sentiment: SentimentLabel | None = None
    score: float | None = None
    provider_label = article.get("sentiment")
    if apply_provider_sentiment and isinstance(provider_label, str):
        mapped = PROVIDER_SENTIMENT_MAP.get(provider_label.lower())
        if mapped:
            sentiment, score = mapped

    return NewsItem(
        id=item_id,
        title=str(article.get("title") or ""),
        source=str(article.get("source_name") or article.get("source") or UNKNOWN_SOURCE),
        url=str(url),
        published_at=parse_published_at(article.get("date") or article.get("published_at")),
        tickers=[str(t) for t in tickers],
        sentiment=sentiment,
        score=score,
    )


def filter_since(items: list[NewsItem], since_minutes: int, *, now: datetime | None = None) -> list[NewsItem]:
    """Keep items published within the last since_minutes.

    A window reaching past datetime.min keeps everything.
    """
    try:
        cutoff = (now or datetime.now(UTC)) - timedelta(minutes=since_minutes)
    except OverflowError:
        return list(items)
    return [item for item in items if item.published_at >= cutoff]


class CryptoNewsClient:
    """CryptoNews HTTP client.

    Without an API token every fetch returns an empty result instead of
    failing.
    """

    def __init__(
        self,
        config: NewsConfig,
        *,
        api_key: str = "",
        client: httpx.AsyncClient | None = None,
    ):
        self._config = config
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=config.timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def fetch_news(
        self,
        tickers: str | Sequence[str],
        since_minutes: int | None = None,
        *,
        items: int | None = None,
        page: int = 1,
        sentiment: ProviderSentiment | None = None,
    ) -> list[NewsItem]:
        """Latest news for one or more tickers, filtered to the lookback window."""
        if not self.enabled:
            return []

        symbols = [tickers] if isinstance(tickers, str) else list(tickers)
        since = since_minutes if since_minutes is not None else self._config.default_since_minutes

        params: dict[str, str] = {}
        # tickers-only for one ticker, tickers-include for several
        if len(symbols) == 1:
            params["tickers-only"] = symbols[0]
        else:
            params["tickers-include"] = ",".join(symbols)
        params["items"] = str(items or self._config.default_items)
        params["page"] = str(page)
        if sentiment:
            params["sentiment"] = str(sentiment)

        payload = await self._get("", params)
        mapped = [normalize_article(a, symbols) for a in _articles(payload)]
        kept = filter_since(mapped, since)
        logger.debug("CryptoNews %s: %d articles, %d within %dm", symbols, len(mapped), len(kept), since)
        return kept

    async def fetch_general(self, *, items: int | None = None, page: int = 1) -> list[NewsItem]:
        """General crypto news section. Provider sentiment is ignored here."""
        if not self.enabled:
            return []

        params = {
            "section": "general",
            "items": str(items or self._config.general_items),
            "page": str(page),
        }
        payload = await self._get("/category", params)
        return [normalize_article(a, apply_provider_sentiment=False) for a in _articles(payload)]

    async def fetch_tickers_db(self) -> dict[str, Any]:
        """Provider ticker database passthrough (rate-limited upstream)."""
        if not self.enabled:
            return {"items": []}
        return await self._get("/account/tickersdbv2", {})

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        query = {**params, "token": self._api_key}
        try:
            resp = await self._client.get(path, params=query)
        except httpx.HTTPError as e:
            raise ProviderError(PROVIDER, f"request failed: {e}") from e

        if not resp.is_success:
            raise ProviderError(PROVIDER, f"API error {resp.status_code}", status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(PROVIDER, "invalid JSON payload") from e

    async def aclose(self) -> None:
        await self._client.aclose()


def _articles(payload: Any) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    articles = payload.get("data") or payload.get("news") or []
    return [a for a in articles if isinstance(a, dict)]

"""Sentiment Classifier — batched LLM labelling with a keyword fallback.

Two stages: the LLM stage returns Ok(labels) or Err(kind); the resolver
demotes any Err to the keyword heuristic, whose weights depend on why the
LLM stage was skipped. classify() never raises.
"""

import json
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from fluxfeed.domain.config import SentimentConfig
from fluxfeed.domain.enums import FallbackKind, SentimentLabel
from fluxfeed.domain.news import NewsItem, SentimentResult
from fluxfeed.domain.result import Err, Ok, Result
from fluxfeed.infra.llm import BaseLLMProvider, extract_json_array

logger = logging.getLogger(__name__)

BULLISH_KEYWORDS = ("surge", "rally", "inflow", "buy", "support", "breakout")
BEARISH_KEYWORDS = ("hack", "dump", "sell", "ban", "lawsuit", "crash")
EXTENDED_BULLISH_KEYWORDS = (*BULLISH_KEYWORDS, "partnership", "approval", "growth", "record")
EXTENDED_BEARISH_KEYWORDS = (*BEARISH_KEYWORDS, "exploit", "delist", "outflow", "fine")

SYSTEM_PROMPT = (
    "You label crypto headlines as bullish or bearish for the mentioned tickers. "
    "Respond with pure JSON only: an array with same length as input; each element is "
    '{"sentiment":"bullish"|"bearish","score":number between -1 and 1}.'
)


@dataclass(frozen=True)
class KeywordWeights:
    """One keyword heuristic preset."""

    bullish: float
    bearish: float
    bullish_terms: tuple[str, ...] = BULLISH_KEYWORDS
    bearish_terms: tuple[str, ...] = BEARISH_KEYWORDS


def weights_for(kind: FallbackKind, config: SentimentConfig) -> KeywordWeights:
    """Heuristic preset for the reason the LLM stage was skipped."""
    if kind == FallbackKind.PARSE:
        return KeywordWeights(
            config.parse_failure_bullish_weight,
            config.parse_failure_bearish_weight,
            EXTENDED_BULLISH_KEYWORDS,
            EXTENDED_BEARISH_KEYWORDS,
        )
    if kind == FallbackKind.TRANSPORT:
        return KeywordWeights(config.transport_bullish_weight, config.transport_bearish_weight)
    return KeywordWeights(config.no_credential_bullish_weight, config.no_credential_bearish_weight)


def keyword_heuristic(texts: Sequence[str], weights: KeywordWeights) -> list[SentimentResult]:
    """Substring keyword scoring. Bullish when the score is >= 0."""
    results = []
    for text in texts:
        low = text.lower()
        score = (weights.bullish if any(k in low for k in weights.bullish_terms) else 0.0) - (
            weights.bearish if any(k in low for k in weights.bearish_terms) else 0.0
        )
        sentiment = SentimentLabel.BULLISH if score >= 0 else SentimentLabel.BEARISH
        results.append(SentimentResult(sentiment=sentiment, score=_clamp(score)))
    return results


def normalize_label(raw: Any, *, missing_score: float = 0.1) -> SentimentResult:
    """One LLM array element -> SentimentResult.

    Anything that is not "bearish" is bullish; a missing or non-finite
    score becomes +/-missing_score; scores are clamped to [-1, 1].
    """
    fields = raw if isinstance(raw, dict) else {}
    sentiment = (
        SentimentLabel.BEARISH
        if str(fields.get("sentiment") or "bullish").lower() == SentimentLabel.BEARISH
        else SentimentLabel.BULLISH
    )
    try:
        score = float(fields.get("score"))
    except (TypeError, ValueError):
        score = math.nan
    if not math.isfinite(score):
        score = missing_score if sentiment == SentimentLabel.BULLISH else -missing_score
    return SentimentResult(sentiment=sentiment, score=_clamp(score))


def _clamp(score: float) -> float:
    return max(-1.0, min(1.0, score))


class SentimentClassifier:
    """Headline sentiment labeller.

    Args:
        llm: LLM provider, or None when no credential is configured
        config: heuristic weights
    """

    def __init__(self, llm: BaseLLMProvider | None, config: SentimentConfig):
        self._llm = llm
        self._config = config

    async def classify(self, texts: Sequence[str]) -> list[SentimentResult]:
        """One result per input text, same order."""
        if not texts:
            return []
        result = await self._classify_with_llm(texts)
        return self._resolve(result, texts)

    async def label_missing(self, items: list[NewsItem]) -> list[NewsItem]:
        """Label only items without a sentiment (one batched call).

        Items that already carry a sentiment pass through untouched, apart
        from a zero score when theirs is missing.
        """
        missing = [i for i, item in enumerate(items) if not item.is_labelled]
        labels = await self.classify([items[i].title for i in missing]) if missing else []
        by_index = dict(zip(missing, labels))

        labelled = []
        for i, item in enumerate(items):
            label = by_index.get(i)
            if label is not None:
                labelled.append(item.model_copy(update={"sentiment": label.sentiment, "score": label.score}))
            elif item.score is None:
                labelled.append(item.model_copy(update={"score": 0.0}))
            else:
                labelled.append(item)
        return labelled

    async def label_all(self, items: list[NewsItem]) -> list[NewsItem]:
        """Label every item, ignoring any existing sentiment."""
        labels = await self.classify([item.title for item in items])
        return [
            item.model_copy(update={"sentiment": label.sentiment, "score": label.score})
            for item, label in zip(items, labels)
        ]

    async def _classify_with_llm(self, texts: Sequence[str]) -> Result[list[SentimentResult]]:
        if self._llm is None:
            return Err(FallbackKind.NO_CREDENTIAL, "no LLM credential")

        try:
            response = await self._llm.generate(
                json.dumps(list(texts), ensure_ascii=False),
                system=SYSTEM_PROMPT,
                temperature=0.0,
                json_mode=True,
                service="sentiment",
            )
        except Exception as e:
            return Err(FallbackKind.TRANSPORT, str(e)[:200])

        try:
            parsed = extract_json_array(response.content or "[]")
        except ValueError as e:
            return Err(FallbackKind.PARSE, str(e)[:200])

        missing_score = self._config.missing_score_magnitude
        return Ok(
            [
                normalize_label(parsed[i] if i < len(parsed) else None, missing_score=missing_score)
                for i in range(len(texts))
            ]
        )

    def _resolve(self, result: Result[list[SentimentResult]], texts: Sequence[str]) -> list[SentimentResult]:
        if isinstance(result, Ok):
            return result.value

        if result.kind == FallbackKind.NO_CREDENTIAL:
            logger.debug("Sentiment heuristic for %d headlines (no LLM)", len(texts))
        else:
            logger.info("Sentiment LLM %s failure, keyword fallback: %s", result.kind, result.reason)
        return keyword_heuristic(texts, weights_for(result.kind, self._config))

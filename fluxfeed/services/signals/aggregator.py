"""Signal Aggregator — news sentiment + price features -> status, confidence, trade plan.

The LLM decides when a credential is configured; any transport or parse
failure demotes to the deterministic heuristic:

    avg > +0.05 and momentum > 0  -> BUY
    avg < -0.05 and momentum < 0  -> SELL
    otherwise                     -> NEUTRAL (confidence 45)

BUY/SELL confidence = min(cap, 60 + round((|avg*100| + |momentum|) / 2)).
Trade levels use a volatility-derived risk fraction clamped to [0.5%, 2%]
with a 1:2 risk/reward.
"""

import json
import logging
import math
from typing import Any

from fluxfeed.domain.config import SignalConfig
from fluxfeed.domain.enums import FallbackKind, SignalStatus, TradeAction
from fluxfeed.domain.news import NewsItem
from fluxfeed.domain.result import Err, Ok, Result
from fluxfeed.domain.signal import AnalyzeResponse, SignalFeatures, SignalResponse
from fluxfeed.infra.llm import BaseLLMProvider, extract_json_object

logger = logging.getLogger(__name__)

SIGNAL_PROMPT = """You are a trading assistant. Using the provided features, return a JSON object {{status, confidence, reasons}}.
status in ["BUY","SELL","NEUTRAL"]. confidence 0..100. reasons 3 bullet points.
Features: {features}"""

PLAN_PROMPT = """You are a crypto trading assistant. Using features below, propose a trade plan as JSON:
{{
  "action": "LONG"|"SHORT"|"NEUTRAL",
  "entryPrice": number,
  "stopLoss": number,
  "takeProfit": number,
  "confidence": 0-100,
  "chartReasons": string[2..3],
  "newsReasons": string[2..3],
  "sentimentSummary": string
}}
Features: {features}
Guidelines: If momentum>0 and news avg>0 -> LONG; if momentum<0 and news avg<0 -> SHORT; else NEUTRAL. Entry ~ last price. Risk/reward ~ 1:2 using volatility as guide."""


# ─── Heuristic ──────────────────────────────────────────


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_confidence(value: float) -> float:
    return max(0.0, min(100.0, value))


def heuristic_decision(features: SignalFeatures, config: SignalConfig, cap: int) -> tuple[SignalStatus, int]:
    """(status, confidence) from sentiment average and momentum."""
    avg = features.news.avg
    momentum = features.price.momentum
    threshold = config.sentiment_threshold

    if avg > threshold and momentum > 0:
        status = SignalStatus.BUY
    elif avg < -threshold and momentum < 0:
        status = SignalStatus.SELL
    else:
        return SignalStatus.NEUTRAL, config.neutral_confidence

    magnitude = abs(avg * 100) + abs(momentum)
    return status, min(cap, config.base_confidence + round_half_up(magnitude / 2))


def risk_fraction(volatility: float, config: SignalConfig) -> float:
    """|volatility| % as a fraction, clamped to [min_risk_fraction, max_risk_fraction]."""
    return min(config.max_risk_fraction, max(config.min_risk_fraction, abs(volatility) / 100))


def trade_levels(status: SignalStatus, entry: float, vol_frac: float, reward_multiple: float) -> tuple[float, float]:
    """(stop, target) around entry. NEUTRAL keeps both at entry."""
    if status == SignalStatus.BUY:
        return entry * (1 - vol_frac), entry * (1 + reward_multiple * vol_frac)
    if status == SignalStatus.SELL:
        return entry * (1 + vol_frac), entry * (1 - reward_multiple * vol_frac)
    return entry, entry


def signal_reasons(features: SignalFeatures) -> list[str]:
    agg, price = features.news, features.price
    reasons = [f"News sentiment avg {agg.avg:.2f} (bull:{agg.bullish}, bear:{agg.bearish})"]
    if price.is_available:
        reasons.append(f"Momentum vs SMA20 {price.momentum:.2f}%")
        reasons.append(f"Change over window {price.pct_change:.2f}%")
    else:
        reasons.append("Price feed unavailable; used news-only heuristics")
        reasons.append("Change over window unavailable")
    return reasons


def chart_reasons(status: SignalStatus, features: SignalFeatures, vol_frac: float, reward_multiple: float) -> list[str]:
    price = features.price
    if status == SignalStatus.NEUTRAL:
        if not price.is_available:
            return ["Price feed unavailable; awaiting price data for chart-based decision"]
        return [f"Mixed momentum ({price.momentum:.2f}%) and change ({price.pct_change:.2f}%)"]

    if not price.is_available:
        return [
            "Price feed unavailable; entry set to last known or market",
            "Using default risk sizing due to missing volatility",
        ]
    side = "above" if status == SignalStatus.BUY else "below"
    return [
        f"Price {side} SMA20 by {abs(price.momentum):.2f}%",
        f"Volatility ~ {price.volatility:.2f}% suggests {vol_frac * 100:.2f}% stop, {reward_multiple:g}R target",
    ]


def news_reasons(features: SignalFeatures) -> list[str]:
    agg = features.news
    return [
        f"{agg.bullish} bullish vs {agg.bearish} bearish headlines",
        f"Average news score {agg.avg:.2f}",
    ]


def heuristic_signal(features: SignalFeatures, config: SignalConfig) -> SignalResponse:
    status, confidence = heuristic_decision(features, config, config.signal_confidence_cap)
    return SignalResponse(
        status=status,
        confidence=clamp_confidence(confidence),
        reasons=signal_reasons(features),
        features=features,
    )


def heuristic_plan(features: SignalFeatures, config: SignalConfig) -> AnalyzeResponse:
    status, confidence = heuristic_decision(features, config, config.plan_confidence_cap)
    vol_frac = risk_fraction(features.price.volatility, config)
    entry = features.price.last
    stop, target = trade_levels(status, entry, vol_frac, config.reward_multiple)
    return AnalyzeResponse(
        status=status,
        confidence=clamp_confidence(confidence),
        entry_price=entry,
        stop_loss=stop,
        take_profit=target,
        chart_reasons=chart_reasons(status, features, vol_frac, config.reward_multiple),
        news_reasons=news_reasons(features),
        sentiment_summary=features.news.summary(),
        features=features,
    )


# ─── LLM parsing ────────────────────────────────────────


def _finite(value: Any, default: float) -> float:
    """float(value), default when missing. ValueError when present but not a finite number."""
    if value is None:
        return default
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number: {value!r}")
    return number


def _str_list(value: Any) -> list[str]:
    return [str(v) for v in value] if isinstance(value, list) else []


def parse_signal_reply(parsed: dict[str, Any], features: SignalFeatures) -> SignalResponse:
    """LLM {status, confidence, reasons} -> SignalResponse. ValueError when unusable."""
    status = SignalStatus(str(parsed.get("status", "")).upper())
    return SignalResponse(
        status=status,
        confidence=clamp_confidence(_finite(parsed.get("confidence"), 50.0)),
        reasons=_str_list(parsed.get("reasons")),
        features=features,
    )


def parse_plan_reply(parsed: dict[str, Any], features: SignalFeatures) -> AnalyzeResponse:
    """LLM trade plan -> AnalyzeResponse. ValueError when unusable."""
    status = TradeAction(str(parsed.get("action", "")).upper()).to_status()
    last = features.price.last
    return AnalyzeResponse(
        status=status,
        confidence=clamp_confidence(_finite(parsed.get("confidence"), 50.0)),
        entry_price=_finite(parsed.get("entryPrice"), last),
        stop_loss=_finite(parsed.get("stopLoss"), last),
        take_profit=_finite(parsed.get("takeProfit"), last),
        chart_reasons=_str_list(parsed.get("chartReasons")),
        news_reasons=_str_list(parsed.get("newsReasons")),
        sentiment_summary=str(parsed.get("sentimentSummary") or features.news.summary()),
        features=features,
    )


class SignalAggregator:
    """Decision step of the signal pipeline.

    Args:
        llm: LLM provider, or None for heuristic-only mode
        config: heuristic parameters
    """

    def __init__(self, llm: BaseLLMProvider | None, config: SignalConfig):
        self._llm = llm
        self._config = config

    async def decide_signal(self, features: SignalFeatures) -> SignalResponse:
        """Status + confidence + reasons (GET /signal)."""
        prompt = SIGNAL_PROMPT.format(features=_dump(features.model_dump(by_alias=True, mode="json")))
        result = await self._ask_llm(prompt, "signal")
        decided = self._parse(result, lambda parsed: parse_signal_reply(parsed, features))
        if isinstance(decided, Ok):
            return decided.value
        self._log_fallback("signal", decided)
        return heuristic_signal(features, self._config)

    async def plan_trade(self, features: SignalFeatures, news: list[NewsItem]) -> AnalyzeResponse:
        """Full trade plan (POST /analyze)."""
        prompt_features = {
            "price": features.price.model_dump(by_alias=True, mode="json"),
            "agg": features.news.model_dump(by_alias=True, mode="json"),
            "newsTop": [
                {"t": n.title, "s": n.sentiment, "sc": n.score} for n in news[: self._config.top_news_for_prompt]
            ],
        }
        result = await self._ask_llm(PLAN_PROMPT.format(features=_dump(prompt_features)), "trade_plan")
        decided = self._parse(result, lambda parsed: parse_plan_reply(parsed, features))
        if isinstance(decided, Ok):
            return decided.value
        self._log_fallback("trade plan", decided)
        return heuristic_plan(features, self._config)

    async def _ask_llm(self, prompt: str, service: str) -> Result[dict[str, Any]]:
        if self._llm is None:
            return Err(FallbackKind.NO_CREDENTIAL, "no LLM credential")
        try:
            response = await self._llm.generate(prompt, temperature=0.0, service=service)
        except Exception as e:
            return Err(FallbackKind.TRANSPORT, str(e)[:200])
        try:
            return Ok(extract_json_object(response.content or "{}"))
        except ValueError as e:
            return Err(FallbackKind.PARSE, str(e)[:200])

    @staticmethod
    def _parse(result: Result[dict[str, Any]], build) -> Result[Any]:
        if isinstance(result, Err):
            return result
        try:
            return Ok(build(result.value))
        except (ValueError, TypeError) as e:
            return Err(FallbackKind.PARSE, str(e)[:200])

    @staticmethod
    def _log_fallback(step: str, err: Err) -> None:
        if err.kind == FallbackKind.NO_CREDENTIAL:
            logger.debug("Heuristic %s (no LLM)", step)
        else:
            logger.info("LLM %s %s failure, heuristic fallback: %s", step, err.kind, err.reason)


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False)

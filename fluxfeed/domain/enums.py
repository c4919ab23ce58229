"""Enumerations shared across the whole system."""

from enum import StrEnum


class SentimentLabel(StrEnum):
    """Headline sentiment"""

    BULLISH = "bullish"
    BEARISH = "bearish"


class ProviderSentiment(StrEnum):
    """Sentiment labels as the news provider spells them"""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Timeframe(StrEnum):
    """Candle timeframe"""

    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"


class SignalStatus(StrEnum):
    """Trading suggestion"""

    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"


class TradeAction(StrEnum):
    """Trade plan direction as the LLM phrases it"""

    LONG = "LONG"
    SHORT = "SHORT"
    NEUTRAL = "NEUTRAL"

    def to_status(self) -> SignalStatus:
        return {
            TradeAction.LONG: SignalStatus.BUY,
            TradeAction.SHORT: SignalStatus.SELL,
        }.get(self, SignalStatus.NEUTRAL)


class PriceSource(StrEnum):
    """Where PriceFeatures came from"""

    BINANCE = "binance"
    COINGECKO = "coingecko"
    UNAVAILABLE = "unavailable"


class FallbackKind(StrEnum):
    """Why a primary (LLM) strategy was demoted"""

    NO_CREDENTIAL = "no_credential"
    TRANSPORT = "transport"
    PARSE = "parse"

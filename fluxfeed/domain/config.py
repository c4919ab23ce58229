"""Unified settings model built on Pydantic Settings.

Every value is injected through environment variables. Precedence:
  1. Environment variables (docker-compose env, .env)
  2. Pydantic Settings defaults

Empty API keys are valid: they switch the matching component into its
degraded (free-tier or heuristic) mode instead of failing at startup.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class SecretsConfig(BaseSettings):
    """External service API keys, mapped straight to env names (no prefix).

        openai_api_key     -> OPENAI_API_KEY
        cryptonews_api_key -> CRYPTONEWS_API_KEY
    """

    openai_api_key: str = ""
    cryptonews_api_key: str = ""

    model_config = {"frozen": True}


class LLMConfig(BaseSettings):
    """LLM settings."""

    provider: str = "openai"
    # LLM_MODEL wins over the legacy OPENAI_MODEL name
    model: str = Field(
        default="gpt-5-mini",
        validation_alias=AliasChoices("LLM_MODEL", "OPENAI_MODEL"),
    )
    base_url: str | None = None
    timeout_seconds: float = 30.0

    model_config = {"env_prefix": "LLM_", "frozen": True, "populate_by_name": True}


class NewsConfig(BaseSettings):
    """CryptoNews provider settings."""

    base_url: str = "https://cryptonews-api.com/api/v1"
    default_items: int = 50
    general_items: int = 12
    max_items: int = 100
    default_since_minutes: int = 1440
    timeout_seconds: float = 10.0

    model_config = {"env_prefix": "NEWS_", "frozen": True}


class MarketConfig(BaseSettings):
    """Price provider settings (Binance primary, CoinGecko fallback)."""

    binance_url: str = "https://api.binance.com/api/v3"
    coingecko_url: str = "https://api.coingecko.com/api/v3"
    candle_limit: int = 200
    sma_window: int = 20
    timeout_seconds: float = 10.0

    model_config = {"env_prefix": "MARKET_", "frozen": True}


class SentimentConfig(BaseSettings):
    """Keyword heuristic weights, one pair per fallback cause.

    The weights are tuning constants; each cause keeps the values it has
    always used.
    """

    # No LLM credential configured
    no_credential_bullish_weight: float = 0.4
    no_credential_bearish_weight: float = 0.4
    # LLM answered but the payload did not parse
    parse_failure_bullish_weight: float = 0.35
    parse_failure_bearish_weight: float = 0.45
    # LLM call itself failed
    transport_bullish_weight: float = 0.4
    transport_bearish_weight: float = 0.5
    # Defaults for items the LLM returned without a usable score
    missing_score_magnitude: float = 0.1

    model_config = {"env_prefix": "SENTIMENT_", "frozen": True}


class SignalConfig(BaseSettings):
    """Heuristic decision parameters."""

    sentiment_threshold: float = 0.05
    base_confidence: int = 60
    neutral_confidence: int = 45
    signal_confidence_cap: int = 90  # GET /signal
    plan_confidence_cap: int = 88  # POST /analyze
    min_risk_fraction: float = 0.005
    max_risk_fraction: float = 0.02
    reward_multiple: float = 2.0
    top_news_for_prompt: int = 8
    default_since_minutes: int = 60

    model_config = {"env_prefix": "SIGNAL_", "frozen": True}


class RedisConfig(BaseSettings):
    """Redis settings (response cache only)."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""

    model_config = {"env_prefix": "REDIS_", "frozen": True}

    @property
    def url(self) -> str:
        if self.password:
            return f"redis://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"redis://{self.host}:{self.port}/{self.db}"


class CacheConfig(BaseSettings):
    """Short-TTL response cache. Off unless explicitly enabled."""

    enabled: bool = False
    ttl_seconds: int = 30
    key_prefix: str = "fluxfeed"

    model_config = {"env_prefix": "CACHE_", "frozen": True}


class AppConfig(BaseSettings):
    """Top-level settings, composed of the sub-configs.

    Usage:
        from fluxfeed.domain.config import get_config
        config = get_config()
        print(config.news.base_url)
        print(config.secrets.openai_api_key != "")
    """

    env: str = Field(default="production", description="development | staging | production")
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=8787, validation_alias=AliasChoices("APP_PORT", "PORT"))
    cors_origins: list[str] = ["*"]

    secrets: SecretsConfig = Field(default_factory=SecretsConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    market: MarketConfig = Field(default_factory=MarketConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    signal: SignalConfig = Field(default_factory=SignalConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = {"env_prefix": "APP_", "frozen": True, "populate_by_name": True}

    @property
    def has_llm(self) -> bool:
        return bool(self.secrets.openai_api_key)

    @property
    def has_news(self) -> bool:
        return bool(self.secrets.cryptonews_api_key)


@lru_cache
def get_config() -> AppConfig:
    """Process-wide settings instance.

    Environment variables are read once and cached.
    Tests reset it with get_config.cache_clear().
    """
    return AppConfig()

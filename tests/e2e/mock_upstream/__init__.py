"""Mock upstream providers — httpx MockTransport for E2E tests."""

from .app import BINANCE_URL, COINGECKO_URL, NEWS_URL, create_mock_transport
from .state import UpstreamState

__all__ = ["BINANCE_URL", "COINGECKO_URL", "NEWS_URL", "UpstreamState", "create_mock_transport"]

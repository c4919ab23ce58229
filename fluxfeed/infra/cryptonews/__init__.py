"""CryptoNews provider."""

from .client import CryptoNewsClient, filter_since, normalize_article, parse_published_at

__all__ = ["CryptoNewsClient", "filter_since", "normalize_article", "parse_published_at"]

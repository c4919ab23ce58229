"""fluxfeed — crypto news sentiment and trading signal API."""

__version__ = "1.0.0"

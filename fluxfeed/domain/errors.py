"""Exception hierarchy."""


class FluxfeedError(Exception):
    """Base class for errors raised by fluxfeed."""


class ProviderError(FluxfeedError):
    """An upstream data provider failed (non-2xx, transport error, unusable payload)."""

    def __init__(self, provider: str, message: str, *, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")

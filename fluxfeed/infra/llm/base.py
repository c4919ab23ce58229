"""LLM provider interface — the contract every provider implements."""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class LLMResponse(BaseModel):
    """Normalised LLM response."""

    content: str
    model: str
    tokens_in: int = 0
    tokens_out: int = 0
    provider: str = ""


class BaseLLMProvider(ABC):
    """Abstract LLM provider.

    Implementations raise on transport failures; callers decide whether to
    fall back.
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
        json_mode: bool = False,
        service: str | None = None,
    ) -> LLMResponse:
        """Text generation. json_mode asks the API for a JSON object reply."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (logging)."""
        ...

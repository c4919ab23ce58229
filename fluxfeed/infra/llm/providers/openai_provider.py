"""OpenAI Provider — chat completions on any OpenAI-compatible API."""

import logging
from typing import Any

import openai

from fluxfeed.infra.llm.base import BaseLLMProvider, LLMResponse
from fluxfeed.infra.llm.factory import register_provider

logger = logging.getLogger(__name__)

# Reasoning models (no temperature, max_completion_tokens instead of max_tokens)
REASONING_MODELS = frozenset(
    {
        "o1",
        "o1-mini",
        "o3",
        "o3-mini",
        "o4-mini",
        "gpt-5",
        "gpt-5-mini",
        "gpt-5-nano",
    }
)


class OpenAILLMProvider(BaseLLMProvider):
    """OpenAI API provider (gpt-5-mini by default)."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gpt-5-mini",
        base_url: str | None = None,
        timeout: float = 30.0,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self._model = model
        client_kwargs: dict[str, Any] = {"api_key": api_key, "timeout": timeout, "max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = client or openai.AsyncOpenAI(**client_kwargs)

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    def _is_reasoning_model(self, model: str) -> bool:
        name = model.lower()
        return any(name == rm or name.startswith(f"{rm}-") for rm in REASONING_MODELS)

    def _request_kwargs(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self._model, "messages": messages}
        if self._is_reasoning_model(self._model):
            kwargs["max_completion_tokens"] = max_tokens
        else:
            kwargs["max_tokens"] = max_tokens
            kwargs["temperature"] = temperature
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        return kwargs

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
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        raw = await self._client.chat.completions.create(
            **self._request_kwargs(messages, temperature=temperature, max_tokens=max_tokens, json_mode=json_mode)
        )

        content = raw.choices[0].message.content or ""
        usage = raw.usage
        response = LLMResponse(
            content=content,
            model=self._model,
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            provider=self.provider_name,
        )
        logger.debug(
            "[%s] %s tokens in=%d out=%d",
            service or "unknown",
            self._model,
            response.tokens_in,
            response.tokens_out,
        )
        return response


# factory auto-registration
register_provider("openai", OpenAILLMProvider)

"""LLM Factory — credential check plus provider registry.

Usage:
    from fluxfeed.infra.llm import LLMFactory

    llm = LLMFactory.create(config)  # None when no API key is configured
"""

import importlib
import logging

from fluxfeed.domain.config import AppConfig

from .base import BaseLLMProvider

logger = logging.getLogger(__name__)

# provider type -> class (filled on import of each provider module)
_PROVIDER_REGISTRY: dict[str, type[BaseLLMProvider]] = {}

_IMPORT_MAP = {
    "openai": "fluxfeed.infra.llm.providers.openai_provider",
}


def register_provider(name: str, cls: type[BaseLLMProvider]) -> None:
    """Register a provider at runtime.

    Each provider module registers itself on import:
        register_provider("openai", OpenAILLMProvider)
    """
    _PROVIDER_REGISTRY[name] = cls
    logger.debug("Registered LLM provider: %s -> %s", name, cls.__name__)


class LLMFactory:
    """Builds the configured provider, or nothing when it has no credential."""

    @staticmethod
    def has_credential(config: AppConfig) -> bool:
        return config.has_llm

    @staticmethod
    def create(config: AppConfig) -> BaseLLMProvider | None:
        """config.llm.provider -> provider instance.

        Returns None without a credential so callers go straight to their
        heuristic path.
        """
        if not LLMFactory.has_credential(config):
            logger.info("No LLM credential configured; heuristic mode")
            return None

        provider_type = config.llm.provider.lower()
        if provider_type not in _PROVIDER_REGISTRY:
            _try_import_provider(provider_type)

        provider_cls = _PROVIDER_REGISTRY.get(provider_type)
        if not provider_cls:
            raise ValueError(
                f"LLM provider '{provider_type}' not registered. Available: {list(_PROVIDER_REGISTRY.keys())}"
            )

        logger.info("LLM provider=%s model=%s", provider_type, config.llm.model)
        return provider_cls(
            api_key=config.secrets.openai_api_key,
            model=config.llm.model,
            base_url=config.llm.base_url,
            timeout=config.llm.timeout_seconds,
        )


def _try_import_provider(provider_type: str) -> None:
    """Lazy provider module import."""
    module_path = _IMPORT_MAP.get(provider_type)
    if module_path:
        try:
            importlib.import_module(module_path)
        except ImportError as e:
            logger.warning("Failed to import %s: %s", module_path, e)

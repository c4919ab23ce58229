"""LLM infrastructure — provider interface, factory, implementations."""

from .base import BaseLLMProvider, LLMResponse
from .factory import LLMFactory, register_provider
from .parsing import extract_json_array, extract_json_object

__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "LLMFactory",
    "register_provider",
    "extract_json_array",
    "extract_json_object",
]

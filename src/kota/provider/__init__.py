"""LLM provider abstraction for kota."""

from kota.provider.base import LLMProvider, LLMToolCall
from kota.provider.providers import (
    AnthropicProvider,
    DeepSeekProvider,
    CohereProvider,
    OpenAIProvider,
    OtherProvider,
)

__all__ = [
    "LLMProvider",
    "LLMToolCall",
    "OpenAIProvider",
    "AnthropicProvider",
    "DeepSeekProvider",
    "CohereProvider",
    "OtherProvider",
]

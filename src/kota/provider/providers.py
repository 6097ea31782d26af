"""Providers selectable through ``llm.provider``."""

from kota.provider.base import LLMProvider


class OpenAIProvider(LLMProvider):
    aliases = ("openai",)
    display_name = "OpenAI"
    default_model = "gpt-4o"
    env_var = "OPENAI_API_KEY"


class AnthropicProvider(LLMProvider):
    aliases = ("anthropic", "claude")
    display_name = "Anthropic Claude"
    default_model = "anthropic/claude-sonnet-4-5"
    env_var = "ANTHROPIC_API_KEY"


class DeepSeekProvider(LLMProvider):
    """OpenAI-compatible API; litellm needs the base URL."""

    aliases = ("deepseek",)
    display_name = "DeepSeek"
    default_model = "deepseek/deepseek-chat"
    env_var = "DEEPSEEK_API_KEY"
    default_api_base = "https://api.deepseek.com"


class CohereProvider(LLMProvider):
    aliases = ("cohere",)
    display_name = "Cohere"
    default_model = "command-r-plus"
    env_var = "COHERE_API_KEY"


class OtherProvider(LLMProvider):
    """Any litellm route not listed above, e.g. a self-hosted server."""

    aliases = ("other",)
    display_name = "Other (custom)"

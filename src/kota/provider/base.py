"""Model client seam over litellm."""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, cast

from litellm import Choices, acompletion
from litellm.types.completion import ChatCompletionMessageParam as Message

from kota.core.exceptions import ConfigError
from kota.utils.config import LLMConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMToolCall:
    """A tool call requested by the model; ``arguments`` is raw JSON text."""

    id: str
    name: str
    arguments: str

    @classmethod
    def from_litellm(cls, raw: Mapping[str, Any]) -> "LLMToolCall":
        function = raw["function"]
        return cls(id=raw["id"], name=function["name"], arguments=function["arguments"])


class LLMProvider:
    """
    Credentials, route and sampling settings for one litellm model.

    Every subclass is registered under each name in ``aliases``; the
    ``llm.provider`` config value selects one case-insensitively. The
    class-level fields only feed onboarding and defaults. ``chat`` is
    shared by all providers.
    """

    aliases: ClassVar[tuple[str, ...]] = ()
    display_name: ClassVar[str] = ""
    default_model: ClassVar[str] = ""
    env_var: ClassVar[Optional[str]] = None
    default_api_base: ClassVar[Optional[str]] = None

    by_alias: ClassVar[dict[str, type["LLMProvider"]]] = {}

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        for alias in cls.aliases:
            LLMProvider.by_alias[alias] = cls

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        api_base: Optional[str] = None,
        **settings: Any,
    ):
        self.model = model
        self.api_key = api_key
        self.api_base = api_base
        self.settings = settings

    @classmethod
    def lookup(cls, name: str) -> type["LLMProvider"]:
        try:
            return cls.by_alias[name.lower()]
        except KeyError:
            raise ConfigError(f"Unknown provider: {name.lower()}") from None

    @classmethod
    def onboarding_choices(cls) -> list[tuple[str, type["LLMProvider"]]]:
        """Each provider once, under its first alias, with ``other`` held back."""
        choices: dict[type[LLMProvider], str] = {}
        for alias, provider_cls in cls.by_alias.items():
            if alias != "other":
                choices.setdefault(provider_cls, alias)
        return [(alias, provider_cls) for provider_cls, alias in choices.items()]

    @staticmethod
    def from_config(config: LLMConfig) -> "LLMProvider":
        """
        Build the provider named by ``config.provider``.

        Raises:
            ConfigError: If the provider name is unknown
        """
        provider_class = LLMProvider.lookup(config.provider)
        return provider_class(
            model=config.model,
            api_key=config.api_key,
            api_base=config.api_base or provider_class.default_api_base,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    def build_request(
        self, messages: list[Message], tools: Optional[list[dict[str, Any]]] = None
    ) -> dict[str, Any]:
        """Keyword arguments for ``litellm.acompletion``; unset fields are omitted."""
        request: dict[str, Any] = {"model": self.model, "messages": messages}
        request.update(self.settings)
        optional = {"api_key": self.api_key, "api_base": self.api_base, "tools": tools}
        request.update({k: v for k, v in optional.items() if v})
        return request

    async def chat(
        self,
        messages: list[Message],
        tools: Optional[list[dict[str, Any]]] = None,
        **kwargs: Any,
    ) -> tuple[str, list[LLMToolCall]]:
        """Send one completion request; returns reply text and requested tool calls."""
        request = self.build_request(messages, tools)
        request.update(kwargs)

        logger.debug(
            f"LLM request: model={self.model} messages={len(messages)} "
            f"tools={len(tools or [])}"
        )
        response = await acompletion(**request)
        message = cast(Choices, response.choices[0]).message

        tool_calls = [LLMToolCall.from_litellm(tc) for tc in message.tool_calls or []]
        return message.content or "", tool_calls

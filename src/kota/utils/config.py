"""Configuration management for kota."""

import os
import re
import string
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from kota.core.exceptions import ConfigError

_ENV_PATTERN = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")


# ============================================================================
# Configuration Models
# ============================================================================


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "openai"
    model: str
    api_key: str
    api_base: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, gt=0)

    @field_validator("api_base")
    @classmethod
    def api_base_must_be_url(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("api_base must be a valid URL")
        return v


class CustomToolConfig(BaseModel):
    """A tool backed by a user callable.

    ``handler`` is ``package.module:function`` or ``path/to/file.py:function``;
    file paths are relative to the workspace. ``parameters`` uses the same
    object schema as the built-in tools.
    """

    handler: str = Field(pattern=r"^.+:[A-Za-z_]\w*$")
    description: str
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )
    default: bool = False


class ToolsConfig(BaseModel):
    """Tool enable/disable lists plus custom tools. Disabled always wins."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)
    custom: dict[str, CustomToolConfig] = Field(default_factory=dict)


class TemplateParam(BaseModel):
    """Fallback chain for one template placeholder."""

    keys: list[str] = Field(default_factory=list)
    default: str = ""


class TemplateSpec(BaseModel):
    """Declarative command template.

    Each ``{placeholder}`` in ``template`` must be declared in ``params``;
    its value is the first of ``keys`` present in the invocation arguments,
    else ``default``.
    """

    template: str
    description: str = ""
    params: dict[str, TemplateParam] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_placeholders(self) -> "TemplateSpec":
        try:
            parsed = list(string.Formatter().parse(self.template))
        except ValueError as e:
            raise ValueError(f"malformed template: {e}") from e

        for _, field_name, format_spec, conversion in parsed:
            if field_name is None:
                continue
            if not field_name.isidentifier():
                raise ValueError(f"unsupported placeholder: {{{field_name}}}")
            if format_spec or conversion:
                raise ValueError(f"placeholder {{{field_name}}} cannot use format specs")
            if field_name not in self.params:
                raise ValueError(f"placeholder {{{field_name}}} has no params entry")
        return self


class LogHookConfig(BaseModel):
    """Log every tool call (before) or result (after)."""

    type: Literal["log"]
    level: Literal["debug", "info", "warning"] = "info"


class BlockHookConfig(BaseModel):
    """Abort calls to the listed tools with an error result."""

    type: Literal["block"]
    tools: list[str]
    message: str | None = None


class DefaultsHookConfig(BaseModel):
    """Fill in missing arguments for one tool."""

    type: Literal["defaults"]
    tool: str
    args: dict[str, Any]


class TruncateHookConfig(BaseModel):
    """Clip string results to ``max_chars``."""

    type: Literal["truncate"]
    max_chars: int = Field(gt=0)


class RedactHookConfig(BaseModel):
    """Replace regex matches in string results."""

    type: Literal["redact"]
    pattern: str
    replacement: str = "[REDACTED]"

    @field_validator("pattern")
    @classmethod
    def pattern_must_compile(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regex: {e}") from e
        return v


BeforeHookConfig = Annotated[
    Union[LogHookConfig, BlockHookConfig, DefaultsHookConfig],
    Field(discriminator="type"),
]
AfterHookConfig = Annotated[
    Union[LogHookConfig, TruncateHookConfig, RedactHookConfig],
    Field(discriminator="type"),
]


class HooksConfig(BaseModel):
    """Ordered hook lists, zero or more per phase."""

    before_execute: list[BeforeHookConfig] = Field(default_factory=list)
    after_execute: list[AfterHookConfig] = Field(default_factory=list)


class ApiConfig(BaseModel):
    """HTTP API configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, lt=65536)
    allow_tool_dispatch: bool = False


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config(BaseModel):
    """
    Main configuration for kota.

    Configuration is loaded from the workspace (default ./.kota/):
    1. config.user.yaml - User configuration (required field: llm)
    2. config.runtime.yaml - Runtime overrides (optional)

    Runtime config takes precedence over user config. String values of the
    form ``${VAR}`` are read from the environment.
    """

    workspace: Path
    llm: LLMConfig
    system_prompt: str = (
        "You are kota, a coding agent working in the user's project. "
        "Use the available tools to inspect and change files."
    )
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    commands: dict[str, str | TemplateSpec] = Field(default_factory=dict)
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    skills_path: Path = Field(default=Path("skills"))
    logging_path: Path = Field(default=Path(".logs"))
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    history_path: Path = Field(default=Path(".history"))
    tool_timeout: float = Field(default=30.0, gt=0)
    chat_max_history: int = Field(default=50, gt=0)

    @field_validator("commands")
    @classmethod
    def command_names_must_be_bare(
        cls, v: dict[str, str | TemplateSpec]
    ) -> dict[str, str | TemplateSpec]:
        for name in v:
            if not name or name.startswith("/") or any(c.isspace() for c in name):
                raise ValueError(f"invalid command name: {name!r}")
        return v

    @model_validator(mode="after")
    def resolve_paths(self) -> "Config":
        """Resolve relative paths to absolute using workspace."""
        for field_name in ("skills_path", "logging_path", "history_path"):
            path = getattr(self, field_name)
            if path.is_absolute():
                raise ValueError(f"{field_name} must be relative, got: {path}")
            setattr(self, field_name, self.workspace / path)
        return self

    @classmethod
    def load(cls, workspace_dir: Path) -> "Config":
        """
        Load configuration from the workspace directory.

        Args:
            workspace_dir: Path to the workspace directory

        Returns:
            Config instance with all settings loaded and validated

        Raises:
            ConfigError: If the config file is missing or invalid
        """
        user_config = workspace_dir / "config.user.yaml"
        runtime_config = workspace_dir / "config.runtime.yaml"

        if not user_config.exists():
            raise ConfigError(f"Configuration file not found: {user_config}")

        load_dotenv(workspace_dir / ".env")

        config_data: dict[str, Any] = {"workspace": workspace_dir}
        for path in (user_config, runtime_config):
            if not path.exists():
                continue
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {path.name}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{path.name} must contain a mapping")
            config_data = cls._deep_merge(config_data, data)

        config_data = cls._interpolate_env_vars(config_data)

        try:
            return cls.model_validate(config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Mappings merge key by key; any other override value replaces outright."""
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                value = Config._deep_merge(current, value)
            merged[key] = value
        return merged

    @staticmethod
    def _interpolate_env_vars(data: Any) -> Any:
        """
        Recursively interpolate environment variables in config values.

        Supports ${VAR_NAME} syntax. Unset variables are left as-is.
        """
        if isinstance(data, dict):
            return {k: Config._interpolate_env_vars(v) for k, v in data.items()}
        if isinstance(data, list):
            return [Config._interpolate_env_vars(v) for v in data]
        if isinstance(data, str):
            match = _ENV_PATTERN.match(data)
            if match:
                return os.getenv(match.group(1), data)
        return data

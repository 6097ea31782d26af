"""Tools declared under ``tools.custom`` in the configuration."""

import importlib
import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

from pydantic import ValidationError

from kota.core.exceptions import ConfigError, DuplicateToolError
from kota.tools.base import ParameterSchema, ToolDefinition
from kota.tools.registry import ToolRegistry
from kota.utils.config import CustomToolConfig

logger = logging.getLogger(__name__)


def _load_file(path: Path, module_name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_handler(name: str, handler: str, workspace: Path) -> Callable[..., Any]:
    """
    Import the callable named by ``module:function`` or ``file.py:function``.

    Raises:
        ConfigError: If the module cannot be imported or the attribute is
            missing or not callable
    """
    target, _, attr = handler.rpartition(":")
    try:
        if target.endswith(".py"):
            module = _load_file(workspace / target, f"kota_custom_tool_{name}")
        else:
            module = importlib.import_module(target)
    except Exception as e:
        raise ConfigError(f"Tool '{name}': cannot import {target}: {e}") from e

    func = getattr(module, attr, None)
    if not callable(func):
        raise ConfigError(f"Tool '{name}': {handler} is not a callable")
    return func


def build_custom_tool(
    name: str, config: CustomToolConfig, workspace: Path
) -> ToolDefinition:
    """Validate the parameter schema and import the handler."""
    try:
        parameters = ParameterSchema.model_validate(config.parameters)
    except ValidationError as e:
        raise ConfigError(f"Tool '{name}': invalid parameters: {e}") from e
    handler = load_handler(name, config.handler, workspace)
    return ToolDefinition(name, config.description, parameters, handler)


def register_custom_tools(
    registry: ToolRegistry, tools: dict[str, CustomToolConfig], workspace: Path
) -> None:
    """
    Build and register every configured custom tool.

    Raises:
        ConfigError: On a bad definition or a name already registered
    """
    for name, config in tools.items():
        definition = build_custom_tool(name, config, workspace)
        try:
            registry.register(definition, default=config.default)
        except DuplicateToolError as e:
            raise ConfigError(f"Tool '{name}': name is already registered") from e
        logger.debug(f"Registered custom tool {name} from {config.handler}")

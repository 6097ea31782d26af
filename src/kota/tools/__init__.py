"""Tools system for kota."""

from kota.tools.base import ParameterProperty, ParameterSchema, ToolDefinition, tool
from kota.tools.registry import ToolRegistry

__all__ = [
    "ParameterProperty",
    "ParameterSchema",
    "ToolDefinition",
    "tool",
    "ToolRegistry",
]

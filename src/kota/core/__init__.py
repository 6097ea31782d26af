"""Core agent functionality.

Submodules are imported directly (``kota.core.agent``, ``kota.core.history``
and so on); only the error kinds are re-exported here so that lower layers can
depend on them without pulling in the agent.
"""

from .exceptions import (
    CommandParseError,
    ConfigError,
    DuplicateToolError,
    HookError,
    KotaError,
    PersistenceError,
    ReentrantDispatchError,
    SchemaValidationError,
    SkillNotFoundError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
)

__all__ = [
    "CommandParseError",
    "ConfigError",
    "DuplicateToolError",
    "HookError",
    "KotaError",
    "PersistenceError",
    "ReentrantDispatchError",
    "SchemaValidationError",
    "SkillNotFoundError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
]

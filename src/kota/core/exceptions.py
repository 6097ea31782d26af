"""Custom exceptions for kota."""

from typing import Any


class KotaError(Exception):
    """Base class for recoverable kota errors."""

    kind: str = "error"

    def to_result(self) -> dict[str, Any]:
        """Render the error using the handler result convention."""
        return {"error": str(self), "kind": self.kind}


class ConfigError(KotaError):
    """Configuration is missing or malformed. Fatal at startup."""

    kind = "config"


class ToolNotFoundError(KotaError):
    """Raised when a tool or command name is unknown or not visible."""

    kind = "not_found"

    def __init__(self, name: str, what: str = "tool"):
        super().__init__(f"{what.capitalize()} not found: {name}")
        self.name = name
        self.what = what


class DuplicateToolError(KotaError):
    """Raised when registering a tool name that already exists."""

    kind = "duplicate"

    def __init__(self, name: str):
        super().__init__(f"Tool already registered: {name}")
        self.name = name


class SchemaValidationError(KotaError):
    """Arguments do not match the tool's parameter schema.

    Carries every offending field, not only the first one found.
    """

    kind = "validation"

    def __init__(self, tool_name: str, fields: dict[str, str]):
        self.tool_name = tool_name
        self.fields = dict(fields)
        details = "; ".join(f"{name}: {reason}" for name, reason in self.fields.items())
        super().__init__(f"Invalid arguments for '{tool_name}': {details}")

    def to_result(self) -> dict[str, Any]:
        result = super().to_result()
        result["fields"] = self.fields
        return result


class ToolExecutionError(KotaError):
    """Domain-level failure reported by a tool handler."""

    kind = "execution"


class HookError(KotaError):
    """A hook faulted. Logged, never fatal."""

    kind = "hook"

    def __init__(self, hook_name: str, stage: str, reason: str):
        super().__init__(f"{stage} hook '{hook_name}' failed: {reason}")
        self.hook_name = hook_name
        self.stage = stage


class ReentrantDispatchError(KotaError):
    """A hook tried to dispatch a tool from inside the pipeline."""

    kind = "reentrant"

    def __init__(self, name: str):
        super().__init__(f"Re-entrant dispatch of '{name}' from a hook is not allowed")
        self.name = name


class ToolTimeoutError(KotaError):
    """A tool invocation exceeded its time limit."""

    kind = "timeout"

    def __init__(self, name: str, timeout: float):
        super().__init__(f"Tool '{name}' timed out after {timeout}s")
        self.name = name
        self.timeout = timeout


class PersistenceError(KotaError):
    """Session log could not be read or written."""

    kind = "persistence"

    def __init__(self, session_id: str, reason: str):
        super().__init__(f"Session '{session_id}': {reason}")
        self.session_id = session_id


class SkillNotFoundError(KotaError):
    """Raised when a skill is not found."""

    kind = "not_found"

    def __init__(self, name: str):
        super().__init__(f"Skill not found: {name}")
        self.name = name


class CommandParseError(KotaError):
    """Slash command text could not be tokenized."""

    kind = "parse"

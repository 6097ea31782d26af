"""Tool registry for managing available tools."""

import inspect
import logging
from typing import TYPE_CHECKING, Any, Iterable

from kota.core.exceptions import (
    DuplicateToolError,
    SchemaValidationError,
    ToolExecutionError,
    ToolNotFoundError,
)
from kota.core.hooks import check_reentrancy
from kota.tools.base import ParameterProperty, ToolDefinition
from kota.tools.builtin_tools import (
    create_directory,
    delete_file,
    edit_file,
    execute_bash,
    read_file,
    write_file,
)
from kota.tools.example_tools import calculator, string_transform
from kota.utils.threads import run_in_thread

if TYPE_CHECKING:
    from kota.core.skill_loader import SkillProfile

logger = logging.getLogger(__name__)


def _type_error(prop: ParameterProperty, value: Any) -> str | None:
    """Return a reason string if value does not match the declared type."""
    if prop.type == "string" and not isinstance(value, str):
        return f"expected string, got {type(value).__name__}"
    if prop.type == "number" and (
        isinstance(value, bool) or not isinstance(value, (int, float))
    ):
        return f"expected number, got {type(value).__name__}"
    if prop.type == "boolean" and not isinstance(value, bool):
        return f"expected boolean, got {type(value).__name__}"
    if prop.enum is not None and value not in prop.enum:
        allowed = ", ".join(str(v) for v in prop.enum)
        return f"'{value}' is not one of: {allowed}"
    return None


class ToolRegistry:
    """
    Registry for all available tools.

    Holds tool definitions plus the enabled/disabled name sets, and decides
    on every dispatch whether a tool may run. A name absent from both sets
    is enabled only if it was registered as a built-in default; the disabled
    set always wins.
    """

    def __init__(self) -> None:
        """Initialize an empty tool registry."""
        self._tools: dict[str, ToolDefinition] = {}
        self._defaults: set[str] = set()
        self._enabled: set[str] = set()
        self._disabled: set[str] = set()

    def register(
        self, tool: ToolDefinition, override: bool = False, default: bool = False
    ) -> None:
        """
        Register a tool.

        Args:
            tool: The tool definition
            override: Replace an existing tool with the same name
            default: Treat as a built-in default (enabled unless disabled)

        Raises:
            DuplicateToolError: If the name exists and override is False
        """
        if tool.name in self._tools and not override:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool
        if default:
            self._defaults.add(tool.name)

    def configure(self, enabled: Iterable[str], disabled: Iterable[str]) -> None:
        """Set the enabled and disabled name sets."""
        self._enabled = set(enabled)
        self._disabled = set(disabled)
        for name in sorted((self._enabled | self._disabled) - set(self._tools)):
            logger.warning(f"Configured tool is not registered: {name}")

    def get(self, name: str) -> ToolDefinition | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def resolve(self, name: str) -> ToolDefinition:
        """
        Get a tool by name.

        Raises:
            ToolNotFoundError: If no tool has this name
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def list_all(self) -> list[ToolDefinition]:
        """List all registered tools."""
        return list(self._tools.values())

    def is_enabled(self, name: str) -> bool:
        """Enable/disable sets only, ignoring any active skill."""
        if name in self._disabled:
            return False
        return name in self._enabled or name in self._defaults

    def effective_visibility(
        self, name: str, active_profile: "SkillProfile | None" = None
    ) -> bool:
        """Whether the tool may be dispatched right now."""
        if name not in self._tools or not self.is_enabled(name):
            return False
        if active_profile is None:
            return True
        return name in active_profile.allowed_tools

    def visible_tools(
        self, active_profile: "SkillProfile | None" = None
    ) -> list[ToolDefinition]:
        """List tools that pass effective visibility."""
        return [
            tool
            for tool in self._tools.values()
            if self.effective_visibility(tool.name, active_profile)
        ]

    def get_tool_schemas(
        self, active_profile: "SkillProfile | None" = None
    ) -> list[dict[str, Any]]:
        """Get tool schemas for all visible tools."""
        return [tool.get_tool_schema() for tool in self.visible_tools(active_profile)]

    @staticmethod
    def validate_args(tool: ToolDefinition, args: Any) -> dict[str, Any]:
        """
        Check arguments against the tool's parameter schema.

        Optional arguments passed as None are treated as absent and dropped.

        Returns:
            The arguments to pass to the handler

        Raises:
            SchemaValidationError: Naming every offending field
        """
        if not isinstance(args, dict):
            raise SchemaValidationError(
                tool.name, {"<arguments>": "expected an object"}
            )

        schema = tool.parameters
        errors: dict[str, str] = {}
        cleaned: dict[str, Any] = {}

        for name in schema.required:
            if args.get(name) is None:
                errors[name] = "missing required argument"

        for name, value in args.items():
            prop = schema.properties.get(name)
            if prop is None:
                errors[name] = "unexpected argument"
                continue
            if value is None:
                continue
            reason = _type_error(prop, value)
            if reason:
                errors[name] = reason
            else:
                cleaned[name] = value

        if errors:
            raise SchemaValidationError(tool.name, errors)
        return cleaned

    async def dispatch(
        self,
        name: str,
        args: dict[str, Any],
        active_profile: "SkillProfile | None" = None,
    ) -> dict[str, Any]:
        """
        Check visibility and arguments, then invoke the handler.

        Domain failures come back as ``{"error": ...}`` results.

        Raises:
            ReentrantDispatchError: If called from inside a hook
            ToolNotFoundError: If the tool is unknown or not visible
            SchemaValidationError: If the arguments do not match the schema
        """
        check_reentrancy(name)
        if not self.effective_visibility(name, active_profile):
            raise ToolNotFoundError(name)

        tool = self._tools[name]
        call_args = self.validate_args(tool, args)

        logger.debug(f"Invoking tool {name} with {call_args}")
        try:
            if inspect.iscoroutinefunction(tool.handler):
                result = await tool.handler(**call_args)
            else:
                result = await run_in_thread(tool.handler, **call_args)
        except ToolExecutionError as e:
            return {"error": str(e)}
        except Exception as e:
            logger.exception(f"Tool {name} raised an unexpected error")
            return ToolExecutionError(f"Error executing {name}: {e}").to_result()

        if not isinstance(result, dict):
            return {"result": result}
        return result

    @classmethod
    def with_builtins(cls) -> "ToolRegistry":
        """Create a ToolRegistry with builtin tools already registered.

        File and shell tools are defaults. delete_file and the example tools
        are registered but must be enabled explicitly.
        """
        registry = cls()

        registry.register(read_file, default=True)
        registry.register(write_file, default=True)
        registry.register(edit_file, default=True)
        registry.register(create_directory, default=True)
        registry.register(execute_bash, default=True)

        registry.register(delete_file)
        registry.register(calculator)
        registry.register(string_transform)

        return registry

"""Command registry for managing slash commands."""

import logging
from typing import TYPE_CHECKING

from kota.core.commands.base import Command, CommandResult
from kota.core.commands.resolver import CommandResolver, parse_invocation
from kota.core.exceptions import ToolNotFoundError

if TYPE_CHECKING:
    from kota.core.agent import AgentSession

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Built-in slash commands plus the configured custom commands."""

    def __init__(self, resolver: CommandResolver | None = None) -> None:
        self._commands: dict[str, Command] = {}
        self.resolver = resolver or CommandResolver()

    def register(self, cmd: Command) -> None:
        """Register a command and its aliases."""
        self._commands[cmd.name] = cmd
        for alias in cmd.aliases:
            self._commands[alias] = cmd

    def list_commands(self) -> list[Command]:
        """Built-in commands, one entry per command."""
        seen: dict[str, Command] = {}
        for cmd in self._commands.values():
            seen.setdefault(cmd.name, cmd)
        return list(seen.values())

    def get(self, name: str) -> Command | None:
        return self._commands.get(name.lower())

    def dispatch(self, input: str, session: "AgentSession") -> CommandResult | None:
        """
        Parse and execute a slash command.

        Built-in commands take precedence over custom commands of the same
        name. A custom command yields a result whose ``prompt`` is the
        expanded text.

        Args:
            input: Full input string
            session: Session the command runs against

        Returns:
            CommandResult if the input is a command, None otherwise

        Raises:
            CommandParseError: If the input cannot be parsed
            ToolNotFoundError: If no command has this name
        """
        if not input.startswith("/"):
            return None

        name, args = parse_invocation(input)
        cmd = self.get(name)
        if cmd is not None:
            logger.debug(f"Running built-in command /{cmd.name}")
            return cmd.execute(args, session)

        if name in self.resolver:
            logger.debug(f"Expanding custom command /{name}")
            return CommandResult(prompt=self.resolver.render(name, args))

        raise ToolNotFoundError(name, what="command")

    @classmethod
    def with_builtins(cls, resolver: CommandResolver | None = None) -> "CommandRegistry":
        """Create registry with built-in commands registered."""
        from kota.core.commands.handlers import (
            ConfigCommand,
            DeleteCommand,
            HelpCommand,
            HistoryCommand,
            LoadCommand,
            SessionsCommand,
            SkillCommand,
            SkillOffCommand,
            SkillsCommand,
            ToolsCommand,
        )

        registry = cls(resolver)
        help_cmd = HelpCommand()
        help_cmd.set_registry(registry)
        registry.register(help_cmd)
        registry.register(SkillsCommand())
        registry.register(SkillCommand())
        registry.register(SkillOffCommand())
        registry.register(ToolsCommand())
        registry.register(SessionsCommand())
        registry.register(HistoryCommand())
        registry.register(LoadCommand())
        registry.register(DeleteCommand())
        registry.register(ConfigCommand())
        return registry

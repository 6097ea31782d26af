"""Built-in slash command handlers."""

from typing import TYPE_CHECKING

from kota.core.commands.base import Command, CommandResult
from kota.core.commands.resolver import CommandArgs
from kota.core.exceptions import CommandParseError

if TYPE_CHECKING:
    from kota.core.agent import AgentSession
    from kota.core.commands.registry import CommandRegistry


class HelpCommand(Command):
    """Show available commands."""

    name = "help"
    aliases = ("?",)
    description = "Show available commands"
    _registry: "CommandRegistry | None" = None

    def set_registry(self, registry: "CommandRegistry") -> None:
        """Set the registry reference for dynamic help generation."""
        self._registry = registry

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        if self._registry is None:
            return CommandResult("Help unavailable: registry not set.")

        lines = ["**Available Commands:**"]
        for cmd in self._registry.list_commands():
            lines.append(f"`{cmd.signature}` - {cmd.description}")

        custom = self._registry.resolver
        if len(custom):
            lines.append("")
            lines.append("**Custom Commands:**")
            for name in custom.names():
                definition = custom.get(name)
                description = definition.description if definition else ""
                lines.append(f"`/{name}` - {description}".rstrip(" -"))
        return CommandResult("\n".join(lines))


class SkillsCommand(Command):
    """List all available skills."""

    name = "skills"
    description = "List all skills"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        skills = session.skills.list_skills()
        if not skills:
            return CommandResult("No skills available.")

        active = session.skills.active
        lines: list[str] = []
        for skill in skills:
            marker = " (active)" if active and active.name == skill.name else ""
            lines.append(f"- `{skill.name}`: {skill.description}{marker}")
        return CommandResult.listing("Skills", lines)


class SkillCommand(Command):
    """Activate a skill for the current session."""

    name = "skill"
    usage = "<name>"
    description = "Activate a skill"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        if not args.positional:
            return self.usage_error()

        profile = session.skills.activate(args.positional[0])
        tools = ", ".join(sorted(profile.allowed_tools)) or "none"
        return CommandResult(f"Skill `{profile.name}` activated. Tools: {tools}")


class SkillOffCommand(Command):
    """Deactivate the current skill."""

    name = "skill-off"
    description = "Deactivate the current skill"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        active = session.skills.active
        session.skills.deactivate()
        if active is None:
            return CommandResult("No skill is active.")
        return CommandResult(f"Skill `{active.name}` deactivated.")


class ToolsCommand(Command):
    """List registered tools and whether the model can see them."""

    name = "tools"
    description = "List tools and their visibility"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        registry = session.context.tool_registry
        profile = session.skills.active

        lines: list[str] = []
        for tool in registry.list_all():
            if registry.effective_visibility(tool.name, profile):
                state = "visible"
            elif not registry.is_enabled(tool.name):
                state = "disabled"
            else:
                state = "hidden by skill"
            lines.append(f"- `{tool.name}` ({state}): {tool.description}")
        return CommandResult.listing("Tools", lines)


class SessionsCommand(Command):
    """List stored sessions."""

    name = "sessions"
    description = "List stored sessions"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        sessions = session.context.history_store.list_sessions()
        if not sessions:
            return CommandResult("No sessions stored.")

        lines: list[str] = []
        for s in sessions:
            marker = " (current)" if s.id == session.session_id else ""
            title = s.title or "untitled"
            lines.append(
                f"- `{s.id}`: {title} ({s.message_count} messages, {s.updated_at}){marker}"
            )
        return CommandResult.listing("Sessions", lines)


class HistoryCommand(Command):
    """Show recent turns of the current session."""

    name = "history"
    usage = "[count]"
    description = "Show recent messages of this session"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        count = 10
        if args.positional:
            try:
                count = int(args.positional[0])
            except ValueError:
                raise CommandParseError(
                    f"Invalid count: {args.positional[0]}"
                ) from None

        turns = session.context.history_store.get_messages(
            session.session_id, max_history=max(count, 0)
        )
        if not turns or count <= 0:
            return CommandResult("No messages in this session.")

        lines: list[str] = []
        for turn in turns:
            content = turn.content if len(turn.content) <= 200 else turn.content[:200] + "..."
            lines.append(f"[{turn.role}] {content}")
        return CommandResult.listing(f"History ({len(turns)})", lines)


class LoadCommand(Command):
    """Switch to a stored session."""

    name = "load"
    usage = "<session-id>"
    description = "Switch to a stored session"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        if not args.positional:
            return self.usage_error()

        session_id = args.positional[0]
        if not session.context.history_store.exists(session_id):
            return CommandResult(f"Session not found: {session_id}")
        return CommandResult(f"Loaded session `{session_id}`.", session_id=session_id)


class DeleteCommand(Command):
    """Delete a stored session."""

    name = "delete"
    usage = "<session-id>"
    description = "Delete a stored session"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        if not args.positional:
            return self.usage_error()

        session_id = args.positional[0]
        if session_id == session.session_id:
            return CommandResult("Cannot delete the current session.")
        if session.context.history_store.delete(session_id):
            return CommandResult(f"Deleted session `{session_id}`.")
        return CommandResult(f"Session not found: {session_id}")


class ConfigCommand(Command):
    """Show the effective configuration."""

    name = "config"
    description = "Show the current configuration"

    def execute(self, args: CommandArgs, session: "AgentSession") -> CommandResult:
        config = session.context.config
        return CommandResult.listing(
            "Configuration",
            [
                f"- workspace: {config.workspace}",
                f"- model: {config.llm.provider}/{config.llm.model}",
                f"- temperature: {config.llm.temperature}",
                f"- tools enabled: {', '.join(config.tools.enabled) or '-'}",
                f"- tools disabled: {', '.join(config.tools.disabled) or '-'}",
                f"- hooks: {len(config.hooks.before_execute)} before, "
                f"{len(config.hooks.after_execute)} after",
                f"- tool timeout: {config.tool_timeout}s",
                f"- custom commands: {', '.join(sorted(config.commands)) or '-'}",
            ],
        )

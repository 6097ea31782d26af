"""Process-wide wiring built once from configuration."""

import logging

from kota.core.commands.registry import CommandRegistry
from kota.core.commands.resolver import CommandResolver
from kota.core.dispatch import ToolDispatcher
from kota.core.history import HistoryStore
from kota.core.hooks import HookPipeline
from kota.core.skill_loader import SkillLoader
from kota.tools.custom import register_custom_tools
from kota.tools.registry import ToolRegistry
from kota.utils.config import Config

logger = logging.getLogger(__name__)


class SharedContext:
    """Global shared state for the application.

    Everything here is read-only after construction except the history
    store, which serializes its own writes per session.
    """

    config: Config
    tool_registry: ToolRegistry
    hooks: HookPipeline
    dispatcher: ToolDispatcher
    skill_loader: SkillLoader
    history_store: HistoryStore
    command_registry: CommandRegistry

    def __init__(self, config: Config, tool_registry: ToolRegistry | None = None):
        self.config = config

        self.tool_registry = tool_registry or ToolRegistry.with_builtins()
        register_custom_tools(
            self.tool_registry, config.tools.custom, config.workspace
        )
        self.tool_registry.configure(config.tools.enabled, config.tools.disabled)

        self.hooks = HookPipeline.from_config(config.hooks)
        self.dispatcher = ToolDispatcher(
            self.tool_registry, self.hooks, timeout=config.tool_timeout
        )
        self.skill_loader = SkillLoader.from_config(config)
        self.history_store = HistoryStore.from_config(config)
        self.command_registry = CommandRegistry.with_builtins(
            CommandResolver.from_config(config)
        )

        logger.debug(
            f"Context ready: {len(self.tool_registry.list_all())} tools, "
            f"{len(self.skill_loader.list_skills())} skills, "
            f"{len(self.hooks.before_hooks)}+{len(self.hooks.after_hooks)} hooks"
        )

"""Tool dispatch: hooks, visibility, validation and handler under one timeout."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from kota.core.exceptions import ToolTimeoutError
from kota.core.hooks import Abort, HookPipeline, check_reentrancy
from kota.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from kota.core.skill_loader import SkillProfile

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """
    Runs one tool call end to end:

    before-hooks -> visibility and schema check -> handler -> after-hooks

    The whole pass, hooks included, is bounded by ``timeout`` seconds. On
    expiry the call returns a structured timeout result instead of raising.
    ToolNotFoundError and SchemaValidationError propagate to the caller.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        hooks: HookPipeline | None = None,
        timeout: float = 30.0,
    ):
        self.registry = registry
        self.hooks = hooks or HookPipeline()
        self.timeout = timeout

    async def dispatch(
        self,
        name: str,
        args: dict[str, Any],
        active_profile: "SkillProfile | None" = None,
    ) -> dict[str, Any]:
        """
        Dispatch a tool call.

        Args:
            name: Tool name
            args: Tool arguments
            active_profile: The session's active skill, if any

        Returns:
            The handler (or aborting hook) result after after-hooks ran

        Raises:
            ReentrantDispatchError: If called from inside a hook
            ToolNotFoundError: If the tool is unknown or not visible
            SchemaValidationError: If the arguments do not match the schema
        """
        check_reentrancy(name)
        try:
            async with asyncio.timeout(self.timeout):
                return await self._run(name, args, active_profile)
        except TimeoutError:
            error = ToolTimeoutError(name, self.timeout)
            logger.warning(str(error))
            return error.to_result()

    async def _run(
        self,
        name: str,
        args: dict[str, Any],
        active_profile: "SkillProfile | None",
    ) -> dict[str, Any]:
        outcome = await self.hooks.run_before(name, args)
        if isinstance(outcome, Abort):
            result = outcome.result
        else:
            result = await self.registry.dispatch(name, outcome, active_profile)
        return await self.hooks.run_after(name, result)

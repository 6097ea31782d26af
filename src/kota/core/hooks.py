"""Ordered before/after interceptors around tool dispatch."""

import copy
import inspect
import logging
import re
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from kota.core.exceptions import HookError, ReentrantDispatchError
from kota.utils.config import (
    AfterHookConfig,
    BeforeHookConfig,
    BlockHookConfig,
    DefaultsHookConfig,
    HooksConfig,
    LogHookConfig,
    RedactHookConfig,
    TruncateHookConfig,
)
from kota.utils.threads import run_in_thread

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Abort:
    """Returned by a before-hook to skip the handler with a final result."""

    result: dict[str, Any]


BeforeResult = Union[dict[str, Any], Abort, None]
AfterResult = Union[dict[str, Any], None]
BeforeHook = Callable[
    [str, dict[str, Any]], Union[BeforeResult, Awaitable[BeforeResult]]
]
AfterHook = Callable[[str, dict[str, Any]], Union[AfterResult, Awaitable[AfterResult]]]

_FAULT = object()
_in_hook: ContextVar[bool] = ContextVar("kota_in_hook", default=False)


def check_reentrancy(tool_name: str) -> None:
    """
    Refuse a dispatch that starts while a hook is running.

    Raises:
        ReentrantDispatchError: If called from inside a hook
    """
    if _in_hook.get():
        raise ReentrantDispatchError(tool_name)


def _hook_name(hook: Callable[..., Any]) -> str:
    return getattr(hook, "hook_name", None) or getattr(hook, "__name__", repr(hook))


class HookPipeline:
    """
    Before-hooks receive (tool name, args) and return new args, None to keep
    the args, or Abort. After-hooks receive (tool name, result) and return a
    new result or None. Hooks run in registration order.

    A hook that raises or returns the wrong shape is logged and skipped; the
    pipeline carries on with the last good args or result.
    """

    def __init__(self) -> None:
        self._before: list[BeforeHook] = []
        self._after: list[AfterHook] = []

    @classmethod
    def from_config(cls, config: HooksConfig) -> "HookPipeline":
        pipeline = cls()
        for before_cfg in config.before_execute:
            pipeline.add_before(make_before_hook(before_cfg))
        for after_cfg in config.after_execute:
            pipeline.add_after(make_after_hook(after_cfg))
        return pipeline

    def add_before(self, hook: BeforeHook) -> None:
        self._before.append(hook)

    def add_after(self, hook: AfterHook) -> None:
        self._after.append(hook)

    @property
    def before_hooks(self) -> list[BeforeHook]:
        return list(self._before)

    @property
    def after_hooks(self) -> list[AfterHook]:
        return list(self._after)

    async def run_before(
        self, tool_name: str, args: dict[str, Any]
    ) -> dict[str, Any] | Abort:
        """Run before-hooks in order. Stops at the first Abort."""
        current = args
        for hook in self._before:
            outcome = await self._call("before", hook, tool_name, current)
            if outcome is _FAULT or outcome is None:
                continue
            if isinstance(outcome, Abort):
                logger.info(f"Hook {_hook_name(hook)} aborted call to {tool_name}")
                return outcome
            if isinstance(outcome, dict):
                current = outcome
                continue
            self._report(
                HookError(
                    _hook_name(hook),
                    "before",
                    f"returned {type(outcome).__name__}, expected dict, Abort or None",
                )
            )
        return current

    async def run_after(self, tool_name: str, result: dict[str, Any]) -> dict[str, Any]:
        """Run after-hooks in order over the in-flight result."""
        current = result
        for hook in self._after:
            outcome = await self._call("after", hook, tool_name, current)
            if outcome is _FAULT or outcome is None:
                continue
            if isinstance(outcome, dict):
                current = outcome
                continue
            self._report(
                HookError(
                    _hook_name(hook),
                    "after",
                    f"returned {type(outcome).__name__}, expected dict or None",
                )
            )
        return current

    async def _call(
        self, stage: str, hook: Callable[..., Any], tool_name: str, value: Any
    ) -> Any:
        token = _in_hook.set(True)
        try:
            # Hooks get a private copy so a faulting hook cannot leave
            # half-applied edits behind.
            value = copy.deepcopy(value)
            if inspect.iscoroutinefunction(hook):
                return await hook(tool_name, value)
            return await run_in_thread(hook, tool_name, value)
        except Exception as e:
            self._report(HookError(_hook_name(hook), stage, str(e)), exc_info=True)
            return _FAULT
        finally:
            _in_hook.reset(token)

    @staticmethod
    def _report(error: HookError, exc_info: bool = False) -> None:
        logger.warning(f"{error} (continuing)", exc_info=exc_info)


# ============================================================================
# Configured hook kinds
# ============================================================================


def _named(fn: Callable[..., Any], name: str) -> Callable[..., Any]:
    fn.hook_name = name  # type: ignore[attr-defined]
    return fn


def make_before_hook(config: BeforeHookConfig) -> BeforeHook:
    """Build a before-hook from its configuration entry."""
    if isinstance(config, LogHookConfig):
        level = logging.getLevelName(config.level.upper())

        def log_call(tool_name: str, args: dict[str, Any]) -> None:
            logger.log(level, f"Tool call: {tool_name} {args}")

        return _named(log_call, "log")

    if isinstance(config, BlockHookConfig):
        blocked = frozenset(config.tools)
        message = config.message

        def block(tool_name: str, args: dict[str, Any]) -> Abort | None:
            if tool_name not in blocked:
                return None
            return Abort({"error": message or f"Tool '{tool_name}' is blocked by hook"})

        return _named(block, "block")

    if isinstance(config, DefaultsHookConfig):
        target = config.tool
        defaults = dict(config.args)

        def fill_defaults(tool_name: str, args: dict[str, Any]) -> dict[str, Any] | None:
            if tool_name != target:
                return None
            return {**defaults, **args}

        return _named(fill_defaults, "defaults")

    raise TypeError(f"Unsupported before hook: {config!r}")


def make_after_hook(config: AfterHookConfig) -> AfterHook:
    """Build an after-hook from its configuration entry."""
    if isinstance(config, LogHookConfig):
        level = logging.getLevelName(config.level.upper())

        def log_result(tool_name: str, result: dict[str, Any]) -> None:
            logger.log(level, f"Tool result: {tool_name} {result}")

        return _named(log_result, "log")

    if isinstance(config, TruncateHookConfig):
        limit = config.max_chars

        def truncate(tool_name: str, result: dict[str, Any]) -> dict[str, Any] | None:
            value = result.get("result")
            if not isinstance(value, str) or len(value) <= limit:
                return None
            clipped = len(value) - limit
            return {**result, "result": f"{value[:limit]}... [truncated {clipped} chars]"}

        return _named(truncate, "truncate")

    if isinstance(config, RedactHookConfig):
        pattern = re.compile(config.pattern)
        replacement = config.replacement

        def redact(tool_name: str, result: dict[str, Any]) -> dict[str, Any]:
            return {
                key: pattern.sub(replacement, value) if isinstance(value, str) else value
                for key, value in result.items()
            }

        return _named(redact, "redact")

    raise TypeError(f"Unsupported after hook: {config!r}")

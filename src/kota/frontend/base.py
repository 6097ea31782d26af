"""Display surface used by chat sessions."""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

from kota.core.exceptions import KotaError

TOOL_DISPLAY_WIDTH = 40


def describe_tool_call(name: str, arguments: str) -> str:
    """One-line label for a pending tool call, clipped for status lines."""
    label = f"Making Tool Call: {name} {arguments}"
    if len(label) > TOOL_DISPLAY_WIDTH:
        label = label[:TOOL_DISPLAY_WIDTH] + "..."
    return label


def describe_error(error: Exception) -> str:
    if isinstance(error, KotaError):
        return f"Error ({error.kind}): {error}"
    return f"Error: {error}"


class Frontend(ABC):
    """Where a session's output goes.

    Subclasses render four kinds of output. Tool-call and error display
    are built on top of those and rarely need overriding.
    """

    @abstractmethod
    async def show_welcome(self, session_id: str) -> None:
        """Greet the user at the start of a session."""

    @abstractmethod
    async def show_message(self, content: str) -> None:
        """Display an assistant reply."""

    @abstractmethod
    async def show_system_message(self, content: str) -> None:
        """Display command output, notices and errors."""

    @abstractmethod
    @asynccontextmanager
    async def show_transient(self, content: str) -> AsyncIterator[None]:
        """Display a status line for as long as the context is open."""
        yield

    @asynccontextmanager
    async def show_tool_call(self, name: str, arguments: str) -> AsyncIterator[None]:
        async with self.show_transient(describe_tool_call(name, arguments)):
            yield

    async def show_error(self, error: Exception) -> None:
        await self.show_system_message(describe_error(error))


class SilentFrontend(Frontend):
    """Discards all output; used by the API and tests."""

    async def show_welcome(self, session_id: str) -> None:
        pass

    async def show_message(self, content: str) -> None:
        pass

    async def show_system_message(self, content: str) -> None:
        pass

    @asynccontextmanager
    async def show_transient(self, content: str) -> AsyncIterator[None]:
        yield

"""Slash command contract shared by the built-ins."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterable

if TYPE_CHECKING:
    from kota.core.agent import AgentSession
    from kota.core.commands.resolver import CommandArgs


@dataclass(frozen=True)
class CommandResult:
    """What the chat loop does after a command.

    ``message`` is shown to the user. ``prompt`` is sent to the model as the
    next user turn. ``session_id`` asks the loop to switch sessions.
    """

    message: str | None = None
    prompt: str | None = None
    session_id: str | None = None

    @classmethod
    def listing(cls, title: str, lines: Iterable[str]) -> "CommandResult":
        return cls("\n".join([f"**{title}:**", *lines]))


class Command(ABC):
    name: ClassVar[str]
    aliases: ClassVar[tuple[str, ...]] = ()
    usage: ClassVar[str] = ""
    description: ClassVar[str] = ""

    @property
    def signature(self) -> str:
        return f"/{self.name} {self.usage}".rstrip()

    def usage_error(self) -> CommandResult:
        return CommandResult(f"Usage: {self.signature}")

    @abstractmethod
    def execute(self, args: "CommandArgs", session: "AgentSession") -> CommandResult:
        """Run against ``session``; built-ins never reach the model directly."""

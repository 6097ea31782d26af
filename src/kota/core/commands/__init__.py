"""Slash command system."""

from kota.core.commands.base import Command, CommandResult
from kota.core.commands.registry import CommandRegistry
from kota.core.commands.resolver import (
    CommandArgs,
    CommandResolver,
    LiteralCommand,
    TemplateCommand,
    parse_invocation,
    tokenize,
)

__all__ = [
    "Command",
    "CommandArgs",
    "CommandRegistry",
    "CommandResolver",
    "CommandResult",
    "LiteralCommand",
    "TemplateCommand",
    "parse_invocation",
    "tokenize",
]

"""Slash-command parsing and custom command definitions."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, NamedTuple, Union

from kota.core.exceptions import (
    CommandParseError,
    KotaError,
    ToolExecutionError,
    ToolNotFoundError,
)
from kota.utils.config import TemplateSpec

if TYPE_CHECKING:
    from kota.utils.config import Config

logger = logging.getLogger(__name__)


class _Token(NamedTuple):
    value: str
    key: str | None  # set when the raw token was a bare identifier=value


def _scan(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    buf: list[str] = []
    in_token = False
    quote: str | None = None
    quoted = False  # a quote opened before any unquoted "="
    eq_at: int | None = None

    def flush() -> None:
        value = "".join(buf)
        key = None
        if eq_at is not None and not quoted and value[:eq_at].isidentifier():
            key, value = value[:eq_at], value[eq_at + 1 :]
        tokens.append(_Token(value, key))

    i = 0
    while i < len(text):
        ch = text[i]
        if quote == "'":
            if ch == "'":
                quote = None
            else:
                buf.append(ch)
        elif quote == '"':
            if ch == "\\" and i + 1 < len(text):
                i += 1
                buf.append(text[i])
            elif ch == '"':
                quote = None
            else:
                buf.append(ch)
        elif ch.isspace():
            if in_token:
                flush()
                buf, in_token, quoted, eq_at = [], False, False, None
        else:
            in_token = True
            if ch in ("'", '"'):
                quote = ch
                if eq_at is None:
                    quoted = True
            elif ch == "\\" and i + 1 < len(text):
                i += 1
                buf.append(text[i])
            elif ch == "=" and eq_at is None:
                eq_at = len(buf)
                buf.append(ch)
            else:
                buf.append(ch)
        i += 1

    if quote is not None:
        raise CommandParseError(f"Unbalanced {quote} quote in: {text}")
    if in_token:
        flush()
    return tokens


def tokenize(text: str) -> list[str]:
    """
    Split text on whitespace, keeping quoted spans together.

    Quotes are stripped. Inside double quotes a backslash escapes the next
    character; single quotes are literal.

    Raises:
        CommandParseError: If a quote is left open
    """
    return [
        f"{tok.key}={tok.value}" if tok.key is not None else tok.value
        for tok in _scan(text)
    ]


class CommandArgs(Mapping[str, str]):
    """
    Arguments of one invocation as a single ordered association.

    Positional values are reachable by index through ``positional`` and by
    key as "1", "2", ... Named bindings take precedence over positional slots
    sharing a key.
    """

    def __init__(
        self,
        positional: list[str] | None = None,
        named: Mapping[str, str] | None = None,
    ):
        self._positional = tuple(positional or ())
        self._named = dict(named or {})
        self._values: dict[str, str] = {}
        for index, value in enumerate(self._positional, start=1):
            self._values[str(index)] = value
        self._values.update(self._named)

    @classmethod
    def from_text(cls, text: str) -> "CommandArgs":
        positional: list[str] = []
        named: dict[str, str] = {}
        for tok in _scan(text):
            if tok.key is None:
                positional.append(tok.value)
            else:
                named[tok.key] = tok.value
        return cls(positional, named)

    @property
    def positional(self) -> tuple[str, ...]:
        return self._positional

    @property
    def named(self) -> dict[str, str]:
        return dict(self._named)

    def first(self, *keys: str, default: str = "") -> str:
        """Return the value of the first present key, else ``default``."""
        for key in keys:
            if key in self._values:
                return self._values[key]
        return default

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"CommandArgs({self._values!r})"


def parse_invocation(text: str) -> tuple[str, CommandArgs]:
    """
    Parse ``[/]name arg ...`` into the command name and its arguments.

    Raises:
        CommandParseError: If the input is empty or has an open quote
    """
    body = text.strip()
    if body.startswith("/"):
        body = body[1:]

    parts = body.split(None, 1)
    if not parts:
        raise CommandParseError("Empty command")

    name = parts[0]
    rest = parts[1] if len(parts) > 1 else ""
    return name, CommandArgs.from_text(rest)


# ============================================================================
# Command definitions
# ============================================================================

Capability = Callable[[CommandArgs], str]


@dataclass(frozen=True)
class LiteralCommand:
    """Fixed prompt text. Arguments are ignored."""

    text: str
    description: str = ""

    def render(self, args: CommandArgs) -> str:
        return self.text


@dataclass(frozen=True)
class TemplateCommand:
    """Prompt produced by a capability from the invocation arguments."""

    capability: Capability
    description: str = ""

    def render(self, args: CommandArgs) -> str:
        try:
            text = self.capability(args)
        except KotaError:
            raise
        except Exception as e:
            raise ToolExecutionError(f"Command template failed: {e}") from e
        if not isinstance(text, str):
            raise ToolExecutionError(
                f"Command template returned {type(text).__name__}, expected str"
            )
        return text


CommandDefinition = Union[LiteralCommand, TemplateCommand]


def template_from_spec(spec: TemplateSpec) -> Capability:
    """
    Build a capability from a configured template.

    Each placeholder takes the first of its keys present in the arguments,
    else its default. A placeholder without keys is looked up by its own name.
    """
    params = {
        name: (tuple(param.keys) or (name,), param.default)
        for name, param in spec.params.items()
    }

    def render(args: CommandArgs) -> str:
        values = {
            name: args.first(*keys, default=default)
            for name, (keys, default) in params.items()
        }
        return spec.template.format(**values)

    return render


def definition_from_config(value: str | TemplateSpec) -> CommandDefinition:
    if isinstance(value, TemplateSpec):
        return TemplateCommand(template_from_spec(value), value.description)
    return LiteralCommand(value)


class CommandResolver:
    """Custom commands by name, expanded into prompt text."""

    def __init__(self, definitions: Mapping[str, CommandDefinition] | None = None):
        self._definitions: dict[str, CommandDefinition] = dict(definitions or {})

    @classmethod
    def from_config(cls, config: "Config") -> "CommandResolver":
        resolver = cls()
        for name, value in config.commands.items():
            resolver.register(name, definition_from_config(value))
        logger.debug(f"Loaded {len(resolver)} custom commands")
        return resolver

    def register(self, name: str, definition: CommandDefinition) -> None:
        self._definitions[name] = definition

    def get(self, name: str) -> CommandDefinition | None:
        return self._definitions.get(name)

    def names(self) -> list[str]:
        return sorted(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def render(self, name: str, args: CommandArgs) -> str:
        """
        Render a command by name.

        Raises:
            ToolNotFoundError: If no command has this name
        """
        definition = self._definitions.get(name)
        if definition is None:
            raise ToolNotFoundError(name, what="command")
        return definition.render(args)

    def expand(self, text: str) -> str:
        """
        Parse ``/name args`` and render the named command.

        Raises:
            CommandParseError: If the input cannot be parsed
            ToolNotFoundError: If no command has this name
        """
        name, args = parse_invocation(text)
        return self.render(name, args)

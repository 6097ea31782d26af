"""Discovery of ``<dir>/<id>/<FILE>.md`` definitions with YAML frontmatter."""

import logging
import re
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

from kota.core.exceptions import ConfigError

T = TypeVar("T")
logger = logging.getLogger(__name__)

_FRONTMATTER = re.compile(r"\A---\r?\n(.*?)\r?\n---\r?\n", re.DOTALL)


class InvalidDefError(ConfigError):
    """A definition file exists but cannot be turned into its object."""

    def __init__(self, kind: str, def_id: str, reason: str):
        super().__init__(f"Invalid {kind} '{def_id}': {reason}")
        self.def_kind = kind
        self.def_id = def_id
        self.reason = reason


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Split a leading ``---`` YAML block from the rest of the file.

    Content without a closed block, or whose block is not a mapping, comes
    back whole with an empty dict. The body is never stripped.

    Raises:
        yaml.YAMLError: If the block is not valid YAML
    """
    match = _FRONTMATTER.match(content)
    if match is None:
        return {}, content

    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        return {}, content
    return data, content[match.end() :]


def discover_definitions(
    path: Path,
    filename: str,
    parse_fn: Callable[[str, dict[str, Any], str], T | None],
) -> list[T]:
    """
    Parse ``path/*/filename`` in folder-name order.

    ``parse_fn(def_id, frontmatter, body)`` may return None to skip a
    folder. Unreadable or invalid files are logged and skipped so one bad
    definition never hides the others.
    """
    if not path.is_dir():
        logger.debug(f"Definitions directory not found: {path}")
        return []

    results: list[T] = []
    for def_dir in sorted(p for p in path.iterdir() if p.is_dir()):
        def_file = def_dir / filename
        if not def_file.is_file():
            logger.warning(f"No {filename} found in {def_dir.name}")
            continue

        try:
            frontmatter, body = parse_frontmatter(def_file.read_text(encoding="utf-8"))
            result = parse_fn(def_dir.name, frontmatter, body)
        except (OSError, yaml.YAMLError, ValueError, ConfigError) as e:
            logger.warning(f"Skipping {def_dir.name}/{filename}: {e}")
            continue

        if result is not None:
            results.append(result)
    return results

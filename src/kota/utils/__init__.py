"""Utilities package."""

from kota.utils.def_loader import (
    InvalidDefError,
    discover_definitions,
    parse_frontmatter,
)
from kota.utils.logging import setup_logging

__all__ = [
    "InvalidDefError",
    "discover_definitions",
    "parse_frontmatter",
    "setup_logging",
]

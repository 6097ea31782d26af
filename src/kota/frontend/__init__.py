"""Frontend abstraction for kota."""

from kota.frontend.base import Frontend, SilentFrontend
from kota.frontend.console import ConsoleFrontend

__all__ = ["Frontend", "SilentFrontend", "ConsoleFrontend"]

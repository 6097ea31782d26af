"""kota: command-line AI coding agent."""

__version__ = "0.1.0"

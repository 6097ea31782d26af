"""Rich terminal rendering for interactive chat."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from kota.frontend.base import Frontend, describe_error


class ConsoleFrontend(Frontend):
    """Renders replies as markdown and tool calls as a spinner."""

    def __init__(self, model: str, console: Console | None = None):
        self.model = model
        self.console = console or Console()

    async def show_welcome(self, session_id: str) -> None:
        grid = Table.grid(padding=(0, 2))
        grid.add_row("[bold]model[/bold]", self.model)
        grid.add_row("[bold]session[/bold]", session_id)
        self.console.print(Panel(grid, title="kota", border_style="cyan", expand=False))
        self.console.print(
            "Type /help for commands, 'quit' or 'exit' to end the session.\n"
        )

    async def show_message(self, content: str) -> None:
        self.console.print(Markdown(content))

    async def show_system_message(self, content: str) -> None:
        self.console.print(Markdown(content), style="dim")

    async def show_error(self, error: Exception) -> None:
        self.console.print(describe_error(error), style="bold red", markup=False)

    def prompt(self) -> str:
        return self.console.input("[bold green]You:[/bold green] ")

    @asynccontextmanager
    async def show_transient(self, content: str) -> AsyncIterator[None]:
        with self.console.status(f"[grey30]{content}[/grey30]"):
            yield

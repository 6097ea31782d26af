"""CLI interface for kota using Typer."""

from pathlib import Path
from typing import Annotated

import questionary
import typer
from rich.console import Console

from kota.cli.chat import chat_command
from kota.cli.onboarding import OnboardingWizard
from kota.cli.server import serve_command
from kota.cli.sessions import sessions_app
from kota.cli.skills import skills_app
from kota.cli.tools import tools_app
from kota.core.exceptions import ConfigError
from kota.utils.config import Config

app = typer.Typer(
    name="kota",
    help="kota: command-line AI coding agent with pluggable tools",
    no_args_is_help=True,
    add_completion=True,
)
app.add_typer(sessions_app, name="sessions")
app.add_typer(skills_app, name="skills")
app.add_typer(tools_app, name="tools")

console = Console()

DEFAULT_WORKSPACE = Path(".kota")


def load_config(workspace_path: Path) -> Config:
    """Load configuration, offering onboarding when none exists."""
    config_file = workspace_path / "config.user.yaml"

    if not config_file.exists():
        run_onboarding = questionary.confirm(
            "No configuration found. Run onboarding now?",
            default=True,
        ).ask()

        if not run_onboarding or not OnboardingWizard(workspace=workspace_path).run():
            console.print("[yellow]Run 'kota init' to set up configuration.[/yellow]")
            raise typer.Exit(1)

    try:
        return Config.load(workspace_path)
    except ConfigError as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    workspace: Annotated[
        Path,
        typer.Option(
            "--workspace",
            "-w",
            help="Path to workspace directory",
        ),
    ] = DEFAULT_WORKSPACE,
) -> None:
    """
    kota: command-line AI coding agent with pluggable tools.

    Configuration is loaded from ./.kota/ by default.
    Use --workspace to specify a custom workspace directory.
    """
    ctx.ensure_object(dict)
    ctx.obj["workspace"] = workspace.resolve()
    if ctx.invoked_subcommand != "init":
        ctx.obj["config"] = load_config(ctx.obj["workspace"])


@app.command()
def chat(
    ctx: typer.Context,
    session: Annotated[
        str | None,
        typer.Option(
            "--session",
            "-s",
            help="Session id to resume or create",
        ),
    ] = None,
) -> None:
    """Start interactive chat session."""
    chat_command(ctx, session_id=session)


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port")] = None,
) -> None:
    """Start the HTTP API server."""
    serve_command(ctx, host=host, port=port)


@app.command()
def init(ctx: typer.Context) -> None:
    """Initialize kota configuration with interactive onboarding."""
    wizard = OnboardingWizard(workspace=ctx.obj["workspace"])
    if not wizard.run():
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

"""Tools subcommand group for kota CLI."""

import asyncio
import json

import typer
from rich.console import Console

from kota.core.context import SharedContext
from kota.core.exceptions import KotaError
from kota.core.skill_manager import SkillManager

tools_app = typer.Typer(
    help="List and run tools",
    no_args_is_help=True,
)
console = Console()


@tools_app.command("list")
def list_tools(
    ctx: typer.Context,
    skill: str | None = typer.Option(
        None, "--skill", "-s", help="Show visibility under this skill"
    ),
) -> None:
    """List registered tools and their visibility."""
    context = SharedContext(ctx.obj["config"])
    registry = context.tool_registry

    profile = None
    if skill:
        try:
            profile = context.skill_loader.load_skill(skill)
        except KotaError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    tools = registry.list_all()
    console.print(typer.style(f"Tools: {len(tools)}", bold=True, fg="cyan"))

    for t in tools:
        visible = registry.effective_visibility(t.name, profile)
        state = "[green]visible[/green]" if visible else "[dim]hidden[/dim]"
        console.print(f"\n[bold]{t.name}[/bold] {state}")
        console.print(f"  {t.description}")
        for param_name, prop in t.parameters.properties.items():
            required = ", required" if param_name in t.parameters.required else ""
            console.print(f"    - {param_name} ({prop.type}{required}): {prop.description}")


@tools_app.command("run")
def run_tool(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the tool to run"),
    args: str | None = typer.Option(
        None,
        "--args",
        "-a",
        help="Arguments as JSON string (e.g., '{\"text\": \"hello\"}')",
    ),
    skill: str | None = typer.Option(
        None, "--skill", "-s", help="Run with this skill active"
    ),
) -> None:
    """Run a tool through the full dispatch pipeline."""
    parsed_args = {}
    if args:
        try:
            parsed_args = json.loads(args)
        except json.JSONDecodeError as e:
            console.print(f"[red]Invalid JSON in args: {e}[/red]")
            raise typer.Exit(1)

    context = SharedContext(ctx.obj["config"])
    skills = SkillManager(context.skill_loader)

    async def _run() -> dict:
        if skill:
            skills.activate(skill)
        return await context.dispatcher.dispatch(name, parsed_args, skills.active)

    try:
        result = asyncio.run(_run())
    except KotaError as e:
        console.print(f"[red]Error ({e.kind}): {e}[/red]")
        raise typer.Exit(1)

    console.print_json(json.dumps(result, default=str))
    if "error" in result:
        raise typer.Exit(1)

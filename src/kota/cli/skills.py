"""``kota skills``: inspect the built-in and workspace skills."""

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from kota.core.exceptions import SkillNotFoundError
from kota.core.skill_loader import SkillLoader
from kota.core.skill_manager import SkillManager

skills_app = typer.Typer(
    help="List and inspect skills",
    no_args_is_help=True,
)
console = Console()


def _tool_list(names: frozenset[str]) -> str:
    return ", ".join(sorted(names)) or "none"


@skills_app.command("list")
def list_skills(ctx: typer.Context) -> None:
    """List all available skills."""
    skills = SkillLoader.from_config(ctx.obj["config"]).list_skills()

    table = Table(title=f"Skills: {len(skills)}", title_justify="left")
    table.add_column("Name", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Tools")
    for skill in skills:
        table.add_row(skill.name, skill.description, _tool_list(skill.allowed_tools))
    console.print(table)


@skills_app.command("show")
def show_skill(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the skill"),
    prompt: bool = typer.Option(
        False, "--prompt", help="Print the system prompt with this skill active"
    ),
) -> None:
    """Show a skill's tools and instructions."""
    config = ctx.obj["config"]
    manager = SkillManager(SkillLoader.from_config(config))

    try:
        skill = manager.activate(name)
    except SkillNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        names = ", ".join(s.name for s in manager.list_skills())
        console.print(f"Available skills: {names}")
        raise typer.Exit(1)

    if prompt:
        console.print(manager.enhance_prompt(config.system_prompt), markup=False)
        return

    console.print(typer.style(f"Skill: {skill.name}", bold=True, fg="cyan"))
    console.print(f"Description: {skill.description}")
    console.print(f"Tools: {_tool_list(skill.allowed_tools)}")
    if skill.dependencies:
        console.print(f"Dependencies: {skill.dependencies}")
    if skill.instructions:
        console.print()
        console.print(Markdown(skill.instructions))

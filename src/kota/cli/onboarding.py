"""First-run wizard that writes ``config.user.yaml``."""

from pathlib import Path
from typing import Any

import questionary
import yaml
from pydantic import ValidationError
from rich.console import Console

from kota.provider import LLMProvider
from kota.tools.registry import ToolRegistry
from kota.utils.config import Config

WORKSPACE_DIRS = ("skills", ".history", ".logs")

STARTER_COMMANDS: dict[str, Any] = {
    "fix": "Analyze and fix the problems in the current file.",
    "test": {
        "template": "Write and run tests for {file}.",
        "description": "Test a file",
        "params": {"file": {"keys": ["file", "1"], "default": "the current file"}},
    },
    "refactor": {
        "template": "Refactor {file} to {goal}.",
        "description": "Refactor a file",
        "params": {
            "file": {"keys": ["file", "1"], "default": "the current file"},
            "goal": {"keys": ["goal", "2"], "default": "improve its structure"},
        },
    },
}


class OnboardingWizard:
    """Collects answers into ``state``, validates them, then writes them out."""

    def __init__(self, workspace: Path | None = None, console: Console | None = None):
        self.workspace = workspace or Path.cwd() / ".kota"
        self.console = console or Console()
        self.state: dict[str, Any] = {}

    @property
    def config_path(self) -> Path:
        return self.workspace / "config.user.yaml"

    def setup_workspace(self) -> None:
        for subdir in WORKSPACE_DIRS:
            (self.workspace / subdir).mkdir(parents=True, exist_ok=True)

    def configure_llm(self) -> None:
        """Pick a provider, model and key; a blank key becomes ``${ENV_VAR}``."""
        choices = [
            questionary.Choice(
                title=f"{p.display_name} (default: {p.default_model})", value=alias
            )
            for alias, p in LLMProvider.onboarding_choices()
        ]
        choices.append(questionary.Choice("Other (custom)", value="other"))

        provider = questionary.select("Select LLM provider:", choices=choices).ask()
        provider_cls = LLMProvider.lookup(provider)

        model = questionary.text("Model name:", default=provider_cls.default_model).ask()

        env_var = provider_cls.env_var
        env_hint = f" (empty to use ${env_var})" if env_var else ""
        api_key = questionary.text(f"API key{env_hint}:").ask()
        if not api_key and env_var:
            api_key = f"${{{env_var}}}"

        api_base = ""
        if provider == "other" or provider_cls.default_api_base:
            api_base = questionary.text(
                "API base URL (optional):",
                default=provider_cls.default_api_base or "",
            ).ask()

        llm: dict[str, Any] = {"provider": provider, "model": model}
        if api_key:
            llm["api_key"] = api_key
        if api_base:
            llm["api_base"] = api_base
        self.state["llm"] = llm

    def configure_tools(self) -> None:
        """Offer the registered tools that are off by default."""
        registry = ToolRegistry.with_builtins()
        optional = [t.name for t in registry.list_all() if not registry.is_enabled(t.name)]
        if not optional:
            return

        enabled = (
            questionary.checkbox(
                "Enable optional tools:",
                choices=[questionary.Choice(name, value=name) for name in optional],
            ).ask()
            or []
        )
        if enabled:
            self.state["tools"] = {"enabled": enabled}

    def configure_commands(self) -> None:
        names = ", ".join(f"/{name}" for name in STARTER_COMMANDS)
        if questionary.confirm(f"Add starter commands ({names})?", default=True).ask():
            self.state["commands"] = dict(STARTER_COMMANDS)

    def save_config(self) -> bool:
        """
        Validate ``state`` as a Config and write it as YAML.

        Returns:
            False, after printing each problem, if validation fails
        """
        try:
            Config.model_validate({"workspace": self.workspace, **self.state})
        except ValidationError as e:
            self.console.print("\n[red]Configuration validation failed:[/red]")
            for error in e.errors():
                where = ".".join(str(part) for part in error["loc"])
                self.console.print(f"  - {where}: {error['msg']}")
            return False

        self.workspace.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.safe_dump(self.state, f, default_flow_style=False, sort_keys=False)
        return True

    def confirm_overwrite(self) -> bool:
        if not self.config_path.exists():
            return True

        self.console.print(f"\n[yellow]Workspace already exists at {self.workspace}[/yellow]")
        return questionary.confirm(
            "This will overwrite your existing configuration. Continue?",
            default=False,
        ).ask()

    def run(self) -> bool:
        """Run every step; True once the config file is written."""
        if not self.confirm_overwrite():
            self.console.print("[yellow]Onboarding cancelled.[/yellow]")
            return False

        self.console.print("\n[bold cyan]Welcome to kota![/bold cyan]")
        self.console.print("Let's set up your configuration.\n")

        self.setup_workspace()
        self.configure_llm()
        self.configure_tools()
        self.configure_commands()

        if not self.save_config():
            return False

        self.console.print(f"\n[green]Configuration saved to {self.config_path}[/green]")
        self.console.print("Edit this file to make changes.\n")
        return True

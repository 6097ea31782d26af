"""Sessions subcommand group for kota CLI."""

import typer
from rich.console import Console
from rich.table import Table

from kota.core.history import HistoryStore

sessions_app = typer.Typer(
    help="Inspect and manage stored sessions",
    no_args_is_help=True,
)
console = Console()


def _store(ctx: typer.Context) -> HistoryStore:
    return HistoryStore.from_config(ctx.obj["config"])


@sessions_app.command("list")
def list_sessions(ctx: typer.Context) -> None:
    """List stored sessions, most recent first."""
    sessions = _store(ctx).list_sessions()
    if not sessions:
        console.print("No sessions stored.")
        return

    table = Table(title=f"Sessions: {len(sessions)}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Messages", justify="right")
    table.add_column("Updated")
    for s in sessions:
        table.add_row(s.id, s.title or "-", str(s.message_count), s.updated_at)
    console.print(table)


@sessions_app.command("show")
def show_session(
    ctx: typer.Context,
    session_id: str = typer.Argument(..., help="Session id"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of recent messages"),
) -> None:
    """Show the recent messages of a session."""
    store = _store(ctx)
    if not store.exists(session_id):
        console.print(f"[red]Session not found: {session_id}[/red]")
        raise typer.Exit(1)

    for turn in store.get_messages(session_id, max_history=limit):
        console.print(f"[bold]{turn.role}[/bold] [dim]{turn.timestamp}[/dim]")
        if turn.content:
            console.print(turn.content, markup=False)
        for tc in turn.tool_calls or []:
            function = tc.get("function", {})
            console.print(
                f"  -> {function.get('name')} {function.get('arguments')}", markup=False
            )


@sessions_app.command("delete")
def delete_session(
    ctx: typer.Context,
    session_id: str = typer.Argument(..., help="Session id"),
) -> None:
    """Delete a stored session."""
    if not _store(ctx).delete(session_id):
        console.print(f"[red]Session not found: {session_id}[/red]")
        raise typer.Exit(1)
    console.print(f"Deleted session {session_id}")

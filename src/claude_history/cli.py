"""Claude History CLI - browse and search Claude Code sessions."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from claude_history import __version__, config
from claude_history.context.store import SessionStore
from claude_history.errors import ClaudeHistoryError

app = typer.Typer(
    name="claude-history",
    help="Search and reference Claude Code CLI session history.",
    no_args_is_help=True,
)
mcp_app = typer.Typer(help="MCP server management.")

app.add_typer(mcp_app, name="mcp")

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"claude-history {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", "-r", help="Claude Code directory (default ~/.claude)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log skipped files")] = False,
) -> None:
    """Claude History - search and reference Claude Code CLI sessions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if root is not None:
        config.CLAUDE_DIR = root.expanduser().resolve()


def _open_store() -> SessionStore:
    try:
        return SessionStore(root=config.CLAUDE_DIR)
    except ClaudeHistoryError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc


def _summary_table(title: str, summaries) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Updated", style="green")
    table.add_column("Project")
    table.add_column("Msgs", justify="right")
    table.add_column("Preview")

    for s in summaries:
        table.add_row(
            s.id,
            (s.updated_at or "")[:19],
            s.project_path or s.cwd or "",
            str(s.message_count),
            s.preview.replace("\n", " ")[:80],
        )
    return table


# ── Session commands ─────────────────────────────────────────────


@app.command("list")
def list_command(
    limit: Annotated[
        int, typer.Option("--limit", "-n", help="Maximum sessions to show (max 100)")
    ] = config.DEFAULT_LIST_LIMIT,
) -> None:
    """List recent sessions, most recently updated first."""
    store = _open_store()
    try:
        summaries = store.list_sessions(limit=limit)
    except ClaudeHistoryError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc

    if not summaries:
        console.print(f"[dim]No sessions found under {store.root}[/dim]")
        return
    console.print(_summary_table("Recent Sessions", summaries))


@app.command("search")
def search_command(
    query: Annotated[str, typer.Argument(help="Text to search for in session messages")],
    limit: Annotated[
        int, typer.Option("--limit", "-n", help="Maximum results (max 50)")
    ] = config.DEFAULT_SEARCH_LIMIT,
) -> None:
    """Fuzzy-search session content."""
    store = _open_store()
    try:
        summaries = store.search_sessions(query, limit=limit)
    except ClaudeHistoryError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc

    if not summaries:
        console.print(f"[yellow]No sessions match[/yellow] {query!r}")
        return
    console.print(_summary_table(f"Sessions matching {query!r}", summaries))


@app.command("show")
def show_command(
    session_id: Annotated[str, typer.Argument(help="Session ID to show")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the session as JSON")] = False,
) -> None:
    """Print every message of a session."""
    store = _open_store()
    try:
        session = store.get_session(session_id)
    except ClaudeHistoryError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc
    if not session:
        console.print(f"[red]Session not found:[/red] {session_id}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(session.model_dump_json(indent=2))
        return

    console.print(f"[bold]{session.id}[/bold]  [dim]{session.cwd or session.project_path or ''}[/dim]")
    for message in session.messages:
        stamp = message.timestamp.isoformat() if message.timestamp else ""
        console.print(f"\n[cyan]{message.role}[/cyan] [dim]{stamp}[/dim]")
        console.print(message.content, markup=False, highlight=False)


@app.command("context")
def context_command(
    session_id: Annotated[str, typer.Argument(help="Session ID to summarize")],
) -> None:
    """Show a condensed summary of what a session worked on."""
    store = _open_store()
    try:
        context = store.get_session_context(session_id)
    except ClaudeHistoryError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc
    if not context:
        console.print(f"[red]Session not found:[/red] {session_id}")
        raise typer.Exit(1)

    typer.echo(json.dumps(context.model_dump(), indent=2))


# ── MCP commands ─────────────────────────────────────────────────


@mcp_app.command("serve")
def mcp_serve() -> None:
    """Start the MCP server (stdio transport)."""
    from claude_history.mcp.server import mcp

    mcp.run()


@mcp_app.command("init")
def mcp_init(
    config_path: Annotated[
        Path, typer.Option("--config", "-c", help="MCP client config file")
    ] = config.CLAUDE_DESKTOP_CONFIG,
) -> None:
    """Register the MCP server in an MCP client config (Claude Desktop by default)."""
    from claude_history.mcp.installer import install_mcp_config

    if install_mcp_config(config_path):
        console.print(f"  [green]✓[/green] {config_path}")
        console.print("\n[dim]Restart the MCP client to pick up the new server.[/dim]")
    else:
        console.print(f"[red]Failed to write MCP config:[/red] {config_path}")
        raise typer.Exit(1)


@mcp_app.command("remove")
def mcp_remove(
    config_path: Annotated[
        Path, typer.Option("--config", "-c", help="MCP client config file")
    ] = config.CLAUDE_DESKTOP_CONFIG,
) -> None:
    """Remove the MCP server from an MCP client config."""
    from claude_history.mcp.installer import remove_mcp_config

    if remove_mcp_config(config_path):
        console.print(f"  [green]✓[/green] {config_path}")
    else:
        console.print(f"[red]Failed to update MCP config:[/red] {config_path}")
        raise typer.Exit(1)

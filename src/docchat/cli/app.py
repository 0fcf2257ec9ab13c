"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..completion import CompletionStatus, StatusTracker
from ..config import AppConfig, configure_logging
from .providers import get_connectivity, open_controller

app = typer.Typer(
    name="docchat",
    help="Ask one question per conversation about your own documents",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


def _read_config() -> AppConfig:
    try:
        return AppConfig.from_env()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _load_config() -> AppConfig:
    config = _read_config()
    configure_logging(config.log_level)
    return config


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:3]}...{secret[-4:]}"


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question to ask about the documents"),
    doc: list[Path] = typer.Option(
        [],
        "--doc",
        "-d",
        exists=True,
        dir_okay=False,
        help="Document file to attach (repeatable)"
    ),
    text: list[str] = typer.Option(
        [],
        "--text",
        "-t",
        help="Inline text to attach as a document (repeatable)"
    ),
    title: str | None = typer.Option(
        None,
        "--title",
        help="Title for the saved conversation"
    ),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        "-k",
        help="API key to store before sending"
    ),
    probe: bool = typer.Option(
        True,
        "--probe/--no-probe",
        help="Check connectivity to the API host before sending"
    ),
):
    """Start a new conversation, send one question and save the answer."""
    config = _load_config()

    async def _ask() -> int:
        status = StatusTracker()
        connectivity = get_connectivity(config)

        def _on_status(current: CompletionStatus) -> None:
            if current.retrying and current.error:
                console.print(f"[yellow]{current.error}[/yellow]")

        status.subscribe(_on_status)

        async with open_controller(config, connectivity, status) as controller:
            if api_key:
                await controller.set_api_key(api_key)

            state = controller.state
            for path in doc:
                item = state.documents.add_file(path)
                console.print(f"[dim]Attached {item.name} ({len(item.content)} chars)[/dim]")
            for entry in text:
                state.documents.add_text(entry)
            if title:
                state.title = title

            if probe:
                await connectivity.probe()

            with console.status("[dim]Waiting for the assistant...[/dim]"):
                outcome = await controller.send_message(prompt)

            if outcome.message is not None:
                console.print(Panel(outcome.message.content, title="Assistant", border_style="green"))
            if outcome.error is not None:
                console.print(f"[red]{outcome.error.message}[/red]")
            if outcome.reached_network:
                console.print(f"[dim]Saved as {state.conversation_id}[/dim]")
            return 0 if outcome.ok else 1

    try:
        code = asyncio.run(_ask())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    if code:
        raise typer.Exit(code=code)


@app.command()
def chats():
    """List saved conversations, most recent first."""
    config = _load_config()

    async def _chats():
        async with open_controller(config) as controller:
            return await controller.saved_conversations()

    try:
        conversations = asyncio.run(_chats())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not conversations:
        console.print("[yellow]No saved chats[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Messages", width=8)
    table.add_column("Docs", width=4)
    table.add_column("Saved", style="green")

    for conversation in conversations:
        table.add_row(
            conversation.id,
            conversation.title,
            str(len(conversation.messages)),
            str(len(conversation.documents)),
            conversation.timestamp.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def show(conversation_id: str = typer.Argument(..., help="Conversation id")):
    """Show a saved conversation's transcript and documents."""
    config = _load_config()

    async def _show():
        async with open_controller(config) as controller:
            return await controller.load_session(conversation_id)

    try:
        conversation = asyncio.run(_show())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if conversation is None:
        console.print(f"[red]Error: no saved chat with id {conversation_id}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold cyan]{conversation.title}[/bold cyan] [dim]({conversation.id})[/dim]\n")
    for doc in conversation.documents:
        console.print(f"[dim]Document: {doc.name} ({doc.type}, {len(doc.content)} chars)[/dim]")
    for message in conversation.messages:
        style = "bold yellow" if message.role == "user" else "bold green"
        label = "You" if message.role == "user" else "Assistant"
        console.print(f"\n[{style}]{label}:[/{style}] {message.content}")


@app.command()
def rename(
    conversation_id: str = typer.Argument(..., help="Conversation id"),
    title: str = typer.Argument(..., help="New title"),
):
    """Rename a saved conversation."""
    config = _load_config()

    async def _rename():
        async with open_controller(config) as controller:
            if await controller.load_session(conversation_id) is None:
                return False
            await controller.rename_session(title)
            return True

    try:
        found = asyncio.run(_rename())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not found:
        console.print(f"[red]Error: no saved chat with id {conversation_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Renamed {conversation_id} to '{title}'[/green]")


@app.command()
def delete(
    conversation_id: str = typer.Argument(..., help="Conversation id"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
):
    """Delete a saved conversation."""
    if not yes:
        confirm = typer.confirm(f"Delete chat {conversation_id}?")
        if not confirm:
            console.print("[dim]Aborted.[/dim]")
            return

    config = _load_config()

    async def _delete():
        async with open_controller(config) as controller:
            return await controller.delete_session(conversation_id)

    try:
        deleted = asyncio.run(_delete())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not deleted:
        console.print(f"[yellow]No saved chat with id {conversation_id}[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted {conversation_id}[/green]")


@app.command(name="set-key")
def set_key(api_key: str = typer.Argument(..., help="API key used as the bearer token")):
    """Store the API key for later sessions."""
    config = _load_config()

    async def _set_key():
        async with open_controller(config) as controller:
            await controller.set_api_key(api_key.strip())

    try:
        asyncio.run(_set_key())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]API key saved ({_mask(api_key.strip())})[/green]")


@app.command()
def status():
    """Show configuration, API key presence and connectivity."""
    config = _load_config()

    async def _status():
        connectivity = get_connectivity(config)
        async with open_controller(config, connectivity) as controller:
            key = await controller.get_api_key()
            count = len(await controller.saved_conversations())
        online = await connectivity.probe()
        return key, count, online

    try:
        key, count, online = asyncio.run(_status())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=14)
    table.add_column("Value")

    table.add_row("Provider", config.provider)
    table.add_row("Model", config.model)
    table.add_row("Store", f"{config.store} ({config.database_path})" if config.store == "sqlite" else config.store)
    table.add_row("Retries", f"{config.max_retries} (base delay {config.base_delay:g}s)")
    table.add_row("API key", _mask(key) if key else "[yellow]NOT SET[/yellow]")
    table.add_row("Saved chats", str(count))
    table.add_row(
        "Connectivity",
        f"[green]online[/green] ({config.connectivity_host})" if online
        else f"[red]offline[/red] ({config.connectivity_host})"
    )

    console.print(table)


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive TUI chat client."""
    from ..ui import run_textual_tui

    config = _read_config()

    try:
        asyncio.run(run_textual_tui(config, log_level=log_level))
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

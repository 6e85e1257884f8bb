"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from ..chat import ChatInputError, ChatRole, preview
from ..settings import SettingsError, default_settings_path
from .providers import (
    create_session,
    get_client,
    get_settings_store,
    get_vault,
    load_settings,
    require_api_key,
    resolve_note,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="vaultchat",
    help="Chat with your markdown notes through Google Gemini",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

_DEBUG_COLORS = {
    "debug": "dim",
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}


def _print_debug(level: str, component: str, message: str) -> None:
    """Debug callback printing to the console (--verbose)."""
    color = _DEBUG_COLORS.get(level, "white")
    console.print(f"[{color}]{escape(f'[{component}]')} {escape(message)}[/{color}]")


VAULT_ARGUMENT = typer.Argument(
    ...,
    exists=True,
    file_okay=False,
    dir_okay=True,
    help="Vault directory (a folder of markdown notes)"
)


@app.command()
def ask(
    vault_dir: Path = VAULT_ARGUMENT,
    question: str = typer.Argument(..., help="Question to ask"),
    note: str | None = typer.Option(
        None,
        "--note",
        "-n",
        help="Current note (path or name) used as context"
    ),
    all_notes: bool = typer.Option(
        False,
        "--all-notes",
        "-a",
        help="Use every note in the vault as context"
    ),
    ref: list[str] | None = typer.Option(
        None,
        "--ref",
        "-r",
        help="Reference a note by path or name (repeatable)"
    ),
    selection: str | None = typer.Option(
        None,
        "--selection",
        "-s",
        help="Use this text as the only context"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show request details"
    ),
):
    """Ask a single question and print the reply."""
    async def _ask():
        vault = get_vault(vault_dir)
        settings = load_settings(get_settings_store(vault), console)
        require_api_key(settings, console)

        client = get_client(settings)
        session = create_session(vault, settings, client)
        if verbose:
            session.set_debug_callback(_print_debug)

        try:
            if note:
                session.set_active_note(resolve_note(vault, note, console))
            if all_notes:
                session.toggle_all_notes()
            for name in ref or []:
                await session.add_reference(resolve_note(vault, name, console))
            if selection:
                session.start_chat_with_selection(selection)

            with console.status("[dim]Waiting for Gemini...[/dim]"):
                reply = await session.send(question)

        except ChatInputError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            await client.close()

        if reply.role is ChatRole.ERROR:
            console.print(f"[red]{escape(reply.content)}[/red]")
            raise typer.Exit(code=1)

        console.print(Markdown(reply.content))

    asyncio.run(_ask())


@app.command()
def config(
    vault_dir: Path = VAULT_ARGUMENT,
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        "-k",
        help="Set the Gemini API key"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Set the model name (e.g. gemini-1.5-flash-002)"
    ),
):
    """Show or update the settings stored in the vault."""
    vault = get_vault(vault_dir)
    store = get_settings_store(vault)

    try:
        settings = store.load()
        if api_key is not None or model is not None:
            if api_key is not None:
                settings.api_key = api_key
            if model is not None:
                settings.model_name = model
            store.save(settings)
            console.print("[green]Settings saved.[/green]")
    except SettingsError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=15)
    table.add_column("Value")

    table.add_row("Vault", str(vault.root))
    table.add_row("Settings file", str(default_settings_path(vault.root)))
    table.add_row("API key", settings.masked_api_key())
    table.add_row("Model", settings.model_name)

    console.print(table)


@app.command(name="test-connection")
def test_connection(
    vault_dir: Path = VAULT_ARGUMENT,
):
    """Send a trivial prompt to check the API key and model."""
    async def _test():
        vault = get_vault(vault_dir)
        settings = load_settings(get_settings_store(vault), console)

        async with get_client(settings) as client:
            with console.status("[dim]Testing connection...[/dim]"):
                result = await client.test_connection()

        if result.success:
            console.print(f"[green]+[/green] {escape(result.message)}")
        else:
            console.print(f"[red]x[/red] {escape(result.message)}")
            raise typer.Exit(code=1)

    asyncio.run(_test())


@app.command()
def models(
    vault_dir: Path = VAULT_ARGUMENT,
):
    """List the models available for content generation."""
    async def _models():
        vault = get_vault(vault_dir)
        settings = load_settings(get_settings_store(vault), console)
        require_api_key(settings, console)

        async with get_client(settings) as client:
            with console.status("[dim]Loading models...[/dim]"):
                available = await client.list_models()

        if not available:
            console.print("[yellow]Could not load models. Check your API key.[/yellow]")
            raise typer.Exit(code=1)

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("", width=1)
        table.add_column("Model", style="cyan")
        table.add_column("Display name")
        table.add_column("Description", style="dim")

        for model in available:
            current = model.name == settings.model_name
            table.add_row(
                "*" if current else "",
                model.name,
                model.display_name,
                preview(model.description or "", 100),
                style="bold green" if current else None,
            )

        console.print(table)
        console.print(f"[dim]{len(available)} models available[/dim]")

    asyncio.run(_models())


@app.command(name="tui")
def tui_command(
    vault_dir: Path = VAULT_ARGUMENT,
    note: str | None = typer.Option(
        None,
        "--note",
        "-n",
        help="Note to open at startup (path or name)"
    ),
    all_notes: bool = typer.Option(
        False,
        "--all-notes",
        "-a",
        help="Start in all-notes mode"
    ),
    selection: str | None = typer.Option(
        None,
        "--selection",
        "-s",
        help="Start with this text as the context"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat panel."""
    async def _tui():
        from ..ui import run_textual_tui

        vault = get_vault(vault_dir)
        store = get_settings_store(vault)
        settings = load_settings(store, console)
        active_note = resolve_note(vault, note, console) if note else None

        client = get_client(settings)
        session = create_session(vault, settings, client)
        session.set_active_note(active_note)
        if all_notes:
            session.toggle_all_notes()

        await run_textual_tui(
            session=session,
            settings_store=store,
            log_level=log_level,
            initial_selection=selection,
        )
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

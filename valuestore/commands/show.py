# valuestore/commands/show.py

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from valuestore.core.console import ConsoleAware
from valuestore.core.exceptions import ValueStoreError
from valuestore.core.models import StoreType
from valuestore.core.store import ValueStore

# ==============================================================
# COMMAND WRAPPER
# ==============================================================

def show_command(file: Path, store_type: Optional[StoreType], console_awr: ConsoleAware, verbose: bool):
    """Command wrapper for show command."""
    store = ValueStore(file, type=store_type, console=console_awr.console, verbose=verbose)

    if not store.count():
        console_awr.print(f"📭 [yellow]{escape(str(file))} is empty[/yellow]")
        return

    table = Table(title=f"{file} ({store.type.value})")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Type", style="dim")

    for key, value in store.items():
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        table.add_row(escape(key), escape(text), type(value).__name__)

    if console_awr.console:
        console_awr.console.print(table)


def register(app):
    """Register the show command with the Typer app."""

    @app.command()
    def show(
        file: Path = typer.Argument(..., help="Store file"),
        store_type: Optional[StoreType] = typer.Option(
            None,
            "--type",
            "-t",
            help="Store format (default: detected from the file extension)"
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Show detailed output"
        )
    ):
        """List all keys of a store."""
        console = Console(log_path=False)
        console_awr = ConsoleAware(console=console, verbose=verbose)
        try:
            show_command(file, store_type, console_awr, verbose)

        except KeyboardInterrupt:
            console_awr.print("\n[bold yellow]⚠️  Show cancelled by user.[/bold yellow]")
            raise typer.Exit(code=1)

        except ValueStoreError as e:
            console_awr.print(f"[bold red]❌ Show failed:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

        except Exception as e:
            console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

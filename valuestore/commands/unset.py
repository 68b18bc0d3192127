# valuestore/commands/unset.py

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from valuestore.core.console import ConsoleAware
from valuestore.core.exceptions import ValueStoreError
from valuestore.core.models import StoreType
from valuestore.core.store import ValueStore

# ==============================================================
# COMMAND WRAPPER
# ==============================================================

def unset_command(file: Path, key: str, store_type: Optional[StoreType], console_awr: ConsoleAware, verbose: bool):
    """Command wrapper for unset command."""
    store = ValueStore(file, type=store_type, console=console_awr.console, verbose=verbose)

    if not store.unset(key):
        console_awr.print(f"ℹ️  [yellow]{escape(key)}[/yellow] is not set, nothing to do")
        return

    if not store.save():
        raise ValueStoreError(f"Could not write {file}")
    console_awr.print(f"🗑️  [green]{escape(key)}[/green] removed from [cyan]{escape(str(file))}[/cyan]")


def register(app):
    """Register the unset command with the Typer app."""

    @app.command()
    def unset(
        file: Path = typer.Argument(..., help="Store file"),
        key: str = typer.Argument(..., help="Key to remove"),
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
        """Remove KEY from the store and save it."""
        console = Console(log_path=False)
        console_awr = ConsoleAware(console=console, verbose=verbose)
        try:
            unset_command(file, key, store_type, console_awr, verbose)

        except KeyboardInterrupt:
            console_awr.print("\n[bold yellow]⚠️  Unset cancelled by user.[/bold yellow]")
            raise typer.Exit(code=1)

        except ValueStoreError as e:
            console_awr.print(f"[bold red]❌ Unset failed:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

        except Exception as e:
            console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

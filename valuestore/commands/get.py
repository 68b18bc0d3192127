# valuestore/commands/get.py

import json
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

def get_command(file: Path, key: str, store_type: Optional[StoreType], console_awr: ConsoleAware, verbose: bool):
    """Command wrapper for get command."""
    store = ValueStore(file, type=store_type, console=console_awr.console, verbose=verbose)

    if not store.has(key):
        raise ValueStoreError(f"Key '{key}' not found in {file}")

    value = store.get(key)
    if isinstance(value, str):
        console_awr.write(value)
    elif isinstance(value, (dict, list)):
        console_awr.write(json.dumps(value, indent=2, ensure_ascii=False))
    else:
        console_awr.write(json.dumps(value))


def register(app):
    """Register the get command with the Typer app."""

    @app.command()
    def get(
        file: Path = typer.Argument(..., help="Store file"),
        key: str = typer.Argument(..., help="Key to read"),
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
        """Print the value stored at KEY."""
        console = Console(log_path=False)
        console_awr = ConsoleAware(console=console, verbose=verbose)
        try:
            get_command(file, key, store_type, console_awr, verbose)

        except KeyboardInterrupt:
            console_awr.print("\n[bold yellow]⚠️  Get cancelled by user.[/bold yellow]")
            raise typer.Exit(code=1)

        except ValueStoreError as e:
            console_awr.print(f"[bold red]❌ Get failed:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

        except Exception as e:
            console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

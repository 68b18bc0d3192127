# valuestore/commands/counter.py

"""
Counter commands: ``incr`` and ``decr``.

Both load the store, step the integer at KEY, save and print the new value.
"""

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

def counter_command(
    file: Path,
    key: str,
    amount: int,
    store_type: Optional[StoreType],
    console_awr: ConsoleAware,
    verbose: bool
) -> int:
    """Command wrapper for incr/decr commands. A negative amount decrements."""
    store = ValueStore(file, type=store_type, console=console_awr.console, verbose=verbose)

    if amount >= 0:
        value = store.increment(key, amount)
    else:
        value = store.decrement(key, -amount)

    if not store.save():
        raise ValueStoreError(f"Could not write {file}")
    console_awr.write(str(value))
    return value


def _run(file: Path, key: str, amount: int, store_type: Optional[StoreType], verbose: bool, action: str):
    console = Console(log_path=False)
    console_awr = ConsoleAware(console=console, verbose=verbose)
    try:
        counter_command(file, key, amount, store_type, console_awr, verbose)

    except KeyboardInterrupt:
        console_awr.print(f"\n[bold yellow]⚠️  {action} cancelled by user.[/bold yellow]")
        raise typer.Exit(code=1)

    except ValueStoreError as e:
        console_awr.print(f"[bold red]❌ {action} failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    except Exception as e:
        console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)


def register(app):
    """Register the incr and decr commands with the Typer app."""

    @app.command()
    def incr(
        file: Path = typer.Argument(..., help="Store file (created if missing)"),
        key: str = typer.Argument(..., help="Counter key"),
        by: int = typer.Option(1, "--by", "-b", min=0, help="Amount to add"),
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
        """Increment the integer at KEY and print the new value."""
        _run(file, key, by, store_type, verbose, "Increment")

    @app.command()
    def decr(
        file: Path = typer.Argument(..., help="Store file (created if missing)"),
        key: str = typer.Argument(..., help="Counter key"),
        by: int = typer.Option(1, "--by", "-b", min=0, help="Amount to subtract"),
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
        """Decrement the integer at KEY and print the new value."""
        _run(file, key, -by, store_type, verbose, "Decrement")

# valuestore/commands/set.py

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from valuestore.core.console import ConsoleAware
from valuestore.core.exceptions import ValueStoreError
from valuestore.core.models import StoreType
from valuestore.core.store import ValueStore
from valuestore.formats.yaml_codec import StoreLoader


def parse_value(text: str, raw: bool) -> Any:
    """
    Turn a command-line argument into a store value.

    The text is read as a YAML scalar or flow collection, so ``42`` is an
    int, ``true`` a bool, ``null`` None and ``[1, 2]`` a list. With ``raw``
    the text is stored as a string unchanged.
    """
    if raw:
        return text
    try:
        return yaml.load(text, Loader=StoreLoader) if text.strip() else text
    except yaml.YAMLError:
        return text

# ==============================================================
# COMMAND WRAPPER
# ==============================================================

def set_command(
    file: Path,
    key: str,
    value: str,
    store_type: Optional[StoreType],
    raw: bool,
    console_awr: ConsoleAware,
    verbose: bool
):
    """Command wrapper for set command."""
    store = ValueStore(file, type=store_type, console=console_awr.console, verbose=verbose)
    store.set(key, parse_value(value, raw))

    if not store.save():
        raise ValueStoreError(f"Could not write {file}")
    console_awr.print(f"✅ [green]{escape(key)}[/green] set in [cyan]{escape(str(file))}[/cyan]")


def register(app):
    """Register the set command with the Typer app."""

    @app.command(name="set")
    def set_(
        file: Path = typer.Argument(..., help="Store file (created if missing)"),
        key: str = typer.Argument(..., help="Key to write"),
        value: str = typer.Argument(..., help="Value, read as YAML unless --raw is given"),
        store_type: Optional[StoreType] = typer.Option(
            None,
            "--type",
            "-t",
            help="Store format (default: detected from the file extension)"
        ),
        raw: bool = typer.Option(
            False,
            "--raw",
            help="Store VALUE as a plain string"
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Show detailed output"
        )
    ):
        """Set KEY to VALUE and save the store."""
        console = Console(log_path=False)
        console_awr = ConsoleAware(console=console, verbose=verbose)
        try:
            set_command(file, key, value, store_type, raw, console_awr, verbose)

        except KeyboardInterrupt:
            console_awr.print("\n[bold yellow]⚠️  Set cancelled by user.[/bold yellow]")
            raise typer.Exit(code=1)

        except ValueStoreError as e:
            console_awr.print(f"[bold red]❌ Set failed:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

        except Exception as e:
            console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

# valuestore/commands/convert.py

"""
Convert a store file from one format to another.

The source is loaded with its own format and its whole tree is written to
the destination with the destination format.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from valuestore.core.console import ConsoleAware
from valuestore.core.exceptions import ValueStoreError
from valuestore.core.file_reading import write_store_file
from valuestore.core.models import DEFAULT_XML_ROOT, StoreOptions, StoreType
from valuestore.core.store import ValueStore
from valuestore.formats import get_codec

# ==============================================================
# COMMAND WRAPPER
# ==============================================================

def convert_command(
    source: Path,
    destination: Path,
    from_type: Optional[StoreType],
    to_type: Optional[StoreType],
    root: str,
    escape_slashes: bool,
    force: bool,
    console_awr: ConsoleAware,
    verbose: bool
) -> StoreOptions:
    """Command wrapper for convert command."""
    if not source.exists():
        raise ValueStoreError(f"Source file not found: {source}")
    if destination.exists() and not force:
        raise ValueStoreError(f"Destination exists: {destination}. Use --force to overwrite it")

    src = ValueStore(source, type=from_type, root=root, console=console_awr.console, verbose=verbose)

    # The destination is written whole, its current content is never read
    options = StoreOptions.resolve(destination, to_type, root, escape_slashes)
    codec = get_codec(options)
    try:
        write_store_file(destination, codec.serialize(src.to_dict()))
    except OSError as e:
        raise ValueStoreError(f"Could not write {destination}: {e}") from e

    console_awr.print(
        f"🔁 [green]Converted[/green] [cyan]{escape(str(source))}[/cyan] ({src.type.value}) → "
        f"[cyan]{escape(str(destination))}[/cyan] ({options.type.value}), {src.count()} key(s)"
    )
    return options


def register(app):
    """Register the convert command with the Typer app."""

    @app.command()
    def convert(
        source: Path = typer.Argument(..., help="Store file to read"),
        destination: Path = typer.Argument(..., help="Store file to write"),
        from_type: Optional[StoreType] = typer.Option(
            None,
            "--from",
            help="Source format (default: detected from the extension)"
        ),
        to_type: Optional[StoreType] = typer.Option(
            None,
            "--to",
            help="Destination format (default: detected from the extension)"
        ),
        root: str = typer.Option(
            DEFAULT_XML_ROOT,
            "--root",
            help="XML root element name"
        ),
        escape_slashes: bool = typer.Option(
            False,
            "--escape",
            help="Escape forward slashes when writing JSON"
        ),
        force: bool = typer.Option(
            False,
            "--force",
            help="Overwrite the destination if it exists"
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Show detailed output"
        )
    ):
        """Convert a store file to another format."""
        console = Console(log_path=False)
        console_awr = ConsoleAware(console=console, verbose=verbose)
        try:
            console_awr.print("")
            convert_command(source, destination, from_type, to_type, root, escape_slashes, force, console_awr, verbose)
            console_awr.print("")

        except KeyboardInterrupt:
            console_awr.print("\n[bold yellow]⚠️  Convert cancelled by user.[/bold yellow]")
            raise typer.Exit(code=1)

        except ValueStoreError as e:
            console_awr.print(f"[bold red]❌ Convert failed:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

        except Exception as e:
            console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

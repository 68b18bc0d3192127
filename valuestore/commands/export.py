# valuestore/commands/export.py

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from valuestore.core.console import ConsoleAware
from valuestore.core.exceptions import ValueStoreError
from valuestore.core.models import DEFAULT_XML_ROOT, StoreType
from valuestore.core.store import ValueStore

# ==============================================================
# COMMAND WRAPPER
# ==============================================================

def export_command(
    file: Path,
    output_format: StoreType,
    store_type: Optional[StoreType],
    pretty: bool,
    root: Optional[str],
    escape_slashes: bool,
    console_awr: ConsoleAware,
    verbose: bool
) -> str:
    """Command wrapper for export command."""
    store = ValueStore(
        file,
        type=store_type,
        root=root or DEFAULT_XML_ROOT,
        console=console_awr.console,
        verbose=verbose
    )

    if output_format == StoreType.JSON:
        text = store.to_json(pretty=pretty, escape=escape_slashes)
    elif output_format == StoreType.XML:
        text = store.to_xml(pretty=pretty, root=root)
    elif output_format == StoreType.YML:
        text = store.to_yaml()
    else:
        text = store.to_php()

    console_awr.write(text.rstrip("\n"))
    return text


def register(app):
    """Register the export command with the Typer app."""

    @app.command()
    def export(
        file: Path = typer.Argument(..., help="Store file"),
        output_format: StoreType = typer.Option(
            StoreType.JSON,
            "--format",
            "-f",
            help="Output format"
        ),
        store_type: Optional[StoreType] = typer.Option(
            None,
            "--type",
            "-t",
            help="Store format (default: detected from the file extension)"
        ),
        pretty: bool = typer.Option(
            False,
            "--pretty",
            "-p",
            help="Pretty-print JSON and XML output"
        ),
        root: Optional[str] = typer.Option(
            None,
            "--root",
            help="XML root element name (also used to read XML stores)"
        ),
        escape_slashes: bool = typer.Option(
            False,
            "--escape",
            help="Escape forward slashes in JSON output"
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Show detailed output"
        )
    ):
        """Print a store in another format without changing it."""
        console = Console(log_path=False)
        console_awr = ConsoleAware(console=console, verbose=verbose)
        try:
            export_command(file, output_format, store_type, pretty, root, escape_slashes, console_awr, verbose)

        except KeyboardInterrupt:
            console_awr.print("\n[bold yellow]⚠️  Export cancelled by user.[/bold yellow]")
            raise typer.Exit(code=1)

        except ValueStoreError as e:
            console_awr.print(f"[bold red]❌ Export failed:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

        except Exception as e:
            console_awr.print(f"[bold red]❌ Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

from typing import Optional, Protocol, Any

from rich.markup import escape

class Console(Protocol):
    """Output sink used by stores and commands (rich.console.Console fits)."""
    def print(self, *objects: Any, **kwargs: Any) -> None:
        ...

    def log(self, *objects: Any) -> None:
        ...

class ConsoleAware:
    """Base class for objects that report what they do to an optional console."""
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console
        self.verbose = verbose

    def print(self, msg: str) -> None:
        if self.console:
            self.console.print(msg)

    def log(self, msg: str) -> None:
        """Emit a diagnostic line, only in verbose mode."""
        if self.console and self.verbose:
            self.console.log(msg)

    def warn(self, msg: str) -> None:
        self.print(f"[bold yellow]⚠️  {escape(msg)}[/bold yellow]")

    def write(self, text: str) -> None:
        """Print document text as-is: no markup, highlighting or wrapping."""
        if self.console:
            self.console.print(text, markup=False, highlight=False, soft_wrap=True)

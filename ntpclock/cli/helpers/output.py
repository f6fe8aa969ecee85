"""Output formatting and display utilities."""
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from . import get_panel_box, CONSOLE_WIDTH


def format_millis(ms: int) -> str:
    """Format a millisecond duration to a human readable string."""
    if ms < 1000:
        return f"{ms}ms"
    elif ms < 60 * 1000:
        return f"{ms / 1000:.1f}s"
    else:
        return f"{ms / 60000:.1f}min"


def format_offset(seconds: int) -> str:
    """Format a time offset in seconds as +HH:MM."""
    sign = "-" if seconds < 0 else "+"
    total = abs(seconds)
    return f"{sign}{total // 3600:02d}:{(total % 3600) // 60:02d}"


class OutputHelper:
    """Output formatting and display utilities."""

    # Ensure stdout uses UTF-8 encoding
    if hasattr(sys.stdout, 'reconfigure'):
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')

    _console = Console()
    PANEL_WIDTH = None

    @staticmethod
    def _get_panel_width():
        """Get panel width."""
        if OutputHelper.PANEL_WIDTH is None:
            OutputHelper.PANEL_WIDTH = CONSOLE_WIDTH
        return OutputHelper.PANEL_WIDTH

    @staticmethod
    def print_panel(content: str, title: str = "", border_style: str = "blue"):
        """Print content in a rich panel box."""
        width = OutputHelper._get_panel_width()
        OutputHelper._console.print(Panel(content, title=title, title_align="left", border_style=border_style, box=get_panel_box(), expand=True, width=width))

    @staticmethod
    def print_error(message: str, title: str = "Error"):
        OutputHelper.print_panel(f"[red]{message}[/red]", title=title, border_style="red")

    @staticmethod
    def create_clock_panel(client, tick: int = 0, synced: bool = True):
        """Create the live clock panel shown by `ntpclock watch`."""
        status = "[green]synchronized[/green]" if synced else "[red]stale (last sync failed)[/red]"
        lines = [
            f"[bold bright_white]{client.formatted_time()}[/bold bright_white]   "
            f"[cyan]{client.formatted_date()}[/cyan]",
            "",
            f"Epoch   : [yellow]{client.epoch_time()}[/yellow]",
            f"Server  : {client.config.server}",
            f"Status  : {status}",
            f"Ticks   : {tick}",
        ]
        width = OutputHelper._get_panel_width()
        return Panel("\n".join(lines), title="Clock", title_align="left", border_style="green" if synced else "yellow", box=get_panel_box(), expand=True, width=width)

    @staticmethod
    def setup_logging(verbose: bool = False):
        """Route library logging through rich; DEBUG with --verbose, WARNING otherwise."""
        level = logging.DEBUG if verbose else logging.WARNING
        root = logging.getLogger("ntpclock")
        root.setLevel(level)
        for handler in list(root.handlers):
            if isinstance(handler, RichHandler):
                root.removeHandler(handler)
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

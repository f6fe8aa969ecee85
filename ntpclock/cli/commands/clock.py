import time

import typer
from rich.live import Live

from ntpclock.utils.exceptions import CLIError, NtpClockException
from ntpclock.protocol import calendar
from ..helpers import OutputHelper, format_offset
from ..connection import _create_client, _handle_client_error, _print_sync_failure
from ..app import app


def _print_help(help_text: str):
    OutputHelper.print_panel(help_text, border_style="dim")
    raise typer.Exit()


@app.command(rich_help_panel="Clock")
def sync(
    show_help: bool = typer.Option(False, "--help", "-h", is_eager=True, hidden=True)
):
    """
    Query the NTP server once and show the result.
    """
    if show_help:
        _print_help("""\
Query the NTP server once and show the synchronized time.

Always performs a network exchange, ignoring the update interval.

[bold cyan]Usage:[/bold cyan]
  ntpclock sync

[bold cyan]Examples:[/bold cyan]
  ntpclock sync                          [dim]# Use configured server[/dim]
  ntpclock --server time.google.com sync [dim]# Override server[/dim]
  ntpclock --offset +09:00 sync          [dim]# Show local time (KST)[/dim]""")

    client = _create_client()
    try:
        ok = client.force_update()
    except NtpClockException as e:
        _handle_client_error(e, title="Sync Failed")
    finally:
        client.stop()

    if not ok:
        _print_sync_failure(client.config)
        raise typer.Exit(1)

    epoch = client.synchronized_epoch.epoch_seconds
    OutputHelper.print_panel(
        f"Server  : [bright_blue]{client.config.server}[/bright_blue]\n"
        f"Epoch   : [yellow]{epoch}[/yellow] [dim](UTC)[/dim]\n"
        f"Offset  : {format_offset(client.config.time_offset)}\n"
        f"Time    : [bright_green]{client.formatted_time()}[/bright_green]\n"
        f"Date    : [bright_green]{client.formatted_date()}[/bright_green]",
        title="Synchronized",
        border_style="green"
    )


@app.command(rich_help_panel="Clock")
def watch(
    count: int = typer.Option(0, "--count", "-n", help="Number of ticks to show (0 = forever)"),
    every: float = typer.Option(1.0, "--every", "-e", help="Seconds between ticks"),
    show_help: bool = typer.Option(False, "--help", "-h", is_eager=True, hidden=True)
):
    """
    Show a live clock, resynchronizing at the update interval.
    """
    if show_help:
        _print_help("""\
Show a live clock that resynchronizes only when the update interval expires.

Between synchronizations the time is projected from the local monotonic clock.

[bold cyan]Usage:[/bold cyan]
  ntpclock watch [yellow][OPTIONS][/yellow]

[bold cyan]Options:[/bold cyan]
  -n, --count [green]N[/green]       Stop after N ticks [dim](0 = run until Ctrl+C)[/dim]
  -e, --every [green]SECONDS[/green] Delay between ticks [dim](default 1.0)[/dim]

[bold cyan]Examples:[/bold cyan]
  ntpclock watch                      [dim]# Run until Ctrl+C[/dim]
  ntpclock --interval 10000 watch     [dim]# Resync every 10 seconds[/dim]
  ntpclock watch -n 5                 [dim]# Show five ticks[/dim]""")

    if every <= 0:
        _handle_client_error(CLIError("--every must be positive"), title="Invalid Option")

    client = _create_client()
    tick = 0
    try:
        synced = client.update()
        with Live(OutputHelper.create_clock_panel(client, tick, synced), console=OutputHelper._console, refresh_per_second=4) as live:
            while True:
                tick += 1
                synced = client.update()
                live.update(OutputHelper.create_clock_panel(client, tick, synced))
                if count and tick >= count:
                    break
                time.sleep(every)
    except KeyboardInterrupt:
        pass
    finally:
        client.stop()


@app.command(name="date", rich_help_panel="Clock")
def date_cmd(
    epoch: int = typer.Argument(..., help="Seconds since 1970-01-01"),
    show_help: bool = typer.Option(False, "--help", "-h", is_eager=True, hidden=True)
):
    """
    Convert epoch seconds to date and time.
    """
    if show_help:
        _print_help("""\
Convert epoch seconds to a calendar date and time of day.

No network access is needed; the conversion uses the same projection as the clock.

[bold cyan]Usage:[/bold cyan]
  ntpclock date [yellow]EPOCH[/yellow]

[bold cyan]Examples:[/bold cyan]
  ntpclock date 0             [dim]# 1970-01-01T00:00:00Z[/dim]
  ntpclock date 1700000000    [dim]# 2023-11-14T22:13:20Z[/dim]""")

    year, month, day = calendar.calendar_date(epoch)
    OutputHelper.print_panel(
        f"ISO 8601 : [bright_green]{calendar.formatted_date(epoch)}[/bright_green]\n"
        f"Date     : {year:04d}-{month:02d}-{day:02d}\n"
        f"Time     : {calendar.formatted_time(epoch)}",
        title="Date",
        border_style="cyan"
    )

import sys
from typing import Optional

import click
import typer
from click.exceptions import UsageError
from rich.console import Console
from rich.panel import Panel

from ntpclock import __version__
from ntpclock.utils.exceptions import NtpClockException
from .helpers.output import OutputHelper, get_panel_box, CONSOLE_WIDTH
from .config import _set_global_options


_original_usage_error_format_message = UsageError.format_message


def _build_command_help(ctx) -> Optional[str]:
    if not ctx or not ctx.command:
        return None

    cmd = ctx.command
    lines = []

    if cmd.help:
        lines.append(cmd.help.strip().split('\n')[0])  # First line only
        lines.append("")

    options = [p for p in cmd.params if isinstance(p, click.Option) and not p.hidden]
    arguments = [p for p in cmd.params if isinstance(p, click.Argument)]

    params_str = "[[cyan]OPTIONS[/cyan]] " if options else ""
    for arg in arguments:
        arg_name = arg.name.upper()
        params_str += f"[yellow]{arg_name}[/yellow] " if arg.required else f"[yellow][{arg_name}][/yellow] "

    lines.append("[bold cyan]Usage:[/bold cyan]")
    lines.append(f"  ntpclock {ctx.info_name} {params_str.strip()}")

    if options:
        lines.append("")
        lines.append("[bold cyan]Options:[/bold cyan]")
        for opt in options:
            opt_str = ", ".join(opt.opts)
            if opt.type and opt.type.name.upper() not in ('BOOL', 'BOOLEAN'):
                opt_str += f" [green]{opt.type.name.upper()}[/green]"
            lines.append(f"  {opt_str:<25} {opt.help or ''}")

    return "\n".join(lines)


def _render_usage_error(e: UsageError):
    console = Console(width=CONSOLE_WIDTH, file=sys.stderr)

    error_msg = _original_usage_error_format_message(e)
    error_lines = []

    cmd_name = None
    if e.ctx and e.ctx.info_name and e.ctx.info_name != 'ntpclock':
        cmd_name = e.ctx.info_name

    is_option_error = any(x in error_msg.lower() for x in ['no such option', 'missing option', 'missing argument', 'invalid value', 'requires an argument', 'got unexpected'])

    help_text = _build_command_help(e.ctx) if (cmd_name and is_option_error) else None
    if help_text:
        error_lines.append(help_text)
    else:
        error_lines.append("[bold cyan]Usage:[/bold cyan] ntpclock [OPTIONS] COMMAND [ARGS]...")
    error_lines.append("")
    error_lines.append(f"[red]{error_msg}[/red]")

    console.print(Panel(
        "\n".join(error_lines),
        title="Error",
        border_style="red",
        box=get_panel_box(),
        width=CONSOLE_WIDTH
    ))


def _custom_usage_error_show(self, file=None):
    _render_usage_error(self)

UsageError.show = _custom_usage_error_show


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=False,
    pretty_exceptions_show_locals=False,
    pretty_exceptions_enable=False,
    help="Lightweight NTP client clock."
)


def _print_main_help():
    lines = []
    lines.append("[bold]Lightweight NTP client clock[/bold]")
    lines.append("[dim]Synchronize once, then project wall-clock time from a monotonic counter[/dim]")
    lines.append("")
    lines.append("[bold cyan]Usage:[/bold cyan]")
    lines.append("  ntpclock [yellow][OPTIONS][/yellow] [green]COMMAND[/green] [[dim]ARGS[/dim]]...")
    lines.append("")
    lines.append("[bold cyan]Global Options:[/bold cyan]")
    lines.append("  [yellow]-s, --server[/yellow] [cyan]HOST[/cyan]      NTP server [dim](pool.ntp.org)[/dim]")
    lines.append("  [yellow]--local-port[/yellow] [cyan]PORT[/cyan]      Local UDP port [dim](1337)[/dim]")
    lines.append("  [yellow]-o, --offset[/yellow] [cyan]OFFSET[/cyan]    Time offset, seconds or +HH:MM [dim](0)[/dim]")
    lines.append("  [yellow]-i, --interval[/yellow] [cyan]MS[/cyan]      Minimum resync spacing [dim](60000)[/dim]")
    lines.append("  [yellow]-v, --verbose[/yellow]          Log every exchange")

    command_groups = [
        ("Clock", [
            ("sync", "Query the NTP server once and show the result"),
            ("watch", "Show a live clock, resynchronizing at the update interval"),
            ("date", "Convert epoch seconds to date and time"),
        ]),
        ("Configuration", [
            ("config", "Show (or save) the resolved client configuration"),
            ("version", "Show ntpclock version"),
        ]),
    ]

    for group_name, commands in command_groups:
        lines.append("")
        lines.append(f"[bold cyan]{group_name}:[/bold cyan]")
        for cmd, desc in commands:
            lines.append(f"  [green]{cmd:<12}[/green] {desc}")

    lines.append("")
    lines.append("[dim]Use 'ntpclock COMMAND --help' for detailed help on each command.[/dim]")

    OutputHelper.print_panel(
        "\n".join(lines),
        title="ntpclock",
        border_style="bright_blue"
    )


# =============================================================================
# App Callback
# =============================================================================

@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    server: Optional[str] = typer.Option(
        None,
        "--server", "-s",
        help="NTP server hostname or address",
    ),
    local_port: Optional[int] = typer.Option(
        None,
        "--local-port",
        help="Local UDP port to bind",
    ),
    offset: Optional[str] = typer.Option(
        None,
        "--offset", "-o",
        help="Time offset in seconds or +HH:MM",
    ),
    interval: Optional[int] = typer.Option(
        None,
        "--interval", "-i",
        help="Minimum milliseconds between resynchronizations",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log every NTP exchange",
    ),
    show_help: bool = typer.Option(
        False,
        "--help",
        is_eager=True,
        expose_value=True,
        help="Show this message and exit."
    )
):
    """
    Lightweight NTP client clock.
    """

    # Store global options in module-level storage for access by all commands
    _set_global_options(server=server, local_port=local_port, offset=offset,
                        interval=interval, verbose=verbose)
    OutputHelper.setup_logging(verbose)

    if show_help or ctx.invoked_subcommand is None:
        _print_main_help()
        raise typer.Exit()


# =============================================================================
# Import all commands to register them with the app
# =============================================================================
from .commands import clock, utility

# These imports are for side-effect (command registration)
_command_modules = (clock, utility)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    if len(sys.argv) == 2 and sys.argv[1] in ('--version', '-V'):
        OutputHelper.print_panel(
            f"[bright_blue]ntpclock[/bright_blue] version [bright_green]{__version__}[/bright_green]",
            title="Version",
            border_style="green"
        )
        sys.exit(0)

    try:
        exit_code = app(standalone_mode=False) or 0
    except click.exceptions.UsageError as e:
        _render_usage_error(e)
        exit_code = 2
    except click.exceptions.Abort:
        print()
        exit_code = 1
    except NtpClockException as e:
        OutputHelper.print_error(e.message)
        exit_code = 1
    except KeyboardInterrupt:
        print()
        exit_code = 130
    sys.exit(exit_code)


if __name__ == '__main__':
    main()

import os

import typer

from ntpclock import __version__
from ntpclock.utils.constants import CONFIG_FILE_NAME
from ..helpers import OutputHelper, format_millis, format_offset
from ..config import ConfigManager
from ..connection import _load_config
from ..app import app


_SOURCE_STYLE = {
    'option': '[bright_green]option[/bright_green]',
    'env': '[yellow]env[/yellow]',
    'file': '[cyan]file[/cyan]',
    'default': '[dim]default[/dim]',
}


@app.command(name="version", hidden=True)
def version_cmd(
    show_help: bool = typer.Option(False, "--help", "-h", is_eager=True, hidden=True)
):
    """
    Show ntpclock version information.

    Alias: ntpclock -V
    """
    if show_help:
        OutputHelper.print_panel("""\
Show ntpclock version information.

[bold cyan]Usage:[/bold cyan]
  ntpclock version
  ntpclock -V                [dim]# Short alias[/dim]""", border_style="dim")
        raise typer.Exit()

    OutputHelper.print_panel(
        f"ntpclock [green]{__version__}[/green]",
        title="Version",
        border_style="cyan"
    )


@app.command(rich_help_panel="Configuration")
def config(
    save: bool = typer.Option(False, "--save", "-s", help="Write the resolved settings to .ntpclock"),
    show_help: bool = typer.Option(False, "--help", "-h", is_eager=True, hidden=True)
):
    """
    Show the resolved client configuration.
    """
    if show_help:
        OutputHelper.print_panel(f"""\
Show the resolved client configuration and where each value came from.

Settings are resolved in this order:
  1. Global option  [dim](--server, --local-port, --offset, --interval)[/dim]
  2. Environment    [dim](NTPCLOCK_SERVER, NTPCLOCK_LOCAL_PORT, NTPCLOCK_OFFSET, NTPCLOCK_INTERVAL)[/dim]
  3. {CONFIG_FILE_NAME} file  [dim](searched upward from the current directory)[/dim]
  4. Built-in default

[bold cyan]Usage:[/bold cyan]
  ntpclock config [yellow][--save][/yellow]

[bold cyan]Examples:[/bold cyan]
  ntpclock config                                  [dim]# Show settings[/dim]
  ntpclock --server time.cloudflare.com config -s  [dim]# Save a new server[/dim]""", border_style="dim")
        raise typer.Exit()

    cfg, sources = _load_config()
    path = ConfigManager.find_config_file()

    if save:
        path = path or os.path.join(os.getcwd(), CONFIG_FILE_NAME)
        ConfigManager.write(path, {
            'server': cfg.server,
            'local_port': cfg.local_port,
            'offset': format_offset(cfg.time_offset),
            'interval': cfg.update_interval_ms,
        })

    lines = [
        f"Server    : [bright_blue]{cfg.server}[/bright_blue]:{cfg.server_port}  {_SOURCE_STYLE[sources['server']]}",
        f"Local port: {cfg.local_port}  {_SOURCE_STYLE[sources['local_port']]}",
        f"Offset    : {format_offset(cfg.time_offset)} ({cfg.time_offset}s)  {_SOURCE_STYLE[sources['offset']]}",
        f"Interval  : {format_millis(cfg.update_interval_ms)}  {_SOURCE_STYLE[sources['interval']]}",
        f"Timeout   : {format_millis(cfg.response_timeout_ms)}",
        "",
        f"Config file: {path if path else '[dim](none)[/dim]'}",
    ]
    OutputHelper.print_panel(
        "\n".join(lines),
        title="Saved" if save else "Configuration",
        border_style="green" if save else "blue"
    )

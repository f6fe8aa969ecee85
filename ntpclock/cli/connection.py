"""
Client construction utilities for CLI commands.

This module provides functionality shared across CLI commands:
- Resolving the effective ClientConfig
- Building an NTPClient over a UDP transport
- Error handling for configuration and network issues
"""

from typing import Dict, Optional, Tuple

import typer

from ntpclock.config import ClientConfig
from ntpclock.protocol import NTPClient
from ntpclock.timebase import SystemClock
from ntpclock.transport import create_transport
from ntpclock.utils.exceptions import NtpClockException
from .helpers import OutputHelper
from .config import _resolve_config


def _load_config() -> Tuple[ClientConfig, Dict[str, str]]:
    """Resolve the config or exit with an error panel."""
    try:
        return _resolve_config()
    except NtpClockException as e:
        _handle_client_error(e, title="Configuration Error")


def _create_client(config: Optional[ClientConfig] = None) -> NTPClient:
    """Build an NTPClient over UDP using the resolved configuration."""
    if config is None:
        config, _sources = _load_config()
    return NTPClient(create_transport(), config=config, clock=SystemClock())


def _handle_client_error(e: Exception, title: str = "Error"):
    """Show an error panel and exit with status 1."""
    message = e.message if isinstance(e, NtpClockException) else str(e)
    OutputHelper.print_error(message, title=title)
    raise typer.Exit(1)


def _print_sync_failure(config: ClientConfig):
    OutputHelper.print_panel(
        f"No valid response from [bright_blue]{config.server}[/bright_blue] "
        f"within {config.response_timeout_ms} ms.\n\n"
        "Please check:\n"
        "  • The host has network access\n"
        f"  • UDP port {config.server_port} is not blocked by a firewall\n"
        f"  • Local port {config.local_port} is free\n\n"
        "[dim]Run with --verbose to see each exchange.[/dim]",
        title="Sync Failed",
        border_style="red"
    )

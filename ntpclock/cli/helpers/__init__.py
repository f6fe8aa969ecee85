"""
Helpers Package

This package contains display helpers for the CLI.
"""
from rich.box import ROUNDED, HORIZONTALS

# Panel box style: "rounded" (4-side box) or "horizontals" (top/bottom only)
PANEL_BOX_STYLE = "rounded"  # Options: "rounded", "horizontals"
CONSOLE_WIDTH = 80  # Global console/panel width


def get_panel_box():
    """Get panel box style based on PANEL_BOX_STYLE setting."""
    return HORIZONTALS if PANEL_BOX_STYLE == "horizontals" else ROUNDED


from .output import OutputHelper, format_millis, format_offset

__all__ = [
    'PANEL_BOX_STYLE', 'CONSOLE_WIDTH', 'get_panel_box',
    'OutputHelper', 'format_millis', 'format_offset',
]

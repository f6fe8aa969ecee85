from . import clock
from . import utility

from ..connection import (
    _create_client,
    _load_config,
    _handle_client_error,
)
from ..helpers import OutputHelper, CONSOLE_WIDTH

__all__ = [
    '_create_client',
    '_load_config',
    '_handle_client_error',
    'OutputHelper',
    'CONSOLE_WIDTH',
]

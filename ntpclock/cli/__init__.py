from .config import (
    GLOBAL_OPTIONS, GlobalOptions,
    ConfigManager, ConfigResolver,
)
from .app import app, main

__all__ = [
    'GLOBAL_OPTIONS', 'GlobalOptions',
    'ConfigManager', 'ConfigResolver',
    'app', 'main'
]

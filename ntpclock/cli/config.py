"""
Configuration management for the ntpclock CLI.

Handles:
- .ntpclock INI file reading/writing
- Global option storage
- Setting resolution (global option -> environment -> .ntpclock -> default)
"""

import os
import re
from typing import Optional, Dict, Any, Tuple

from ntpclock.config import ClientConfig
from ntpclock.utils.constants import (
    CONFIG_FILE_NAME, ENV_PREFIX, SECONDS_PER_HOUR, SECONDS_PER_MINUTE,
)
from ntpclock.utils.exceptions import ConfigError


# Setting name -> (INI key, environment suffix, ClientConfig field)
SETTINGS = {
    'server': ('SERVER', 'SERVER', 'server'),
    'local_port': ('LOCAL_PORT', 'LOCAL_PORT', 'local_port'),
    'offset': ('OFFSET', 'OFFSET', 'time_offset'),
    'interval': ('INTERVAL', 'INTERVAL', 'update_interval_ms'),
}

_SECTION = 'NTP'

_OFFSET_SECONDS = re.compile(r'^[+-]?\d+$')
_OFFSET_HHMM = re.compile(r'^([+-]?)(\d{1,2}):(\d{2})$')


def parse_offset(text: Optional[str]) -> int:
    """Parse a time offset given as seconds ('3600') or '+HH:MM' / '-HH:MM'."""
    if text is None or not str(text).strip():
        return 0
    value = str(text).strip()
    if _OFFSET_SECONDS.match(value):
        return int(value)

    match = _OFFSET_HHMM.match(value)
    if not match:
        raise ValueError(f"Invalid offset {value!r}, expected seconds or +HH:MM")
    sign, hh, mm = match.groups()
    if int(mm) > 59:
        raise ValueError(f"Invalid offset {value!r}, minutes must be 00-59")
    seconds = int(hh) * SECONDS_PER_HOUR + int(mm) * SECONDS_PER_MINUTE
    return -seconds if sign == '-' else seconds


# ============================================================================
# Global Options (set by CLI callback)
# ============================================================================

class GlobalOptions:
    """Global CLI options storage."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._values = {}
            cls._instance.verbose = False
        return cls._instance

    def set(self, server: str = None, local_port: int = None,
            offset: str = None, interval: int = None, verbose: bool = False):
        """Set global options."""
        self._values = {
            'server': server,
            'local_port': local_port,
            'offset': offset,
            'interval': interval,
        }
        self.verbose = verbose

    def get(self) -> Dict[str, Any]:
        """Get all global options as dict (None means not given)."""
        return dict(self._values)


# Singleton instance
GLOBAL_OPTIONS = GlobalOptions()


# ============================================================================
# Config File Management
# ============================================================================

class ConfigManager:
    """
    Manages the .ntpclock configuration file (INI format).

    File format:
        [NTP]
        SERVER=pool.ntp.org
        LOCAL_PORT=1337
        OFFSET=+09:00
        INTERVAL=60000
    """

    @staticmethod
    def find_config_file() -> Optional[str]:
        """Find .ntpclock by searching up from the current directory."""
        current = os.path.realpath(os.getcwd())

        visited = set()
        while current not in visited:
            visited.add(current)
            path = os.path.join(current, CONFIG_FILE_NAME)
            if os.path.isfile(path):
                return path
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return None

    @staticmethod
    def read(path: str) -> Dict[str, str]:
        """
        Read the [NTP] section of an INI-style .ntpclock file.

        Returns:
            dict keyed by setting name ('server', 'local_port', ...) with raw
            string values; missing keys are absent.
        """
        result = {}
        if not path or not os.path.exists(path):
            return result

        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        by_ini_key = {ini_key: name for name, (ini_key, _, _) in SETTINGS.items()}
        current_section = None

        for line in content.splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith(('#', ';')):
                continue

            if line.startswith('[') and line.endswith(']'):
                current_section = line[1:-1].strip().upper()
                continue

            if '=' in line and current_section == _SECTION:
                key, value = line.split('=', 1)
                name = by_ini_key.get(key.strip().upper())
                if name:
                    result[name] = value.strip()

        return result

    @staticmethod
    def write(path: str, values: Dict[str, Any]):
        """Write settings to an INI-style .ntpclock file."""
        lines = [f'[{_SECTION}]']
        for name, (ini_key, _, _) in SETTINGS.items():
            value = values.get(name)
            if value is not None:
                lines.append(f'{ini_key}={value}')
        lines.append('')

        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines))


# ============================================================================
# Setting Resolution
# ============================================================================

class ConfigResolver:
    """
    Resolves each client setting based on priority:
    1. Global option (--server, --local-port, --offset, --interval)
    2. Environment variable (NTPCLOCK_SERVER, ...)
    3. .ntpclock file
    4. Built-in default
    """

    @staticmethod
    def resolve(options: Dict[str, Any] = None,
                config_path: str = None) -> Tuple[ClientConfig, Dict[str, str]]:
        """
        Build a ClientConfig.

        Returns:
            (config, sources) where sources maps each setting name to
            'option' | 'env' | 'file' | 'default'
        """
        options = options or {}
        if config_path is None:
            config_path = ConfigManager.find_config_file()
        file_values = ConfigManager.read(config_path) if config_path else {}

        kwargs = {}
        sources = {}
        for name, (_, env_suffix, field) in SETTINGS.items():
            raw, source = ConfigResolver._pick(name, env_suffix, options, file_values)
            sources[name] = source
            if raw is None:
                continue
            kwargs[field] = ConfigResolver._convert(name, raw)

        return ClientConfig(**kwargs), sources

    @staticmethod
    def _pick(name: str, env_suffix: str, options: dict, file_values: dict):
        if options.get(name) is not None:
            return options[name], 'option'
        env_value = os.environ.get(ENV_PREFIX + env_suffix)
        if env_value:
            return env_value, 'env'
        if name in file_values:
            return file_values[name], 'file'
        return None, 'default'

    @staticmethod
    def _convert(name: str, raw):
        try:
            if name == 'server':
                return str(raw).strip()
            if name == 'offset':
                return parse_offset(raw) if isinstance(raw, str) else int(raw)
            return int(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {name}: {raw!r}") from e


# ============================================================================
# Shortcuts
# ============================================================================

def _set_global_options(**kwargs):
    """Alias for GLOBAL_OPTIONS.set()."""
    GLOBAL_OPTIONS.set(**kwargs)


def _resolve_config(config_path: str = None) -> Tuple[ClientConfig, Dict[str, str]]:
    """Resolve the client config from global options, environment and file."""
    return ConfigResolver.resolve(GLOBAL_OPTIONS.get(), config_path)

from .exceptions import (
    NtpClockException, TransportError, ProtocolError, ConfigError, CLIError,
)
from .constants import (
    DEFAULT_NTP_SERVER, NTP_SERVER_PORT, DEFAULT_LOCAL_PORT,
    DEFAULT_UPDATE_INTERVAL_MS, DEFAULT_POLL_INTERVAL_MS, DEFAULT_MAX_POLL_ATTEMPTS,
    NTP_PACKET_SIZE, NTP_UNIX_DELTA, DEFAULT_TICKS_WIDTH,
)

__all__ = [
    # Exceptions
    'NtpClockException', 'TransportError', 'ProtocolError', 'ConfigError', 'CLIError',
    # Constants
    'DEFAULT_NTP_SERVER', 'NTP_SERVER_PORT', 'DEFAULT_LOCAL_PORT',
    'DEFAULT_UPDATE_INTERVAL_MS', 'DEFAULT_POLL_INTERVAL_MS', 'DEFAULT_MAX_POLL_ATTEMPTS',
    'NTP_PACKET_SIZE', 'NTP_UNIX_DELTA', 'DEFAULT_TICKS_WIDTH',
]

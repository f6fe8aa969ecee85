"""Client configuration."""

from dataclasses import dataclass

from ntpclock.utils.constants import (
    DEFAULT_NTP_SERVER, NTP_SERVER_PORT, DEFAULT_LOCAL_PORT,
    DEFAULT_UPDATE_INTERVAL_MS, DEFAULT_POLL_INTERVAL_MS, DEFAULT_MAX_POLL_ATTEMPTS,
)
from ntpclock.utils.exceptions import ConfigError


@dataclass
class ClientConfig:
    """Settings for one NTPClient.

    `time_offset` is a user/timezone adjustment in seconds added to every
    projected time; it never affects the protocol exchange.
    """
    server: str = DEFAULT_NTP_SERVER
    local_port: int = DEFAULT_LOCAL_PORT
    time_offset: int = 0
    update_interval_ms: int = DEFAULT_UPDATE_INTERVAL_MS
    server_port: int = NTP_SERVER_PORT
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS

    def __post_init__(self):
        self.validate()

    def validate(self):
        if not self.server or not str(self.server).strip():
            raise ConfigError("Server name must not be empty")
        for name in ('local_port', 'server_port'):
            port = getattr(self, name)
            if not 0 <= port <= 65535:
                raise ConfigError(f"{name} out of range: {port}")
        if self.update_interval_ms < 0:
            raise ConfigError(f"update_interval_ms must be >= 0, got {self.update_interval_ms}")
        if self.poll_interval_ms <= 0:
            raise ConfigError(f"poll_interval_ms must be > 0, got {self.poll_interval_ms}")
        if self.max_poll_attempts <= 0:
            raise ConfigError(f"max_poll_attempts must be > 0, got {self.max_poll_attempts}")

    @property
    def response_timeout_ms(self) -> int:
        return self.poll_interval_ms * self.max_poll_attempts

import logging
from typing import Optional

from ntpclock.config import ClientConfig
from ntpclock.timebase import MonotonicClock, SystemClock, ticks_add
from ntpclock.transport import Transport
from ntpclock.utils.constants import NTP_PACKET_SIZE
from ntpclock.utils.exceptions import ConfigError, TransportError
from . import calendar
from .calendar import CalendarDate, SynchronizedEpoch, UNSYNCHRONIZED
from .packet import NtpPacket, build_request, is_valid, extract_transmit_epoch

logger = logging.getLogger(__name__)


class NTPClient:
    """Rate-limited NTP client projecting wall-clock time from a monotonic counter.

    Call `update()` as often as you like (e.g. every pass of a main loop); it only
    talks to the server when `update_interval_ms` has elapsed since the last
    successful sync, or when the client has never been synchronized.

    Not safe for concurrent use: callers must serialize access.
    """

    def __init__(self, transport: Transport, config: Optional[ClientConfig] = None,
                 clock: Optional[MonotonicClock] = None):
        if transport is None:
            raise ValueError("NTPClient requires a transport")
        self.transport = transport
        self.config = config if config is not None else ClientConfig()
        self.clock = clock if clock is not None else SystemClock()
        self._started = False
        self._epoch = UNSYNCHRONIZED
        self.last_sync_ok = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def ensure_started(self, local_port: Optional[int] = None) -> None:
        """Open the transport once; no-op until `stop()` is called."""
        if self._started:
            return
        if local_port is not None:
            self.config.local_port = local_port
        self.transport.open(self.config.local_port)
        self._started = True
        logger.debug("Transport opened on local port %d", self.config.local_port)

    def stop(self) -> None:
        if self._started:
            self.transport.close()
            logger.debug("Transport closed")
        self._started = False

    # ------------------------------------------------------------------
    # Synchronization
    # ------------------------------------------------------------------

    @property
    def is_synchronized(self) -> bool:
        return self._epoch.is_set

    @property
    def synchronized_epoch(self) -> SynchronizedEpoch:
        return self._epoch

    def update(self) -> bool:
        if not self._epoch.is_set:
            return self.force_update()
        elapsed = self.clock.elapsed_since(self._epoch.captured_at_millis)
        if elapsed >= self.config.update_interval_ms:
            return self.force_update()
        return True

    def force_update(self) -> bool:
        """Run one request/response exchange, blocking for at most the poll budget.

        Returns False on timeout, invalid responses or transport failure; the
        previously synchronized epoch is kept in every failure case.
        """
        cfg = self.config
        try:
            self.ensure_started()
            stale = self.transport.discard_pending()
            if stale:
                logger.debug("Discarded %d stale datagram(s) before request", stale)
            request = build_request()
            logger.debug("Sending NTP request to %s:%d", cfg.server, cfg.server_port)
            self.transport.send_datagram(cfg.server, cfg.server_port, bytes(request))
            packet, polls = self._poll_response()
        except TransportError as e:
            logger.warning("NTP exchange with %s failed: %s", cfg.server, e)
            self.last_sync_ok = False
            return False

        if packet is None:
            logger.warning("No valid NTP response from %s within %d ms",
                           cfg.server, cfg.response_timeout_ms)
            self.last_sync_ok = False
            return False

        # Back-date by the time spent polling
        captured = ticks_add(self.clock.now_millis(), -cfg.poll_interval_ms * polls, self.clock.width)
        self._epoch = SynchronizedEpoch(extract_transmit_epoch(packet), captured)
        self.last_sync_ok = True
        logger.info("Synchronized with %s: epoch=%d (stratum %d)",
                    cfg.server, self._epoch.epoch_seconds, packet.stratum)
        return True

    def _poll_response(self):
        cfg = self.config
        polls = 0
        while polls < cfg.max_poll_attempts:
            self.clock.sleep_millis(cfg.poll_interval_ms)
            polls += 1
            if self.transport.available() <= 0:
                continue

            data = self.transport.read_datagram(NTP_PACKET_SIZE)
            if len(data) != NTP_PACKET_SIZE:
                logger.debug("Discarding %d-byte datagram", len(data))
                continue
            packet = NtpPacket(data)
            if not is_valid(packet):
                logger.debug("Discarding invalid response: %r", packet)
                continue
            return packet, polls
        return None, polls

    def set_epoch_override(self, seconds: int) -> None:
        """Seed the clock from an external source without a network round trip."""
        self._epoch = SynchronizedEpoch(seconds, self.clock.now_millis())

    def set_time_offset(self, time_offset: int) -> None:
        self.config.time_offset = time_offset

    def set_update_interval(self, update_interval_ms: int) -> None:
        if update_interval_ms < 0:
            raise ConfigError(f"update_interval_ms must be >= 0, got {update_interval_ms}")
        self.config.update_interval_ms = update_interval_ms

    # ------------------------------------------------------------------
    # Time projection
    # ------------------------------------------------------------------

    def epoch_time(self) -> int:
        """Seconds since 1970-01-01, including the configured time offset."""
        return calendar.current_epoch_seconds(
            self._epoch, self.config.time_offset, self.clock.now_millis(), self.clock.width
        )

    def _resolve(self, secs: Optional[int]) -> int:
        return self.epoch_time() if secs is None else secs

    def hours(self) -> int:
        return calendar.hours(self.epoch_time())

    def minutes(self) -> int:
        return calendar.minutes(self.epoch_time())

    def seconds(self) -> int:
        return calendar.seconds(self.epoch_time())

    def date(self, secs: Optional[int] = None) -> CalendarDate:
        return calendar.calendar_date(self._resolve(secs))

    def year(self) -> int:
        return self.date().year

    def month(self) -> int:
        return self.date().month

    def day(self) -> int:
        return self.date().day

    def formatted_time(self, secs: Optional[int] = None) -> str:
        return calendar.formatted_time(self._resolve(secs))

    def formatted_date(self, secs: Optional[int] = None) -> str:
        return calendar.formatted_date(self._resolve(secs))

"""NTP packet codec.

Only the fields a unicast client needs are exposed: the header byte
(LI/VN/Mode), stratum, poll, precision, reference identifier, reference
timestamp and transmit timestamp. Everything else is zero on send and
ignored on receive.

Timestamps are decoded for NTP era 0 only, which ends when the 32-bit
seconds field wraps on 2036-02-07T06:28:16Z.
"""

import struct
from typing import Union

from ntpclock.utils.constants import (
    NTP_PACKET_SIZE, NTP_UNIX_DELTA,
    NTP_REQUEST_HEADER, NTP_REQUEST_POLL, NTP_REQUEST_PRECISION, NTP_REQUEST_REFERENCE_ID,
    NTP_MODE_SERVER, NTP_MIN_VERSION, NTP_LEAP_UNSYNCHRONIZED, NTP_MAX_STRATUM,
)
from ntpclock.utils.exceptions import ProtocolError

# Field offsets (RFC 5905, figure 8)
_HEADER = 0
_STRATUM = 1
_POLL = 2
_PRECISION = 3
_REFERENCE_ID = 12
_REFERENCE_TIMESTAMP = 16
_TRANSMIT_TIMESTAMP = 40

_TIMESTAMP_SIZE = 8


def ntp_to_unix(ntp_seconds: int) -> int:
    return ntp_seconds - NTP_UNIX_DELTA


def unix_to_ntp(unix_seconds: int) -> int:
    ntp_seconds = unix_seconds + NTP_UNIX_DELTA
    if not 0 <= ntp_seconds <= 0xFFFFFFFF:
        raise ValueError(f"Epoch {unix_seconds} is outside NTP era 0")
    return ntp_seconds


class NtpPacket:
    """Fixed 48-byte NTP message with named field accessors."""

    def __init__(self, data: Union[bytes, bytearray, None] = None):
        if data is None:
            self._buf = bytearray(NTP_PACKET_SIZE)
        else:
            if len(data) != NTP_PACKET_SIZE:
                raise ProtocolError(f"NTP packet must be {NTP_PACKET_SIZE} bytes, got {len(data)}")
            self._buf = bytearray(data)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return (
            f"NtpPacket(leap={self.leap}, version={self.version}, mode={self.mode}, "
            f"stratum={self.stratum}, transmit={self.transmit_seconds})"
        )

    # -- header byte ------------------------------------------------------

    @property
    def header(self) -> int:
        return self._buf[_HEADER]

    @header.setter
    def header(self, value: int):
        self._buf[_HEADER] = value & 0xFF

    @property
    def leap(self) -> int:
        return (self._buf[_HEADER] >> 6) & 0b11

    @property
    def version(self) -> int:
        return (self._buf[_HEADER] >> 3) & 0b111

    @property
    def mode(self) -> int:
        return self._buf[_HEADER] & 0b111

    def set_header(self, leap: int, version: int, mode: int):
        self.header = ((leap & 0b11) << 6) | ((version & 0b111) << 3) | (mode & 0b111)

    # -- single-byte fields -----------------------------------------------

    @property
    def stratum(self) -> int:
        return self._buf[_STRATUM]

    @stratum.setter
    def stratum(self, value: int):
        self._buf[_STRATUM] = value & 0xFF

    @property
    def poll(self) -> int:
        return self._buf[_POLL]

    @poll.setter
    def poll(self, value: int):
        self._buf[_POLL] = value & 0xFF

    @property
    def precision(self) -> int:
        """Precision exponent as a signed byte (log2 seconds)."""
        return struct.unpack_from('!b', self._buf, _PRECISION)[0]

    @precision.setter
    def precision(self, value: int):
        self._buf[_PRECISION] = value & 0xFF

    # -- multi-byte fields ------------------------------------------------

    @property
    def reference_id(self) -> bytes:
        return bytes(self._buf[_REFERENCE_ID:_REFERENCE_ID + 4])

    @reference_id.setter
    def reference_id(self, value: bytes):
        if len(value) != 4:
            raise ValueError("Reference identifier must be 4 bytes")
        self._buf[_REFERENCE_ID:_REFERENCE_ID + 4] = value

    @property
    def reference_timestamp(self) -> bytes:
        return bytes(self._buf[_REFERENCE_TIMESTAMP:_REFERENCE_TIMESTAMP + _TIMESTAMP_SIZE])

    @reference_timestamp.setter
    def reference_timestamp(self, value: bytes):
        if len(value) != _TIMESTAMP_SIZE:
            raise ValueError("Reference timestamp must be 8 bytes")
        self._buf[_REFERENCE_TIMESTAMP:_REFERENCE_TIMESTAMP + _TIMESTAMP_SIZE] = value

    @property
    def transmit_seconds(self) -> int:
        return struct.unpack_from('!I', self._buf, _TRANSMIT_TIMESTAMP)[0]

    @property
    def transmit_fraction(self) -> int:
        return struct.unpack_from('!I', self._buf, _TRANSMIT_TIMESTAMP + 4)[0]

    def set_transmit_timestamp(self, seconds: int, fraction: int = 0):
        struct.pack_into('!II', self._buf, _TRANSMIT_TIMESTAMP, seconds, fraction)

    def set_transmit_epoch(self, unix_seconds: int):
        self.set_transmit_timestamp(unix_to_ntp(unix_seconds))


def build_request() -> NtpPacket:
    packet = NtpPacket()
    packet.header = NTP_REQUEST_HEADER
    packet.stratum = 0
    packet.poll = NTP_REQUEST_POLL
    packet.precision = NTP_REQUEST_PRECISION
    packet.reference_id = NTP_REQUEST_REFERENCE_ID
    return packet


def is_valid(packet: NtpPacket) -> bool:
    """Check that a response comes from a synchronized server.

    A packet that fails here must never be used to set the clock.
    """
    if packet.leap == NTP_LEAP_UNSYNCHRONIZED:
        return False
    if packet.version < NTP_MIN_VERSION:
        return False
    if packet.mode != NTP_MODE_SERVER:
        return False
    if packet.stratum < 1 or packet.stratum > NTP_MAX_STRATUM:
        return False
    if not any(packet.reference_timestamp):
        return False
    return True


def extract_transmit_epoch(packet: NtpPacket) -> int:
    return ntp_to_unix(packet.transmit_seconds)

"""Protocol Layer - NTP packet codec, synchronization and time projection."""

from .packet import NtpPacket, build_request, is_valid, extract_transmit_epoch, ntp_to_unix, unix_to_ntp
from .calendar import CalendarDate, SynchronizedEpoch, calendar_date, formatted_date, formatted_time
from .client import NTPClient

__all__ = [
    # Packet codec
    "NtpPacket",
    "build_request",
    "is_valid",
    "extract_transmit_epoch",
    "ntp_to_unix",
    "unix_to_ntp",
    # Time projection
    "CalendarDate",
    "SynchronizedEpoch",
    "calendar_date",
    "formatted_date",
    "formatted_time",
    # Controller
    "NTPClient",
]

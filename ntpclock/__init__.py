__version__ = "0.1.0"

from .config import ClientConfig
from .protocol import NTPClient, NtpPacket, CalendarDate, SynchronizedEpoch
from .timebase import MonotonicClock, SystemClock
from .transport import Transport, UdpTransport, create_transport

__all__ = [
    '__version__',
    'ClientConfig',
    'NTPClient', 'NtpPacket', 'CalendarDate', 'SynchronizedEpoch',
    'MonotonicClock', 'SystemClock',
    'Transport', 'UdpTransport', 'create_transport',
]

"""Protocol and configuration constants."""

# Network defaults
DEFAULT_NTP_SERVER = "pool.ntp.org"
NTP_SERVER_PORT = 123
DEFAULT_LOCAL_PORT = 1337

# Synchronization schedule (milliseconds)
DEFAULT_UPDATE_INTERVAL_MS = 60000
DEFAULT_POLL_INTERVAL_MS = 10
DEFAULT_MAX_POLL_ATTEMPTS = 100

# Wire format
NTP_PACKET_SIZE = 48
NTP_REQUEST_HEADER = 0b00011011     # LI=0, VN=3, Mode=3 (client)
NTP_REQUEST_POLL = 6
NTP_REQUEST_PRECISION = 0xEC
NTP_REQUEST_REFERENCE_ID = b"INIR"
NTP_MODE_SERVER = 4
NTP_MIN_VERSION = 4
NTP_LEAP_UNSYNCHRONIZED = 0b11
NTP_MAX_STRATUM = 15

# Seconds between 1900-01-01 and 1970-01-01 (NTP era 0)
NTP_UNIX_DELTA = 2208988800
# Last Unix second representable in NTP era 0 (2036-02-07T06:28:15Z)
NTP_ERA0_LAST_UNIX_SECOND = 0xFFFFFFFF - NTP_UNIX_DELTA

# Monotonic clock
DEFAULT_TICKS_WIDTH = 32

# Calendar
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60
UNIX_EPOCH_YEAR = 1970
MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# CLI configuration
CONFIG_FILE_NAME = ".ntpclock"
ENV_PREFIX = "NTPCLOCK_"

"""Protocol constants for apcupsd NIS communication."""

# Network parameters
DEFAULT_NIS_PORT = 3551
CONNECT_TIMEOUT = 10.0  # seconds allowed for the TCP dial
READ_TIMEOUT = 30.0  # seconds for a single frame read when no deadline is given

# Frame layout: 2-byte big-endian unsigned length, then payload
FRAME_LENGTH_FORMAT = ">H"
FRAME_LENGTH_SIZE = 2
MAX_FRAME_SIZE = 0xFFFF

# Commands
STATUS_CMD = "status"

# Timestamp layout used by XONBATT / XOFFBATT and by the exported labels,
# e.g. "2016-08-30 17:19:40 +0200"
TIMESTAMP_LAYOUT = "%Y-%m-%d %H:%M:%S %z"

# Canonical UPS status vocabulary, in ordinal order.
# See apcupsd src/lib/apcstatus.c for the strings the daemon emits.
STATUS_VOCABULARY = (
    "online",
    "trim online",
    "boost",
    "trim",
    "onbatt",
    "overload",
    "lowbatt",
    "replacebatt",
    "nobatt",
    "slave",
    "slavedown",
    "commlost",
    "shutting down",
)

# HTTP exposition defaults
DEFAULT_LISTEN_ADDRESS = ":9099"
DEFAULT_SCRAPE_TIMEOUT = 30.0  # seconds
SCRAPE_TIMEOUT_HEADER = "X-Prometheus-Scrape-Timeout-Seconds"

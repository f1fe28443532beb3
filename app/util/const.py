import logging
from enum import Enum

EXPORTER_NAME = "tc4400_exporter"
EXPORTER_VERSION = "0.1.0"

# Prefix for every metric we publish
METRICS_NS = "tc4400"

# The two pages on the modem that hold tables we care about
STATS_IFC_PAGE = "statsifc.html"
CONN_STATUS_PAGE = "cmconnectionstatus.html"

# Unlikely that the modem cares but it's easy enough to pretend to be a browser just in case
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:123.4) Gecko/20100101 Firefox/123.4",
    "Accept": "text/html,application/xhtml+xml,*/*",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Pragma": "no-cache",
    "Cache-Control": "no-cache",
}


class LogLevel(Enum):
    """Simple enum of supported log levels for easy validation"""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

"""Shared constants for multilog.

Flag bits follow the classic line-logger layout so documents written by
other tools that use the same numbering stay readable.
"""

import os
from logging.handlers import SysLogHandler


# ---------------------------------------------------------------------------
# Logger header flags
# ---------------------------------------------------------------------------
FLAG_DATE = 1            # 2009/01/23
FLAG_TIME = 2            # 01:23:23
FLAG_MICROSECONDS = 4    # 01:23:23.123123, implies FLAG_TIME
FLAG_LONG_FILE = 8       # /a/b/c/d.py:23
FLAG_SHORT_FILE = 16     # d.py:23, overrides FLAG_LONG_FILE
FLAG_UTC = 32            # UTC rather than local time
FLAG_STANDARD = FLAG_DATE | FLAG_TIME

# ---------------------------------------------------------------------------
# File sinks
# ---------------------------------------------------------------------------
FILE_FLAGS_APPEND = os.O_APPEND | os.O_CREAT | os.O_WRONLY
FILE_MODE_DEFAULT = 0o640
DIR_MODE_DEFAULT = 0o750

DEFAULT_LOG_DIR = "log"

# ---------------------------------------------------------------------------
# Syslog sinks
# ---------------------------------------------------------------------------
SYSLOG_FACILITY = SysLogHandler.LOG_LOCAL7
SYSLOG_SEVERITY_INFO = SysLogHandler.LOG_INFO
SYSLOG_SEVERITY_ERR = SysLogHandler.LOG_ERR
SYSLOG_DEFAULT_PORT = 514

# Searched in order when the protocol names the local syslog daemon
SYSLOG_LOCAL_SOCKETS = ("/dev/log", "/var/run/syslog", "/var/run/log")

# ---------------------------------------------------------------------------
# Buffered writers
# ---------------------------------------------------------------------------
BUFFER_SIZE_DEFAULT = 4096

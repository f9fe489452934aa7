"""multilog — multiplexed System/Access/Error logging.

Each channel writes to any combination of an append-only file, the
console and a syslog endpoint. Configuration is fluent, locked by
init(), and persists to a JSON document.
"""

from multilog._version import __version__, __app_name__
from multilog.errors import (
    ConfigLockedError, FanoutWriteError, MultilogError, NotInitializedError,
    decorate_error,
)
from multilog.fanout import BufferedWriter, FanoutWriter
from multilog.logger import ChannelHandler, ChannelLogger
from multilog.multilogger import MultiLogger
from multilog.options import Channel, Config, Options
from multilog.sinks import SinkFactory
from multilog.writer import MultiLoggerWriter

__all__ = [
    "__version__", "__app_name__",
    "MultiLoggerWriter", "MultiLogger", "Channel", "Options", "Config",
    "ChannelLogger", "ChannelHandler", "FanoutWriter", "BufferedWriter",
    "SinkFactory",
    "MultilogError", "ConfigLockedError", "NotInitializedError",
    "FanoutWriteError", "decorate_error",
]

"""MultiLogger, a single line logger writing to many destinations.

Where MultiLoggerWriter manages three channels behind a configuration
lock, MultiLogger is one logger whose destinations can change at any
time::

    ml = MultiLogger("inventory ", FLAG_STANDARD, stdout=True,
                     files=["/var/log/inventory/inventory.log"])
    ml.print("service started")
    ml.set_stderr(True).add_file("/var/log/inventory/audit.log")

Every change rebuilds the fan-out writer. Lines go to stdout, stderr,
added writers and files, in that order.
"""

import threading

from multilog.fanout import FanoutWriter
from multilog.logger import ChannelLogger
from multilog.sinks import ConsoleSink, DiscardSink, FileSink, SinkFactory, StreamSink


class MultiLogger(ChannelLogger):
    """Line logger over a mutable set of destinations.

    Args:
        prefix: Text put verbatim at the start of every line.
        flags: Header bitmask (``constants.FLAG_*``).
        stdout: Also write to standard output.
        stderr: Also write to standard error.
        files: Log files to open for append. One that cannot be opened is
            reported on the diagnostics channel and skipped.
        sink_factory: Supplies file and directory permissions.
    """

    def __init__(self, prefix="", flags=0, stdout=False, stderr=False,
                 files=(), sink_factory=None):
        super().__init__(FanoutWriter([DiscardSink()]), prefix, flags)
        self.sink_factory = sink_factory or SinkFactory()
        self._lock = threading.Lock()
        self._stdout = stdout
        self._stderr = stderr
        self._writers = []
        self._files = []

        for path in files:
            sink = self.sink_factory.open_file(path)
            if sink is not None:
                self._files.append(sink)
        self._refresh()

    @property
    def sinks(self):
        """Current destinations, in write order."""
        return self.writer.sinks

    def _refresh(self):
        with self._lock:
            sinks = []
            if self._stdout:
                sinks.append(ConsoleSink("stdout"))
            if self._stderr:
                sinks.append(ConsoleSink("stderr"))
            sinks.extend(self._writers)
            sinks.extend(self._files)
            self.writer = FanoutWriter(sinks or [DiscardSink()])

    def add_file(self, path):
        """Open ``path`` for append, creating parent directories, and log to it.

        Raises:
            OSError: if the directory or file cannot be created.
            ValueError: if ``path`` is empty.
        """
        sink = FileSink.open(path, self.sink_factory.file_mode, self.sink_factory.dir_mode)
        self._files.append(sink)
        self._refresh()
        return self

    def add_writer(self, stream):
        """Also log to ``stream`` (anything with ``write(text)``). It is never closed."""
        self._writers.append(StreamSink(stream))
        self._refresh()
        return self

    def set_stdout(self, b):
        self._stdout = b
        self._refresh()
        return self

    def set_stderr(self, b):
        self._stderr = b
        self._refresh()
        return self

    def set_flags(self, flags):
        self.flags = flags
        return self

    def set_prefix(self, prefix):
        """Replace the line prefix. No spacing is added."""
        self.prefix = prefix
        return self

    def close(self):
        """Close every file this logger opened and stop writing to them."""
        files, self._files = self._files, []
        self._refresh()
        for sink in files:
            sink.close()

    def __repr__(self):
        return f"MultiLogger(prefix={self.prefix!r}, sinks={list(self.sinks)!r})"

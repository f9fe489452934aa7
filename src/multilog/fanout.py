"""Fan-out writers: one write, duplicated to every sink of a channel.

Both writers serialize their write path with a lock, so concurrent
callers on the same channel never interleave partial lines.
"""

import threading

from multilog import constants
from multilog.errors import FanoutWriteError


class FanoutWriter:
    """Duplicate each write to an ordered list of sinks.

    Every sink is attempted even when an earlier one fails. Failures are
    collected and raised together as FanoutWriteError afterwards; writes
    that already reached other sinks are not rolled back.
    """

    def __init__(self, sinks):
        self._sinks = tuple(sinks)
        self._lock = threading.Lock()

    @property
    def sinks(self):
        return self._sinks

    def write(self, text):
        failures = []
        with self._lock:
            for sink in self._sinks:
                try:
                    sink.write(text)
                except (OSError, ValueError) as e:
                    failures.append((sink, e))
        if failures:
            raise FanoutWriteError(failures) from failures[0][1]
        return len(text)

    def flush(self):
        with self._lock:
            for sink in self._sinks:
                sink.flush()

    def __repr__(self):
        return f"FanoutWriter({list(self._sinks)!r})"


class BufferedWriter:
    """Buffer text in front of a FanoutWriter.

    Text is forwarded in a single write once ``size`` characters have
    accumulated, or when ``flush()`` is called. Nothing flushes on exit:
    callers flush (or close the owning MultiLoggerWriter) themselves.
    """

    def __init__(self, target, size=constants.BUFFER_SIZE_DEFAULT):
        if size <= 0:
            raise ValueError("buffer size must be positive")
        self.target = target
        self.size = size
        self._parts = []
        self._buffered = 0
        self._lock = threading.Lock()

    @property
    def buffered(self):
        """Characters waiting to be flushed."""
        return self._buffered

    def write(self, text):
        with self._lock:
            self._parts.append(text)
            self._buffered += len(text)
            if self._buffered >= self.size:
                self._flush_locked()
        return len(text)

    def flush(self):
        with self._lock:
            self._flush_locked()

    def _flush_locked(self):
        if not self._parts:
            return
        data = "".join(self._parts)
        self._parts.clear()
        self._buffered = 0
        self.target.write(data)

"""Sink Factory: physical destinations for log lines.

A sink is anything with ``write(text)``, ``flush()`` and ``close()``.
SinkFactory opens file and syslog sinks; when one cannot be opened the
failure is reported on the diagnostics channel and ``None`` is returned,
so one bad destination never stops the others from being set up.
"""

import os
import socket
import sys
from datetime import datetime
from pathlib import Path

from multilog import constants
from multilog.diagnostics import get_diagnostics, levels
from multilog.errors import decorate_error
from multilog.options import Channel


class Sink:
    """Base sink. Subclasses override ``write``."""

    owned = True  # closed by the controller on close()

    def write(self, text):
        raise NotImplementedError

    def flush(self):
        pass

    def close(self):
        pass


class DiscardSink(Sink):
    """Accepts and drops every write."""

    owned = False

    def write(self, text):
        return len(text)

    def __repr__(self):
        return "DiscardSink()"


class ConsoleSink(Sink):
    """Writes to ``sys.stdout`` or ``sys.stderr``.

    The stream is looked up on every write, so redirection of the
    process streams after init() is honoured. Never closed.
    """

    owned = False

    def __init__(self, stream_name):
        if stream_name not in ("stdout", "stderr"):
            raise ValueError(f"unknown console stream {stream_name!r}")
        self.stream_name = stream_name

    @property
    def stream(self):
        return getattr(sys, self.stream_name)

    def write(self, text):
        stream = self.stream
        stream.write(text)
        stream.flush()
        return len(text)

    def __repr__(self):
        return f"ConsoleSink({self.stream_name!r})"


class StreamSink(Sink):
    """Any caller-supplied object with ``write(text)``. Flushed, never closed."""

    owned = False

    def __init__(self, stream):
        self.stream = stream

    def write(self, text):
        self.stream.write(text)
        return len(text)

    def flush(self):
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def __repr__(self):
        return f"StreamSink({self.stream!r})"


class FileSink(Sink):
    """Append-only file. Each write is flushed straight through."""

    def __init__(self, path, handle):
        self.path = Path(path)
        self._handle = handle

    @classmethod
    def open(cls, path, file_mode=constants.FILE_MODE_DEFAULT,
             dir_mode=constants.DIR_MODE_DEFAULT):
        """Create missing parent directories, then open for append.

        Raises:
            ValueError: if ``path`` is empty.
            OSError: if the directory or file cannot be created.
        """
        if not path:
            raise ValueError("no log file name configured")
        path = Path(path)
        if str(path.parent) not in ("", "."):
            os.makedirs(path.parent, mode=dir_mode, exist_ok=True)
        fd = os.open(path, constants.FILE_FLAGS_APPEND, file_mode)
        return cls(path, os.fdopen(fd, "a", encoding="utf-8"))

    @property
    def closed(self):
        return self._handle.closed

    def write(self, text):
        self._handle.write(text)
        self._handle.flush()
        return len(text)

    def flush(self):
        if not self._handle.closed:
            self._handle.flush()

    def close(self):
        self._handle.close()

    def __repr__(self):
        return f"FileSink({str(self.path)!r})"


class SyslogSink(Sink):
    """A connected syslog socket writing one RFC 3164 message per line."""

    def __init__(self, sock, priority, tag="", hostname=None, local=False):
        self._sock = sock
        self.priority = priority
        argv0 = sys.argv[0] if sys.argv and sys.argv[0] else "python"
        self.tag = tag or Path(argv0).name
        self.hostname = hostname or socket.gethostname()
        self.local = local

    @property
    def stream_socket(self):
        return self._sock.type == socket.SOCK_STREAM

    @classmethod
    def dial(cls, prot, host, port, priority, tag=""):
        """Connect to a syslog endpoint.

        ``prot`` is ``udp``/``tcp`` (optionally suffixed ``4``/``6``) for a
        remote daemon, or empty/``unix``/``unixgram`` for the local one,
        in which case ``host`` may name the socket path.

        Raises:
            ValueError: on an unknown protocol, missing host or bad port.
            OSError: if the connection cannot be made.
        """
        prot = (prot or "").strip().lower()
        if prot in ("", "unix", "unixgram"):
            sock = _dial_local(prot, host)
            return cls(sock, priority, tag, local=True)

        if prot not in ("udp", "udp4", "udp6", "tcp", "tcp4", "tcp6"):
            raise ValueError(f"unsupported syslog protocol {prot!r}")
        if not host:
            raise ValueError("syslog host not configured")
        try:
            port = int(port) if port else constants.SYSLOG_DEFAULT_PORT
        except ValueError:
            raise ValueError(f"invalid syslog port {port!r}") from None

        family = {"4": socket.AF_INET, "6": socket.AF_INET6}.get(prot[-1], socket.AF_UNSPEC)
        socktype = socket.SOCK_STREAM if prot.startswith("tcp") else socket.SOCK_DGRAM
        return cls(_dial_remote(host, port, family, socktype), priority, tag)

    def _frame(self, line, now=None):
        now = now or datetime.now()
        stamp = f"{now:%b} {now.day:2d} {now:%H:%M:%S}"
        header = f"<{self.priority}>{stamp}"
        if not self.local:
            header = f"{header} {self.hostname}"
        msg = f"{header} {self.tag}[{os.getpid()}]: {line}"
        if self.stream_socket:
            msg += "\n"
        return msg.encode("utf-8")

    def write(self, text):
        for line in text.splitlines():
            if not line.strip():
                continue
            data = self._frame(line)
            if self.stream_socket:
                self._sock.sendall(data)
            else:
                self._sock.send(data)
        return len(text)

    def close(self):
        self._sock.close()

    def __repr__(self):
        return f"SyslogSink(priority={self.priority}, tag={self.tag!r})"


def _dial_local(prot, path):
    candidates = [path] if path else [
        p for p in constants.SYSLOG_LOCAL_SOCKETS if os.path.exists(p)
    ]
    if not candidates:
        raise FileNotFoundError("no local syslog socket found")

    socktypes = [socket.SOCK_DGRAM]
    if prot != "unixgram":
        socktypes.append(socket.SOCK_STREAM)

    last_err = None
    for candidate in candidates:
        for socktype in socktypes:
            sock = socket.socket(socket.AF_UNIX, socktype)
            try:
                sock.connect(candidate)
                return sock
            except OSError as e:
                sock.close()
                last_err = e
    raise last_err


def _dial_remote(host, port, family, socktype):
    last_err = None
    for af, st, proto, _, addr in socket.getaddrinfo(host, port, family, socktype):
        sock = socket.socket(af, st, proto)
        try:
            sock.connect(addr)
            return sock
        except OSError as e:
            sock.close()
            last_err = e
    raise last_err or OSError(f"cannot resolve syslog host {host!r}")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
class SinkFactory:
    """Opens sinks for a channel, reporting rather than raising failures.

    Permissions and the syslog facility are passed in, not read from
    module state, so callers can open sinks with different settings.
    """

    def __init__(self, file_mode=constants.FILE_MODE_DEFAULT,
                 dir_mode=constants.DIR_MODE_DEFAULT,
                 facility=constants.SYSLOG_FACILITY):
        self.file_mode = file_mode
        self.dir_mode = dir_mode
        self.facility = facility

    def open_file(self, path):
        """Open an append-only file sink, or return None on failure."""
        try:
            sink = FileSink.open(path, self.file_mode, self.dir_mode)
        except (OSError, ValueError) as e:
            get_diagnostics().warn(decorate_error(e), channel='sink')
            return None
        get_diagnostics().emit(levels.DEBUG, "opened {sink}", channel='sink', sink=sink)
        return sink

    def console(self, channel):
        """Console sink for a channel: stderr for Error, stdout otherwise."""
        return ConsoleSink("stderr" if channel is Channel.ERROR else "stdout")

    def priority(self, channel):
        severity = (constants.SYSLOG_SEVERITY_ERR if channel is Channel.ERROR
                    else constants.SYSLOG_SEVERITY_INFO)
        return (self.facility << 3) | severity

    def open_syslog(self, channel, prot, host, port, tag):
        """Dial a syslog sink for a channel, or return None on failure."""
        try:
            sink = SyslogSink.dial(prot, host, port, self.priority(channel), tag)
        except (OSError, ValueError) as e:
            get_diagnostics().warn(decorate_error(e), channel='sink')
            return None
        get_diagnostics().emit(levels.DEBUG, "opened {sink}", channel='sink', sink=sink)
        return sink

"""Logger facade: tag and header formatting in front of a channel writer.

Header layout, each part present only when its flag is set::

    <tag> 2026/10/19 14:03:07.123456 /srv/app/main.py:42: message

``FLAG_SHORT_FILE`` prints the base name instead of the full path and wins
over ``FLAG_LONG_FILE`` when both are set.
"""

import inspect
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from multilog import constants
from multilog.diagnostics import get_diagnostics
from multilog.errors import FanoutWriteError, decorate_error


def compose_flags(log_flags):
    """Build the header bitmask from LogFlagOptions.

    ``standard`` selects FLAG_STANDARD and ignores every other toggle.
    """
    if log_flags.standard:
        return constants.FLAG_STANDARD
    flags = 0
    if log_flags.utc:
        flags |= constants.FLAG_UTC
    if log_flags.date:
        flags |= constants.FLAG_DATE
    if log_flags.time:
        flags |= constants.FLAG_TIME
    if log_flags.short_file:
        flags |= constants.FLAG_SHORT_FILE
    elif log_flags.long_file:
        flags |= constants.FLAG_LONG_FILE
    return flags


def normalize_tag(tag):
    """Strip a tag and give it exactly one trailing space.

    An empty or blank tag yields ``""``, not a lone space, so untagged
    lines start directly with the header or message.
    """
    tag = (tag or "").strip()
    return f"{tag} " if tag else ""


def format_header(prefix, flags, now=None, caller=None):
    """Render the line prefix for ``flags``.

    Args:
        prefix: Normalized tag.
        flags: Header bitmask.
        now: Timestamp to render (default: current time).
        caller: ``(filename, lineno)`` for the file flags.
    """
    parts = [prefix]
    if flags & (constants.FLAG_DATE | constants.FLAG_TIME | constants.FLAG_MICROSECONDS):
        if now is None:
            now = datetime.now(timezone.utc) if flags & constants.FLAG_UTC else datetime.now()
        elif flags & constants.FLAG_UTC and now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        if flags & constants.FLAG_DATE:
            parts.append(now.strftime("%Y/%m/%d "))
        if flags & (constants.FLAG_TIME | constants.FLAG_MICROSECONDS):
            parts.append(now.strftime("%H:%M:%S"))
            if flags & constants.FLAG_MICROSECONDS:
                parts.append(f".{now.microsecond:06d}")
            parts.append(" ")
    if flags & (constants.FLAG_SHORT_FILE | constants.FLAG_LONG_FILE):
        filename, lineno = caller or ("???", 0)
        if flags & constants.FLAG_SHORT_FILE:
            filename = Path(filename).name
        parts.append(f"{filename}:{lineno}: ")
    return "".join(parts)


def _caller(depth):
    frame = inspect.currentframe()
    try:
        # skip _caller itself
        for _ in range(depth + 1):
            if frame is None:
                return None
            frame = frame.f_back
        if frame is None:
            return None
        return frame.f_code.co_filename, frame.f_lineno
    finally:
        del frame


class ChannelLogger:
    """Line logger bound to one channel's writer.

    Each call renders one complete line and hands it to the writer in a
    single ``write``, so the writer's lock keeps lines whole.
    """

    def __init__(self, writer, prefix="", flags=0):
        self.writer = writer
        self.prefix = prefix
        self.flags = flags

    def output(self, text, depth=1, caller=None):
        """Write ``text`` as one line.

        Args:
            text: Message; a newline is appended if missing.
            depth: Frames between the user's call and this method, used
                for the file flags (1 = the direct caller of output()).
            caller: Explicit ``(filename, lineno)``; skips frame lookup.

        A sink that fails the write is reported as a diagnostics warning
        on the ``sink`` channel; the caller never sees the error.
        """
        if caller is None and self.flags & (constants.FLAG_SHORT_FILE | constants.FLAG_LONG_FILE):
            caller = _caller(depth)
        line = format_header(self.prefix, self.flags, caller=caller) + text
        if not line.endswith("\n"):
            line += "\n"
        try:
            self.writer.write(line)
        except FanoutWriteError as e:
            # sinks that did accept the line keep it
            get_diagnostics().warn(decorate_error(e), channel='sink')

    def print(self, *values, sep=" "):
        """Log values joined by ``sep``."""
        self.output(sep.join(str(v) for v in values), depth=2)

    def printf(self, fmt, *args):
        """Log a %-format string."""
        self.output(fmt % args if args else fmt, depth=2)

    def fatal(self, *values):
        """Log values, then exit the process with status 1."""
        self.output(" ".join(str(v) for v in values), depth=2)
        sys.exit(1)

    def __repr__(self):
        return f"ChannelLogger(prefix={self.prefix!r}, flags={self.flags})"


class ChannelHandler(logging.Handler):
    """Forward standard ``logging`` records to a ChannelLogger.

    The record's own pathname/lineno supply the file flags, so headers
    point at the code that called ``logging``, not at this handler.
    """

    def __init__(self, channel_logger, level=logging.NOTSET):
        super().__init__(level)
        self.channel_logger = channel_logger

    def emit(self, record):
        try:
            self.channel_logger.output(
                self.format(record),
                caller=(record.pathname, record.lineno),
            )
        except Exception:
            self.handleError(record)

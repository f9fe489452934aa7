"""MultiLoggerWriter, the configuration controller.

Configure with chained setters, then call init() once::

    mlw = (MultiLoggerWriter()
           .defaults()
           .app_name("inventory")
           .enable_console(True)
           .init())
    mlw.system_logger().print("service started")
    mlw.error_logger().printf("lookup failed for %s", serial)

init() locks the configuration: from then on every setter raises
ConfigLockedError. Options and Config (not the live sinks) round-trip
through a JSON document with get_config()/save_config() and the
``path`` constructor argument.
"""

import os
import sys
import traceback
from dataclasses import dataclass

from multilog import constants
from multilog.diagnostics import get_diagnostics, levels
from multilog.document import dump_document, load_document, save_document
from multilog.errors import ConfigLockedError, FanoutWriteError, NotInitializedError
from multilog.fanout import BufferedWriter, FanoutWriter
from multilog.logger import ChannelLogger, compose_flags, normalize_tag
from multilog.options import (
    Channel, Config, Options,
    options_config_from_document, options_config_to_document,
)
from multilog.sinks import DiscardSink, SinkFactory


@dataclass
class ChannelState:
    """Runtime objects for one channel, built by init()."""
    writer: FanoutWriter
    buffered_writer: BufferedWriter
    logger: ChannelLogger


def _as_channel(channel):
    if isinstance(channel, Channel):
        return channel
    for candidate in Channel:
        if str(channel).lower() in (candidate.value.lower(), candidate.attr):
            return candidate
    raise ValueError(f"unknown channel {channel!r}")


def _program_dir():
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not argv0 or argv0 == "-c":
        return os.getcwd()
    return os.path.dirname(os.path.abspath(argv0))


class MultiLoggerWriter:
    """Routes the System, Access and Error channels to files, console and syslog.

    Args:
        path: Optional JSON document to restore Options/Config from. Any
            failure to read or parse it is reported as a diagnostics
            warning and the defaults() baseline is used instead.
        sink_factory: SinkFactory to open sinks with (default permissions
            and facility when omitted).
    """

    def __init__(self, path=None, sink_factory=None):
        self.options = Options()
        self.config = Config()
        self.sink_factory = sink_factory or SinkFactory()
        self._locked = False
        self._channels = {}
        self._owned_sinks = []

        if path is not None:
            self._restore(path)

    def _restore(self, path):
        diag = get_diagnostics()
        try:
            self.options, self.config = options_config_from_document(load_document(path))
        except (OSError, ValueError) as e:
            diag.warn(f"cannot load {str(path)!r} ({e}); using defaults", channel='config')
            self.options, self.config = Options(), Config()
            self.defaults()
            return
        diag.emit(levels.CONFIG, "restored configuration from {path}",
                  channel='config', path=path)

    # ------------------------------------------------------------------
    # Lock
    # ------------------------------------------------------------------
    @property
    def locked(self):
        """True once init() has run."""
        return self._locked

    def _check_unlocked(self, setting):
        if self._locked:
            raise ConfigLockedError(setting)

    # ------------------------------------------------------------------
    # Routing setters
    # ------------------------------------------------------------------
    def _enable_channel(self, channel, b):
        self._check_unlocked(f"enable_{channel.attr}")
        self.options.log_files.set(channel, b)
        self.options.console.set(channel, b)
        self.options.syslog.set(channel, b)
        return self

    def enable_system(self, b):
        """Route System to every sink kind (file, console, syslog)."""
        return self._enable_channel(Channel.SYSTEM, b)

    def enable_access(self, b):
        return self._enable_channel(Channel.ACCESS, b)

    def enable_error(self, b):
        return self._enable_channel(Channel.ERROR, b)

    def enable_log_files(self, b):
        """Toggle file sinks for all three channels."""
        self._check_unlocked("enable_log_files")
        self.options.log_files.set_all(b)
        return self

    def enable_console(self, b):
        self._check_unlocked("enable_console")
        self.options.console.set_all(b)
        return self

    def enable_syslog(self, b):
        self._check_unlocked("enable_syslog")
        self.options.syslog.set_all(b)
        return self

    def set_log_file(self, channel, b):
        """Toggle the file sink of a single channel."""
        self._check_unlocked("set_log_file")
        self.options.log_files.set(_as_channel(channel), b)
        return self

    def set_console(self, channel, b):
        self._check_unlocked("set_console")
        self.options.console.set(_as_channel(channel), b)
        return self

    def set_syslog(self, channel, b):
        self._check_unlocked("set_syslog")
        self.options.syslog.set(_as_channel(channel), b)
        return self

    # ------------------------------------------------------------------
    # Formatting setters
    # ------------------------------------------------------------------
    def _use_flags(self, channel, b):
        self._check_unlocked(f"{channel.attr}_use_flags")
        self.options.use_flags.set(channel, b)
        return self

    def system_use_flags(self, b):
        """Whether System lines carry the composed header flags."""
        return self._use_flags(Channel.SYSTEM, b)

    def access_use_flags(self, b):
        return self._use_flags(Channel.ACCESS, b)

    def error_use_flags(self, b):
        return self._use_flags(Channel.ERROR, b)

    def flags_utc(self, b):
        self._check_unlocked("flags_utc")
        self.options.log_flags.utc = b
        return self

    def flags_date(self, b):
        self._check_unlocked("flags_date")
        self.options.log_flags.date = b
        return self

    def flags_time(self, b):
        self._check_unlocked("flags_time")
        self.options.log_flags.time = b
        return self

    def flags_long_file(self, b):
        """Full caller path in headers; clears short-file when set."""
        self._check_unlocked("flags_long_file")
        if b:
            self.options.log_flags.short_file = False
        self.options.log_flags.long_file = b
        return self

    def flags_short_file(self, b):
        """Caller base name in headers; clears long-file when set."""
        self._check_unlocked("flags_short_file")
        if b:
            self.options.log_flags.long_file = False
        self.options.log_flags.short_file = b
        return self

    def flags_standard(self, b):
        """Date and time only; clears UTC, date, time and both file flags."""
        self._check_unlocked("flags_standard")
        if b:
            flags = self.options.log_flags
            flags.utc = flags.date = flags.time = False
            flags.long_file = flags.short_file = False
        self.options.log_flags.standard = b
        return self

    def recovery_stack(self, b):
        """Include tracebacks in log_recovered() output."""
        self._check_unlocked("recovery_stack")
        self.options.recovery_stack = b
        return self

    # ------------------------------------------------------------------
    # Config setters
    # ------------------------------------------------------------------
    def app_name(self, s):
        self._check_unlocked("app_name")
        self.config.app_name = s
        return self

    def app_dir(self, s):
        """Base directory for a relative log_dir (default: the program's directory)."""
        self._check_unlocked("app_dir")
        self.config.app_dir = s
        return self

    def log_dir(self, s):
        self._check_unlocked("log_dir")
        self.config.log_dir = s
        return self

    def _log_file(self, channel, s):
        self._check_unlocked(f"{channel.attr}_log")
        self.config.log_files.set(channel, s)
        return self

    def system_log(self, s):
        """System log file; relative names live under log_dir."""
        return self._log_file(Channel.SYSTEM, s)

    def access_log(self, s):
        return self._log_file(Channel.ACCESS, s)

    def error_log(self, s):
        return self._log_file(Channel.ERROR, s)

    def syslog_prot(self, s):
        """``udp``, ``tcp`` or empty for the local syslog socket."""
        self._check_unlocked("syslog_prot")
        self.config.syslog.prot = s
        return self

    def syslog_host(self, s):
        self._check_unlocked("syslog_host")
        self.config.syslog.host = s
        return self

    def syslog_port(self, s):
        self._check_unlocked("syslog_port")
        self.config.syslog.port = str(s)
        return self

    def syslog_tag(self, s):
        self._check_unlocked("syslog_tag")
        self.config.syslog.tag = s
        return self

    def _tag(self, channel, s):
        self._check_unlocked(f"{channel.attr}_tag")
        self.config.log_tags.set(channel, s)
        return self

    def system_tag(self, s):
        return self._tag(Channel.SYSTEM, s)

    def access_tag(self, s):
        return self._tag(Channel.ACCESS, s)

    def error_tag(self, s):
        return self._tag(Channel.ERROR, s)

    # ------------------------------------------------------------------
    # Baseline
    # ------------------------------------------------------------------
    def defaults(self):
        """Reset Options and Config to the baseline. Raises when locked.

        System and Error log to files with header flags, Access is off,
        console and syslog are off, and headers use the standard
        date/time layout.
        """
        self._check_unlocked("defaults")
        return (self
                .enable_system(True)
                .enable_access(False)
                .enable_error(True)

                .system_use_flags(True)
                .access_use_flags(False)
                .error_use_flags(True)

                .enable_console(False)
                .enable_syslog(False)

                .flags_utc(False)
                .flags_date(False)
                .flags_time(False)
                .flags_long_file(False)
                .flags_short_file(True)
                .flags_standard(True)

                .recovery_stack(False)

                .app_name("")
                .app_dir("")
                .log_dir(constants.DEFAULT_LOG_DIR)

                .system_log("system.log")
                .access_log("access.log")
                .error_log("error.log")

                .syslog_prot("")
                .syslog_host("")
                .syslog_port("")
                .syslog_tag("")

                .system_tag("system")
                .access_tag("access")
                .error_tag("error"))

    def defaults_init(self):
        """defaults() followed by init()."""
        return self.defaults().init()

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------
    def _resolve_dirs(self):
        cfg = self.config
        if not cfg.app_dir:
            cfg.app_dir = _program_dir()
        if not cfg.log_dir:
            cfg.log_dir = constants.DEFAULT_LOG_DIR
        if not os.path.isabs(cfg.log_dir) and os.path.dirname(cfg.log_dir) in ("", "."):
            cfg.log_dir = os.path.join(cfg.app_dir, cfg.log_dir)

    def log_file_path(self, channel):
        """Where a channel's file sink lives: absolute names as-is, others under log_dir."""
        name = self.config.log_files.get(_as_channel(channel))
        if not name or os.path.isabs(name):
            return name
        return os.path.join(self.config.log_dir, name)

    def _open_sinks(self, channel):
        opts, factory = self.options, self.sink_factory
        sinks = []
        if opts.log_files.get(channel):
            sink = factory.open_file(self.log_file_path(channel))
            if sink is not None:
                sinks.append(sink)
        if opts.console.get(channel):
            sinks.append(factory.console(channel))
        if opts.syslog.get(channel):
            sl = self.config.syslog
            sink = factory.open_syslog(channel, sl.prot, sl.host, sl.port, sl.tag)
            if sink is not None:
                sinks.append(sink)
        return sinks

    def init(self):
        """Lock the configuration and build every channel's writers and logger.

        Sinks that fail to open are reported and left out; a channel with
        no sink at all discards its output. Calling init() again reopens
        everything without closing what the first call opened.
        """
        self._locked = True
        self._resolve_dirs()

        flags = compose_flags(self.options.log_flags)
        diag = get_diagnostics()
        diag.emit(levels.CONFIG, "log directory {d}", channel='init', d=self.config.log_dir)

        channels = {}
        for channel in Channel:
            sinks = self._open_sinks(channel)
            self._owned_sinks.extend(s for s in sinks if s.owned)
            if not sinks:
                sinks = [DiscardSink()]

            channel_flags = flags if self.options.use_flags.get(channel) else 0
            self.config.log_flags.set(channel, channel_flags)
            tag = normalize_tag(self.config.log_tags.get(channel))
            self.config.log_tags.set(channel, tag)

            writer = FanoutWriter(sinks)
            channels[channel] = ChannelState(
                writer=writer,
                buffered_writer=BufferedWriter(writer),
                logger=ChannelLogger(writer, tag, channel_flags),
            )
            diag.emit(levels.INFO, "{ch}: {sinks}", channel='init',
                      ch=channel.value, sinks=", ".join(repr(s) for s in sinks))

        self._channels = channels
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def _state(self, channel):
        if not self._channels:
            raise NotInitializedError("init() has not been called")
        return self._channels[_as_channel(channel)]

    def writer(self, channel):
        """Fan-out writer for a channel (Channel or name)."""
        return self._state(channel).writer

    def buffered_writer(self, channel):
        return self._state(channel).buffered_writer

    def logger(self, channel):
        return self._state(channel).logger

    def system_writer(self):
        return self.writer(Channel.SYSTEM)

    def access_writer(self):
        return self.writer(Channel.ACCESS)

    def error_writer(self):
        return self.writer(Channel.ERROR)

    def system_buffered_writer(self):
        return self.buffered_writer(Channel.SYSTEM)

    def access_buffered_writer(self):
        return self.buffered_writer(Channel.ACCESS)

    def error_buffered_writer(self):
        return self.buffered_writer(Channel.ERROR)

    def system_logger(self):
        return self.logger(Channel.SYSTEM)

    def access_logger(self):
        return self.logger(Channel.ACCESS)

    def error_logger(self):
        return self.logger(Channel.ERROR)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_document(self):
        """Options and Config as a plain dict."""
        return options_config_to_document(self.options, self.config)

    def get_config(self):
        """Options and Config as tab-indented JSON text."""
        return dump_document(self.to_document())

    def save_config(self, path):
        """Write Options and Config to ``path``. OSError propagates."""
        target = save_document(self.to_document(), path)
        get_diagnostics().emit(levels.CONFIG, "saved configuration to {path}",
                               channel='config', path=target)
        return target

    # ------------------------------------------------------------------
    # Recovery and shutdown
    # ------------------------------------------------------------------
    def log_recovered(self, exc, message=None):
        """Log a recovered exception on the Error channel.

        The traceback is appended when the RecoveryStack option is on.
        """
        text = f"{message or 'recovered'}: {type(exc).__name__}: {exc}"
        if self.options.recovery_stack:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            text = f"{text}\n{stack.rstrip()}"
        self.error_logger().output(text, depth=2)

    def close(self):
        """Flush buffered writers and close every file and syslog sink."""
        diag = get_diagnostics()
        for channel, state in self._channels.items():
            try:
                state.buffered_writer.flush()
            except FanoutWriteError as e:
                diag.warn(f"{channel.value}: flush failed: {e}", channel='sink')
        sinks, self._owned_sinks = self._owned_sinks, []
        for sink in sinks:
            try:
                sink.close()
            except OSError as e:
                diag.warn(f"cannot close {sink!r}: {e}", channel='sink')

    def __repr__(self):
        state = "locked" if self._locked else "unlocked"
        return f"<MultiLoggerWriter {self.config.app_name or '-'} {state}>"

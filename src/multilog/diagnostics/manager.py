"""
DiagnosticOutput, the process's own diagnostic channel.

multilog never lets a failing sink or a broken document abort the
application. Those failures are reported here instead, gated by a single
verbosity axis with per-channel overrides:

    <-- quieter ---------- default ---------- louder -->
    -4    -3     -2      -1     0      1     2      3
    wall  errors warnings minimal default info config debug

Warnings sit at -2, so they show by default and disappear with -QQ.
"""

import sys
from typing import Any, Dict, Optional, TextIO

from . import levels
from .channels import parse_channel_spec


class DiagnosticOutput:
    """Verbosity-gated writer for multilog's own diagnostics.

    Usage::

        diag = DiagnosticOutput(verbosity=1)
        diag.emit(1, "opened {count} sinks", channel='init', count=3)
        diag.warn("cannot open log file", channel='sink')
    """

    def __init__(
        self,
        verbosity: int = 0,
        channel_overrides: Dict[str, int] = None,
        file: TextIO = None,
    ):
        self.verbosity = verbosity
        self.channel_overrides: Dict[str, int] = dict(channel_overrides or {})
        self._file = file

    @property
    def file(self) -> TextIO:
        """Destination stream; stderr unless one was given."""
        return self._file if self._file is not None else sys.stderr

    def threshold(self, channel: str) -> int:
        return self.channel_overrides.get(channel, self.verbosity)

    def emit(self, level: int, message: str, *,
             channel: str = 'general', **kwargs: Any) -> None:
        """Emit a message if level <= threshold for that channel.

        Args:
            level: Message level (higher = more verbose)
            message: Format string (uses str.format with kwargs)
            channel: Diagnostic channel name
            **kwargs: Values for template placeholders
        """
        threshold = self.threshold(channel)
        if threshold <= levels.NOTHING or level > threshold:
            return
        text = message.format(**kwargs) if kwargs else message
        print(f"multilog: {text}", file=self.file)

    def warn(self, message: str, *, channel: str = 'general') -> None:
        """Emit a warning (level -2)."""
        self.emit(levels.WARNING, "WARNING: {msg}", channel=channel, msg=message)

    def error(self, message: str) -> None:
        """Emit an error (level -3, shown unless at the hard wall)."""
        self.emit(levels.ERROR, "ERROR: {msg}", channel='error', msg=message)

    def channel_active(self, channel: str, level: int = levels.DEFAULT) -> bool:
        """True when a message at ``level`` on ``channel`` would be shown."""
        threshold = self.threshold(channel)
        return threshold > levels.NOTHING and level <= threshold


# =============================================================================
# Module-level singleton
# =============================================================================

_diagnostics: Optional[DiagnosticOutput] = None


def init_diagnostics(verbosity: int = 0, channels: list = None,
                     file: TextIO = None) -> DiagnosticOutput:
    """Initialize the module-level DiagnosticOutput singleton.

    Args:
        verbosity: Global threshold (0 = default, negative = quieter)
        channels: Channel spec strings, e.g. ``['sink:2', 'config']``
        file: Destination stream (default: stderr at emit time)
    """
    global _diagnostics

    overrides = {}
    for spec in channels or []:
        parsed = parse_channel_spec(spec)
        overrides[parsed.name] = parsed.level

    _diagnostics = DiagnosticOutput(
        verbosity=verbosity,
        channel_overrides=overrides,
        file=file,
    )
    return _diagnostics


def get_diagnostics() -> DiagnosticOutput:
    """Get the module-level DiagnosticOutput, creating a default if needed."""
    global _diagnostics
    if _diagnostics is None:
        _diagnostics = DiagnosticOutput()
    return _diagnostics

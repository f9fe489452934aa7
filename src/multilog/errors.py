"""Exception types and the call-site error decorator."""

import inspect
from pathlib import Path


class MultilogError(Exception):
    """Base class for multilog errors."""


class ConfigLockedError(MultilogError, RuntimeError):
    """Raised when configuration is mutated after init()."""

    def __init__(self, setting=None):
        message = "configuration is locked"
        if setting:
            message = f"{message}: cannot change {setting!r}"
        super().__init__(message)
        self.setting = setting


class NotInitializedError(MultilogError, RuntimeError):
    """Raised when runtime accessors are used before init()."""


class FanoutWriteError(MultilogError, OSError):
    """One or more sinks failed during a fan-out write.

    Every sink was attempted. ``failures`` holds ``(sink, exception)``
    pairs in sink order; the first exception is chained as ``__cause__``.
    """

    def __init__(self, failures):
        self.failures = list(failures)
        names = ", ".join(f"{sink!r} ({exc})" for sink, exc in self.failures)
        super().__init__(f"write failed on {len(self.failures)} sink(s): {names}")


def decorate_error(err, depth=1):
    """Prefix an error with the caller's file, line and function.

    Args:
        err: Exception or message to decorate.
        depth: Frames to walk up from this function (1 = direct caller).

    Returns:
        String like ``"sinks.py:88: open_file(): [Errno 13] Permission denied"``.
        The bare message is returned when no frame is available.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return str(err)
        return "{}:{}: {}(): {}".format(
            Path(frame.f_code.co_filename).name,
            frame.f_lineno,
            frame.f_code.co_name,
            err,
        )
    finally:
        del frame

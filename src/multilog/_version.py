"""
Version information for multilog.

This file is the single source of the version number. setup.py execs it
directly, so it must not import anything from the package.

VERSION is the PEP 440 form used for packaging (``0.3.0b0``);
BASE_VERSION is the form shown by ``multilog --version`` (``0.3.0-beta0``).
"""

# major, minor, patch, phase (None, "alpha", "beta" or "rc"), phase number
VERSION_INFO = (0, 3, 0, "beta", 0)

_PEP440_PHASES = {"alpha": "a", "beta": "b", "rc": "rc"}

__app_name__ = "multilog"


def _check_phase(phase):
    if phase is not None and phase not in _PEP440_PHASES:
        raise ValueError(f"unknown release phase {phase!r}")


def format_version(major, minor, patch, phase=None, number=0):
    """PEP 440 version string, e.g. ``1.2.0``, ``0.3.0b0`` or ``1.0.0rc2``."""
    _check_phase(phase)
    base = f"{major}.{minor}.{patch}"
    if phase is None:
        return base
    return f"{base}{_PEP440_PHASES[phase]}{number}"


def format_base_version(major, minor, patch, phase=None, number=0):
    """Display version string, e.g. ``1.2.0`` or ``0.3.0-beta0``."""
    _check_phase(phase)
    base = f"{major}.{minor}.{patch}"
    if phase is None:
        return base
    return f"{base}-{phase}{number}"


VERSION = format_version(*VERSION_INFO)
BASE_VERSION = format_base_version(*VERSION_INFO)
__version__ = VERSION

"""Console message formatting for the multilog command-line tool.

print_*() helpers respect the diagnostics verbosity axis: they are
level -2 messages, hidden at -QQQ and below.
"""

import sys

from multilog.diagnostics import get_diagnostics, levels


def _should_print():
    return get_diagnostics().verbosity >= levels.WARNING


def print_ok(msg):
    """Print a success message."""
    if _should_print():
        print(f"  [OK] {msg}")


def print_warn(msg):
    """Print a warning message."""
    if _should_print():
        print(f"  [WARN] {msg}")


def print_info(msg):
    if _should_print():
        print(f"  {msg}")


def print_error(msg):
    """Print an error message to stderr (hidden only at the hard wall)."""
    if get_diagnostics().verbosity > levels.NOTHING:
        print(f"  ERROR: {msg}", file=sys.stderr)

"""
Diagnostic verbosity level constants.

The emit rule is simple:

    message.level <= threshold  ->  message is shown

The threshold is either the global verbosity or a per-channel override.

Level assignments:
    <-- quieter ---------- default ---------- louder -->
    -4    -3     -2      -1     0      1     2      3
    wall  errors warnings minimal default info config debug
"""

# Positive levels (shown with -v/-vv/-vvv)
DEBUG = 3          # Per-sink detail, resolved paths
CONFIG = 2         # Document load/save, resolved directories
INFO = 1           # Init summary
DEFAULT = 0

# Negative levels (suppressed with -Q/-QQ/-QQQ/-QQQQ)
MINIMAL = -1
WARNING = -2       # Sink-acquisition and document failures
ERROR = -3
NOTHING = -4       # Hard wall

"""
Diagnostic channel names and ``--show`` spec parsing.

Diagnostic channels classify multilog's own messages about itself (a sink
that could not be opened, a document that could not be read). They are
unrelated to the System/Access/Error log channels that applications write to.

Channel spec syntax:
    CHANNEL[:LEVEL]

    Examples:
        sink        # level 0
        config:2    # level 2
"""

from dataclasses import dataclass


KNOWN_CHANNELS = {
    'sink',         # Sink acquisition (files, syslog)
    'config',       # Document restore and save
    'init',         # Channel materialization
    'general',      # Default channel
    'error',        # Error messages
}

CHANNEL_DESCRIPTIONS = {
    'sink':     'Sink acquisition (files, syslog)',
    'config':   'Configuration document restore and save',
    'init':     'Channel materialization during init()',
    'general':  'General output',
    'error':    'Error messages',
}


@dataclass
class ChannelSpec:
    """A parsed ``--show`` argument."""
    name: str
    level: int = 0


def parse_channel_spec(spec: str) -> ChannelSpec:
    """Parse ``"name"`` or ``"name:level"`` into a ChannelSpec.

    Raises:
        ValueError: if the level part is not an integer.
    """
    name, _, level = spec.partition(':')
    return ChannelSpec(name=name.strip(), level=int(level) if level else 0)


def format_channel_list() -> str:
    """Format the diagnostic channels for display."""
    lines = ["Diagnostic channels:"]
    width = max(len(name) for name in KNOWN_CHANNELS)
    for name in sorted(KNOWN_CHANNELS):
        lines.append(f"  {name:<{width}}  {CHANNEL_DESCRIPTIONS.get(name, '')}")
    return "\n".join(lines)

"""
diagnostics — multilog's own verbosity-gated output.

Public API:
    DiagnosticOutput    — verbosity-gated writer
    init_diagnostics    — singleton initialization
    get_diagnostics     — access singleton
    ChannelSpec         — parsed ``--show`` argument
    parse_channel_spec  — parse ``name[:level]``
    KNOWN_CHANNELS      — set of diagnostic channel names
"""

from .manager import DiagnosticOutput, init_diagnostics, get_diagnostics
from .channels import (
    ChannelSpec, parse_channel_spec, KNOWN_CHANNELS,
    CHANNEL_DESCRIPTIONS, format_channel_list,
)

__all__ = [
    'DiagnosticOutput', 'init_diagnostics', 'get_diagnostics',
    'ChannelSpec', 'parse_channel_spec', 'KNOWN_CHANNELS',
    'CHANNEL_DESCRIPTIONS', 'format_channel_list',
]

"""
Tests for multilog.diagnostics — verbosity-gated self-reporting.

Covers the level axis, per-channel overrides, warn/error helpers,
channel spec parsing and the module singleton.
"""

import io

import pytest

from multilog.diagnostics import (
    DiagnosticOutput,
    KNOWN_CHANNELS,
    format_channel_list,
    get_diagnostics,
    init_diagnostics,
    parse_channel_spec,
)
from multilog.diagnostics.levels import (
    CONFIG, DEBUG, DEFAULT, ERROR, INFO, MINIMAL, NOTHING, WARNING,
)


@pytest.fixture
def buf():
    """A StringIO buffer for capturing output."""
    return io.StringIO()


class TestLevelConstants:
    """Verify level constants keep their ordering."""

    def test_level_ordering(self):
        assert NOTHING < ERROR < WARNING < MINIMAL < DEFAULT < INFO < CONFIG < DEBUG

    def test_specific_values(self):
        assert DEFAULT == 0
        assert WARNING == -2
        assert NOTHING == -4


class TestEmit:
    """Test threshold gating in DiagnosticOutput.emit()."""

    def test_message_at_threshold_shown(self, buf):
        diag = DiagnosticOutput(verbosity=1, file=buf)
        diag.emit(1, "opened {n} sinks", channel='init', n=3)
        assert "multilog: opened 3 sinks" in buf.getvalue()

    def test_message_above_threshold_hidden(self, buf):
        diag = DiagnosticOutput(verbosity=0, file=buf)
        diag.emit(2, "too detailed")
        assert buf.getvalue() == ""

    def test_channel_override_wins(self, buf):
        diag = DiagnosticOutput(verbosity=0, channel_overrides={'sink': 3}, file=buf)
        diag.emit(3, "sink detail", channel='sink')
        diag.emit(3, "init detail", channel='init')
        assert "sink detail" in buf.getvalue()
        assert "init detail" not in buf.getvalue()

    def test_hard_wall_silences_everything(self, buf):
        diag = DiagnosticOutput(verbosity=NOTHING, file=buf)
        diag.emit(ERROR, "even errors")
        diag.error("boom")
        assert buf.getvalue() == ""

    def test_default_file_is_stderr(self, capsys):
        DiagnosticOutput().emit(0, "to stderr")
        assert "to stderr" in capsys.readouterr().err


class TestWarnAndError:
    """warn() and error() use fixed levels."""

    def test_warn_shown_by_default(self, buf):
        DiagnosticOutput(file=buf).warn("disk full", channel='sink')
        assert "WARNING: disk full" in buf.getvalue()

    def test_warn_hidden_at_errors_only(self, buf):
        DiagnosticOutput(verbosity=ERROR, file=buf).warn("disk full")
        assert buf.getvalue() == ""

    def test_error_shown_when_quiet(self, buf):
        DiagnosticOutput(verbosity=ERROR, file=buf).error("fatal thing")
        assert "ERROR: fatal thing" in buf.getvalue()

    def test_braces_in_message_are_not_formatted(self, buf):
        DiagnosticOutput(file=buf).warn("bad key {Options}")
        assert "{Options}" in buf.getvalue()


class TestChannelActive:

    def test_active_at_default(self):
        assert DiagnosticOutput().channel_active('sink')

    def test_inactive_when_level_too_high(self):
        assert not DiagnosticOutput().channel_active('sink', level=DEBUG)

    def test_inactive_at_hard_wall(self):
        diag = DiagnosticOutput(channel_overrides={'sink': NOTHING})
        assert not diag.channel_active('sink', level=ERROR)


class TestChannelSpec:
    """Test --show CHANNEL[:LEVEL] parsing."""

    def test_bare_name(self):
        spec = parse_channel_spec("sink")
        assert spec.name == "sink"
        assert spec.level == 0

    def test_name_and_level(self):
        spec = parse_channel_spec("config:2")
        assert spec.name == "config"
        assert spec.level == 2

    def test_negative_level(self):
        assert parse_channel_spec("init:-4").level == -4

    def test_bad_level_raises(self):
        with pytest.raises(ValueError):
            parse_channel_spec("sink:loud")

    def test_channel_list_mentions_every_channel(self):
        text = format_channel_list()
        for name in KNOWN_CHANNELS:
            assert name in text


class TestSingleton:
    """init_diagnostics()/get_diagnostics() module singleton."""

    def test_get_creates_default(self):
        diag = get_diagnostics()
        assert diag.verbosity == 0
        assert get_diagnostics() is diag

    def test_init_applies_channel_specs(self, buf):
        diag = init_diagnostics(verbosity=-1, channels=["sink:3"], file=buf)
        assert get_diagnostics() is diag
        assert diag.channel_overrides == {"sink": 3}
        assert diag.verbosity == -1

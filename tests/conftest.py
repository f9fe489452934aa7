"""Shared test fixtures for the multilog test suite."""

import io
import json
import socket
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from multilog import MultiLoggerWriter  # noqa: E402
from multilog.diagnostics import manager as _diag_manager  # noqa: E402


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: multi-threaded or socket-heavy tests")


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_diagnostics():
    """Give every test a fresh diagnostics singleton."""
    saved = _diag_manager._diagnostics
    _diag_manager._diagnostics = None
    yield
    _diag_manager._diagnostics = saved


@pytest.fixture
def diag_buf():
    """Route diagnostics into a StringIO buffer and return it."""
    buf = io.StringIO()
    _diag_manager.init_diagnostics(verbosity=0, file=buf)
    return buf


# ---------------------------------------------------------------------------
# Controllers
# ---------------------------------------------------------------------------
@pytest.fixture
def app_dir(tmp_path):
    """A temporary application directory."""
    d = tmp_path / "app"
    d.mkdir()
    return d


@pytest.fixture
def mlw(app_dir):
    """A default, not yet initialized controller rooted in app_dir."""
    writer = MultiLoggerWriter().defaults().app_dir(str(app_dir))
    yield writer
    writer.close()


@pytest.fixture
def default_document():
    """The document defaults() produces, before init()."""
    return {
        "Options": {
            "LogFiles": {"System": True, "Access": False, "Error": True},
            "Console": {"System": False, "Access": False, "Error": False},
            "Syslog": {"System": False, "Access": False, "Error": False},
            "UseFlags": {"System": True, "Access": False, "Error": True},
            "LogFlags": {
                "UTC": False, "Date": False, "Time": False,
                "LongFile": False, "ShortFile": False, "Standard": True,
            },
            "RecoveryStack": False,
        },
        "Config": {
            "AppName": "",
            "AppDir": "",
            "LogDir": "log",
            "LogFiles": {"System": "system.log", "Access": "access.log",
                         "Error": "error.log"},
            "LogFlags": {"System": 0, "Access": 0, "Error": 0},
            "LogTags": {"System": "system", "Access": "access", "Error": "error"},
            "Syslog": {"Prot": "", "Host": "", "Port": "", "Tag": ""},
        },
    }


@pytest.fixture
def config_file(tmp_path, default_document):
    """Write default_document to disk and return its path."""
    path = tmp_path / "multilog.json"
    path.write_text(json.dumps(default_document), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Syslog receivers
# ---------------------------------------------------------------------------
@pytest.fixture
def udp_receiver():
    """A bound UDP socket standing in for a syslog daemon."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def closed_tcp_port():
    """A localhost TCP port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port

"""Options and Config, the persisted half of a MultiLoggerWriter.

Each dataclass field carries its document key in ``metadata["key"]``.
``to_document()`` and ``from_document()`` walk those descriptors, so the
JSON layout is declared once, next to the fields themselves::

    {
        "Options": {"LogFiles": {"System": true, ...}, ...},
        "Config":  {"AppName": "", "LogDir": "log", ...}
    }

Unknown keys are ignored on read; missing keys keep their zero value.
"""

from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict


class Channel(Enum):
    """The three logical log channels."""
    SYSTEM = "System"
    ACCESS = "Access"
    ERROR = "Error"

    @property
    def attr(self) -> str:
        """Attribute name on per-channel dataclasses."""
        return self.name.lower()


def _key(name, default):
    return field(default=default, metadata={"key": name})


def _group(name, factory):
    return field(default_factory=factory, metadata={"key": name})


class _PerChannel:
    """Channel-indexed access shared by the per-channel groups."""

    def get(self, channel: Channel):
        return getattr(self, channel.attr)

    def set(self, channel: Channel, value) -> None:
        setattr(self, channel.attr, value)


@dataclass
class ChannelFlags(_PerChannel):
    """One boolean per channel."""
    system: bool = _key("System", False)
    access: bool = _key("Access", False)
    error: bool = _key("Error", False)

    def set_all(self, value: bool) -> None:
        for channel in Channel:
            self.set(channel, value)


@dataclass
class ChannelStrings(_PerChannel):
    """One string per channel (file paths, tags)."""
    system: str = _key("System", "")
    access: str = _key("Access", "")
    error: str = _key("Error", "")


@dataclass
class ChannelInts(_PerChannel):
    """One integer per channel (computed flag bitmasks)."""
    system: int = _key("System", 0)
    access: int = _key("Access", 0)
    error: int = _key("Error", 0)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------
@dataclass
class LogFlagOptions:
    """Shared header formatting toggles.

    ``long_file``/``short_file`` are mutually exclusive and ``standard``
    excludes all the others; MultiLoggerWriter's setters keep it that way.
    """
    utc: bool = _key("UTC", False)
    date: bool = _key("Date", False)
    time: bool = _key("Time", False)
    long_file: bool = _key("LongFile", False)
    short_file: bool = _key("ShortFile", False)
    standard: bool = _key("Standard", False)


@dataclass
class Options:
    """Routing and formatting switches."""
    log_files: ChannelFlags = _group("LogFiles", ChannelFlags)
    console: ChannelFlags = _group("Console", ChannelFlags)
    syslog: ChannelFlags = _group("Syslog", ChannelFlags)
    use_flags: ChannelFlags = _group("UseFlags", ChannelFlags)
    log_flags: LogFlagOptions = _group("LogFlags", LogFlagOptions)
    recovery_stack: bool = _key("RecoveryStack", False)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
@dataclass
class SyslogConfig:
    """Syslog connection parameters. ``port`` is kept as text."""
    prot: str = _key("Prot", "")
    host: str = _key("Host", "")
    port: str = _key("Port", "")
    tag: str = _key("Tag", "")


@dataclass
class Config:
    """Names, paths, tags and syslog endpoint."""
    app_name: str = _key("AppName", "")
    app_dir: str = _key("AppDir", "")
    log_dir: str = _key("LogDir", "")
    log_files: ChannelStrings = _group("LogFiles", ChannelStrings)
    log_flags: ChannelInts = _group("LogFlags", ChannelInts)
    log_tags: ChannelStrings = _group("LogTags", ChannelStrings)
    syslog: SyslogConfig = _group("Syslog", SyslogConfig)


# ---------------------------------------------------------------------------
# Document conversion
# ---------------------------------------------------------------------------
def to_document(obj) -> Dict[str, Any]:
    """Convert a dataclass tree to a dict keyed by document names."""
    doc = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        doc[f.metadata["key"]] = to_document(value) if is_dataclass(value) else value
    return doc


def _zero(f):
    if f.default_factory is not MISSING:
        return f.default_factory()
    return f.default


def from_document(cls, data):
    """Build ``cls`` from a document section.

    Missing keys take the field's zero value; unknown keys are ignored.

    Raises:
        ValueError: if ``data`` or a value has the wrong JSON type.
    """
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"{cls.__name__}: expected an object, got {type(data).__name__}")

    kwargs = {}
    for f in fields(cls):
        key = f.metadata["key"]
        if key not in data:
            continue
        value = data[key]
        zero = _zero(f)
        if is_dataclass(zero):
            kwargs[f.name] = from_document(type(zero), value)
        elif value is None:
            kwargs[f.name] = zero
        elif type(value) is not type(zero):
            # bool is an int subclass, so compare exact types
            raise ValueError(
                f"{cls.__name__}.{key}: expected {type(zero).__name__}, "
                f"got {type(value).__name__}"
            )
        else:
            kwargs[f.name] = value
    return cls(**kwargs)


def options_config_to_document(options: Options, config: Config) -> Dict[str, Any]:
    """The full two-section document."""
    return {"Options": to_document(options), "Config": to_document(config)}


def options_config_from_document(data):
    """Parse a full document into ``(Options, Config)``.

    Raises:
        ValueError: on a non-object document or mistyped values.
    """
    if not isinstance(data, dict):
        raise ValueError("configuration document must be a JSON object")
    return (
        from_document(Options, data.get("Options")),
        from_document(Config, data.get("Config")),
    )

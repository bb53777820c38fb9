"""
DeployTrace Logging Engine.

Records timestamped trace messages for unattended deployment workflows:
- TraceTool (CMTrace-compatible) or Legacy text lines
- Optional console mirroring, colored by severity
- Size-based rotation to a single ".lo_" archive

Usage:
    from deploytrace.logging import write_log, Severity

    write_log("Installing patch", source="Add-Patch")
    write_log(["Copy failed", "Access denied"], severity=Severity.ERROR)

Collaborators only supply text, severity and optional tags; the
process-wide dispatcher is created from get_config() on first use.
"""

import threading
from collections.abc import Sequence

from deploytrace.state import get_session, set_current_section

from .config import LogConfiguration, LogFormat, get_config, load_config, set_config
from .console import ConsoleMirror
from .dispatcher import LogDispatcher
from .entries import CallContext, LogEntry, Severity
from .formatter import format_console, format_legacy, format_trace_tool
from .rotation import RotationManager

# Lazy-initialized dispatcher to avoid touching the file system before needed
_dispatcher: LogDispatcher | None = None
_init_lock = threading.Lock()


def get_dispatcher() -> LogDispatcher:
    """Get the process-wide dispatcher, creating it on first use."""
    global _dispatcher

    if _dispatcher is not None:
        return _dispatcher

    with _init_lock:
        # Double-check after acquiring lock
        if _dispatcher is None:
            _dispatcher = LogDispatcher(get_config(), get_session())
        return _dispatcher


def set_dispatcher(dispatcher: LogDispatcher | None) -> None:
    """Replace the process-wide dispatcher (None re-creates it lazily)."""
    global _dispatcher
    _dispatcher = dispatcher


def write_log(
    messages: str | Sequence[str],
    severity: int | Severity = Severity.INFO,
    source: str | None = None,
    section: str | None = None,
    **options,
) -> list[str] | None:
    """Log through the process-wide dispatcher. See LogDispatcher.log()."""
    return get_dispatcher().log(messages, severity, source, section, **options)


__all__ = [
    # Call contract
    "write_log",
    "get_dispatcher",
    "set_dispatcher",
    "set_current_section",
    # Engine
    "LogDispatcher",
    "ConsoleMirror",
    "RotationManager",
    # Entries
    "Severity",
    "LogEntry",
    "CallContext",
    # Formatting
    "format_trace_tool",
    "format_legacy",
    "format_console",
    # Config
    "LogConfiguration",
    "LogFormat",
    "get_config",
    "set_config",
    "load_config",
]

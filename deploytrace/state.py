"""
DeployTrace - Session Context

Process-wide state shared by every dispatch call in one deployment run:
the current phase label used as the default log section, and the sticky
switch that turns file logging off after the log directory proved unusable.
"""

from dataclasses import dataclass, field
from datetime import datetime

# Phase whose banner is suppressed after an internal relaunch
INITIALIZATION_SECTION = "Initialization"


@dataclass
class SessionContext:
    """
    Context maintained throughout a deployment session.

    Only the dispatcher mutates file_logging_disabled; callers change
    the current phase through set_current_section().
    """

    current_section: str = ""
    file_logging_disabled: bool = False
    disabled_reason: str | None = None

    started_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)

    # Counters
    lines_written: int = 0
    write_failures: int = 0
    rotations: int = 0

    def disable_file_logging(self, reason: str) -> None:
        """Stop file writes for the rest of the session."""
        self.file_logging_disabled = True
        self.disabled_reason = reason
        self.last_activity = datetime.now()

    def record_write(self, success: bool) -> None:
        """Record the outcome of one append."""
        if success:
            self.lines_written += 1
        else:
            self.write_failures += 1
        self.last_activity = datetime.now()

    def record_rotation(self) -> None:
        self.rotations += 1
        self.last_activity = datetime.now()


_session: SessionContext | None = None


def get_session() -> SessionContext:
    """Get the process-wide session, creating it on first use."""
    global _session
    if _session is None:
        _session = SessionContext()
    return _session


def set_current_section(section: str) -> None:
    """Set the phase label used when a log call names no section."""
    get_session().current_section = section


def reset_session() -> SessionContext:
    """Start a fresh session (useful for testing)."""
    global _session
    _session = SessionContext()
    return _session

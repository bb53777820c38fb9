"""
Log Entry Data Structures for DeployTrace.

A LogEntry exists only for the duration of one dispatch call; what gets
persisted is its serialization (see formatter.py). Environment context is
captured once per call so every message of the call shares it.
"""

import getpass
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from types import FrameType

_PACKAGE = __name__.split(".")[0]


class Severity(IntEnum):
    """Severity codes as written to the "type" attribute of trace lines."""

    INFO = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        """Word used in legacy lines: Info, Warning or Error."""
        return self.name.capitalize()

    @classmethod
    def coerce(cls, value: "int | Severity") -> "Severity":
        """
        Convert an int (1-3) to a Severity.

        Raises:
            ValueError: If value is not a known severity code
        """
        message = f"Invalid severity {value!r}; expected 1 (Info), 2 (Warning) or 3 (Error)"
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(message)
        try:
            return cls(value)
        except ValueError:
            raise ValueError(message)


@dataclass(frozen=True)
class CallContext:
    """Environment captured once per dispatch call."""

    timestamp: datetime
    thread_id: int  # process id, as the trace viewer expects
    principal_name: str
    script_file: str
    caller: str  # default source when the call names none

    @classmethod
    def capture(cls, script_file: str | None = None) -> "CallContext":
        """Snapshot the clock, process and calling frame."""
        frame = _caller_frame()
        caller = ""
        caller_file = ""
        if frame is not None:
            if frame.f_code.co_name != "<module>":
                caller = frame.f_code.co_name
            caller_file = Path(frame.f_code.co_filename).name
        return cls(
            timestamp=datetime.now().astimezone(),
            thread_id=os.getpid(),
            principal_name=_principal_name(),
            script_file=script_file if script_file is not None else caller_file,
            caller=caller,
        )


@dataclass(frozen=True)
class LogEntry:
    """A single message ready for serialization."""

    text: str
    severity: Severity
    source: str
    section: str
    timestamp: datetime
    thread_id: int
    principal_name: str
    script_file: str

    @classmethod
    def from_context(
        cls,
        text: str,
        severity: Severity,
        source: str,
        section: str,
        context: CallContext,
    ) -> "LogEntry":
        """Build an entry that shares the call's captured context."""
        return cls(
            text="" if text is None else str(text),
            severity=severity,
            source=source,
            section=section,
            timestamp=context.timestamp,
            thread_id=context.thread_id,
            principal_name=context.principal_name,
            script_file=context.script_file,
        )

    @property
    def section_defined(self) -> bool:
        return bool(self.section)


def _caller_frame() -> FrameType | None:
    """First frame on the stack that does not belong to this package."""
    frame = sys._getframe(1)
    while frame is not None and frame.f_globals.get("__name__", "").split(".")[0] == _PACKAGE:
        frame = frame.f_back
    return frame


def _principal_name() -> str:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = ""
    domain = os.environ.get("USERDOMAIN")
    if domain and user:
        return f"{domain}\\{user}"
    return user

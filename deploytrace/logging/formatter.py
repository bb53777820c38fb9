"""
Line Formatters for DeployTrace.

Pure functions turning a LogEntry into one line of text:

- TraceTool: CMTrace-compatible line read by trace-viewing tools. The
  attribute order is fixed; viewers parse it positionally.
- Legacy: "[date time] [section] [source] [Severity] :: message".
- Console: the legacy line without the severity word, used for mirroring.
"""

from datetime import datetime

from .config import LogFormat
from .entries import LogEntry

_TRACE_TEMPLATE = (
    '<![LOG[{message}]LOG]!>'
    '<time="{time}" date="{date}" component="{component}" context="{context}" '
    'type="{type}" thread="{thread}" file="{file}">'
)


def format_time(ts: datetime) -> str:
    """HH:MM:SS.mmm"""
    return ts.strftime("%H:%M:%S.") + f"{ts.microsecond // 1000:03d}"


def format_date(ts: datetime) -> str:
    """MM-DD-YYYY"""
    return ts.strftime("%m-%d-%Y")


def timezone_bias(ts: datetime) -> str:
    """UTC offset in minutes, signed and zero-padded: +060, -300, +000."""
    offset = ts.utcoffset()
    minutes = int(offset.total_seconds() / 60) if offset is not None else 0
    return f"{minutes:+04d}"


def format_trace_tool(entry: LogEntry) -> str:
    """Serialize an entry as a TraceTool line."""
    return _TRACE_TEMPLATE.format(
        message=entry.text,
        time=format_time(entry.timestamp) + timezone_bias(entry.timestamp),
        date=format_date(entry.timestamp),
        component=entry.source,
        context=entry.principal_name,
        type=int(entry.severity),
        thread=entry.thread_id,
        file=entry.script_file,
    )


def _legacy_prefix(entry: LogEntry) -> str:
    prefix = f"[{format_date(entry.timestamp)} {format_time(entry.timestamp)}]"
    if entry.section_defined:
        prefix += f" [{entry.section}]"
    if entry.source:
        prefix += f" [{entry.source}]"
    return prefix


def format_legacy(entry: LogEntry) -> str:
    """Serialize an entry as a Legacy text line."""
    return f"{_legacy_prefix(entry)} [{entry.severity.label}] :: {entry.text}"


def format_console(entry: LogEntry) -> str:
    """Legacy line without the severity word; color carries severity on the console."""
    return f"{_legacy_prefix(entry)} :: {entry.text}"


def format_entry(entry: LogEntry) -> dict[LogFormat, str]:
    """Render every on-disk variant so the active one can be picked without recomputation."""
    return {
        LogFormat.TRACE_TOOL: format_trace_tool(entry),
        LogFormat.LEGACY: format_legacy(entry),
    }

"""
Log Viewer Utilities for DeployTrace.

Parses log files written in either format back into dictionaries and
provides filtering and display helpers. Used by the `deploytrace show`
CLI command; the logging engine itself never reads log contents.
"""

import re
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from .entries import Severity

_TRACE_RE = re.compile(
    r'^<!\[LOG\[(?P<message>.*)\]LOG\]!>'
    r'<time="(?P<time>\d{2}:\d{2}:\d{2}\.\d{3})(?P<bias>[+-]\d+)" date="(?P<date>[^"]*)" '
    r'component="(?P<source>[^"]*)" context="(?P<context>[^"]*)" type="(?P<type>\d)" '
    r'thread="(?P<thread>[^"]*)" file="(?P<file>[^"]*)">$'
)

_LEGACY_RE = re.compile(
    r"^\[(?P<date>\d{2}-\d{2}-\d{4}) (?P<time>\d{2}:\d{2}:\d{2}\.\d{3})\]"
    r"(?P<tags>(?: \[[^\]]*\])*) :: (?P<message>.*)$"
)

_TAG_RE = re.compile(r"\[([^\]]*)\]")

_LABELS = {s.label: s for s in Severity}


def parse_since(since: str) -> datetime:
    """
    Parse a 'since' time string into a datetime.

    Supports:
        - ISO format: "2026-01-11T10:00:00"
        - Relative: "1h", "30m", "2d", "1w"

    Raises:
        ValueError: If the string matches neither form
    """
    try:
        return datetime.fromisoformat(since)
    except ValueError:
        pass

    match = re.match(r"^(\d+)([mhdw])$", since.lower())
    if match:
        value = int(match.group(1))
        delta_map = {
            "m": timedelta(minutes=value),
            "h": timedelta(hours=value),
            "d": timedelta(days=value),
            "w": timedelta(weeks=value),
        }
        return datetime.now() - delta_map[match.group(2)]

    raise ValueError(f"Invalid time format: {since}. Use ISO format or relative (1h, 30m, 2d)")


def _parse_timestamp(date: str, time: str) -> datetime | None:
    try:
        return datetime.strptime(f"{date} {time}", "%m-%d-%Y %H:%M:%S.%f")
    except ValueError:
        return None


def parse_line(line: str) -> dict[str, Any] | None:
    """
    Parse one log line in either format.

    Legacy lines carry at most two tags before the severity word; a
    single tag is read as the source.

    Returns:
        Entry dict, or None if the line is not a log line
    """
    line = line.rstrip("\r\n")

    if match := _TRACE_RE.match(line):
        try:
            severity = Severity(int(match["type"]))
        except ValueError:
            return None
        return {
            "format": "TraceTool",
            "timestamp": _parse_timestamp(match["date"], match["time"]),
            "timezone_bias": int(match["bias"]),
            "message": match["message"],
            "source": match["source"],
            "section": "",
            "severity": severity,
            "context": match["context"],
            "thread": match["thread"],
            "file": match["file"],
        }

    if match := _LEGACY_RE.match(line):
        tags = _TAG_RE.findall(match["tags"])
        if not tags or tags[-1] not in _LABELS:
            return None
        extra = tags[:-1]
        section = extra[0] if len(extra) == 2 else ""
        source = extra[-1] if extra else ""
        return {
            "format": "Legacy",
            "timestamp": _parse_timestamp(match["date"], match["time"]),
            "message": match["message"],
            "source": source,
            "section": section,
            "severity": _LABELS[tags[-1]],
        }

    return None


def read_log(filepath: Path, limit: int | None = None, since: datetime | None = None) -> Iterator[dict[str, Any]]:
    """
    Read entries from a log file.

    Args:
        filepath: Path to the log file
        limit: Maximum entries to return (from end of file)
        since: Only return entries at or after this time

    Yields:
        Parsed log entries as dicts
    """
    if not filepath.exists():
        return

    entries: list[dict[str, Any]] = []

    with open(filepath, encoding="utf-8", errors="replace") as f:
        for line in f:
            entry = parse_line(line)
            if entry is None:
                continue
            if since and (entry["timestamp"] is None or entry["timestamp"] < since):
                continue
            entries.append(entry)

    if limit and len(entries) > limit:
        entries = entries[-limit:]

    yield from entries


def query_log(
    filepath: Path,
    min_severity: int | Severity = Severity.INFO,
    source: str | None = None,
    section: str | None = None,
    since: str | None = None,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """
    Query log entries with filters.

    Args:
        filepath: Path to the log file
        min_severity: Lowest severity to include
        source: Only entries from this source (case-insensitive)
        section: Only entries in this section (case-insensitive)
        since: Time filter (ISO or relative like "1h")
        limit: Max entries to return (the most recent ones)

    Returns:
        Matching entries in file order
    """
    floor = Severity.coerce(min_severity)
    since_dt = parse_since(since) if since else None

    results = []
    for entry in read_log(filepath, since=since_dt):
        if entry["severity"] < floor:
            continue
        if source and entry["source"].lower() != source.lower():
            continue
        if section and entry["section"].lower() != section.lower():
            continue
        results.append(entry)

    return results[-limit:] if limit else results


def count_by_severity(entries: list[dict[str, Any]]) -> dict[str, int]:
    """Count entries per severity label."""
    counts = {s.label: 0 for s in Severity}
    for entry in entries:
        counts[entry["severity"].label] += 1
    return counts


def format_entry_line(entry: dict[str, Any]) -> str:
    """
    Format a parsed entry as a single display line.

    Args:
        entry: Entry dict from parse_line()

    Returns:
        Formatted string
    """
    ts = entry["timestamp"].strftime("%Y-%m-%d %H:%M:%S") if entry.get("timestamp") else "?"
    severity = entry["severity"].label
    source = entry.get("source") or "-"
    section = f" ({entry['section']})" if entry.get("section") else ""
    return f"[{ts}] {severity:7s} {source}{section}: {entry['message']}"

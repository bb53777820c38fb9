"""Tests for line formatters."""

from datetime import datetime, timedelta, timezone

import pytest

from deploytrace.logging.config import LogFormat
from deploytrace.logging.entries import LogEntry, Severity
from deploytrace.logging.formatter import (
    format_console,
    format_date,
    format_entry,
    format_legacy,
    format_time,
    format_trace_tool,
    timezone_bias,
)

STAMP = datetime(2026, 3, 5, 14, 7, 9, 123456, tzinfo=timezone(timedelta(hours=1)))


def make_entry(text="Installing patch", severity=Severity.INFO, source="Add-Patch", section="Installation", ts=STAMP):
    return LogEntry(
        text=text,
        severity=severity,
        source=source,
        section=section,
        timestamp=ts,
        thread_id=4242,
        principal_name="CORP\\admin",
        script_file="deploy.py",
    )


class TestTimestampParts:
    """Tests for date, time and bias rendering."""

    def test_time_has_milliseconds(self):
        assert format_time(STAMP) == "14:07:09.123"

    def test_date_is_month_day_year(self):
        assert format_date(STAMP) == "03-05-2026"

    def test_positive_bias(self):
        assert timezone_bias(STAMP) == "+060"

    def test_negative_bias(self):
        ts = STAMP.replace(tzinfo=timezone(timedelta(hours=-5)))
        assert timezone_bias(ts) == "-300"

    def test_utc_bias(self):
        assert timezone_bias(STAMP.replace(tzinfo=timezone.utc)) == "+000"

    def test_naive_timestamp_has_zero_bias(self):
        assert timezone_bias(STAMP.replace(tzinfo=None)) == "+000"


class TestTraceToolFormat:
    """Tests for the CMTrace-compatible line."""

    def test_full_line(self):
        line = format_trace_tool(make_entry())
        assert line == (
            '<![LOG[Installing patch]LOG]!><time="14:07:09.123+060" date="03-05-2026" '
            'component="Add-Patch" context="CORP\\admin" type="1" thread="4242" file="deploy.py">'
        )

    def test_attribute_order(self):
        line = format_trace_tool(make_entry())
        keys = ["time=", "date=", "component=", "context=", "type=", "thread=", "file="]
        positions = [line.index(k) for k in keys]
        assert positions == sorted(positions)

    def test_severity_code(self):
        line = format_trace_tool(make_entry(severity=Severity.ERROR))
        assert 'type="3"' in line

    def test_empty_message_keeps_structure(self):
        line = format_trace_tool(make_entry(text=""))
        assert line.startswith("<![LOG[]LOG]!><time=")
        assert line.endswith('file="deploy.py">')


class TestLegacyFormat:
    """Tests for the legacy text line."""

    def test_full_line(self):
        assert format_legacy(make_entry()) == (
            "[03-05-2026 14:07:09.123] [Installation] [Add-Patch] [Info] :: Installing patch"
        )

    @pytest.mark.parametrize(
        "severity,word",
        [(Severity.INFO, "[Info]"), (Severity.WARNING, "[Warning]"), (Severity.ERROR, "[Error]")],
    )
    def test_severity_word(self, severity, word):
        assert word in format_legacy(make_entry(severity=severity))

    def test_section_omitted_when_undefined(self):
        line = format_legacy(make_entry(section=""))
        assert line == "[03-05-2026 14:07:09.123] [Add-Patch] [Info] :: Installing patch"

    def test_source_omitted_when_empty(self):
        line = format_legacy(make_entry(text="disk full", severity=Severity.ERROR, source="", section=""))
        assert line == "[03-05-2026 14:07:09.123] [Error] :: disk full"

    def test_empty_message(self):
        line = format_legacy(make_entry(text=""))
        assert line.endswith("[Info] :: ")


class TestConsoleFormat:
    """Tests for the console mirror line."""

    def test_no_severity_word(self):
        line = format_console(make_entry(severity=Severity.WARNING))
        assert line == "[03-05-2026 14:07:09.123] [Installation] [Add-Patch] :: Installing patch"

    def test_bare_line_without_section_or_source(self):
        line = format_console(make_entry(text="hello", source="", section=""))
        assert line == "[03-05-2026 14:07:09.123] :: hello"


class TestFormatEntry:
    """Tests for rendering all variants at once."""

    def test_renders_both_formats(self):
        entry = make_entry()
        lines = format_entry(entry)
        assert lines[LogFormat.TRACE_TOOL] == format_trace_tool(entry)
        assert lines[LogFormat.LEGACY] == format_legacy(entry)

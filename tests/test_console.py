"""Tests for console mirroring."""

import io
from unittest.mock import MagicMock

from rich.console import Console
from rich.text import Text

from deploytrace.logging.console import SEVERITY_STYLES, ConsoleMirror
from deploytrace.logging.entries import Severity

LINE = "[03-05-2026 14:07:09.123] [Installation] [Add-Patch] :: copy failed"


class TestSeverityStyles:
    """Tests for the severity-to-color mapping."""

    def test_mapping(self):
        assert SEVERITY_STYLES[Severity.ERROR] == "red on black"
        assert SEVERITY_STYLES[Severity.WARNING] == "yellow on black"
        assert SEVERITY_STYLES[Severity.INFO] is None


class TestColorCapability:
    """Tests for the capability query."""

    def test_redirected_output_has_no_color(self, plain_console):
        assert not ConsoleMirror(plain_console).supports_color()

    def test_terminal_has_color(self, color_console):
        assert ConsoleMirror(color_console).supports_color()

    def test_terminal_without_color_system(self):
        console = Console(file=io.StringIO(), force_terminal=True, color_system=None)
        assert not ConsoleMirror(console).supports_color()


class TestConsoleMirror:
    """Tests for writing lines."""

    def test_plain_fallback_keeps_text(self, plain_console):
        mirror = ConsoleMirror(plain_console)
        mirror.write(LINE, Severity.ERROR)
        assert plain_console.file.getvalue() == LINE + "\n"

    def test_error_is_red_on_black(self, color_console):
        ConsoleMirror(color_console).write(LINE, Severity.ERROR)
        output = color_console.file.getvalue()
        assert "\x1b[31;40m" in output
        assert "[Installation]" in output

    def test_warning_is_yellow(self, color_console):
        ConsoleMirror(color_console).write(LINE, Severity.WARNING)
        assert "\x1b[33;40m" in color_console.file.getvalue()

    def test_info_is_uncolored(self, color_console):
        ConsoleMirror(color_console).write(LINE, Severity.INFO)
        output = color_console.file.getvalue()
        assert "\x1b[3" not in output
        assert LINE in output

    def test_styled_text_passed_to_console(self):
        console = MagicMock()
        console.is_terminal = True
        console.color_system = "truecolor"
        ConsoleMirror(console).write(LINE, Severity.WARNING)

        rendered = console.print.call_args.args[0]
        assert isinstance(rendered, Text)
        assert rendered.plain == LINE
        assert rendered.style == "yellow on black"

    def test_error_helper(self, plain_console):
        ConsoleMirror(plain_console).error("boom")
        assert plain_console.file.getvalue() == "boom\n"

    def test_empty_line_still_emitted(self, plain_console):
        ConsoleMirror(plain_console).write("", Severity.INFO)
        assert plain_console.file.getvalue() == "\n"

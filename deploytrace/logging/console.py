"""
Console Mirroring for DeployTrace.

Echoes formatted lines to the interactive console, colored by severity.
When the output is not a color-capable terminal (redirected to a file or
pipe), the same text is written plain to the same stream.
"""

from rich.console import Console
from rich.text import Text

from .entries import Severity

SEVERITY_STYLES: dict[Severity, str | None] = {
    Severity.ERROR: "red on black",
    Severity.WARNING: "yellow on black",
    Severity.INFO: None,
}


class ConsoleMirror:
    """Writes log lines to a rich Console."""

    def __init__(self, console: Console | None = None):
        """
        Initialize mirror.

        Args:
            console: Target console (defaults to stdout, no wrapping)
        """
        self.console = console or Console(soft_wrap=True, highlight=False)

    def supports_color(self) -> bool:
        """Whether the output sink is a terminal that renders color."""
        return self.console.is_terminal and self.console.color_system is not None

    def write(self, line: str, severity: Severity = Severity.INFO) -> None:
        """Write one line, colored by severity when the sink supports it."""
        style = SEVERITY_STYLES.get(severity)
        if style and self.supports_color():
            # Text keeps "[...]" segments from being read as markup
            self.console.print(Text(line, style=style), soft_wrap=True)
        else:
            self.console.out(line, highlight=False)

    def error(self, line: str) -> None:
        """Write an engine diagnostic in the error color."""
        self.write(line, Severity.ERROR)

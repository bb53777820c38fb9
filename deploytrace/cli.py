"""
DeployTrace CLI - Typer Commands

Write log entries from shell-driven deployment steps, inspect existing
logs and print the effective configuration.
"""

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from deploytrace.exceptions import ConfigError
from deploytrace.logging import LogDispatcher, Severity, load_config
from deploytrace.logging.viewer import count_by_severity, format_entry_line, query_log

console = Console()

app = typer.Typer(
    name="deploytrace",
    help="Structured trace logging for unattended deployments",
    add_completion=False,
    no_args_is_help=True,
)

_SEVERITY_COLORS = {Severity.ERROR: "red", Severity.WARNING: "yellow", Severity.INFO: "white"}


def _load(config_path: Path | None):
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def write(
    messages: list[str] = typer.Argument(..., help="Message(s) to log, one entry each"),
    severity: int = typer.Option(1, "--severity", "-s", min=1, max=3, help="1=Info, 2=Warning, 3=Error"),
    source: str = typer.Option("", "--source", help="Origin tag (component)"),
    section: str = typer.Option(None, "--section", help="Phase label"),
    log_format: str = typer.Option(None, "--format", help="TraceTool or Legacy"),
    directory: Path = typer.Option(None, "--dir", help="Log directory"),
    file_name: str = typer.Option(None, "--file", help="Log file name"),
    max_size: float = typer.Option(None, "--max-size", help="Rotation threshold in MB (0 disables)"),
    no_console: bool = typer.Option(False, "--no-console", help="Do not mirror to the console"),
    debug: bool = typer.Option(False, "--debug", help="Mark as debug-level message"),
    config_path: Path = typer.Option(None, "--config", help="JSON settings file"),
) -> None:
    """Write message(s) to the deployment log."""
    config = _load(config_path)
    try:
        config = config.with_overrides(format=log_format)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    dispatcher = LogDispatcher(config)
    dispatcher.log(
        messages,
        severity,
        source,
        section,
        directory=directory,
        file_name=file_name,
        max_size_mb=max_size,
        mirror_to_console=False if no_console else None,
        debug=debug,
        script_file=Path(sys.argv[0]).name,
    )


@app.command()
def show(
    severity: int = typer.Option(1, "--severity", "-s", min=1, max=3, help="Minimum severity"),
    source: str = typer.Option(None, "--source", help="Filter by source"),
    section: str = typer.Option(None, "--section", help="Filter by section"),
    since: str = typer.Option(None, "--since", help="Time filter (ISO or relative: 1h, 30m, 2d)"),
    tail: int = typer.Option(20, "--tail", "-n", help="Show last N entries"),
    summary: bool = typer.Option(False, "--summary", help="Show counts per severity instead of entries"),
    log_file: Path = typer.Option(None, "--log", help="Log file to read (defaults to the configured one)"),
    config_path: Path = typer.Option(None, "--config", help="JSON settings file"),
) -> None:
    """View entries of an existing log."""
    path = log_file or _load(config_path).log_path

    try:
        entries = query_log(
            path,
            min_severity=severity,
            source=source,
            section=section,
            since=since,
            limit=0 if summary else tail,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not entries:
        console.print("[dim]No log entries found[/dim]")
        return

    if summary:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Severity")
        table.add_column("Entries", justify="right")
        for label, count in count_by_severity(entries).items():
            table.add_row(label, str(count))
        console.print(table)
        return

    for entry in entries:
        color = _SEVERITY_COLORS[entry["severity"]]
        console.print(format_entry_line(entry), style=color, markup=False, highlight=False)


@app.command(name="config")
def show_config(
    config_path: Path = typer.Option(None, "--config", help="JSON settings file"),
) -> None:
    """Print the effective logging configuration."""
    config = _load(config_path)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.to_dict().items():
        table.add_row(key, str(value))
    table.add_row("log_path", str(config.log_path))
    console.print(table)


def run() -> None:
    """Entry point wrapper that invokes the Typer app."""
    app()


if __name__ == "__main__":
    run()

"""
Log Dispatcher for DeployTrace.

Orchestrates one dispatch call: guard checks, entry construction,
formatting, file append, console mirroring and the post-call rotation
check. Nothing in here raises to the caller; file-system failures are
turned into optional console diagnostics.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from deploytrace.exceptions import ConfigError, LogDirectoryError, LogWriteError
from deploytrace.state import INITIALIZATION_SECTION, SessionContext, get_session

from .config import LogConfiguration, LogFormat, get_config
from .console import ConsoleMirror
from .entries import CallContext, LogEntry, Severity
from .formatter import format_console, format_date, format_entry, format_time
from .rotation import RotationManager

logger = logging.getLogger(__name__)


class LogDispatcher:
    """
    Entry point of the logging engine.

    Holds the startup configuration and the session; each log() call may
    derive a per-call configuration from them but never mutates either
    configuration.
    """

    def __init__(
        self,
        config: LogConfiguration | None = None,
        session: SessionContext | None = None,
        mirror: ConsoleMirror | None = None,
    ):
        """
        Initialize dispatcher.

        Args:
            config: Startup configuration (defaults to the global config)
            session: Session context (defaults to the process-wide session)
            mirror: Console mirror (defaults to a stdout mirror)
        """
        self.config = config or get_config()
        self.session = session or get_session()
        self.mirror = mirror or ConsoleMirror()
        self.rotation = RotationManager(self)

    def log(
        self,
        messages: str | Sequence[str],
        severity: int | Severity = Severity.INFO,
        source: str | None = None,
        section: str | None = None,
        *,
        format: LogFormat | str | None = None,
        directory: Path | str | None = None,
        file_name: str | None = None,
        max_size_mb: float | None = None,
        mirror_to_console: bool | None = None,
        continue_on_failure: bool | None = None,
        debug: bool = False,
        pass_through: bool = False,
        script_file: str | None = None,
        config: LogConfiguration | None = None,
    ) -> list[str] | None:
        """
        Record one or more messages.

        Args:
            messages: A message or sequence of messages, logged in order
            severity: 1 (Info), 2 (Warning) or 3 (Error)
            source: Origin tag; defaults to the calling function's name
            section: Phase label; defaults to the session's current section
            format, directory, file_name, max_size_mb, mirror_to_console,
                continue_on_failure: Per-call overrides of the configuration
            debug: Message is debug-level; dropped unless debug_enabled
            pass_through: Return the input messages
            script_file: Overrides the file attribute of trace lines
            config: Base configuration for this call (defaults to self.config)

        Returns:
            The input messages when pass_through is set, else None

        Raises:
            ValueError: If severity is not 1, 2 or 3
        """
        level = Severity.coerce(severity)
        items = [messages] if isinstance(messages, str) else list(messages)
        result = list(items) if pass_through else None

        base = config or self.config
        try:
            call_config = base.with_overrides(
                format=format,
                directory=directory,
                file_name=file_name,
                max_size_mb=max_size_mb,
                mirror_to_console=mirror_to_console,
                continue_on_failure=continue_on_failure,
            )
        except ConfigError as e:
            logger.warning("Ignoring invalid log overrides: %s", e)
            call_config = base
            if not call_config.continue_on_failure:
                self.mirror.error(f"[{_now_label()}] [{source or 'LogDispatcher'}] :: {e}")

        if section is None:
            section = self.session.current_section

        if debug and not call_config.debug_enabled:
            return result

        write_file = call_config.file_logging_enabled and not self.session.file_logging_disabled
        if not write_file and not call_config.mirror_to_console:
            return result

        if call_config.relaunched and section == INITIALIZATION_SECTION:
            return result

        if not items:
            return result

        if write_file:
            try:
                self._ensure_directory(call_config)
            except LogDirectoryError as e:
                self.session.disable_file_logging(str(e))
                logger.debug("File logging disabled: %s", e)
                if not call_config.continue_on_failure:
                    self.mirror.error(f"[{_now_label()}] [{source or 'LogDispatcher'}] :: {e}")
                return result

        context = CallContext.capture(script_file=script_file)
        if source is None:
            source = context.caller

        for text in items:
            entry = LogEntry.from_context(text, level, source, section, context)
            lines = format_entry(entry)

            if write_file:
                try:
                    self._append(call_config.log_path, lines[call_config.format])
                    self.session.record_write(True)
                except LogWriteError as e:
                    self.session.record_write(False)
                    logger.debug("Append failed: %s", e)
                    if not call_config.continue_on_failure:
                        self.mirror.error(f"[{_now_label()}] [{source or 'LogDispatcher'}] :: {e}")

            if call_config.mirror_to_console:
                self.mirror.write(format_console(entry), level)

        if write_file:
            self.rotation.check(call_config, context.script_file)

        return result

    def _ensure_directory(self, config: LogConfiguration) -> None:
        """Create the log directory if missing."""
        if config.directory.is_dir():
            return
        try:
            config.ensure_log_dir()
        except OSError as e:
            raise LogDirectoryError(
                f"Failed to create the log directory [{config.directory}]: {e}",
                config.directory,
            ) from e

    def _append(self, path: Path, line: str) -> None:
        """Append one line, creating the file on first write."""
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
        except OSError as e:
            raise LogWriteError(f"Failed to write message [{line}] to the log file [{path}]: {e}", path) from e


def _now_label() -> str:
    now = datetime.now()
    return f"{format_date(now)} {format_time(now)}"

"""
Log Rotation for DeployTrace.

After each dispatch call the log file's size is checked. An over-sized file
is renamed to its archive path (same name, ".lo_" extension), replacing any
earlier archive, and the next write recreates the log file. The two
announcements go through the dispatcher with rotation disabled, so they can
never trigger a nested rotation.
"""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from deploytrace.exceptions import RotationError

from .config import LogConfiguration

if TYPE_CHECKING:
    from .dispatcher import LogDispatcher

logger = logging.getLogger(__name__)

ROTATION_SOURCE = "LogRotation"


class RotationManager:
    """Archives the log file once it grows past the configured size."""

    def __init__(self, dispatcher: "LogDispatcher"):
        self.dispatcher = dispatcher

    def needs_rotation(self, config: LogConfiguration) -> bool:
        """True when rotation is enabled and the log file exceeds the threshold."""
        if not config.rotation_enabled:
            return False
        try:
            size = config.log_path.stat().st_size
        except FileNotFoundError:
            return False
        return size > config.max_size_bytes

    def check(self, config: LogConfiguration, script_file: str | None = None) -> bool:
        """
        Rotate the log file if needed.

        Failures are swallowed; the file simply keeps growing.

        Args:
            config: Effective configuration of the dispatch call
            script_file: File attribute of the call, reused by the announcements

        Returns:
            True if a rotation happened
        """
        try:
            if not self.needs_rotation(config):
                return False
            self.rotate(config, script_file)
        except Exception as e:
            logger.debug("Log rotation skipped: %s", e)
            return False
        return True

    def rotate(self, config: LogConfiguration, script_file: str | None = None) -> Path:
        """
        Move the log file to its archive path and announce it.

        Raises:
            RotationError: If the rename fails
        """
        log_path = config.log_path
        archive_path = config.archive_path
        nested = config.with_overrides(max_size_mb=0)
        size_label = f"{config.max_size_mb:g} MB"

        self.dispatcher.log(
            f"Maximum log file size [{size_label}] reached. Rename log file to [{archive_path.name}].",
            source=ROTATION_SOURCE,
            script_file=script_file,
            config=nested,
        )

        try:
            os.replace(log_path, archive_path)
        except OSError as e:
            raise RotationError(f"Failed to archive log file: {e}", log_path, archive_path) from e

        self.dispatcher.session.record_rotation()
        logger.debug("Rotated %s to %s", log_path, archive_path)

        self.dispatcher.log(
            f"Previous log file was renamed to [{archive_path.name}] "
            f"because maximum log file size of [{size_label}] was reached.",
            source=ROTATION_SOURCE,
            script_file=script_file,
            config=nested,
        )
        return archive_path

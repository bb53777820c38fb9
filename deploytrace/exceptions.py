"""
DeployTrace - Exception Hierarchy

All DeployTrace-specific exceptions inherit from DeployTraceError.
The logging engine raises the I/O errors internally and converts them into
console diagnostics; only ConfigError ever reaches application code.
"""

from pathlib import Path
from typing import Any


class DeployTraceError(Exception):
    """Base exception for all DeployTrace errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# Configuration Errors
class ConfigError(DeployTraceError):
    """Raised when logging configuration is invalid or unreadable."""

    pass


# Log File Errors
class LogFileError(DeployTraceError):
    """Base exception for log file I/O failures."""

    pass


class LogDirectoryError(LogFileError):
    """Raised when the log directory cannot be created."""

    def __init__(self, message: str, directory: Path):
        super().__init__(message, {"directory": str(directory)})
        self.directory = directory


class LogWriteError(LogFileError):
    """Raised when a line cannot be appended to the log file."""

    def __init__(self, message: str, path: Path):
        super().__init__(message, {"path": str(path)})
        self.path = path


class RotationError(LogFileError):
    """Raised when an over-sized log file cannot be archived."""

    def __init__(self, message: str, path: Path, archive_path: Path):
        super().__init__(message, {"path": str(path), "archive_path": str(archive_path)})
        self.path = path
        self.archive_path = archive_path

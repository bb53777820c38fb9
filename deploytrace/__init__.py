"""
DeployTrace - diagnostic logging for unattended deployments.

Writes CMTrace-compatible or legacy text logs, mirrors them to the console
and rotates the log file once it grows past a configured size.
"""

__version__ = "0.1.0"

from deploytrace.exceptions import (
    ConfigError,
    DeployTraceError,
    LogDirectoryError,
    LogFileError,
    LogWriteError,
    RotationError,
)
from deploytrace.logging import (
    LogConfiguration,
    LogFormat,
    Severity,
    set_current_section,
    write_log,
)

__all__ = [
    "__version__",
    "write_log",
    "set_current_section",
    "Severity",
    "LogFormat",
    "LogConfiguration",
    "DeployTraceError",
    "ConfigError",
    "LogFileError",
    "LogDirectoryError",
    "LogWriteError",
    "RotationError",
]

"""
Logging Configuration for DeployTrace.

Defines the output format, log path, rotation threshold and the console,
debug and failure policies. A configuration is immutable: per-call
settings are derived with with_overrides(), never by mutating it.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

from deploytrace.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Extension given to the previous log file on rotation
ARCHIVE_EXTENSION = ".lo_"

# Settings-file keys used by the original deployment toolkit
_KEY_ALIASES = {
    "logStyle": "format",
    "logDir": "directory",
    "logFileName": "file_name",
    "logMaxSize": "max_size_mb",
    "logWriteToHost": "mirror_to_console",
    "logDebugMessage": "debug_enabled",
    "continueOnError": "continue_on_failure",
    "disableLogging": "file_logging_enabled",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class LogFormat(Enum):
    """On-disk serialization of log entries."""

    TRACE_TOOL = "TraceTool"  # CMTrace-compatible structured line
    LEGACY = "Legacy"  # Plain bracketed text

    @classmethod
    def parse(cls, value: "str | LogFormat") -> "LogFormat":
        """
        Parse a format name (case-insensitive).

        Accepts the member values, member names and the "CMTrace" alias.

        Raises:
            ConfigError: If the name is not recognized
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "")
        for member in cls:
            if key in (member.value.lower(), member.name.lower().replace("_", "")):
                return member
        if key == "cmtrace":
            return cls.TRACE_TOOL
        raise ConfigError(
            f"Unknown log format: {value!r}",
            {"valid": [m.value for m in cls]},
        )


@dataclass(frozen=True)
class LogConfiguration:
    """Configuration for the DeployTrace logging engine."""

    format: LogFormat = LogFormat.TRACE_TOOL

    # Paths
    directory: Path = field(default_factory=lambda: Path.home() / ".deploytrace" / "logs")
    file_name: str = "deploytrace.log"

    # Rotation threshold in MB; 0 or negative disables rotation
    max_size_mb: float = 10.0

    # Policies
    mirror_to_console: bool = True
    debug_enabled: bool = False
    continue_on_failure: bool = True
    file_logging_enabled: bool = True

    # Set when the toolkit re-launched itself asynchronously
    relaunched: bool = False

    def __post_init__(self) -> None:
        # Normalize loosely-typed values passed by callers and loaders
        object.__setattr__(self, "format", LogFormat.parse(self.format))
        object.__setattr__(self, "directory", Path(self.directory).expanduser())
        object.__setattr__(self, "max_size_mb", _parse_size(self.max_size_mb))

    @property
    def log_path(self) -> Path:
        """Full path to the active log file."""
        return self.directory / self.file_name

    @property
    def archive_path(self) -> Path:
        """Path the log file is moved to when rotated."""
        return self.log_path.with_suffix(ARCHIVE_EXTENSION)

    @property
    def rotation_enabled(self) -> bool:
        return self.max_size_mb > 0

    @property
    def max_size_bytes(self) -> int:
        return int(self.max_size_mb * 1024 * 1024)

    def with_overrides(self, **overrides: Any) -> "LogConfiguration":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["format"] = self.format.value
        data["directory"] = str(self.directory)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogConfiguration":
        """
        Create from a settings dictionary.

        Unknown keys are ignored. The original toolkit's camelCase keys
        are accepted as aliases.

        Raises:
            ConfigError: If a value cannot be converted
        """
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                continue
            if key == "disableLogging":
                value = not _coerce_bool(value, key)
            values[name] = _coerce(name, value)
        return cls(**values)

    @classmethod
    def from_env(cls, base: "LogConfiguration | None" = None) -> "LogConfiguration":
        """Load config from environment variables on top of base (or defaults)."""
        config = base or cls()
        changes: dict[str, Any] = {}

        if fmt := os.environ.get("DEPLOYTRACE_LOG_FORMAT"):
            changes["format"] = LogFormat.parse(fmt)

        if log_dir := os.environ.get("DEPLOYTRACE_LOG_DIR"):
            changes["directory"] = Path(log_dir)

        if file_name := os.environ.get("DEPLOYTRACE_LOG_FILE"):
            changes["file_name"] = file_name

        if max_size := os.environ.get("DEPLOYTRACE_LOG_MAX_SIZE_MB"):
            try:
                changes["max_size_mb"] = _parse_size(max_size)
            except ConfigError:
                logger.warning("Ignoring invalid DEPLOYTRACE_LOG_MAX_SIZE_MB=%r", max_size)

        for env_name, field_name in (
            ("DEPLOYTRACE_LOG_CONSOLE", "mirror_to_console"),
            ("DEPLOYTRACE_LOG_DEBUG", "debug_enabled"),
            ("DEPLOYTRACE_CONTINUE_ON_FAILURE", "continue_on_failure"),
            ("DEPLOYTRACE_ASYNC_RELAUNCH", "relaunched"),
        ):
            flag = _env_flag(env_name)
            if flag is not None:
                changes[field_name] = flag

        disabled = _env_flag("DEPLOYTRACE_DISABLE_LOGGING")
        if disabled is not None:
            changes["file_logging_enabled"] = not disabled

        return config.with_overrides(**changes)

    def ensure_log_dir(self) -> None:
        """Create the log directory if it doesn't exist."""
        self.directory.mkdir(parents=True, exist_ok=True)


def load_config(path: Path | str | None = None) -> LogConfiguration:
    """
    Load configuration from a JSON settings file, then apply environment overrides.

    Args:
        path: Settings file. When None or missing, defaults are used.

    Returns:
        The effective configuration

    Raises:
        ConfigError: If the file exists but cannot be parsed
    """
    base = LogConfiguration()
    if path is not None:
        settings_path = Path(path).expanduser()
        if settings_path.exists():
            try:
                data = json.loads(settings_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Failed to read settings file: {e}", {"path": str(settings_path)})
            if not isinstance(data, dict):
                raise ConfigError("Settings file must contain a JSON object", {"path": str(settings_path)})
            base = LogConfiguration.from_dict(data)
        else:
            logger.debug("Settings file %s not found, using defaults", settings_path)
    return LogConfiguration.from_env(base)


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return _coerce_bool(raw, name)
    except ConfigError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return None


def _coerce_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _parse_size(value: Any) -> float:
    """Rotation threshold in MB; must be a finite number."""
    try:
        size = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid number for max_size_mb: {value!r}")
    if not math.isfinite(size):
        raise ConfigError(f"max_size_mb must be finite, got {value!r}")
    return size


def _coerce(name: str, value: Any) -> Any:
    if name == "format":
        return LogFormat.parse(value)
    if name == "directory":
        return Path(str(value))
    if name == "file_name":
        return str(value)
    if name == "max_size_mb":
        return _parse_size(value)
    return _coerce_bool(value, name)


# Global config instance - initialized on first use
_config: LogConfiguration | None = None


def get_config() -> LogConfiguration:
    """Get the global log config, initializing from env if needed."""
    global _config
    if _config is None:
        _config = LogConfiguration.from_env()
    return _config


def set_config(config: LogConfiguration | None) -> None:
    """Set a custom log config (None re-reads the environment on next use)."""
    global _config
    _config = config

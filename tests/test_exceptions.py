"""Tests for exception hierarchy."""

from pathlib import Path

from deploytrace.exceptions import (
    ConfigError,
    DeployTraceError,
    LogDirectoryError,
    LogFileError,
    LogWriteError,
    RotationError,
)


class TestDeployTraceError:
    """Tests for base DeployTraceError."""

    def test_basic_error(self):
        err = DeployTraceError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.details == {}
        assert str(err) == "Something went wrong"

    def test_error_with_details(self):
        err = DeployTraceError("Error occurred", {"code": 5})
        assert err.details == {"code": 5}
        assert "code" in str(err)


class TestLogFileErrors:
    """Tests for file I/O errors."""

    def test_config_error(self):
        assert isinstance(ConfigError("bad"), DeployTraceError)

    def test_directory_error(self):
        err = LogDirectoryError("cannot create", Path("/x/logs"))
        assert isinstance(err, LogFileError)
        assert err.directory == Path("/x/logs")
        assert err.details["directory"] == str(Path("/x/logs"))

    def test_write_error(self):
        err = LogWriteError("cannot write", Path("/x/a.log"))
        assert isinstance(err, LogFileError)
        assert err.path == Path("/x/a.log")

    def test_rotation_error(self):
        err = RotationError("cannot rename", Path("a.log"), Path("a.lo_"))
        assert isinstance(err, LogFileError)
        assert err.archive_path == Path("a.lo_")
        assert "a.lo_" in str(err)

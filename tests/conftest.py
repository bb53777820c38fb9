"""Shared fixtures for DeployTrace tests."""

import io
import os

import pytest
from rich.console import Console

from deploytrace import logging as dt_logging
from deploytrace.logging import ConsoleMirror, LogConfiguration, LogDispatcher, LogFormat
from deploytrace.state import SessionContext, reset_session


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from DEPLOYTRACE_* variables and process-wide state."""
    for name in list(os.environ):
        if name.startswith("DEPLOYTRACE_"):
            monkeypatch.delenv(name, raising=False)
    reset_session()
    dt_logging.set_dispatcher(None)
    dt_logging.set_config(None)
    yield
    reset_session()
    dt_logging.set_dispatcher(None)
    dt_logging.set_config(None)


@pytest.fixture
def plain_console():
    """Console writing to a buffer, as when stdout is redirected."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def color_console():
    """Console writing to a buffer but behaving like a color terminal."""
    return Console(file=io.StringIO(), width=200, force_terminal=True, color_system="standard")


@pytest.fixture
def legacy_config(tmp_path):
    return LogConfiguration(format=LogFormat.LEGACY, directory=tmp_path / "logs", file_name="deploy.log")


@pytest.fixture
def make_dispatcher(plain_console):
    """Build a dispatcher with its own session and a buffered console."""

    def _make(config, console=None):
        return LogDispatcher(config, SessionContext(), ConsoleMirror(console or plain_console))

    return _make

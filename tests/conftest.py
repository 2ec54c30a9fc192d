"""
Shared test fixtures and fakes for the acquisition pipeline.
"""

from __future__ import annotations

import logging
import os
import stat
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from dotnet_acquisition.core.models.events import AcquisitionEvent
from dotnet_acquisition.core.models.request import InstallRequest
from dotnet_acquisition.core.services.event_stream import EventStream

posix_only = pytest.mark.skipif(os.name != "posix", reason="needs a POSIX shell")


class FakeLocator:
    """Script locator returning a fixed path, or raising ``error``."""

    def __init__(self, path: str | Path = "/opt/scripts/dotnet-install.sh", error: Exception | None = None):
        self.path = Path(path)
        self.error = error
        self.calls = 0

    def get_install_script_path(self) -> Path:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.path


class FakeProbe:
    """Online probe with a scripted answer (or exception)."""

    def __init__(self, online: bool = True, error: Exception | None = None):
        self.online = online
        self.error = error
        self.calls = 0

    def is_online(self) -> bool:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.online


class FakePrompt:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def prompt_install(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def event_stream() -> EventStream:
    return EventStream()


@pytest.fixture
def recorded(event_stream: EventStream) -> list[AcquisitionEvent]:
    """Every event posted to ``event_stream``, in order."""
    events: list[AcquisitionEvent] = []
    event_stream.subscribe(events.append)
    return events


@pytest.fixture
def install_request(tmp_path: Path) -> InstallRequest:
    install_dir = tmp_path / "dotnet"
    return InstallRequest(
        version="6.0.100",
        install_dir=install_dir,
        dotnet_path=install_dir / "dotnet",
    )


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable ``/bin/sh`` script and return its path."""

    def _make(body: str, name: str = "dotnet-install.sh", directory: Path | None = None) -> Path:
        directory = directory or tmp_path / "scripts"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.raiseExceptions = True

"""
Tests for event sinks and the acquisition context that wires them.
"""

import asyncio
import logging
from pathlib import Path

from conftest import FakeLocator, FakeProbe

from dotnet_acquisition.core.config.loader import TELEMETRY_ENV_VAR, AcquisitionSettings
from dotnet_acquisition.core.context import AcquisitionContext, create_context
from dotnet_acquisition.core.models.events import (
    AcquisitionCompleted,
    InstallError,
    OfflineFailure,
    ScriptOutput,
)
from dotnet_acquisition.core.models.request import InstallRequest, ProcessOutcome
from dotnet_acquisition.core.observability.metrics import MetricsRegistry
from dotnet_acquisition.core.observers import LoggingObserver, TelemetryObserver
from dotnet_acquisition.core.platform import Platform
from dotnet_acquisition.core.services.acquisition.errors import OfflineError, ProcessExitError


def _settings(tmp_path: Path, **kw) -> AcquisitionSettings:
    return AcquisitionSettings(
        script_dir=tmp_path / "scripts",
        install_root=tmp_path / "runtimes",
        log_dir=tmp_path / "logs",
        **kw,
    )


class TestLoggingObserver:
    def test_writes_one_line_per_event(self, tmp_path: Path):
        obs = LoggingObserver(tmp_path / "logs" / "acq.txt")
        obs.post(ScriptOutput(version="6.0.100", text="Installed.\n"))
        obs.post(ScriptOutput(version="6.0.100", text="careful", channel="stderr"))
        obs.dispose()

        lines = (tmp_path / "logs" / "acq.txt").read_text().splitlines()
        assert len(lines) == 2
        assert "acquisition:script_output Installed." in lines[0]
        assert "STDERR: careful" in lines[1]

    def test_post_after_dispose_is_ignored(self, tmp_path: Path):
        obs = LoggingObserver(tmp_path / "acq.txt")
        obs.dispose()
        obs.dispose()
        obs.post(ScriptOutput(version="6.0.100", text="late"))
        assert (tmp_path / "acq.txt").read_text() == ""


class TestTelemetryObserver:
    def test_counts_outcomes(self):
        registry = MetricsRegistry()
        obs = TelemetryObserver(registry)
        obs.post(ScriptOutput(version="1", text="x"))
        obs.post(AcquisitionCompleted(version="1", dotnet_path=Path("/d")))
        obs.post(OfflineFailure(cause=OfflineError("1"), version="1"))
        obs.post(InstallError(cause=ProcessExitError(1), version="1"))

        assert registry.total("acquisition.events") == 4
        assert registry.total("acquisition.completed") == 1
        assert registry.total("acquisition.failures") == 2
        assert registry.counter("acquisition.failures", kind="offline").value == 1

    def test_to_dict(self):
        registry = MetricsRegistry()
        TelemetryObserver(registry).post(ScriptOutput(version="1", text="x"))
        d = registry.to_dict()
        assert d["counters"][0]["labels"] == {"type": "acquisition:script_output"}


class TestContext:
    def test_create_context_subscribes_observers(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(TELEMETRY_ENV_VAR, raising=False)
        ctx = create_context(_settings(tmp_path), platform=Platform.LINUX)
        assert ctx.event_stream.subscriber_count == 2
        assert ctx.telemetry is not None
        assert ctx.log_file is not None
        assert ctx.log_file.parent == tmp_path / "logs"
        assert ctx.log_file.name.startswith("DotNetAcquisition")

        ctx.event_stream.post(ScriptOutput(version="6.0.100", text="hello"))
        ctx.dispose()

        assert ctx.event_stream.subscriber_count == 0
        assert "hello" in ctx.log_file.read_text()
        assert ctx.telemetry.registry.total("acquisition.events") == 1

    def test_dispose_logs_telemetry_snapshot(self, tmp_path: Path, monkeypatch, caplog):
        monkeypatch.delenv(TELEMETRY_ENV_VAR, raising=False)
        ctx = create_context(_settings(tmp_path), platform=Platform.LINUX)
        ctx.event_stream.post(ScriptOutput(version="6.0.100", text="hello"))

        with caplog.at_level(logging.DEBUG, logger="dotnet_acquisition.core.context"):
            ctx.dispose()

        assert "Session telemetry" in caplog.text
        assert "acquisition.events" in caplog.text

    def test_telemetry_opt_out(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(TELEMETRY_ENV_VAR, "0")
        ctx = create_context(_settings(tmp_path))
        assert ctx.telemetry is None
        assert ctx.event_stream.subscriber_count == 1
        ctx.dispose()

    def test_invoker_posts_to_context_stream(self, tmp_path: Path):
        class Runner:
            async def run(self, command, platform=None):
                return ProcessOutcome(error=ProcessExitError(1), returncode=1)

        ctx = AcquisitionContext(settings=_settings(tmp_path), platform=Platform.LINUX)
        seen = []
        ctx.event_stream.subscribe(seen.append)
        invoker = ctx.create_invoker(FakeLocator(), FakeProbe(online=False))
        invoker._runner = Runner()

        request = InstallRequest(
            version="6.0.100", install_dir=tmp_path / "d", dotnet_path=tmp_path / "d" / "dotnet",
        )
        try:
            asyncio.run(invoker.install(request))
        except OfflineError:
            pass
        assert [type(e) for e in seen] == [OfflineFailure]

    def test_prober_uses_settings_timeout(self, tmp_path: Path):
        ctx = AcquisitionContext(settings=_settings(tmp_path, dependency_probe_timeout_s=7), platform=Platform.OTHER)
        prober = ctx.create_dependency_prober(prompt=None)
        assert prober._timeout_s == 7
        assert prober.probe("anything") is False

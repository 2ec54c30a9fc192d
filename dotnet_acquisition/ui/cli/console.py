"""
Console sinks for the CLI — progress output, --json event capture, and
the remediation prompt.
"""

from __future__ import annotations

import click

from dotnet_acquisition.core.models.events import (
    AcquisitionCompleted,
    AcquisitionEvent,
    MissingNativeDependencies,
    ScriptOutput,
)

LINUX_DEPENDENCIES_URL = "https://learn.microsoft.com/dotnet/core/install/linux"


class ConsoleObserver:
    """Echo acquisition progress to the terminal.

    Script output is only shown when ``verbose``; failures are reported
    by the command itself, so they are not echoed here.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def post(self, event: AcquisitionEvent) -> None:
        if isinstance(event, ScriptOutput):
            if self.verbose:
                color = "yellow" if event.channel == "stderr" else None
                click.secho(event.describe().rstrip(), fg=color, err=True)
        elif isinstance(event, AcquisitionCompleted):
            click.secho(f"✅ .NET {event.version} installed", fg="green", err=True)
        elif isinstance(event, MissingNativeDependencies):
            click.secho(f"⚠️  {event.describe()}", fg="yellow", err=True)

    def dispose(self) -> None:
        pass


class ConsolePrompt:
    """Tell the user how to install missing Linux dependencies."""

    def prompt_install(self, message: str) -> None:
        click.secho(f"❌ {message}", fg="red", err=True)
        click.echo(
            "   Your system is missing libraries .NET needs. "
            f"See {LINUX_DEPENDENCIES_URL}",
            err=True,
        )


class EventRecorder:
    """Keep the session's events for ``--json`` output."""

    def __init__(self) -> None:
        self.events: list[AcquisitionEvent] = []

    def post(self, event: AcquisitionEvent) -> None:
        self.events.append(event)

    def to_list(self) -> list[dict]:
        return [event.to_dict() for event in self.events]

    def dispose(self) -> None:
        pass

"""
.NET runtime acquisition — CLI entrypoint.

Usage:
    dotnet-acquire --help
    dotnet-acquire acquire 8.0.4
    dotnet-acquire ensure-deps ./my-tool --version
    dotnet-acquire config check
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from dotnet_acquisition import __version__
from dotnet_acquisition.core.config.loader import (
    AcquisitionSettings,
    ConfigError,
    find_settings_file,
    load_settings,
)
from dotnet_acquisition.core.context import create_context
from dotnet_acquisition.core.models.request import FailureKind, InstallRequest
from dotnet_acquisition.core.observability.logging_config import (
    LOG_FILE_ENV_VAR,
    LOG_FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)
from dotnet_acquisition.core.platform import capabilities_for
from dotnet_acquisition.core.services.acquisition.errors import AcquisitionError
from dotnet_acquisition.ui.cli.console import ConsoleObserver, ConsolePrompt, EventRecorder

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="dotnet-acquire")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to acquisition.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """.NET runtime acquisition — install runtimes with dotnet-install."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV_VAR),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV_VAR),
        quiet_third_party=not debug,
    )


def _settings_or_exit(ctx: click.Context) -> AcquisitionSettings:
    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _report_failure(
    error: BaseException,
    kind: FailureKind,
    log_file: Path | None,
    recorder: EventRecorder | None,
) -> None:
    if recorder is not None:
        click.echo(json.dumps({
            "ok": False,
            "kind": str(kind),
            "error": str(error),
            "log_file": str(log_file) if log_file else None,
            "events": recorder.to_list(),
        }, indent=2))
    else:
        click.secho(f"❌ {error}", fg="red")
        if log_file:
            click.echo(f"   See the acquisition log: {log_file}")
    sys.exit(1)


def _reject_version(version: str, reason: str | None = None) -> None:
    click.secho(
        f'❌ Cannot acquire .NET version "{version}". Please provide a valid version.',
        fg="red",
    )
    if reason:
        click.echo(f"   {reason}")
    sys.exit(1)


@cli.command()
@click.argument("version")
@click.option(
    "--install-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Install directory (default: <install_root>/<version>).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def acquire(ctx: click.Context, version: str, install_dir: str | None, as_json: bool) -> None:
    """Install the .NET runtime VERSION (an exact version like 8.0.4).

    VERSION is handed to the install script on a shell command line, so
    only letters, digits and . _ + - are accepted.
    """
    if not version.strip() or version.strip().lower() == "latest":
        _reject_version(version)

    settings = _settings_or_exit(ctx)
    target = (Path(install_dir) if install_dir else settings.install_root / version).resolve()
    try:
        request = InstallRequest(
            version=version,
            install_dir=target,
            dotnet_path=target / capabilities_for().dotnet_executable,
        )
    except ValidationError as e:
        _reject_version(version, e.errors()[0]["msg"].removeprefix("Value error, "))

    session = create_context(settings)
    recorder = EventRecorder() if as_json else None
    if recorder is not None:
        session.add_observer(recorder)
    elif not ctx.obj.get("quiet"):
        session.add_observer(ConsoleObserver(verbose=ctx.obj.get("verbose", False)))

    try:
        invoker = session.create_invoker()
        try:
            dotnet_path = asyncio.run(invoker.install(request))
        except AcquisitionError as e:
            _report_failure(e, e.kind, session.log_file, recorder)
        except Exception as e:
            logger.debug("Unexpected invocation error", exc_info=True)
            _report_failure(e, FailureKind.UNEXPECTED_INVOCATION_ERROR, session.log_file, recorder)
    finally:
        session.dispose()

    if recorder is not None:
        click.echo(json.dumps({
            "ok": True,
            "version": version,
            "dotnet_path": str(dotnet_path),
            "events": recorder.to_list(),
        }, indent=2))
        return
    click.echo(str(dotnet_path))


@cli.command(
    "ensure-deps",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def ensure_deps(ctx: click.Context, command: str, args: tuple[str, ...]) -> None:
    """Run COMMAND [ARGS...] and detect missing native Linux dependencies."""
    if not capabilities_for().probes_native_dependencies:
        click.echo("Native dependency check only applies on Linux; skipped.")
        return

    settings = _settings_or_exit(ctx)
    session = create_context(settings)
    try:
        missing = session.create_dependency_prober(ConsolePrompt()).probe(command, args)
    finally:
        session.dispose()

    if missing:
        sys.exit(1)
    click.secho("✅ No missing native dependencies detected", fg="green")


@cli.group()
def config() -> None:
    """Acquisition configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate acquisition.yml."""
    path = ctx.obj.get("config_path") or find_settings_file()
    try:
        settings = load_settings(path)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "errors": [str(e)]}, indent=2))
        else:
            click.secho("❌ Configuration errors:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "path": str(path) if path else None,
            "settings": settings.model_dump(mode="json"),
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   File: {path or '(defaults)'}")
    click.echo(f"   Scripts: {settings.script_dir}")
    click.echo(f"   Install root: {settings.install_root}")
    click.echo(f"   Timeout: {settings.timeout_s:g}s, output cap: {settings.max_buffer_kib} KiB")
    click.echo(f"   Telemetry: {'on' if settings.telemetry_enabled() else 'off'}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

"""
Platform capabilities — the one place that knows how platforms differ.

Quoting style, shell wrapping, which install script to run and whether
the native-dependency probe applies are all looked up here.  Adding a
platform is one row in ``_CAPABILITIES``.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import StrEnum


class Platform(StrEnum):
    """Platform families the acquisition pipeline distinguishes."""

    WINDOWS = "windows"
    LINUX = "linux"
    OTHER = "other"


class QuotingStyle(StrEnum):
    # PowerShell: '' escapes a quote inside a single-quoted string
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"


@dataclass(frozen=True)
class PlatformCapabilities:
    platform: Platform
    quoting: QuotingStyle
    shell_prefix: str | None
    probes_native_dependencies: bool
    script_name: str
    dotnet_executable: str


_POWERSHELL_PREFIX = "powershell.exe -ExecutionPolicy unrestricted -File"

_CAPABILITIES: dict[Platform, PlatformCapabilities] = {
    Platform.WINDOWS: PlatformCapabilities(
        platform=Platform.WINDOWS,
        quoting=QuotingStyle.SINGLE_QUOTE,
        shell_prefix=_POWERSHELL_PREFIX,
        probes_native_dependencies=False,
        script_name="dotnet-install.ps1",
        dotnet_executable="dotnet.exe",
    ),
    Platform.LINUX: PlatformCapabilities(
        platform=Platform.LINUX,
        quoting=QuotingStyle.DOUBLE_QUOTE,
        shell_prefix=None,
        probes_native_dependencies=True,
        script_name="dotnet-install.sh",
        dotnet_executable="dotnet",
    ),
    Platform.OTHER: PlatformCapabilities(
        platform=Platform.OTHER,
        quoting=QuotingStyle.DOUBLE_QUOTE,
        shell_prefix=None,
        probes_native_dependencies=False,
        script_name="dotnet-install.sh",
        dotnet_executable="dotnet",
    ),
}


def current_platform() -> Platform:
    """Detect the platform family of the running interpreter."""
    if sys.platform in ("win32", "cygwin"):
        return Platform.WINDOWS
    if sys.platform.startswith("linux"):
        return Platform.LINUX
    return Platform.OTHER


def capabilities_for(platform: Platform | str | None = None) -> PlatformCapabilities:
    """Look up capabilities for ``platform`` (default: the current one)."""
    if platform is None:
        platform = current_platform()
    return _CAPABILITIES[Platform(platform)]

"""
Command builder — turn (version, install dir) into an installer invocation.

The install directory must survive the target shell: PowerShell gets a
single-quoted literal with embedded quotes doubled, every other shell
gets the path in double quotes as-is.
"""

from __future__ import annotations

from pathlib import Path

from dotnet_acquisition.core.models.request import ResolvedCommand
from dotnet_acquisition.core.platform import Platform, QuotingStyle, capabilities_for
from dotnet_acquisition.core.services.script_locator import ScriptLocator

# The runtime variant this pipeline installs (vs. aspnetcore / windowsdesktop)
RUNTIME_KIND = "dotnet"


def quote_install_dir(install_dir: str | Path, platform: Platform | None = None) -> str:
    """Quote ``install_dir`` for the platform's shell."""
    raw = str(install_dir)
    if capabilities_for(platform).quoting == QuotingStyle.SINGLE_QUOTE:
        escaped = raw.replace("'", "''")
        return f"'{escaped}'"
    return f'"{raw}"'


class CommandBuilder:
    """Build installer commands for one platform.

    Args:
        script_locator: Resolves the install script; may do network I/O.
            Its exceptions propagate unchanged.
        platform: Target platform (default: current).
    """

    def __init__(self, script_locator: ScriptLocator, platform: Platform | None = None) -> None:
        self._script_locator = script_locator
        self._platform = platform

    def build(self, version: str, install_dir: str | Path) -> ResolvedCommand:
        args = [
            "-InstallDir", quote_install_dir(install_dir, self._platform),
            "-Runtime", RUNTIME_KIND,
            "-Version", version,
        ]
        script_path = self._script_locator.get_install_script_path()
        return ResolvedCommand(executable_path=str(script_path), arguments=args)

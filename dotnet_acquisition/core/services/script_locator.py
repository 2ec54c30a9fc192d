"""
Install-script location.

Downloading and caching the dotnet-install scripts is someone else's
job; the acquisition pipeline only needs a path.  ``ScriptLocator`` is
that seam.  ``LocalScriptLocator`` serves scripts that already sit in a
directory on disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from dotnet_acquisition.core.platform import Platform, capabilities_for
from dotnet_acquisition.core.services.acquisition.errors import ScriptNotFoundError

logger = logging.getLogger(__name__)


class ScriptLocator(Protocol):
    def get_install_script_path(self) -> Path:
        """Return the on-disk path of the install script.  May raise."""
        ...


class LocalScriptLocator:
    """Resolve the platform's install script inside ``script_dir``."""

    def __init__(self, script_dir: Path, platform: Platform | None = None) -> None:
        self._script_dir = Path(script_dir)
        self._script_name = capabilities_for(platform).script_name

    def get_install_script_path(self) -> Path:
        path = self._script_dir / self._script_name
        if not path.is_file():
            raise ScriptNotFoundError(f"Install script not found: {path}")
        logger.debug("Using install script %s", path)
        return path.resolve()

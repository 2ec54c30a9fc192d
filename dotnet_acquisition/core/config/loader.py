"""
Configuration loader — reads acquisition.yml into AcquisitionSettings.

The file is optional: without one every setting has a working default.
When present it is YAML, validated against a Pydantic schema.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from dotnet_acquisition.core.services.reachability import DEFAULT_PROBE_URL

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "acquisition.yml"

# Set to 0/false/off to opt out of telemetry regardless of the file
TELEMETRY_ENV_VAR = "DOTNET_ACQUISITION_TELEMETRY"


class ConfigError(Exception):
    """Raised when acquisition configuration is invalid."""


def _default_data_dir() -> Path:
    return Path.home() / ".dotnet-acquisition"


class AcquisitionSettings(BaseModel):
    """Tunables for the acquisition pipeline."""

    script_dir: Path = Field(default_factory=lambda: _default_data_dir() / "scripts")
    install_root: Path = Field(default_factory=lambda: _default_data_dir() / "runtimes")
    log_dir: Path = Field(default_factory=lambda: _default_data_dir() / "logs")

    timeout_s: float = Field(default=30.0, gt=0)
    max_buffer_kib: int = Field(default=500, gt=0)

    online_probe_url: str = DEFAULT_PROBE_URL
    online_probe_timeout_s: float = Field(default=5.0, gt=0)
    dependency_probe_timeout_s: float = Field(default=60.0, gt=0)

    enable_telemetry: bool = True

    @property
    def max_buffer_bytes(self) -> int:
        return self.max_buffer_kib * 1024

    def telemetry_enabled(self) -> bool:
        """File flag AND environment flag must both allow telemetry."""
        env = os.environ.get(TELEMETRY_ENV_VAR)
        env_allows = env is None or env.strip().lower() not in ("0", "false", "off", "no")
        return self.enable_telemetry and env_allows


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for acquisition.yml starting from the given directory, walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> AcquisitionSettings:
    """Load and validate acquisition settings.

    Args:
        path: Explicit path to acquisition.yml.  If None, searches upward
            and falls back to defaults when nothing is found.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No %s found; using defaults", SETTINGS_FILE)
            return AcquisitionSettings()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading acquisition settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow everything to sit under an "acquisition:" key
    if isinstance(data.get("acquisition"), dict):
        data = data["acquisition"]

    try:
        settings = AcquisitionSettings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid acquisition configuration: {e}") from e

    # Relative directories are relative to the config file
    base = path.parent.resolve()
    updates = {
        name: base / value
        for name in ("script_dir", "install_root", "log_dir")
        if not (value := getattr(settings, name)).is_absolute()
    }
    if updates:
        settings = settings.model_copy(update=updates)

    return settings

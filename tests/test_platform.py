"""
Tests for platform detection and the capability table.
"""

import pytest

from dotnet_acquisition.core import platform as platform_mod
from dotnet_acquisition.core.platform import Platform, QuotingStyle, capabilities_for, current_platform


class TestCurrentPlatform:
    @pytest.mark.parametrize(
        "sys_platform, expected",
        [
            ("win32", Platform.WINDOWS),
            ("cygwin", Platform.WINDOWS),
            ("linux", Platform.LINUX),
            ("darwin", Platform.OTHER),
            ("freebsd14", Platform.OTHER),
        ],
    )
    def test_detection(self, monkeypatch, sys_platform, expected):
        monkeypatch.setattr(platform_mod.sys, "platform", sys_platform)
        assert current_platform() == expected


class TestCapabilities:
    def test_windows(self):
        caps = capabilities_for(Platform.WINDOWS)
        assert caps.quoting == QuotingStyle.SINGLE_QUOTE
        assert caps.shell_prefix == "powershell.exe -ExecutionPolicy unrestricted -File"
        assert caps.script_name == "dotnet-install.ps1"
        assert caps.dotnet_executable == "dotnet.exe"
        assert not caps.probes_native_dependencies

    def test_linux(self):
        caps = capabilities_for(Platform.LINUX)
        assert caps.quoting == QuotingStyle.DOUBLE_QUOTE
        assert caps.shell_prefix is None
        assert caps.probes_native_dependencies

    def test_other(self):
        caps = capabilities_for("other")
        assert caps.script_name == "dotnet-install.sh"
        assert not caps.probes_native_dependencies

    def test_default_is_current(self, monkeypatch):
        monkeypatch.setattr(platform_mod.sys, "platform", "win32")
        assert capabilities_for().platform == Platform.WINDOWS

    def test_every_platform_has_capabilities(self):
        for p in Platform:
            assert capabilities_for(p).platform == p

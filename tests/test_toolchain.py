"""
Tests for toolchain host detection and download URL selection.
"""

import pytest

from vessel.core.acquire.toolchain import HostTarget, host_target, parse_semver, toolchain_url
from vessel.core.errors import UnsupportedPlatformError

LINUX = HostTarget("x86_64-linux", "linux64")
MACOS = HostTarget("x86_64-darwin", "macos")


class TestHostTarget:
    def test_linux(self):
        assert host_target("Linux") == LINUX

    def test_macos(self):
        assert host_target("Darwin") == MACOS

    def test_unsupported(self):
        with pytest.raises(UnsupportedPlatformError):
            host_target("Windows")


class TestParseSemver:
    @pytest.mark.parametrize(
        "version, expected",
        [
            ("0.6.2", (0, 6, 2)),
            ("0.10.0-beta.1", (0, 10, 0)),
            ("1.0.0+build5", (1, 0, 0)),
        ],
    )
    def test_parses(self, version, expected):
        assert parse_semver(version) == expected

    @pytest.mark.parametrize("version", ["nightly", "0.6", "", "1.2.3.4", "v1.2.3"])
    def test_rejects(self, version):
        assert parse_semver(version) is None


class TestToolchainUrl:
    def test_legacy_at_threshold(self):
        assert toolchain_url("0.6.2", LINUX) == (
            "https://download.dfinity.systems/motoko/0.6.2/x86_64-linux/motoko-0.6.2.tar.gz"
        )

    def test_release_above_threshold(self):
        assert toolchain_url("0.6.3", MACOS) == (
            "https://github.com/dfinity/motoko/releases/download/0.6.3/motoko-macos-0.6.3.tar.gz"
        )

    def test_numeric_not_lexicographic(self):
        assert toolchain_url("0.10.0", LINUX).startswith("https://github.com/")

    def test_unparsable_uses_legacy(self):
        assert toolchain_url("nightly", MACOS) == (
            "https://download.dfinity.systems/motoko/nightly/x86_64-darwin/motoko-nightly.tar.gz"
        )

    def test_prefixed_version_uses_legacy(self):
        assert toolchain_url("v0.7.0", LINUX).startswith("https://download.dfinity.systems/")

"""
Tests for the acquirer: caching, forced refetch, strategy fallback,
archive shape checks, and toolchain downloads.
"""

import pytest

from vessel.core.acquire.acquirer import Acquirer
from vessel.core.acquire.strategies import TarballStrategy, tarball_url
from vessel.core.acquire.toolchain import HostTarget
from vessel.core.errors import (
    AcquisitionError,
    ArchiveError,
    NetworkError,
    SubprocessError,
    ValidationError,
)

from tests.conftest import make_package, make_tarball

GITHUB_REPO = "https://github.com/org/base.git"
TARBALL_URL = "https://github.com/org/base/archive/v1.0.0.tar.gz"


@pytest.fixture
def github_base():
    return make_package("base", repo=GITHUB_REPO)


# ── Tarball strategy ─────────────────────────────────────────────────


class TestTarball:
    def test_url(self):
        assert tarball_url(GITHUB_REPO, "v1.0.0") == TARBALL_URL
        assert tarball_url("https://github.com/org/base", "v2") == (
            "https://github.com/org/base/archive/v2.tar.gz"
        )

    def test_fetch_and_install(self, acquirer, layout, transport, github_base):
        transport.set_response(
            TARBALL_URL, make_tarball({"base-1.0.0/src/List.mo": "module {}"})
        )

        path = acquirer.acquire(github_base)

        assert path == layout.package_sources("base", "v1.0.0")
        assert (path / "List.mo").read_text() == "module {}"
        assert transport.urls == [TARBALL_URL]

    def test_second_acquire_is_cache_hit(self, acquirer, transport, github_base):
        transport.set_response(TARBALL_URL, make_tarball({"base/src/List.mo": ""}))

        first = acquirer.acquire(github_base)
        second = acquirer.acquire(github_base)

        assert first == second
        assert transport.call_count == 1

    def test_force_refetches(self, acquirer, transport, github_base):
        transport.set_response(TARBALL_URL, make_tarball({"base/src/List.mo": "old"}))
        path = acquirer.acquire(github_base)

        transport.set_response(TARBALL_URL, make_tarball({"base/src/List.mo": "new"}))
        acquirer.acquire(github_base, force=True)

        assert transport.call_count == 2
        assert (path / "List.mo").read_text() == "new"

    def test_staging_is_cleaned_up(self, acquirer, layout, transport, github_base):
        transport.set_response(TARBALL_URL, make_tarball({"base/src/List.mo": ""}))
        acquirer.acquire(github_base)
        assert list(layout.staging_root.iterdir()) == []

    def test_empty_archive(self, layout, transport, vcs, github_base):
        transport.set_response(TARBALL_URL, make_tarball({}))
        acquirer = Acquirer(layout, transport, vcs, strategies=[TarballStrategy(transport)])

        with pytest.raises(ArchiveError, match="empty tarball"):
            acquirer.acquire(github_base)
        assert not layout.package_slot("base", "v1.0.0").exists()

    def test_two_roots(self, layout, transport, vcs, github_base):
        transport.set_response(TARBALL_URL, make_tarball({"a/x.mo": "", "b/y.mo": ""}))
        acquirer = Acquirer(layout, transport, vcs, strategies=[TarballStrategy(transport)])

        with pytest.raises(ArchiveError, match="single directory"):
            acquirer.acquire(github_base)

    def test_file_root(self, layout, transport, vcs, github_base):
        transport.set_response(TARBALL_URL, make_tarball({"README": "hi"}))
        acquirer = Acquirer(layout, transport, vcs, strategies=[TarballStrategy(transport)])

        with pytest.raises(ArchiveError, match="not a directory"):
            acquirer.acquire(github_base)

    def test_corrupt_archive(self, layout, transport, vcs, github_base):
        transport.set_response(TARBALL_URL, b"definitely not gzip")
        acquirer = Acquirer(layout, transport, vcs, strategies=[TarballStrategy(transport)])

        with pytest.raises(ArchiveError):
            acquirer.acquire(github_base)

    def test_http_error(self, layout, transport, vcs, github_base):
        transport.set_response(TARBALL_URL, "rate limited", status=429)
        acquirer = Acquirer(layout, transport, vcs, strategies=[TarballStrategy(transport)])

        with pytest.raises(NetworkError) as exc_info:
            acquirer.acquire(github_base)
        assert exc_info.value.status == 429
        assert '"429"' in str(exc_info.value)


# ── Clone strategy and fallback ──────────────────────────────────────


class TestClone:
    def test_non_github_goes_straight_to_clone(self, acquirer, transport, vcs):
        vcs.add_repo("https://git.example.com/base.git", {"src/Base.mo": "module {}"})

        path = acquirer.acquire(make_package("base"))

        assert (path / "Base.mo").is_file()
        assert transport.call_count == 0
        assert vcs.calls("clone") == ["https://git.example.com/base.git"]
        assert vcs.calls("checkout") == ["v1.0.0"]

    def test_tarball_failure_falls_back_to_clone(self, acquirer, transport, vcs, github_base):
        vcs.add_repo(GITHUB_REPO, {"src/List.mo": "module {}"})

        path = acquirer.acquire(github_base)

        assert transport.urls == [TARBALL_URL]
        assert vcs.calls("clone") == [GITHUB_REPO]
        assert (path / "List.mo").is_file()

    def test_single_failure_is_reraised(self, acquirer, layout):
        with pytest.raises(SubprocessError, match="Failed to clone"):
            acquirer.acquire(make_package("ghost"))
        assert not layout.package_slot("ghost", "v1.0.0").exists()

    def test_checkout_failure(self, acquirer, vcs):
        vcs.add_repo("https://git.example.com/base.git", {"src/Base.mo": ""})
        vcs.set_checkout_failure("v1.0.0")

        with pytest.raises(SubprocessError) as exc_info:
            acquirer.acquire(make_package("base"))
        assert "pathspec" in exc_info.value.diagnostics

    def test_all_strategies_fail(self, acquirer, layout, github_base):
        with pytest.raises(AcquisitionError) as exc_info:
            acquirer.acquire(github_base)

        strategies = [name for name, _ in exc_info.value.failures]
        assert strategies == ["tarball", "clone"]
        assert isinstance(exc_info.value.failures[0][1], NetworkError)
        assert not layout.package_slot("base", "v1.0.0").exists()
        assert list(layout.staging_root.iterdir()) == []


# ── Misc ─────────────────────────────────────────────────────────────


class TestAcquirerMisc:
    def test_unsafe_version_rejected_before_io(self, acquirer, transport, vcs):
        package = make_package("base", repo=GITHUB_REPO, version="../../etc")
        with pytest.raises(ValidationError):
            acquirer.acquire(package)
        assert transport.call_count == 0
        assert vcs.call_log == []

    def test_package_sources_sorted_and_filtered(self, acquirer, vcs):
        vcs.add_repo(
            "https://git.example.com/base.git",
            {
                "src/b.mo": "",
                "src/a.mo": "",
                "src/nested/c.mo": "",
                "src/README.md": "",
                "test/t.mo": "",
            },
        )
        package = make_package("base")
        root = acquirer.acquire(package)

        assert acquirer.package_sources(package) == [
            root / "a.mo",
            root / "b.mo",
            root / "nested" / "c.mo",
        ]


# ── Toolchain ────────────────────────────────────────────────────────


class TestDownloadToolchain:
    RELEASE = (
        "https://github.com/dfinity/motoko/releases/download/0.10.0/motoko-linux64-0.10.0.tar.gz"
    )

    @pytest.fixture
    def linux_acquirer(self, layout, transport, vcs):
        return Acquirer(layout, transport, vcs, target=HostTarget("x86_64-linux", "linux64"))

    def test_download(self, linux_acquirer, layout, transport):
        transport.set_response(self.RELEASE, make_tarball({"moc": "#!/bin/sh", "mo-doc": ""}))

        path = linux_acquirer.download_toolchain("0.10.0")

        assert path == layout.toolchain_slot("0.10.0")
        assert (path / "moc").read_text() == "#!/bin/sh"

    def test_cache_hit(self, linux_acquirer, transport):
        transport.set_response(self.RELEASE, make_tarball({"moc": ""}))
        linux_acquirer.download_toolchain("0.10.0")
        linux_acquirer.download_toolchain("0.10.0")
        assert transport.call_count == 1

    def test_download_failure(self, linux_acquirer, layout):
        with pytest.raises(NetworkError, match="Failed to download Motoko binaries"):
            linux_acquirer.download_toolchain("0.10.0")
        assert not layout.toolchain_slot("0.10.0").exists()

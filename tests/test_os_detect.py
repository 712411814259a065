"""
Tests for OS detection — platform tags, os-release parsing, tie-breaks.
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from devstrap.core.errors import UnsupportedPlatformError
from devstrap.core.models.profile import OSProfile, OSTag
from devstrap.core.services.os_detect import detect_os, probe_curl, read_os_release

AL2023_RELEASE = textwrap.dedent("""\
    NAME="Amazon Linux"
    VERSION="2023"
    ID="amzn"
    VERSION_ID="2023"
    PRETTY_NAME="Amazon Linux 2023"
""")

AL2_RELEASE = textwrap.dedent("""\
    NAME="Amazon Linux"
    VERSION="2"
    ID="amzn"
    VERSION_ID="2"
    PRETTY_NAME="Amazon Linux 2"
""")

UBUNTU_RELEASE = textwrap.dedent("""\
    # comment line
    NAME="Ubuntu"
    VERSION_ID="24.04"
    ID=ubuntu
    PRETTY_NAME="Ubuntu 24.04 LTS"
""")


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "os-release"
    path.write_text(text)
    return path


class TestReadOsRelease:
    def test_parses_quoted_and_bare_values(self, tmp_path: Path):
        fields = read_os_release(_write(tmp_path, UBUNTU_RELEASE))
        assert fields["ID"] == "ubuntu"
        assert fields["PRETTY_NAME"] == "Ubuntu 24.04 LTS"
        assert "# comment line" not in fields

    def test_missing_file(self, tmp_path: Path):
        assert read_os_release(tmp_path / "nope") == {}


class TestDetectLinux:
    def test_al2023_beats_dnf(self, tmp_path: Path, make_which):
        profile = detect_os(
            platform_tag="linux",
            os_release=_write(tmp_path, AL2023_RELEASE),
            which=make_which("dnf", "yum"),
        )
        assert profile.tag is OSTag.AL2023
        assert profile.pretty_name == "Amazon Linux 2023"

    def test_amazon_linux_2(self, tmp_path: Path, make_which):
        profile = detect_os(
            platform_tag="linux",
            os_release=_write(tmp_path, AL2_RELEASE),
            which=make_which("yum"),
        )
        assert profile.tag is OSTag.AMAZON
        assert profile.package_manager is None

    def test_ubuntu_by_apt_get(self, tmp_path: Path, make_which):
        profile = detect_os(
            platform_tag="linux",
            os_release=_write(tmp_path, UBUNTU_RELEASE),
            which=make_which("apt-get", "dnf"),
        )
        assert profile.tag is OSTag.UBUNTU
        assert profile.package_manager == "apt"

    def test_dnf_with_redhat_release(self, tmp_path: Path, make_which):
        marker = tmp_path / "redhat-release"
        marker.write_text("Red Hat Enterprise Linux release 9.3\n")
        profile = detect_os(
            platform_tag="linux",
            os_release=tmp_path / "missing",
            redhat_release=marker,
            which=make_which("dnf"),
        )
        assert profile.tag is OSTag.REDHAT

    def test_dnf_without_redhat_release(self, tmp_path: Path, make_which):
        profile = detect_os(
            platform_tag="linux",
            os_release=tmp_path / "missing",
            redhat_release=tmp_path / "also-missing",
            which=make_which("dnf"),
        )
        assert profile.tag is OSTag.FEDORA

    @pytest.mark.parametrize(
        "commands, expected",
        [
            (("yum",), OSTag.CENTOS),
            (("pacman",), OSTag.ARCH),
            ((), OSTag.LINUX),
        ],
    )
    def test_manager_fallbacks(self, tmp_path: Path, make_which, commands, expected):
        profile = detect_os(
            platform_tag="linux",
            os_release=tmp_path / "missing",
            redhat_release=tmp_path / "missing",
            which=make_which(*commands),
        )
        assert profile.tag is expected


class TestDetectOtherPlatforms:
    def test_darwin(self, make_which):
        profile = detect_os(platform_tag="darwin", which=make_which())
        assert profile.tag is OSTag.MACOS
        assert profile.package_manager == "brew"

    @pytest.mark.parametrize("tag", ["win32", "cygwin", "freebsd14"])
    def test_unsupported(self, tag: str, make_which):
        with pytest.raises(UnsupportedPlatformError, match="Unsupported OS"):
            detect_os(platform_tag=tag, which=make_which())


class TestProfile:
    def test_profile_is_frozen(self):
        profile = OSProfile(tag=OSTag.UBUNTU)
        with pytest.raises(ValidationError):
            profile.tag = OSTag.ARCH

    def test_to_dict(self):
        d = OSProfile(tag=OSTag.FEDORA, platform="linux").to_dict()
        assert d["tag"] == "fedora"
        assert d["package_manager"] == "dnf"


class TestProbeCurl:
    def test_no_curl_leaves_profile(self, make_which, runner, mock_adapter):
        profile = OSProfile(tag=OSTag.AL2023)
        assert probe_curl(profile, runner, which=make_which()) is profile
        assert mock_adapter.call_count == 0

    def test_curl_minimal_detected(self, make_which, runner, mock_adapter):
        profile = probe_curl(OSProfile(tag=OSTag.AL2023), runner, which=make_which("curl"))
        assert profile.curl_minimal is True
        ctx = mock_adapter.call_log[0]
        assert ctx.action.params["argv"] == ["rpm", "-q", "curl-minimal"]
        assert ctx.action.read_only

    def test_full_curl(self, make_which, runner, mock_adapter):
        mock_adapter.set_failure("detect:curl-minimal", "package curl-minimal is not installed")
        profile = probe_curl(OSProfile(tag=OSTag.FEDORA), runner, which=make_which("curl"))
        assert profile.curl_minimal is False

    def test_apt_never_checks_rpm(self, make_which, runner, mock_adapter):
        profile = probe_curl(OSProfile(tag=OSTag.UBUNTU), runner, which=make_which("curl"))
        assert profile.curl_minimal is False
        assert mock_adapter.call_count == 0

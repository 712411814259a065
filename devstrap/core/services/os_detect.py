"""
OS detection — classify the host into an ``OSTag``.

Read-only probes: the platform tag, ``/etc/os-release`` contents,
``/etc/redhat-release`` presence and which package managers are on
PATH.  Amazon Linux is recognised by os-release content BEFORE any
manager probe, because AL2023 ships dnf and would otherwise be
classified as fedora/redhat.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable
from pathlib import Path

from devstrap.core.engine.executor import Runner
from devstrap.core.errors import UnsupportedPlatformError
from devstrap.core.models.action import Action
from devstrap.core.models.profile import OSProfile, OSTag

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")
REDHAT_RELEASE = Path("/etc/redhat-release")

Which = Callable[[str], str | None]


def read_os_release(path: Path = OS_RELEASE) -> dict[str, str]:
    """Parse an os-release file into a dict.  Missing file → empty dict."""
    fields: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return fields

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        fields[key.strip()] = value.strip().strip('"').strip("'")
    return fields


def _classify_linux(
    release: dict[str, str],
    release_text: str,
    redhat_release: Path,
    which: Which,
) -> OSTag:
    if "Amazon Linux" in release_text:
        if release.get("VERSION_ID") == "2023":
            return OSTag.AL2023
        return OSTag.AMAZON
    if which("apt-get"):
        return OSTag.UBUNTU
    if which("dnf"):
        # Fedora, RHEL 8+, or another dnf-based distro
        return OSTag.REDHAT if redhat_release.exists() else OSTag.FEDORA
    if which("yum"):
        return OSTag.CENTOS
    if which("pacman"):
        return OSTag.ARCH
    return OSTag.LINUX


def detect_os(
    platform_tag: str | None = None,
    os_release: Path = OS_RELEASE,
    redhat_release: Path = REDHAT_RELEASE,
    which: Which = shutil.which,
) -> OSProfile:
    """Detect the host OS profile.

    Args:
        platform_tag: Runtime platform (default: ``sys.platform``).
        os_release: Path to the os-release file.
        redhat_release: Path whose existence marks a Red Hat system.
        which: PATH lookup, injectable for tests.

    Returns:
        The frozen ``OSProfile``.

    Raises:
        UnsupportedPlatformError: Neither Linux nor macOS.
    """
    platform_tag = platform_tag or sys.platform

    if platform_tag.startswith("linux"):
        try:
            release_text = os_release.read_text(encoding="utf-8")
        except (FileNotFoundError, OSError):
            release_text = ""
        release = read_os_release(os_release)
        tag = _classify_linux(release, release_text, redhat_release, which)
        profile = OSProfile(
            tag=tag,
            platform=platform_tag,
            pretty_name=release.get("PRETTY_NAME", ""),
        )
    elif platform_tag.startswith("darwin"):
        profile = OSProfile(tag=OSTag.MACOS, platform=platform_tag, pretty_name="macOS")
    else:
        raise UnsupportedPlatformError(platform_tag)

    logger.info("Detected OS: %s (%s)", profile.tag.value, profile.pretty_name or platform_tag)
    return profile


def probe_curl(profile: OSProfile, runner: Runner, which: Which = shutil.which) -> OSProfile:
    """Record whether the minimal curl build is installed.

    Only rpm-based systems ship ``curl-minimal``; the answer decides
    whether the AL2023 branch swaps it for the full build.  The rpm
    query goes through the runner, so ``--mock`` never touches rpm.
    """
    if not which("curl"):
        return profile

    minimal = False
    if profile.package_manager in ("dnf", "yum"):
        minimal = runner.query(Action(
            id="detect:curl-minimal",
            name="Check for curl-minimal",
            adapter="shell",
            params={"argv": ["rpm", "-q", "curl-minimal"], "timeout": 10},
            read_only=True,
        )).ok
    if minimal:
        logger.info("curl-minimal detected")
    else:
        logger.info("standard curl detected")
    return profile.model_copy(update={"curl_minimal": minimal})

"""
Package installation — the per-OS install table.

``plan_packages`` turns an OS profile into an ordered list of actions.
Each branch only emits actions for its own package manager (plus the
service/account tooling that branch needs).  Modern CLI tools are
best-effort everywhere: a distro that lacks them must not abort the run.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from devstrap.core.engine.executor import Runner
from devstrap.core.models.action import Action
from devstrap.core.models.profile import BootstrapConfig, OSTag

logger = logging.getLogger(__name__)

HOMEBREW_INSTALLER = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

MODERN_TOOLS_WARNING = "Some modern tools are not available"

# ── Package lists ──────────────────────────────────────────────

UBUNTU_CORE = (
    "git", "zsh", "curl", "wget", "vim", "neovim",
    "htop", "tree", "unzip", "zip",
    "build-essential", "software-properties-common",
    "docker.io", "docker-compose",
    "nodejs", "npm", "python3", "python3-pip",
)
UBUNTU_MODERN = ("fzf", "ripgrep", "fd-find", "bat", "exa")

MACOS_CORE = (
    "git", "zsh", "curl", "wget", "vim", "neovim",
    "htop", "tree", "unzip",
    "docker", "docker-compose",
    "node", "python",
)
MACOS_MODERN = ("fzf", "ripgrep", "fd", "bat", "exa")

AL2023_CORE = (
    "git", "zsh", "curl", "wget", "vim",
    "htop", "tree", "unzip", "zip",
    "gcc", "gcc-c++", "make",
    "nodejs", "npm", "python3", "python3-pip",
)
DNF_MODERN = ("fzf", "ripgrep", "fd-find", "bat")

RHEL_CORE = (
    "git", "zsh", "curl", "wget", "vim",
    "htop", "tree", "unzip", "zip",
    "nodejs", "npm", "python3", "python3-pip",
)

CENTOS_CORE = RHEL_CORE

ARCH_CORE = (
    "git", "zsh", "curl", "wget", "vim", "neovim",
    "htop", "tree", "unzip", "zip",
    "base-devel",
    "docker", "docker-compose",
    "nodejs", "npm", "python", "python-pip",
)
ARCH_MODERN = ("fzf", "ripgrep", "fd", "bat", "eza")

DEV_TOOLS_GROUP = "Development Tools"


def _pkg(
    action_id: str,
    manager: str,
    operation: str,
    packages: tuple[str, ...] | list[str] = (),
    *,
    name: str = "",
    best_effort: bool = False,
    warning: str = "",
) -> Action:
    return Action(
        id=f"packages:{action_id}",
        name=name or f"{manager} {operation}",
        adapter="packages",
        params={"manager": manager, "operation": operation, "packages": list(packages)},
        best_effort=best_effort,
        warning=warning,
    )


def _sh(action_id: str, argv: list[str], *, name: str, sudo: bool = False) -> Action:
    return Action(
        id=f"packages:{action_id}",
        name=name,
        adapter="shell",
        params={"argv": argv, "sudo": sudo, "stream": True},
    )


# ── Branches ───────────────────────────────────────────────────


def _ubuntu(config: BootstrapConfig, which: Callable) -> list[Action]:
    return [
        _pkg("update", "apt", "update"),
        _pkg("core", "apt", "install", UBUNTU_CORE, name="Install core packages"),
        _pkg("modern", "apt", "install", UBUNTU_MODERN,
             name="Install modern CLI tools", best_effort=True,
             warning=MODERN_TOOLS_WARNING),
    ]


def _macos(config: BootstrapConfig, which: Callable) -> list[Action]:
    actions: list[Action] = []
    if not which("brew"):
        actions.append(Action(
            id="packages:homebrew",
            name="Install Homebrew",
            adapter="shell",
            params={
                "command": f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALLER})"',
                "stream": True,
            },
        ))
    actions += [
        _pkg("core", "brew", "install", MACOS_CORE, name="Install core packages"),
        _pkg("modern", "brew", "install", MACOS_MODERN,
             name="Install modern CLI tools", best_effort=True,
             warning=MODERN_TOOLS_WARNING),
    ]
    return actions


def _al2023(config: BootstrapConfig, which: Callable) -> list[Action]:
    actions: list[Action] = []

    # Later steps need full curl; swap before anything else is installed
    if config.profile.curl_minimal:
        actions += [
            _pkg("swap-libcurl", "dnf", "swap", ("libcurl-minimal", "libcurl-full"),
                 name="Swap libcurl-minimal for libcurl-full"),
            _pkg("swap-curl", "dnf", "swap", ("curl-minimal", "curl-full"),
                 name="Swap curl-minimal for curl-full"),
        ]

    actions += [
        _pkg("update", "dnf", "update"),
        _pkg("epel", "dnf", "install", ("epel-release",),
             name="Enable EPEL", best_effort=True,
             warning="EPEL is not available"),
        _pkg("core", "dnf", "install", AL2023_CORE, name="Install core packages"),
        _pkg("modern", "dnf", "install", DNF_MODERN,
             name="Install modern CLI tools", best_effort=True,
             warning=MODERN_TOOLS_WARNING),
        _pkg("docker", "dnf", "install", ("docker",), name="Install docker"),
        _sh("docker-enable", ["systemctl", "enable", "docker"],
            name="Enable docker service", sudo=True),
        _sh("docker-start", ["systemctl", "start", "docker"],
            name="Start docker service", sudo=True),
        _sh("docker-group", ["usermod", "-aG", "docker", config.host.user],
            name="Add user to docker group", sudo=True),
    ]

    if not which("docker-compose"):
        actions.append(_sh(
            "docker-compose",
            ["pip3", "install", "--user", "docker-compose"],
            name="Install docker-compose with pip",
        ))

    actions.append(_pkg(
        "neovim", "dnf", "install", ("neovim",),
        name="Install neovim", best_effort=True,
        warning="Neovim not available, vim will be used",
    ))
    return actions


def _rhel(config: BootstrapConfig, which: Callable) -> list[Action]:
    return [
        _pkg("update", "dnf", "update"),
        _pkg("devtools", "dnf", "groupinstall", (DEV_TOOLS_GROUP,),
             name="Install Development Tools"),
        _pkg("core", "dnf", "install", RHEL_CORE, name="Install core packages"),
        _pkg("modern", "dnf", "install", DNF_MODERN,
             name="Install modern CLI tools", best_effort=True,
             warning=MODERN_TOOLS_WARNING),
    ]


def _centos(config: BootstrapConfig, which: Callable) -> list[Action]:
    return [
        _pkg("update", "yum", "update"),
        _pkg("devtools", "yum", "groupinstall", (DEV_TOOLS_GROUP,),
             name="Install Development Tools"),
        _pkg("core", "yum", "install", CENTOS_CORE, name="Install core packages"),
    ]


def _arch(config: BootstrapConfig, which: Callable) -> list[Action]:
    return [
        _pkg("update", "pacman", "update"),
        _pkg("core", "pacman", "install", ARCH_CORE, name="Install core packages"),
        _pkg("modern", "pacman", "install", ARCH_MODERN,
             name="Install modern CLI tools", best_effort=True,
             warning=MODERN_TOOLS_WARNING),
    ]


_BRANCHES: dict[OSTag, Callable[[BootstrapConfig, Callable], list[Action]]] = {
    OSTag.UBUNTU: _ubuntu,
    OSTag.MACOS: _macos,
    OSTag.AL2023: _al2023,
    OSTag.REDHAT: _rhel,
    OSTag.FEDORA: _rhel,
    OSTag.CENTOS: _centos,
    OSTag.ARCH: _arch,
}


def plan_packages(
    config: BootstrapConfig,
    which: Callable[[str], str | None] = shutil.which,
) -> list[Action]:
    """Build the install actions for the configured OS.

    Returns an empty list for profiles without an install branch
    (Amazon Linux 2, generic Linux).
    """
    branch = _BRANCHES.get(config.profile.tag)
    if branch is None:
        return []

    actions = branch(config, which)

    manager = config.profile.package_manager
    if config.extra_packages and manager:
        actions.append(_pkg(
            "extra", manager, "install", config.extra_packages,
            name="Install extra packages", best_effort=True,
            warning="Some extra packages could not be installed",
        ))
    return actions


def install_packages(
    config: BootstrapConfig,
    runner: Runner,
    which: Callable[[str], str | None] = shutil.which,
) -> None:
    """Install the essential packages for the configured OS."""
    runner.info("Installing essential packages...")
    actions = plan_packages(config, which)
    if not actions:
        runner.warn(
            f"No package list for '{config.profile.tag.value}'; "
            "install git, zsh, curl and vim manually"
        )
        return
    if any(a.id == "packages:homebrew" for a in actions):
        runner.info("Installing Homebrew...")
    if config.profile.curl_minimal and config.profile.tag is OSTag.AL2023:
        runner.info("Upgrading curl-minimal to curl-full for AL2023...")
    runner.run(actions)

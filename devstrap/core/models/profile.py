"""
Profile models — what machine we are bootstrapping, and for whom.

Everything here is frozen.  The OS profile is selected once by the
detector and the host snapshot is read once from the environment;
both are then threaded through every step inside ``BootstrapConfig``.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PackageManager = Literal["apt", "dnf", "yum", "pacman", "brew"]


class OSTag(str, Enum):
    """Operating system / distribution family."""

    UBUNTU = "ubuntu"
    MACOS = "macos"
    AL2023 = "al2023"
    AMAZON = "amazon"
    REDHAT = "redhat"
    FEDORA = "fedora"
    CENTOS = "centos"
    ARCH = "arch"
    LINUX = "linux"  # generic Linux, no known package manager


# Package manager driving each tag's install branch.
# amazon (AL2) and generic linux have no install branch.
_MANAGERS: dict[OSTag, PackageManager | None] = {
    OSTag.UBUNTU: "apt",
    OSTag.MACOS: "brew",
    OSTag.AL2023: "dnf",
    OSTag.AMAZON: None,
    OSTag.REDHAT: "dnf",
    OSTag.FEDORA: "dnf",
    OSTag.CENTOS: "yum",
    OSTag.ARCH: "pacman",
    OSTag.LINUX: None,
}


class OSProfile(BaseModel):
    """The detected platform."""

    model_config = ConfigDict(frozen=True)

    tag: OSTag
    platform: str = ""          # raw platform tag, e.g. "linux", "darwin"
    pretty_name: str = ""       # PRETTY_NAME from os-release, if any
    curl_minimal: bool = False  # curl-minimal package installed (AL2023)

    @property
    def package_manager(self) -> PackageManager | None:
        return _MANAGERS[self.tag]

    def to_dict(self) -> dict:
        return {
            "tag": self.tag.value,
            "platform": self.platform,
            "pretty_name": self.pretty_name,
            "package_manager": self.package_manager,
            "curl_minimal": self.curl_minimal,
        }


class HostEnvironment(BaseModel):
    """Snapshot of the invoking user's environment."""

    model_config = ConfigDict(frozen=True)

    home: Path
    user: str
    euid: int
    login_shell: str = ""
    zsh_custom: Path

    @classmethod
    def from_environ(cls, environ: dict[str, str] | None = None) -> HostEnvironment:
        """Read HOME, USER, SHELL, ZSH_CUSTOM and the effective uid."""
        env = os.environ if environ is None else environ
        home = Path(env.get("HOME") or Path.home())
        user = env.get("USER") or env.get("LOGNAME") or "unknown"
        zsh_custom = env.get("ZSH_CUSTOM") or str(home / ".oh-my-zsh" / "custom")
        return cls(
            home=home,
            user=user,
            euid=os.geteuid(),
            login_shell=env.get("SHELL", ""),
            zsh_custom=Path(zsh_custom),
        )

    @property
    def is_root(self) -> bool:
        return self.euid == 0

    @property
    def oh_my_zsh_dir(self) -> Path:
        return self.home / ".oh-my-zsh"


class BootstrapConfig(BaseModel):
    """Immutable run configuration handed to every step."""

    model_config = ConfigDict(frozen=True)

    profile: OSProfile
    host: HostEnvironment
    git_name: str = ""
    git_email: str = ""
    extra_packages: tuple[str, ...] = Field(default_factory=tuple)
    dry_run: bool = False

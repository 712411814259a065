"""
Shell environment — oh-my-zsh, plugins and the powerlevel10k theme.

Every install is guarded by its destination directory: if the
directory exists the clone is skipped, so a second run performs no
network operations at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devstrap.core.engine.executor import Runner
from devstrap.core.models.action import Action
from devstrap.core.models.profile import BootstrapConfig

logger = logging.getLogger(__name__)

OH_MY_ZSH_INSTALLER = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"


@dataclass(frozen=True)
class ZshAddon:
    """A plugin or theme cloned into ``$ZSH_CUSTOM``."""

    name: str
    url: str
    kind: str = "plugins"      # "plugins" | "themes"
    shallow: bool = False

    def destination(self, zsh_custom: Path) -> Path:
        return zsh_custom / self.kind / self.name


ADDONS: tuple[ZshAddon, ...] = (
    ZshAddon(
        name="zsh-autosuggestions",
        url="https://github.com/zsh-users/zsh-autosuggestions",
    ),
    ZshAddon(
        name="zsh-syntax-highlighting",
        url="https://github.com/zsh-users/zsh-syntax-highlighting.git",
    ),
    ZshAddon(
        name="fast-syntax-highlighting",
        url="https://github.com/zdharma-continuum/fast-syntax-highlighting.git",
        shallow=True,
    ),
    ZshAddon(
        name="powerlevel10k",
        url="https://github.com/romkatv/powerlevel10k.git",
        kind="themes",
        shallow=True,
    ),
)


def plan_oh_my_zsh(config: BootstrapConfig) -> list[Action]:
    """Installer action, or nothing when ``~/.oh-my-zsh`` already exists."""
    if config.host.oh_my_zsh_dir.is_dir():
        return []
    return [Action(
        id="shell:oh-my-zsh",
        name="Install Oh My Zsh",
        adapter="shell",
        params={
            "command": f'sh -c "$(curl -fsSL {OH_MY_ZSH_INSTALLER})" "" --unattended',
            "stream": True,
        },
    )]


def plan_addons(config: BootstrapConfig) -> list[Action]:
    """Clone actions for every plugin/theme whose directory is missing."""
    actions: list[Action] = []
    for addon in ADDONS:
        dest = addon.destination(config.host.zsh_custom)
        if dest.is_dir():
            logger.debug("%s already present at %s", addon.name, dest)
            continue
        params: dict = {"operation": "clone", "url": addon.url, "dest": str(dest)}
        if addon.shallow:
            params["depth"] = 1
        actions.append(Action(
            id=f"shell:clone:{addon.name}",
            name=f"Clone {addon.name}",
            adapter="git",
            params=params,
        ))
    return actions


def install_oh_my_zsh(config: BootstrapConfig, runner: Runner) -> None:
    """Run the unattended oh-my-zsh installer unless ``~/.oh-my-zsh`` exists.

    Raises:
        StepFailed: If the installer fails.
    """
    actions = plan_oh_my_zsh(config)
    if not actions:
        runner.info("Oh My Zsh already installed")
        return
    runner.info("Installing Oh My Zsh...")
    runner.run(actions)


def install_zsh_plugins(config: BootstrapConfig, runner: Runner) -> None:
    """Clone the missing plugins and the powerlevel10k theme; present ones are left alone."""
    runner.info("Installing zsh plugins...")
    runner.run(plan_addons(config))

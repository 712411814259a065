"""
Home directory layout and dotfiles.

Both steps converge: directories are created with ``exist_ok`` and
the rc files are overwritten unconditionally with generator output,
so repeated runs end in the same state (prior edits are discarded).
"""

from __future__ import annotations

import logging

from devstrap.core.engine.executor import Runner
from devstrap.core.models.action import Action
from devstrap.core.models.profile import BootstrapConfig
from devstrap.core.models.template import GeneratedFile
from devstrap.core.services.generators import GENERATORS

logger = logging.getLogger(__name__)

HOME_DIRECTORIES = ("bin", "scripts", "projects", "tmp", ".local/bin")


def plan_directories(config: BootstrapConfig) -> list[Action]:
    """mkdir actions for the standard home directories."""
    return [
        Action(
            id=f"dirs:{rel}",
            name=f"Create ~/{rel}",
            adapter="filesystem",
            params={"operation": "mkdir", "path": str(config.host.home / rel)},
        )
        for rel in HOME_DIRECTORIES
    ]


def write_action(config: BootstrapConfig, generated: GeneratedFile) -> Action:
    """Filesystem action that overwrites ``~/<path>`` with the generated content."""
    return Action(
        id=f"dotfile:{generated.path}",
        name=f"Write ~/{generated.path}",
        adapter="filesystem",
        params={
            "operation": "write",
            "path": str(config.host.home / generated.path),
            "content": generated.content,
        },
    )


def create_directories(config: BootstrapConfig, runner: Runner) -> None:
    """Create ~/bin, ~/scripts, ~/projects, ~/tmp and ~/.local/bin; existing ones are fine."""
    runner.info("Creating useful directories...")
    runner.run(plan_directories(config))


def write_dotfile(config: BootstrapConfig, runner: Runner, name: str) -> GeneratedFile:
    """Generate and write one dotfile by generator name ('zshrc', 'vimrc')."""
    try:
        generator = GENERATORS[name]
    except KeyError:
        raise ValueError(f"Unknown dotfile '{name}'. Valid: {', '.join(sorted(GENERATORS))}") from None
    generated = generator()
    runner.info(f"Configuring ~/{generated.path}...")
    runner.run_one(write_action(config, generated))
    return generated


def setup_zshrc(config: BootstrapConfig, runner: Runner) -> GeneratedFile:
    """Write ~/.zshrc, replacing any existing file."""
    return write_dotfile(config, runner, "zshrc")


def setup_vim(config: BootstrapConfig, runner: Runner) -> GeneratedFile:
    """Write ~/.vimrc, replacing any existing file."""
    return write_dotfile(config, runner, "vimrc")

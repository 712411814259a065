"""
Git global configuration — identity, preferences and aliases.

Identity is only set when missing (prompting if the config file does
not provide it).  Preferences and aliases are desired state: they are
re-applied on every run regardless of what is configured.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from devstrap.core.engine.executor import Runner
from devstrap.core.models.action import Action
from devstrap.core.models.profile import BootstrapConfig

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]

GIT_PREFERENCES: tuple[tuple[str, str], ...] = (
    ("init.defaultBranch", "main"),
    ("core.editor", "vim"),
    ("color.ui", "auto"),
    ("push.default", "simple"),
    ("pull.rebase", "false"),
)

GIT_ALIASES: tuple[tuple[str, str], ...] = (
    ("st", "status"),
    ("co", "checkout"),
    ("br", "branch"),
    ("ci", "commit"),
    ("unstage", "reset HEAD --"),
    ("last", "log -1 HEAD"),
    ("visual", "!gitk"),
    ("lg", "log --color --graph --pretty=format:'%Cred%h%Creset -%C(yellow)%d%Creset "
           "%s %Cgreen(%cr) %C(bold blue)<%an>%Creset' --abbrev-commit"),
)

# key → (prompt label, config override attribute)
_IDENTITY = (
    ("user.name", "Name for git", "git_name"),
    ("user.email", "Email for git", "git_email"),
)


def _get(key: str) -> Action:
    return Action(
        id=f"git:get:{key}",
        name=f"Read git {key}",
        adapter="git",
        params={"operation": "config_get", "key": key},
        read_only=True,
    )


def _set(key: str, value: str) -> Action:
    return Action(
        id=f"git:set:{key}",
        name=f"Set git {key}",
        adapter="git",
        params={"operation": "config_set", "key": key, "value": value},
    )


def plan_git_defaults() -> list[Action]:
    """Preferences and aliases, always (re)applied."""
    actions = [_set(key, value) for key, value in GIT_PREFERENCES]
    actions += [_set(f"alias.{name}", value) for name, value in GIT_ALIASES]
    return actions


def configure_identity(config: BootstrapConfig, runner: Runner, prompt: Prompt) -> dict[str, str]:
    """Set user.name / user.email when they are not configured yet.

    Returns:
        The keys that were set, mapped to their new values.
    """
    applied: dict[str, str] = {}
    for key, label, override_attr in _IDENTITY:
        current = runner.query(_get(key))
        if current.ok and current.output.strip():
            logger.debug("git %s already set", key)
            continue

        value = getattr(config, override_attr) or ""
        if not value and not runner.dry_run:
            value = prompt(label).strip()
        if not value:
            if runner.dry_run:
                runner.info(f"[dry-run] Would prompt for git {key}")
            else:
                runner.warn(f"git {key} left empty")
            continue

        runner.run_one(_set(key, value))
        applied[key] = value
    return applied


def setup_git(config: BootstrapConfig, runner: Runner, prompt: Prompt) -> None:
    """Configure the global git identity, then reapply preferences and aliases.

    Identity values already set in git are kept; missing ones come from
    ``config`` or, failing that, from ``prompt``.
    """
    runner.info("Configuring git...")
    configure_identity(config, runner, prompt)
    runner.run(plan_git_defaults())

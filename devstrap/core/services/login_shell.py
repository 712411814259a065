"""
Login shell — make zsh the user's default shell.

Three strategies are tried in order and the first success wins:

    1. ``sudo chsh -s ZSH USER``   (cloud images often lock plain chsh)
    2. ``chsh -s ZSH``             (prompts for the user's password)
    3. rewrite the shell field of the user's ``/etc/passwd`` entry

None of this is fatal.  Exhausting every strategy leaves a warning
with the manual command; the change itself is not verified.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from devstrap.core.engine.executor import Runner
from devstrap.core.models.action import Action
from devstrap.core.models.profile import BootstrapConfig, OSTag

logger = logging.getLogger(__name__)

PASSWD = Path("/etc/passwd")

Which = Callable[[str], str | None]

# Package that provides chsh, per profile.  ubuntu ships it by default.
_CHSH_PACKAGES: dict[OSTag, tuple[str, str]] = {
    OSTag.AL2023: ("dnf", "util-linux-user"),
    OSTag.REDHAT: ("dnf", "util-linux-user"),
    OSTag.FEDORA: ("dnf", "util-linux-user"),
    OSTag.CENTOS: ("yum", "util-linux-user"),
}

_USERNAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*\$?$")

NEXT_LOGIN = "The shell will change at next login"


@dataclass(frozen=True)
class ShellChangeOutcome:
    """What the shell changer did."""

    changed: bool
    strategy: str | None = None
    already_default: bool = False
    manual_command: str = ""

    def to_dict(self) -> dict:
        return {
            "changed": self.changed,
            "strategy": self.strategy,
            "already_default": self.already_default,
            "manual_command": self.manual_command,
        }


def manual_command(zsh: str, user: str) -> str:
    return f"sudo usermod -s {zsh} {user}"


# ── Strategies ─────────────────────────────────────────────────


def _chsh_with_sudo(config: BootstrapConfig, runner: Runner, zsh: str) -> bool:
    return runner.attempt(Action(
        id="login-shell:sudo-chsh",
        name="sudo chsh",
        adapter="shell",
        params={"argv": ["chsh", "-s", zsh, config.host.user], "sudo": True, "stream": True},
    ))


def _chsh_plain(config: BootstrapConfig, runner: Runner, zsh: str) -> bool:
    return runner.attempt(Action(
        id="login-shell:chsh",
        name="chsh",
        adapter="shell",
        params={"argv": ["chsh", "-s", zsh], "stream": True},
    ))


def passwd_entry(user: str, passwd: Path = PASSWD) -> list[str] | None:
    """Return the user's passwd fields if the entry is well formed.

    Well formed means exactly one line for the user with the seven
    colon-separated fields of passwd(5).
    """
    if not _USERNAME_RE.match(user):
        return None
    try:
        lines = passwd.read_text(encoding="utf-8").splitlines()
    except OSError:
        return None

    matches = [line for line in lines if line.split(":", 1)[0] == user]
    if len(matches) != 1:
        return None
    fields = matches[0].split(":")
    if len(fields) != 7:
        return None
    return fields


def passwd_sed_expression(user: str, zsh: str) -> str:
    """sed -E expression replacing only the shell field of USER's entry."""
    escaped_user = re.sub(r"([.$])", r"\\\1", user)
    return f"s|^({escaped_user}(:[^:]*){{5}}:)[^:]*$|\\1{zsh}|"


def _can_edit_passwd(runner: Runner, passwd: Path) -> bool:
    if os.access(passwd, os.W_OK):
        return True
    probe = runner.query(Action(
        id="login-shell:sudo-probe",
        name="Check passwordless sudo",
        adapter="shell",
        params={"argv": ["sudo", "-n", "true"], "timeout": 10},
        read_only=True,
    ))
    return probe.ok


def _edit_passwd(
    config: BootstrapConfig,
    runner: Runner,
    zsh: str,
    passwd: Path = PASSWD,
) -> bool:
    user = config.host.user
    runner.info(f"Alternative: editing {passwd} directly...")

    fields = passwd_entry(user, passwd)
    if fields is None:
        logger.warning("No well-formed %s entry for %s, not editing", passwd, user)
        return False
    if not _can_edit_passwd(runner, passwd):
        return False

    ok = runner.attempt(Action(
        id="login-shell:passwd",
        name=f"Edit {passwd}",
        adapter="shell",
        params={
            "argv": ["sed", "-i", "-E", passwd_sed_expression(user, zsh), str(passwd)],
            "sudo": True,
        },
    ))
    if ok:
        runner.info(f"Shell changed directly in {passwd}")
    return ok


# ── Entry point ────────────────────────────────────────────────


def _ensure_chsh(config: BootstrapConfig, runner: Runner, which: Which) -> bool:
    if which("chsh"):
        return True
    provider = _CHSH_PACKAGES.get(config.profile.tag)
    if provider is None:
        return False
    manager, package = provider
    runner.info(f"Installing {package} for chsh...")
    runner.run_one(Action(
        id="login-shell:install-chsh",
        name=f"Install {package}",
        adapter="packages",
        params={"manager": manager, "operation": "install", "packages": [package]},
        best_effort=True,
        warning=f"Could not install {package}",
    ))
    return bool(which("chsh"))


def change_shell(
    config: BootstrapConfig,
    runner: Runner,
    which: Which = shutil.which,
    passwd: Path = PASSWD,
) -> ShellChangeOutcome:
    """Make zsh the login shell, falling back through every strategy."""
    zsh = which("zsh")
    user = config.host.user
    if not zsh:
        runner.warn("zsh not found on PATH; install it, then run chsh -s $(which zsh)")
        return ShellChangeOutcome(changed=False, manual_command="chsh -s $(which zsh)")

    if config.host.login_shell == zsh:
        runner.info("zsh is already the default shell")
        return ShellChangeOutcome(changed=False, already_default=True)

    runner.info("Changing the default shell to zsh...")
    manual = manual_command(zsh, user)

    if not _ensure_chsh(config, runner, which):
        runner.warn(f"chsh not available. Run: {manual}")
        return ShellChangeOutcome(changed=False, manual_command=manual)

    strategies: list[tuple[str, Callable[[], bool]]] = [
        ("sudo-chsh", lambda: _chsh_with_sudo(config, runner, zsh)),
        ("chsh", lambda: _chsh_plain(config, runner, zsh)),
        ("passwd", lambda: _edit_passwd(config, runner, zsh, passwd)),
    ]
    for index, (name, strategy) in enumerate(strategies):
        if strategy():
            if runner.dry_run:
                runner.info(f"[dry-run] Would change the login shell to {zsh} ({name})")
            else:
                runner.warn(NEXT_LOGIN)
            return ShellChangeOutcome(changed=True, strategy=name)
        if index == 1:
            runner.warn("Unable to change the shell with chsh")

    runner.warn(f"Run manually: {manual}")
    return ShellChangeOutcome(changed=False, manual_command=manual)

"""
Bootstrap use case — provision the machine end to end.

The fixed pipeline:

    detect OS → refuse root → directories → packages → oh-my-zsh
    → plugins → .zshrc → .vimrc → git → login shell → summary

Any required action that fails stops the run (``StepFailed``) with no
cleanup.  Best-effort actions and the whole login-shell step only
ever produce warnings.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from devstrap.adapters.packages.system import SystemPackageAdapter
from devstrap.adapters.registry import AdapterRegistry
from devstrap.adapters.shell.command import ShellCommandAdapter
from devstrap.adapters.shell.filesystem import FilesystemAdapter
from devstrap.adapters.vcs.git import GitAdapter
from devstrap.core.config.loader import Settings
from devstrap.core.engine.executor import BootstrapReport, Reporter, Runner, log_reporter
from devstrap.core.errors import BootstrapError, PrivilegedUserError
from devstrap.core.models.profile import BootstrapConfig, HostEnvironment, OSProfile
from devstrap.core.services import dotfiles, git_setup, packages, shell_env
from devstrap.core.services.login_shell import PASSWD, ShellChangeOutcome, change_shell
from devstrap.core.services.os_detect import OS_RELEASE, detect_os, probe_curl
from devstrap.core.services.summary import closing_warnings, post_install_notes

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Result of a bootstrap run."""

    profile: OSProfile | None = None
    report: BootstrapReport = field(default_factory=BootstrapReport)
    shell: ShellChangeOutcome | None = None
    notes: list[str] = field(default_factory=list)
    closing: list[str] = field(default_factory=list)
    dry_run: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "dry_run": self.dry_run,
            "profile": self.profile.to_dict() if self.profile else None,
            "report": self.report.to_dict(),
        }
        if self.shell:
            result["shell"] = self.shell.to_dict()
        if self.notes:
            result["notes"] = list(self.notes)
        if self.closing:
            result["closing"] = list(self.closing)
        if self.error:
            result["error"] = self.error
        return result


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with every adapter the bootstrap uses."""
    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(ShellCommandAdapter())
    registry.register(FilesystemAdapter())
    registry.register(GitAdapter())
    registry.register(SystemPackageAdapter())
    return registry


def _no_prompt(label: str) -> str:
    return ""


def run_bootstrap(
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
    reporter: Reporter | None = None,
    prompt: Callable[[str], str] | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    platform_tag: str | None = None,
    host: HostEnvironment | None = None,
    environ: Mapping[str, str] | None = None,
    os_release: Path = OS_RELEASE,
    passwd: Path = PASSWD,
    which: Callable[[str], str | None] = shutil.which,
) -> BootstrapResult:
    """Provision the current machine.

    Args:
        settings: Optional file overrides (git identity, extra packages).
        registry: Pre-configured adapter registry (default: all adapters).
        reporter: Receives (level, message) progress lines.
        prompt: Asks the user for a value; used for missing git identity.
        dry_run: Validate and print what would run, change nothing.
        mock_mode: Route every action to the mock adapter.
        platform_tag: Override ``sys.platform`` (tests).
        host: Override the environment snapshot (tests).
        environ: Environment to snapshot when ``host`` is not given.
        os_release: os-release file to classify Linux distributions.
        passwd: Account database used by the last shell-change fallback.
        which: PATH lookup.

    Returns:
        BootstrapResult; ``error`` is set when the run stopped early.
    """
    settings = settings or Settings()
    reporter = reporter or log_reporter
    result = BootstrapResult(dry_run=dry_run)

    if registry is None:
        registry = default_registry(mock_mode=mock_mode)

    reporter("info", "Starting machine setup...")

    try:
        # ── Detect ───────────────────────────────────────────────
        profile = detect_os(platform_tag=platform_tag, os_release=os_release, which=which)
        result.profile = profile
        reporter("info", f"Detected OS: {profile.tag.value}")

        # ── Precondition: never as root ──────────────────────────
        host = host or HostEnvironment.from_environ(dict(environ) if environ is not None else None)
        if host.is_root:
            raise PrivilegedUserError()

        runner = Runner(
            registry,
            home=str(host.home),
            dry_run=dry_run,
            reporter=reporter,
            report=result.report,
        )
        profile = probe_curl(profile, runner, which=which)
        result.profile = profile

        config = BootstrapConfig(
            profile=profile,
            host=host,
            git_name=settings.git.name,
            git_email=settings.git.email,
            extra_packages=tuple(settings.extra_packages),
            dry_run=dry_run,
        )

        # ── Pipeline ─────────────────────────────────────────────
        runner.step("directories")
        dotfiles.create_directories(config, runner)

        runner.step("packages")
        packages.install_packages(config, runner, which=which)

        runner.step("oh-my-zsh")
        shell_env.install_oh_my_zsh(config, runner)

        runner.step("zsh-plugins")
        shell_env.install_zsh_plugins(config, runner)

        runner.step("zshrc")
        dotfiles.setup_zshrc(config, runner)

        runner.step("vimrc")
        dotfiles.setup_vim(config, runner)

        runner.step("git")
        git_setup.setup_git(config, runner, prompt or _no_prompt)

        runner.step("login-shell")
        result.shell = change_shell(config, runner, which=which, passwd=passwd)

    except BootstrapError as e:
        result.error = str(e)
        reporter("error", result.error)
        return result

    result.notes = post_install_notes(profile)
    result.closing = closing_warnings(profile)
    reporter("info", "Configuration complete!")
    return result

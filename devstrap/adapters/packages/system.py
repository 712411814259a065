"""
System package adapter — apt-get, dnf, yum, pacman and brew.

Translates a (manager, operation, packages) triple into the exact
command line for that manager, so callers never build package
manager argv by hand and no branch can leak another manager's syntax.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.adapters.shell.command import with_sudo
from devstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

MANAGERS = ("apt", "dnf", "yum", "pacman", "brew")

# Binary invoked for each manager.
_BINARIES = {
    "apt": "apt-get",
    "dnf": "dnf",
    "yum": "yum",
    "pacman": "pacman",
    "brew": "brew",
}

_OPERATIONS: dict[str, dict[str, list[str]]] = {
    "apt": {
        "update": ["apt-get", "update"],
        "install": ["apt-get", "install", "-y"],
    },
    "dnf": {
        "update": ["dnf", "update", "-y"],
        "install": ["dnf", "install", "-y"],
        "groupinstall": ["dnf", "groupinstall", "-y"],
        "swap": ["dnf", "swap", "-y"],
    },
    "yum": {
        "update": ["yum", "update", "-y"],
        "install": ["yum", "install", "-y"],
        "groupinstall": ["yum", "groupinstall", "-y"],
    },
    "pacman": {
        "update": ["pacman", "-Syu", "--noconfirm"],
        "install": ["pacman", "-S", "--needed", "--noconfirm"],
    },
    "brew": {
        "update": ["brew", "update"],
        "install": ["brew", "install"],
    },
}


def build_command(manager: str, operation: str, packages: list[str] | None = None) -> list[str]:
    """Return the argv for a package operation (without ``sudo``).

    Raises:
        ValueError: If the manager does not support the operation.
    """
    ops = _OPERATIONS.get(manager)
    if ops is None:
        raise ValueError(f"Unknown package manager: {manager}")
    if operation not in ops:
        raise ValueError(f"{manager} does not support '{operation}'")
    return [*ops[operation], *(packages or [])]


def needs_sudo(manager: str) -> bool:
    """Homebrew refuses to run as root; everything else needs it."""
    return manager != "brew"


class SystemPackageAdapter(Adapter):
    """Package manager operations.

    Action params:
        manager (str): One of apt, dnf, yum, pacman, brew.
        operation (str): One of update, install, groupinstall, swap.
        packages (list[str]): Package names (group name for groupinstall,
            ``[old, new]`` for swap).
    """

    @property
    def name(self) -> str:
        return "packages"

    def is_available(self) -> bool:
        return any(shutil.which(b) for b in _BINARIES.values())

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        manager = params.get("manager", "")
        operation = params.get("operation", "")
        packages = params.get("packages", [])

        if manager not in MANAGERS:
            return False, f"Unknown package manager '{manager}'. Valid: {', '.join(MANAGERS)}"
        if operation not in _OPERATIONS[manager]:
            return False, f"{manager} does not support '{operation}'"
        if operation in ("install", "groupinstall") and not packages:
            return False, f"Missing required param: 'packages' for {operation}"
        if operation == "swap" and len(packages) != 2:
            return False, "swap takes exactly two packages: [old, new]"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        manager = params["manager"]
        operation = params["operation"]
        packages = list(params.get("packages", []))

        cmd = build_command(manager, operation, packages)
        if needs_sudo(manager):
            cmd = with_sudo(cmd)

        logger.info("Running: %s", " ".join(cmd))
        start = time.monotonic()
        try:
            # Streamed so the user sees progress and sudo can prompt
            result = subprocess.run(cmd, timeout=params.get("timeout"))
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{_BINARIES[manager]} not found",
                metadata={"command": cmd},
            )
        except subprocess.TimeoutExpired as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{manager} {operation} timed out after {e.timeout}s",
                metadata={"command": cmd},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Package manager error: {e}",
                metadata={"command": cmd},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=f"{manager} {operation} {' '.join(packages)}".strip(),
                duration_ms=elapsed_ms,
                metadata={"command": cmd},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=f"{manager} {operation} exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={"command": cmd, "return_code": result.returncode},
        )

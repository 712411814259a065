"""
Shell command adapter — execute commands and capture (or stream) output.

This is the most fundamental adapter: every package manager, installer
script and account tool call goes through the same subprocess pattern.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from pathlib import Path

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


def with_sudo(argv: list[str]) -> list[str]:
    """Prefix ``sudo`` unless we already run as root."""
    if os.geteuid() == 0:
        return list(argv)
    return ["sudo", *argv]


class ShellCommandAdapter(Adapter):
    """Execute commands and capture output.

    Action params:
        argv (list[str]): Command as an argument vector (preferred).
        command (str): Command string run through ``sh`` (for installer
            one-liners such as ``sh -c "$(curl ...)"``).
        sudo (bool): Prefix ``sudo`` to ``argv`` (default: False).
        stream (bool): Inherit the terminal instead of capturing output,
            so package managers and ``sudo`` can talk to the user.
        input (str): Data written to stdin (captured mode only).
        timeout (int | None): Timeout in seconds (default: 300, none when
            streaming).
        cwd (str): Override working directory (default: context.working_dir).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        argv = params.get("argv")
        command = params.get("command", "")
        if not argv and not command:
            return False, "Missing required param: 'argv' or 'command'"
        if argv and not isinstance(argv, list):
            return False, "'argv' must be a list of strings"
        if params.get("sudo") and not argv:
            return False, "'sudo' requires 'argv'"

        cwd = params.get("cwd")
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        stream = params.get("stream", False)
        timeout = params.get("timeout", None if stream else 300)
        cwd = context.working_dir if Path(context.working_dir).is_dir() else None

        argv = params.get("argv")
        if argv:
            cmd: list[str] | str = with_sudo(argv) if params.get("sudo") else list(argv)
            display = shlex.join(cmd)
            use_shell = False
        else:
            cmd = params["command"]
            display = cmd
            use_shell = True

        logger.debug("Executing: %s (cwd=%s, stream=%s)", display, cwd, stream)
        start = time.monotonic()

        try:
            if stream:
                result = subprocess.run(
                    cmd,
                    shell=use_shell,
                    cwd=cwd,
                    timeout=timeout,
                )
            else:
                result = subprocess.run(
                    cmd,
                    shell=use_shell,
                    cwd=cwd,
                    capture_output=True,
                    text=True,
                    input=params.get("input"),
                    timeout=timeout,
                )

            elapsed_ms = int((time.monotonic() - start) * 1000)
            output = (result.stdout or "").strip()
            stderr = (result.stderr or "").strip()

            if result.returncode == 0:
                return Receipt.success(
                    adapter=self.name,
                    action_id=context.action.id,
                    output=output,
                    duration_ms=elapsed_ms,
                    metadata={
                        "command": display,
                        "return_code": result.returncode,
                        "stderr": stderr,
                    },
                )
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=stderr or f"Command exited with code {result.returncode}",
                duration_ms=elapsed_ms,
                metadata={
                    "command": display,
                    "return_code": result.returncode,
                    "stdout": output,
                },
            )

        except FileNotFoundError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command not found: {e.filename or display}",
                metadata={"command": display},
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"command": display, "timeout": timeout},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"command": display},
            )

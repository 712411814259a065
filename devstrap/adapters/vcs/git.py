"""
Git adapter — clones and global configuration.

Provides the git operations the bootstrap needs (clone, global config
get/set) through the adapter protocol. Uses the git CLI.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations.

    Action params:
        operation (str): One of 'clone', 'config_get', 'config_set'.
        url (str): Repository URL (for 'clone').
        dest (str): Destination directory (for 'clone').
        depth (int): Shallow clone depth (for 'clone', default: full).
        key (str): Config key, e.g. 'user.name' (for 'config_*').
        value (str): Config value (for 'config_set').
        timeout (int): Timeout in seconds (default: 30, 600 for clones).
    """

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        valid_ops = {"clone", "config_get", "config_set"}
        if operation not in valid_ops:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(valid_ops))}"

        if operation == "clone":
            if not params.get("url") or not params.get("dest"):
                return False, "Missing required params: 'url' and 'dest' for clone"
        else:
            if not params.get("key"):
                return False, f"Missing required param: 'key' for {operation}"
            if operation == "config_set" and "value" not in params:
                return False, "Missing required param: 'value' for config_set"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.action.params["operation"]
        start = time.monotonic()
        try:
            if operation == "clone":
                receipt = self._clone(context)
            elif operation == "config_get":
                receipt = self._config_get(context)
            elif operation == "config_set":
                receipt = self._config_set(context)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {operation}",
                )
        except subprocess.TimeoutExpired as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"git timed out after {e.timeout}s",
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Git error: {e}",
            )
        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        return receipt

    # ── Operations ──────────────────────────────────────────────

    def _clone(self, ctx: ExecutionContext) -> Receipt:
        params = ctx.action.params
        args = ["clone"]
        if params.get("depth"):
            args.append(f"--depth={params['depth']}")
        args += [params["url"], params["dest"]]
        output = self._git(args, ctx.home, timeout=params.get("timeout", 600))
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=output.strip(),
            metadata={"url": params["url"], "dest": params["dest"]},
        )

    def _config_get(self, ctx: ExecutionContext) -> Receipt:
        """Read a global key.  An unset key is an empty value, not a failure."""
        key = ctx.action.params["key"]
        result = subprocess.run(
            ["git", "config", "--global", "--get", key],
            cwd=ctx.home,
            capture_output=True,
            text=True,
            timeout=ctx.action.params.get("timeout", 30),
        )
        # exit 1 = key not set
        if result.returncode not in (0, 1):
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=result.stderr.strip() or f"git config exited with {result.returncode}",
            )
        value = result.stdout.strip()
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=value,
            metadata={"key": key, "set": bool(value)},
        )

    def _config_set(self, ctx: ExecutionContext) -> Receipt:
        key = ctx.action.params["key"]
        value = str(ctx.action.params["value"])
        self._git(["config", "--global", key, value], ctx.home,
                  timeout=ctx.action.params.get("timeout", 30))
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"{key}={value}",
            metadata={"key": key, "value": value},
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: str, timeout: int = 30) -> str:
        """Run a git command and return stdout."""
        logger.debug("git %s", " ".join(args))
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        if result.returncode != 0:
            raise RuntimeError(result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout

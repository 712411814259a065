"""
Filesystem adapter — home directories and dotfiles.

Relative paths resolve against the home directory being provisioned.
Both operations converge: ``mkdir`` tolerates existing directories and
``write`` replaces the whole file, so reruns end in the same state.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

_OPERATIONS = ("mkdir", "write")


class FilesystemAdapter(Adapter):
    """Action params: ``operation`` (mkdir | write), ``path``, ``content`` (write)."""

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if operation not in _OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(_OPERATIONS)}"
        if not params.get("path"):
            return False, "Missing required param: 'path'"
        if operation == "write" and not isinstance(params.get("content"), str):
            return False, "write needs string 'content'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        target = Path(params["path"]).expanduser()
        if not target.is_absolute():
            target = Path(context.home) / target

        try:
            if params["operation"] == "mkdir":
                target.mkdir(parents=True, exist_ok=True)
                output = f"{target}/"
            else:
                content = params["content"]
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                output = f"{target} ({len(content)} bytes)"
        except OSError as e:
            return Receipt.failure(
                self.name,
                context.action.id,
                error=f"{params['operation']} {target}: {e.strerror or e}",
                metadata={"path": str(target)},
            )

        logger.debug("%s %s", params["operation"], target)
        return Receipt.success(self.name, context.action.id, output=output, metadata={"path": str(target)})

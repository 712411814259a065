"""
Adapter contract — how the runner reaches the outside world.

Each side effect of a bootstrap (running a command, writing a dotfile,
cloning a repo, calling a package manager) lives behind one adapter.
Adapters report through ``Receipt`` objects and must not raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from devstrap.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """One action as seen by the adapter executing it."""

    action: Action
    home: str = "."            # home directory being provisioned
    cwd: str | None = None     # per-action override of the working directory
    dry_run: bool = False
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def working_dir(self) -> str:
        return self.cwd or self.home


class Adapter(ABC):
    """Base class for the shell, filesystem, git and packages adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Key that ``Action.adapter`` refers to."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing tool exists on this machine."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check the action params before anything runs.

        Returns:
            ``(True, "")`` when valid, else ``(False, reason)``.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the action.  Failures come back as a failed receipt."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

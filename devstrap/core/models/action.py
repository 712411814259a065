"""
Actions and receipts.

A bootstrap step is a list of ``Action``s.  Each one is dispatched to
the adapter it names and comes back as a ``Receipt``; adapters report
failure through the receipt rather than by raising.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

Status = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    """One operation for one adapter.

    A failed ``best_effort`` action becomes a warning (``warning`` text,
    if set); any other failure stops the run.  ``read_only`` marks a
    probe, which still runs during a dry run.
    """

    id: str                         # e.g. "packages:core", "git:set:core.editor"
    name: str = ""                  # shown in progress and error messages
    adapter: str
    params: dict[str, Any] = Field(default_factory=dict)
    best_effort: bool = False
    read_only: bool = False
    warning: str = ""


class Receipt(BaseModel):
    """Outcome of one action."""

    adapter: str
    action_id: str
    status: Status = "ok"
    finished_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    duration_ms: int = 0
    output: str = ""
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Not executed (dry run); ``reason`` goes to ``output``."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)

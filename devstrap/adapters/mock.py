"""
Mock adapter — stands in for every adapter during ``--mock`` runs and tests.

Nothing touches the machine.  Every action succeeds unless a canned
receipt was registered for its id, and every context is recorded so
tests can assert which commands a step would have issued.
"""

from __future__ import annotations

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.core.models.action import Receipt


class MockAdapter(Adapter):
    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._canned: dict[str, Receipt] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    @property
    def action_ids(self) -> list[str]:
        """Ids of the executed actions, in execution order."""
        return [ctx.action.id for ctx in self.call_log]

    def is_available(self) -> bool:
        return self._available

    # ── Canned responses ───────────────────────────────────────

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._canned[action_id] = receipt

    def set_output(self, action_id: str, output: str) -> None:
        """Succeed with ``output`` (e.g. an empty ``git config --get``)."""
        self.set_response(action_id, Receipt.success(self._name, action_id, output=output))

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        self.set_response(action_id, Receipt.failure(self._name, action_id, error=error))

    def reset(self) -> None:
        self.call_log.clear()
        self._canned.clear()

    # ── Adapter ────────────────────────────────────────────────

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        action_id = context.action.id
        canned = self._canned.get(action_id)
        if canned is not None:
            return canned
        return Receipt.success(
            self._name,
            action_id,
            output=self._default_output,
            metadata={"mock": True},
        )

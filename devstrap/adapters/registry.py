"""
Adapter registry — routes each action to the adapter named in it.

``execute_action`` is the only way the runner reaches an adapter.  It
never raises: unknown adapters, invalid params and adapter crashes all
come back as failed receipts.  In a dry run, mutating actions stop
after validation while ``read_only`` probes still execute.  An adapter
whose tool is missing fails the action instead of being called.
"""

from __future__ import annotations

import logging
import time

from devstrap.adapters.base import Adapter, ExecutionContext
from devstrap.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, plus an optional mock that replaces them all."""

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: Adapter | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        """Route every action to ``mock_adapter`` (or a built-in success)."""
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("Registered adapter %s", adapter.name)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return sorted(self._adapters)

    def _resolve(self, action: Action) -> Adapter | None:
        if self._mock_mode:
            return self._mock_adapter
        return self._adapters.get(action.adapter)

    def execute_action(
        self,
        action: Action,
        home: str = ".",
        dry_run: bool = False,
    ) -> Receipt:
        """Validate and run one action; always returns a receipt.

        Args:
            action: The action to run.
            home: Home directory relative paths resolve against.
            dry_run: Skip everything but ``read_only`` probes.
        """
        started = time.monotonic()

        if self._mock_mode and self._mock_adapter is None:
            return Receipt.success(
                action.adapter,
                action.id,
                output=f"[mock] {action.adapter}:{action.id}",
                metadata={"mock": True, "dry_run": dry_run},
            )

        adapter = self._resolve(action)
        if adapter is None:
            return Receipt.failure(
                action.adapter, action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(
            action=action,
            home=home,
            cwd=action.params.get("cwd"),
            dry_run=dry_run,
            params=action.params,
        )

        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            valid, reason = False, f"validator crashed: {e}"
        if not valid:
            return Receipt.failure(action.adapter, action.id, error=f"Validation failed: {reason}")

        if dry_run and not action.read_only:
            return Receipt.skip(
                action.adapter,
                action.id,
                reason=f"[dry-run] {action.name or action.id}",
                metadata={"dry_run": True, "params": action.params},
            )

        if not adapter.is_available():
            return Receipt.failure(
                action.adapter, action.id,
                error=f"{adapter.name} is not available on this machine",
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s crashed on %s: %s", adapter.name, action.id, e)
            receipt = Receipt.failure(action.adapter, action.id, error=f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt

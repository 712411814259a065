"""
Engine executor — runs bootstrap actions with the two-tier failure policy.

Every step hands its actions to a ``Runner``.  The runner dispatches
them through the adapter registry, collects receipts on the report,
and applies the policy:

    failed + required     → StepFailed (the run stops here)
    failed + best_effort  → warning, continue
    ok / skipped          → continue

Probes (``read_only`` actions) and fallback attempts go through
``query``/``attempt``, which never raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from devstrap.adapters.registry import AdapterRegistry
from devstrap.core.errors import StepFailed
from devstrap.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)

# (level, message) with level one of "info", "warn", "error"
Reporter = Callable[[str, str], None]


def log_reporter(level: str, message: str) -> None:
    """Default reporter: route user-facing messages to the log."""
    if level == "error":
        logger.error(message)
    elif level == "warn":
        logger.warning(message)
    else:
        logger.info(message)


@dataclass
class BootstrapReport:
    """Everything that happened during a run."""

    receipts: list[Receipt] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    def to_dict(self) -> dict:
        return {
            "steps": list(self.steps),
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "warnings": list(self.warnings),
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class Runner:
    """Executes actions for one bootstrap run."""

    def __init__(
        self,
        registry: AdapterRegistry,
        home: str = ".",
        dry_run: bool = False,
        reporter: Reporter | None = None,
        report: BootstrapReport | None = None,
    ):
        self.registry = registry
        self.home = home
        self.dry_run = dry_run
        self.reporter = reporter or log_reporter
        self.report = report or BootstrapReport()

    # ── Messages ────────────────────────────────────────────────

    def info(self, message: str) -> None:
        self.reporter("info", message)

    def warn(self, message: str) -> None:
        self.report.warnings.append(message)
        self.reporter("warn", message)

    def step(self, name: str) -> None:
        """Mark the start of a pipeline step."""
        self.report.steps.append(name)
        logger.debug("── step: %s", name)

    # ── Execution ───────────────────────────────────────────────

    def _dispatch(self, action: Action) -> Receipt:
        receipt = self.registry.execute_action(action, home=self.home, dry_run=self.dry_run)
        self.report.receipts.append(receipt)
        marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", marker, action.id, receipt.status)
        return receipt

    def run_one(self, action: Action) -> Receipt:
        """Execute one action under the fail-fast policy."""
        receipt = self._dispatch(action)
        if receipt.failed:
            if not action.best_effort:
                raise StepFailed(action, receipt)
            label = action.name or action.id
            self.warn(action.warning or f"{label} failed: {receipt.error}")
        return receipt

    def run(self, actions: Iterable[Action]) -> list[Receipt]:
        """Execute actions in order; stop at the first required failure."""
        return [self.run_one(action) for action in actions]

    def query(self, action: Action) -> Receipt:
        """Execute a probe.  Never raises, never warns."""
        return self._dispatch(action)

    def attempt(self, action: Action) -> bool:
        """Execute one fallback attempt and report whether it worked.

        In a dry run the attempt is not executed and counts as a success,
        so fallback chains stop at their first strategy.
        """
        receipt = self._dispatch(action)
        if receipt.failed:
            logger.debug("Attempt %s failed: %s", action.id, receipt.error)
        return receipt.ok or receipt.status == "skipped"

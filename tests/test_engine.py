"""
Tests for engine executor — the fail-fast / best-effort policy.
"""

import pytest

from devstrap.core.engine.executor import BootstrapReport, Runner
from devstrap.core.errors import StepFailed
from devstrap.core.models.action import Action, Receipt


def _action(action_id: str, **kwargs) -> Action:
    return Action(id=action_id, name=f"Do {action_id}", adapter="shell", **kwargs)


class TestRunOne:
    def test_success(self, runner, mock_adapter):
        receipt = runner.run_one(_action("a"))
        assert receipt.ok
        assert runner.report.receipts == [receipt]

    def test_required_failure_raises(self, runner, mock_adapter):
        mock_adapter.set_failure("a", "boom")
        with pytest.raises(StepFailed) as exc:
            runner.run_one(_action("a"))
        assert str(exc.value) == "Do a failed: boom"
        assert exc.value.action.id == "a"
        assert exc.value.receipt.failed

    def test_best_effort_failure_warns(self, runner, mock_adapter, messages):
        mock_adapter.set_failure("a", "boom")
        receipt = runner.run_one(_action("a", best_effort=True, warning="a is missing"))
        assert receipt.failed
        assert runner.report.warnings == ["a is missing"]
        assert messages == [("warn", "a is missing")]

    def test_best_effort_default_warning(self, runner, mock_adapter):
        mock_adapter.set_failure("a", "boom")
        runner.run_one(_action("a", best_effort=True))
        assert runner.report.warnings == ["Do a failed: boom"]


class TestRun:
    def test_stops_at_first_required_failure(self, runner, mock_adapter):
        mock_adapter.set_failure("b")
        with pytest.raises(StepFailed):
            runner.run([_action("a"), _action("b"), _action("c")])
        assert mock_adapter.action_ids == ["a", "b"]

    def test_continues_past_best_effort(self, runner, mock_adapter):
        mock_adapter.set_failure("b")
        receipts = runner.run([_action("a"), _action("b", best_effort=True), _action("c")])
        assert [r.status for r in receipts] == ["ok", "failed", "ok"]


class TestQueryAndAttempt:
    def test_query_never_raises(self, runner, mock_adapter):
        mock_adapter.set_failure("probe")
        receipt = runner.query(_action("probe", read_only=True))
        assert receipt.failed
        assert runner.report.warnings == []

    def test_attempt(self, runner, mock_adapter):
        mock_adapter.set_failure("no")
        assert runner.attempt(_action("yes"))
        assert not runner.attempt(_action("no"))
        assert runner.report.warnings == []

    def test_attempt_in_dry_run_counts_as_success(self, registry, mock_adapter):
        runner = Runner(registry, dry_run=True)
        mock_adapter.set_failure("x")
        assert runner.attempt(_action("x"))
        assert mock_adapter.call_count == 0


class TestReport:
    def test_counts(self):
        report = BootstrapReport(receipts=[
            Receipt.success(adapter="shell", action_id="a"),
            Receipt.failure(adapter="shell", action_id="b", error="x"),
            Receipt.skip(adapter="shell", action_id="c"),
        ])
        assert (report.total, report.succeeded, report.failed, report.skipped) == (3, 1, 1, 1)

    def test_steps_and_to_dict(self, runner):
        runner.step("packages")
        runner.run_one(_action("a"))
        data = runner.report.to_dict()
        assert data["steps"] == ["packages"]
        assert data["receipts"][0]["action_id"] == "a"
        assert data["total"] == 1

"""DemoRunner — full mock runs of each scenario through the orchestrator protocol."""

from __future__ import annotations

import pytest

from repochief_demo.config import DemoSettings
from repochief_demo.errors import ConfigurationError, ExecutionTimeout
from repochief_demo.orchestrator.mock import MockOrchestrator
from repochief_demo.runner import DemoRunner, gate_icon


def _settings(tmp_path, scenario: str, **kw) -> DemoSettings:
    return DemoSettings(scenario=scenario, artifacts_dir=tmp_path / "artifacts", mock_step_delay=0.0, **kw)


def _failing_factory(*task_ids: str):
    def factory(settings, session):
        return MockOrchestrator(session, artifacts_dir=settings.artifacts_dir, fail_tasks=task_ids)
    return factory


def test_basic_run(tmp_path, catalog, capsys):
    runner = DemoRunner(_settings(tmp_path, "basic"), catalog=catalog)
    report = runner.run()

    assert [t.id for t in runner.queued] == ["comprehend-todo-api", "generate-todo-api", "test-todo-api"]
    assert set(runner.agents) == {"analyst", "developer", "tester"}
    assert report.tasks_completed == report.total_tasks == 3
    assert report.success
    assert runner.failures == []

    out = capsys.readouterr().out
    assert "Status: SUCCESS" in out
    assert "Mode: Mock" in out
    assert "Total Cost" not in out
    assert "cd .repochief/artifacts/generate-todo-api" in out


def test_enterprise_run(tmp_path, catalog):
    runner = DemoRunner(_settings(tmp_path, "enterprise"), catalog=catalog)
    report = runner.run()

    by_id = {t.id: t for t in runner.queued}
    assert len(by_id) == 5
    assert by_id["validate-todo-api"].dependencies == ("generate-todo-api", "test-todo-api")
    assert by_id["generate-todo-frontend"].dependencies == ("generate-todo-api",)
    assert by_id["validate-todo-api"].agent_id == runner.agents["reviewer"].id
    assert report.success
    assert {g.gate for g in runner.gate_results} == {"eslint", "test", "complexity"}


def test_run_writes_artifacts_under_session(tmp_path, catalog):
    runner = DemoRunner(_settings(tmp_path, "basic"), catalog=catalog)
    runner.run()
    session_dir = tmp_path / "artifacts" / "todo-demo-basic" / "artifacts"
    assert sorted(p.name for p in session_dir.iterdir()) == [
        "comprehend-todo-api-result.json",
        "generate-todo-api-result.json",
        "test-todo-api-result.json",
    ]


def test_task_failure_is_reported_not_raised(tmp_path, catalog, capsys):
    runner = DemoRunner(
        _settings(tmp_path, "fullstack"), catalog=catalog,
        orchestrator_factory=_failing_factory("test-todo-api"),
    )
    report = runner.run()

    assert not report.success
    failed = {f.task_id for f in runner.failures}
    # validate depends on test; the frontend task only needs generate
    assert failed == {"test-todo-api", "validate-todo-api"}
    assert report.tasks_completed == 3
    assert report.tasks_failed == 2

    captured = capsys.readouterr()
    assert "Status: FAILED" in captured.out
    assert "mock failure injected" in captured.err
    assert "Success!" not in captured.out


def test_unknown_scenario_fails_before_orchestrator(tmp_path, catalog):
    calls = []

    def factory(settings, session):
        calls.append(session)
        raise AssertionError("should not be reached")

    runner = DemoRunner(_settings(tmp_path, "nope"), catalog=catalog, orchestrator_factory=factory)
    with pytest.raises(ConfigurationError, match="Unknown scenario 'nope'"):
        runner.run()
    assert calls == []


def test_real_mode_without_key_is_fatal(tmp_path, catalog):
    runner = DemoRunner(_settings(tmp_path, "basic", mock_mode=False), catalog=catalog)
    with pytest.raises(ConfigurationError, match="REPOCHIEF_API_KEY"):
        runner.run()


def test_timeout_raises_and_cleans_up(tmp_path, catalog):
    shut_down = []

    class Slow(MockOrchestrator):
        def shutdown(self):
            shut_down.append(self.session_name)
            super().shutdown()

    def factory(settings, session):
        return Slow(session, artifacts_dir=settings.artifacts_dir, step_delay=0.2)

    runner = DemoRunner(_settings(tmp_path, "basic"), catalog=catalog, orchestrator_factory=factory, timeout=0.05)
    with pytest.raises(ExecutionTimeout):
        runner.run()
    assert shut_down == ["todo-demo-basic"]


def test_catalog_loaded_from_settings(tmp_path, presets_dir):
    runner = DemoRunner(_settings(tmp_path, "basic", presets_dir=presets_dir))
    assert runner.run().success
    assert runner.plan is not None and runner.plan.scenario.id == "basic"


def test_verbose_prints_progress(tmp_path, catalog, capsys):
    DemoRunner(_settings(tmp_path, "basic", verbose=True), catalog=catalog).run()
    assert "Progress: 50%" in capsys.readouterr().out


@pytest.mark.parametrize("status,icon", [("pass", "✅"), ("skipped", "⏭️"), ("fail", "❌"), ("error", "❌")])
def test_gate_icon(status, icon):
    assert gate_icon(status) == icon

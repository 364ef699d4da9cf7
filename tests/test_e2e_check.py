from __future__ import annotations

from repochief_demo.e2e import run_e2e_check
from repochief_demo.orchestrator.mock import MockOrchestrator


def _orch(tmp_path, **kw) -> MockOrchestrator:
    return MockOrchestrator("e2e-test-todo", artifacts_dir=tmp_path / "artifacts", project_dir=tmp_path, **kw)


def test_passes_with_skipped_gates(tmp_path, presets_dir, capsys):
    result = run_e2e_check(presets_dir=presets_dir, artifacts_dir=tmp_path / "artifacts", project_dir=tmp_path)
    assert result.passed
    assert result.queued == result.completed == 3
    assert result.failed == 0
    assert result.artifacts_created
    # No eslint config and no package.json in tmp_path
    assert result.gate_statuses == {"skipped": 2, "pass": 1}
    assert "E2E TEST PASSED" in capsys.readouterr().out


def test_passes_with_project_tooling(tmp_path, presets_dir):
    (tmp_path / ".eslintrc.json").write_text("{}")
    (tmp_path / "package.json").write_text('{"scripts": {"test": "jest"}}')
    result = run_e2e_check(presets_dir=presets_dir, artifacts_dir=tmp_path / "artifacts", project_dir=tmp_path)
    assert result.passed
    assert result.gate_statuses == {"pass": 3}


def test_failing_gate_fails_check(tmp_path, presets_dir, capsys):
    result = run_e2e_check(presets_dir=presets_dir, orchestrator=_orch(tmp_path, gate_overrides={"eslint": "fail"}))
    assert result.tasks_ok
    assert not result.gates_ok
    assert not result.passed
    assert "Quality gates failed" in capsys.readouterr().out


def test_failed_task_fails_check(tmp_path, presets_dir):
    result = run_e2e_check(presets_dir=presets_dir, orchestrator=_orch(tmp_path, fail_tasks=["e2e-test"]))
    assert result.failed == 1
    assert not result.tasks_ok
    assert not result.passed


def test_timeout_is_recorded(tmp_path, presets_dir):
    result = run_e2e_check(
        presets_dir=presets_dir, timeout=0.05, orchestrator=_orch(tmp_path, step_delay=0.2),
    )
    assert result.error == "Execution timeout after 0.05 seconds"
    assert not result.passed

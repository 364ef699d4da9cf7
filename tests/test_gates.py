"""Mock quality gates and the skipped-is-acceptable verdict."""

from __future__ import annotations

import json

import pytest

from repochief_demo.orchestrator.gates import check_gate, count_statuses, gates_acceptable


def test_eslint_skipped_without_config(tmp_path):
    outcome = check_gate("eslint", project_dir=tmp_path)
    assert outcome.status == "skipped"
    assert outcome.acceptable


@pytest.mark.parametrize("name", [".eslintrc", ".eslintrc.json", "eslint.config.js"])
def test_eslint_passes_with_config(tmp_path, name):
    (tmp_path / name).write_text("{}")
    assert check_gate("eslint", project_dir=tmp_path).status == "pass"


def test_test_gate_needs_test_script(tmp_path):
    assert check_gate("test", project_dir=tmp_path).status == "skipped"
    (tmp_path / "package.json").write_text(json.dumps({"scripts": {"start": "node ."}}))
    assert check_gate("test", project_dir=tmp_path).status == "skipped"
    (tmp_path / "package.json").write_text(json.dumps({"scripts": {"test": "mocha"}}))
    assert check_gate("test", project_dir=tmp_path).status == "pass"


def test_test_gate_unreadable_package_json(tmp_path):
    (tmp_path / "package.json").write_text("{not json")
    outcome = check_gate("test", project_dir=tmp_path)
    assert outcome.status == "error"
    assert not outcome.acceptable


def test_complexity_checks_artifact(tmp_path):
    artifact = tmp_path / "r.json"
    assert check_gate("complexity", project_dir=tmp_path, artifact=artifact).status == "fail"
    artifact.write_text("")
    assert check_gate("complexity", project_dir=tmp_path, artifact=artifact).status == "fail"
    artifact.write_text("{}")
    assert check_gate("complexity", project_dir=tmp_path, artifact=artifact).status == "pass"


def test_unknown_gate_is_error(tmp_path):
    assert check_gate("sonar", project_dir=tmp_path).status == "error"


@pytest.mark.parametrize("statuses,expected", [
    ([], True),
    (["pass", "pass"], True),
    (["pass", "skipped"], True),
    (["skipped"], True),
    (["pass", "fail"], False),
    (["skipped", "error"], False),
])
def test_gates_acceptable(statuses, expected):
    assert gates_acceptable(statuses) is expected


def test_count_statuses():
    assert count_statuses(["pass", "skipped", "pass"]) == {"pass": 2, "skipped": 1}

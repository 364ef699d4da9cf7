"""CLI smoke tests via click's CliRunner."""
import json

import click
from click.testing import CliRunner

from repochief_demo.cli import cli


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


def test_cli_is_group():
    assert isinstance(cli, click.Group)


def test_cli_help_exits_zero():
    result = _invoke("--help")
    assert result.exit_code == 0


def test_cli_expected_subcommands():
    registered = list(cli.commands.keys())
    for cmd in ["run", "check", "record", "scenarios", "plan"]:
        assert cmd in registered, f"Missing command: {cmd}"


def test_scenarios_json():
    result = _invoke("scenarios")
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    by_id = {s["id"]: s for s in data["scenarios"]}
    assert set(by_id) == {"basic", "fullstack", "enterprise"}
    assert (by_id["basic"]["agents"], by_id["basic"]["tasks"]) == (3, 3)
    assert (by_id["enterprise"]["agents"], by_id["enterprise"]["tasks"]) == (5, 5)


def test_scenarios_human():
    result = _invoke("--human", "scenarios")
    assert result.exit_code == 0
    assert "- basic" in result.output


def test_plan_json():
    result = _invoke("plan", "fullstack")
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["id"] == "fullstack"
    assert [a["role"] for a in data["agents"]] == ["analyst", "developer", "tester", "reviewer", "frontend"]
    order = data["execution_order"]
    assert order.index("test-todo-api") < order.index("validate-todo-api")
    assert order.index("generate-todo-api") < order.index("generate-todo-frontend")


def test_plan_unknown_scenario():
    result = _invoke("plan", "galactic")
    assert result.exit_code == 1
    assert "Unknown scenario 'galactic'" in result.output


def test_plan_uses_presets_dir_option(tmp_path):
    result = _invoke("--presets-dir", str(tmp_path / "missing"), "plan", "basic")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_run_mock_non_interactive():
    result = _invoke("run", "--scenario", "basic", "--mock", "--non-interactive")
    assert result.exit_code == 0, result.output
    assert "Status: SUCCESS" in result.output
    assert "Tasks: 3/3 completed" in result.output


def test_run_reads_scenario_from_env(monkeypatch):
    monkeypatch.setenv("DEMO_SCENARIO", "nowhere")
    result = _invoke("run", "--non-interactive")
    assert result.exit_code == 1
    assert "Demo failed: Unknown scenario 'nowhere'" in result.output


def test_run_real_without_api_key():
    result = _invoke("run", "--real", "--non-interactive")
    assert result.exit_code == 1
    assert "REPOCHIEF_API_KEY" in result.output


def test_run_rejects_zero_budget():
    result = _invoke("run", "--budget", "0", "--non-interactive")
    assert result.exit_code == 2


def test_check_passes():
    result = _invoke("check")
    assert result.exit_code == 0, result.output
    assert "E2E TEST PASSED" in result.output


def test_record_unknown_scenario():
    result = _invoke("record", "--scenario", "galactic")
    assert result.exit_code == 1
    assert "Unknown scenario" in result.output


# ---------------------------------------------------------------------------
# Interactive setup
# ---------------------------------------------------------------------------


def _interactive(monkeypatch):
    monkeypatch.setattr("repochief_demo.cli._is_interactive", lambda: True)


def test_interactive_mock_run(monkeypatch):
    _interactive(monkeypatch)
    result = CliRunner().invoke(cli, ["run"], input="fullstack\ny\n")
    assert result.exit_code == 0, result.output
    assert "Select demo scenario" in result.output
    assert "Set budget limit" not in result.output
    assert "Scenario: Full Stack TODO App" in result.output
    assert "Mode: Mock" in result.output
    assert "Tasks: 5/5 completed" in result.output


def test_interactive_real_mode_asks_budget(monkeypatch):
    _interactive(monkeypatch)
    result = CliRunner().invoke(cli, ["run"], input="basic\nn\n25\n")
    assert result.exit_code == 1
    assert "Set budget limit (USD)" in result.output
    assert "Mode: Real AI" in result.output
    assert "Budget: $25" in result.output
    assert "REPOCHIEF_API_KEY" in result.output


def test_non_interactive_flag_skips_prompts(monkeypatch):
    _interactive(monkeypatch)
    result = CliRunner().invoke(cli, ["run", "--non-interactive"])
    assert result.exit_code == 0, result.output
    assert "Select demo scenario" not in result.output
    assert "Scenario: Basic TODO API" in result.output


def test_explicit_option_skips_prompts(monkeypatch):
    _interactive(monkeypatch)
    result = CliRunner().invoke(cli, ["run", "--scenario", "basic"])
    assert result.exit_code == 0, result.output
    assert "Select demo scenario" not in result.output

"""Package-level helpers re-exported from repochief_demo."""
import repochief_demo


def test_get_scenarios():
    ids = [s["id"] for s in repochief_demo.get_scenarios()]
    assert sorted(ids) == ["basic", "enterprise", "fullstack"]


def test_get_scenario_config():
    config = repochief_demo.get_scenario_config("basic")
    assert config is not None
    assert [t["id"] for t in config["tasks"]] == ["comprehend-todo-api", "generate-todo-api", "test-todo-api"]


def test_get_scenario_config_unknown():
    assert repochief_demo.get_scenario_config("missing") is None


def test_run_demo(tmp_path):
    report = repochief_demo.run_demo(scenario="basic", mock_step_delay=0.0)
    assert report.success
    assert report.total_tasks == 3
    assert (tmp_path / "artifacts" / "todo-demo-basic" / "artifacts").is_dir()

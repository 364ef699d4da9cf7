"""repochief-demo — scenario presets and runner for the RepoChief TODO app demo."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from repochief_demo.config import DemoSettings, load_settings
from repochief_demo.errors import ConfigurationError, DemoError, ExecutionTimeout, TaskFailure
from repochief_demo.orchestrator.protocol import FinalReport
from repochief_demo.runner import DemoRunner
from repochief_demo.scenarios.loader import load_catalog
from repochief_demo.scenarios.planner import ScenarioPlan, plan_scenario

__all__ = [
    "ConfigurationError",
    "DemoError",
    "DemoRunner",
    "DemoSettings",
    "ExecutionTimeout",
    "FinalReport",
    "ScenarioPlan",
    "TaskFailure",
    "get_scenario_config",
    "get_scenarios",
    "load_settings",
    "plan_scenario",
    "run_demo",
]


def run_demo(**options: Any) -> FinalReport:
    """Run a demo scenario programmatically. Options override env settings."""
    settings = load_settings(**options)
    return DemoRunner(settings).run()


def get_scenarios(presets_dir: str | Path | None = None) -> list[dict[str, Any]]:
    """Summaries of every selectable scenario."""
    catalog = load_catalog(presets_dir)
    return [s.summary() for s in catalog.scenarios.values()]


def get_scenario_config(scenario_id: str, presets_dir: str | Path | None = None) -> Optional[dict[str, Any]]:
    """Full plan for one scenario, or None when the id is unknown."""
    catalog = load_catalog(presets_dir)
    if catalog.get(scenario_id) is None:
        return None
    return plan_scenario(catalog, scenario_id).to_dict()

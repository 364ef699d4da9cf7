"""Scenarios — presets, agent templates, and the task planner."""

from repochief_demo.scenarios.loader import find_presets_dir, list_scenario_ids, load_catalog, load_scenario
from repochief_demo.scenarios.model import (
    AgentRequest,
    AgentTemplate,
    Scenario,
    ScenarioCatalog,
    TaskDefinition,
)
from repochief_demo.scenarios.planner import ScenarioPlan, plan_scenario, topological_order, validate_task_graph
from repochief_demo.scenarios.templates import load_templates

__all__ = [
    "AgentRequest",
    "AgentTemplate",
    "Scenario",
    "ScenarioCatalog",
    "ScenarioPlan",
    "TaskDefinition",
    "find_presets_dir",
    "list_scenario_ids",
    "load_catalog",
    "load_scenario",
    "load_templates",
    "plan_scenario",
    "topological_order",
    "validate_task_graph",
]

"""Scenario task planner — scenario id + catalog → agent requests and ordered tasks.

Pure: no I/O, no randomness, no module state. The catalog is loaded once by
the caller (see loader.load_catalog) and handed in on every call, so the
same inputs always produce an equal plan.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable

from repochief_demo.errors import ConfigurationError

from .model import TASK_TYPES, AgentRequest, Scenario, ScenarioCatalog, TaskDefinition


@dataclass(frozen=True)
class ScenarioPlan:
    scenario: Scenario

    @property
    def agents(self) -> tuple[AgentRequest, ...]:
        return self.scenario.agents

    @property
    def tasks(self) -> tuple[TaskDefinition, ...]:
        return self.scenario.tasks

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    @property
    def roles(self) -> list[str]:
        return [a.role for a in self.agents]

    def task(self, task_id: str) -> TaskDefinition:
        for t in self.tasks:
            if t.id == task_id:
                return t
        raise KeyError(task_id)

    def agent_for(self, task: TaskDefinition) -> AgentRequest:
        for a in self.agents:
            if a.role == task.role:
                return a
        raise KeyError(task.role)

    def dependency_order(self) -> list[str]:
        """Stable topological order (Kahn), ties broken by declaration order."""
        return topological_order(self.tasks)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.scenario.summary(),
            "agents": [
                {"role": a.role, "name": a.name, "template": a.template.name,
                 "max_concurrent_tasks": a.max_concurrent_tasks}
                for a in self.agents
            ],
            "tasks": [t.to_dict() for t in self.tasks],
        }


def validate_task_graph(
    tasks: Iterable[TaskDefinition],
    roles: Iterable[str],
    scenario: str = "?",
) -> None:
    """Hard fail on any structural error in a scenario's task list.

    Every dependency must name a task declared earlier in the list. That
    rules out forward references, self references and therefore cycles.
    """
    known_roles = set(roles)
    seen: set[str] = set()
    count = 0
    for task in tasks:
        count += 1
        _pfx = f"Scenario '{scenario}', task '{task.id}'"
        if not task.id:
            raise ConfigurationError(f"Scenario '{scenario}': task with empty id")
        if task.id in seen:
            raise ConfigurationError(f"{_pfx}: duplicate task id")
        if task.type not in TASK_TYPES:
            raise ConfigurationError(
                f"{_pfx}: unknown type '{task.type}'. Valid: {list(TASK_TYPES)}"
            )
        if isinstance(task.max_tokens, bool) or not isinstance(task.max_tokens, int) or task.max_tokens <= 0:
            raise ConfigurationError(f"{_pfx}: 'max_tokens' must be a positive integer")
        if task.role not in known_roles:
            raise ConfigurationError(
                f"{_pfx}: role '{task.role}' has no agent. Agents: {sorted(known_roles)}"
            )
        for dep in task.dependencies:
            if dep not in seen:
                raise ConfigurationError(
                    f"{_pfx}: dependency '{dep}' is not declared before this task"
                )
        seen.add(task.id)
    if count == 0:
        raise ConfigurationError(f"Scenario '{scenario}' has no tasks")


def topological_order(tasks: Iterable[TaskDefinition]) -> list[str]:
    tasks = list(tasks)
    indegree = {t.id: len(t.dependencies) for t in tasks}
    dependants: dict[str, list[str]] = {t.id: [] for t in tasks}
    for t in tasks:
        for dep in t.dependencies:
            if dep not in dependants:
                raise ConfigurationError(f"Task '{t.id}' depends on unknown task '{dep}'")
            dependants[dep].append(t.id)

    ready = deque(t.id for t in tasks if indegree[t.id] == 0)
    order: list[str] = []
    while ready:
        tid = ready.popleft()
        order.append(tid)
        for child in dependants[tid]:
            indegree[child] -= 1
            if indegree[child] == 0:
                ready.append(child)

    if len(order) != len(tasks):
        stuck = sorted(tid for tid, n in indegree.items() if n > 0)
        raise ConfigurationError(f"Dependency cycle among tasks: {stuck}")
    return order


def plan_scenario(catalog: ScenarioCatalog, scenario_id: str) -> ScenarioPlan:
    """Resolve a scenario id against the catalog. Unknown ids never fall back to a default."""
    scenario = catalog.get(scenario_id)
    if scenario is None:
        raise ConfigurationError(
            f"Unknown scenario '{scenario_id}'. Valid: {sorted(catalog.ids())}"
        )
    return ScenarioPlan(scenario=scenario)

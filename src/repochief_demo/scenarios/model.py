"""Frozen records for scenarios, agent requests and task definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

TASK_TYPES = ("comprehension", "generation", "validation")


@dataclass(frozen=True)
class AgentTemplate:
    name: str
    role: str
    model: str
    capabilities: tuple[str, ...] = ()
    constraints: tuple[tuple[str, Any], ...] = ()

    def to_config(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "model": self.model,
            "capabilities": list(self.capabilities),
            "constraints": dict(self.constraints),
        }


@dataclass(frozen=True)
class AgentRequest:
    """One agent the scenario needs, keyed by the role tasks are assigned to."""

    role: str
    name: str
    template: AgentTemplate
    max_concurrent_tasks: int = 2

    def to_config(self) -> dict[str, Any]:
        """Agent creation request for Orchestrator.create_agent()."""
        return {
            "name": self.name,
            **self.template.to_config(),
            "max_concurrent_tasks": self.max_concurrent_tasks,
        }


@dataclass(frozen=True)
class TaskDefinition:
    id: str
    type: str
    objective: str
    role: str
    max_tokens: int
    description: str = ""
    dependencies: tuple[str, ...] = ()
    context: tuple[str, ...] = ()
    success_criteria: tuple[str, ...] = ()
    specific_checks: tuple[str, ...] = ()
    quality_gates: tuple[str, ...] = ()

    def to_spec(self, agent_id: str) -> dict[str, Any]:
        """Task spec for Orchestrator.queue_task(), bound to a created agent."""
        spec: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "objective": self.objective,
            "dependencies": list(self.dependencies),
            "context": list(self.context),
            "success_criteria": list(self.success_criteria),
            "max_tokens": self.max_tokens,
            "agent_id": agent_id,
        }
        if self.description:
            spec["description"] = self.description
        if self.specific_checks:
            spec["specific_checks"] = list(self.specific_checks)
        if self.quality_gates:
            spec["quality_gates"] = list(self.quality_gates)
        return spec

    def to_dict(self) -> dict[str, Any]:
        data = self.to_spec(agent_id="")
        data.pop("agent_id")
        data["role"] = self.role
        return data


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    description: str
    agents: tuple[AgentRequest, ...]
    tasks: tuple[TaskDefinition, ...]
    session: Optional[str] = None

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(a.role for a in self.agents)

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "agents": len(self.agents),
            "tasks": len(self.tasks),
        }


@dataclass(frozen=True)
class ScenarioCatalog:
    """Every selectable scenario, keyed by id. Passed explicitly to the planner."""

    scenarios: dict[str, Scenario] = field(default_factory=dict)
    templates: dict[str, AgentTemplate] = field(default_factory=dict)

    def ids(self) -> list[str]:
        return list(self.scenarios)

    def get(self, scenario_id: str) -> Optional[Scenario]:
        return self.scenarios.get(scenario_id)

"""Boundary with the orchestrator backend — what the runner calls, and what comes back."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol


@dataclass(frozen=True)
class Agent:
    id: str
    name: str
    role: str
    model: str = ""
    max_concurrent_tasks: int = 2


@dataclass(frozen=True)
class QueuedTask:
    id: str
    objective: str
    agent_id: str = ""
    dependencies: tuple[str, ...] = ()
    quality_gates: tuple[str, ...] = ()


@dataclass(frozen=True)
class FinalReport:
    tasks_completed: int
    total_tasks: int
    tasks_failed: int
    total_cost: float = 0.0
    total_tokens: int = 0
    duration_ms: int = 0
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.total_tasks > 0 and self.tasks_completed == self.total_tasks

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks_completed": self.tasks_completed,
            "total_tasks": self.total_tasks,
            "tasks_failed": self.tasks_failed,
            "total_cost": self.total_cost,
            "total_tokens": self.total_tokens,
            "duration_ms": self.duration_ms,
            "failures": dict(self.failures),
        }


class Orchestrator(Protocol):
    def initialize(self) -> None: ...

    def create_agent(self, config: dict[str, Any]) -> Agent: ...

    def queue_task(self, spec: dict[str, Any]) -> QueuedTask: ...

    def on(self, event_name: str, handler: Callable[[Any], None]) -> None: ...

    def start_execution(self) -> None: ...

    def wait_for_completion(self, timeout: Optional[float] = None) -> None: ...

    def get_final_report(self) -> FinalReport: ...

    def shutdown(self) -> None: ...
